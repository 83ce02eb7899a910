"""Tests for helpspec.translator.usage -- usage-string parameter placement."""

from __future__ import annotations

import pytest

from helpspec.models import ParameterPlacement, UsageParameter
from helpspec.translator.usage import normalize_url_template, parse_usage, template_variables

PATH = ParameterPlacement.PATH
QUERY = ParameterPlacement.QUERY
BODY = ParameterPlacement.BODY


class TestUrlTemplates:
    def test_plus_modifier_is_removed(self) -> None:
        assert normalize_url_template("/riotclient/v1/{+path}") == "/riotclient/v1/{path}"

    def test_plain_template_unchanged(self) -> None:
        assert normalize_url_template("/a/{id}/b") == "/a/{id}/b"

    def test_template_variables_in_order(self) -> None:
        assert template_variables("/a/{+path}/b/{id}") == ["path", "id"]
        assert template_variables("/plain") == []


class TestPlacement:
    def test_required_path_param_on_get(self) -> None:
        assert parse_usage("f <id>", "/a/{id}", "GET") == [
            UsageParameter(name="id", placement=PATH, optional=False)
        ]

    def test_bracketed_name_is_optional_query(self) -> None:
        assert parse_usage("f [limit]", "/a", "GET") == [
            UsageParameter(name="limit", placement=QUERY, optional=True)
        ]

    def test_post_argument_outside_template_is_body(self) -> None:
        assert parse_usage("f <body>", "/a", "POST") == [
            UsageParameter(name="body", placement=BODY, optional=False)
        ]

    def test_post_argument_in_template_is_path(self) -> None:
        assert parse_usage("f <id> <body>", "/a/{id}", "POST") == [
            UsageParameter(name="id", placement=PATH),
            UsageParameter(name="body", placement=BODY),
        ]

    def test_plus_modifier_counts_as_template_variable(self) -> None:
        [param] = parse_usage("f <path>", "/proxy/{+path}", "PUT")
        assert param.placement == PATH

    @pytest.mark.parametrize("method", ["GET", "DELETE", "get", "delete"])
    def test_get_and_delete_prefer_path(self, method: str) -> None:
        [param] = parse_usage("f <name>", "/a", method)
        assert param.placement == PATH

    def test_optional_angle_argument_on_post_is_optional_query(self) -> None:
        assert parse_usage("f [<payload>]", "/a", "POST") == [
            UsageParameter(name="payload", placement=QUERY, optional=True)
        ]

    @pytest.mark.parametrize("method", ["GET", "DELETE"])
    def test_optional_angle_argument_ignores_path_bias(self, method: str) -> None:
        assert parse_usage("f [<limit>]", "/items", method) == [
            UsageParameter(name="limit", placement=QUERY, optional=True)
        ]

    def test_optional_angle_argument_in_template_is_still_query(self) -> None:
        assert parse_usage("f [<id>]", "/a/{id}", "GET") == [
            UsageParameter(name="id", placement=QUERY, optional=True)
        ]

    def test_path_bias_outside_template_is_reported(self, verbose_output, capsys) -> None:
        [param] = parse_usage("f <name>", "/a", "DELETE")
        assert param.placement == PATH
        assert "'name' is not in the URL template" in capsys.readouterr().err

    def test_template_variable_is_not_reported(self, verbose_output, capsys) -> None:
        parse_usage("f <id>", "/a/{id}", "GET")
        assert "not in the URL template" not in capsys.readouterr().err


class TestTokens:
    @pytest.mark.parametrize("usage", [None, "", "   ", "OnlyTheName"])
    def test_nothing_to_parse(self, usage) -> None:
        assert parse_usage(usage, "/a", "GET") == []

    def test_first_token_is_discarded(self) -> None:
        assert parse_usage("[fn] [x]", "/a", "GET") == [
            UsageParameter(name="x", placement=QUERY, optional=True)
        ]

    @pytest.mark.parametrize("token", ["bare", "<>", "[]", "<open", "{id}", "[<a]", "<a<b>>"])
    def test_unrecognised_tokens_are_skipped(self, token: str, verbose_output, capsys) -> None:
        assert parse_usage(f"f {token}", "/a", "GET") == []
        assert "Unrecognised usage token" in capsys.readouterr().err

    def test_extra_whitespace(self) -> None:
        params = parse_usage("  f   <id>\t[q]  ", "/a/{id}", "GET")
        assert [p.name for p in params] == ["id", "q"]

    def test_unknown_arguments_are_skipped(self) -> None:
        params = parse_usage("f <id> [q]", "/a/{id}", "GET", known_arguments={"id"})
        assert [p.name for p in params] == ["id"]

    def test_duplicates_keep_first_occurrence(self) -> None:
        params = parse_usage("f <id> [id]", "/a/{id}", "GET")
        assert params == [UsageParameter(name="id", placement=PATH, optional=False)]

    def test_deterministic(self) -> None:
        usage = "f <id> [q] <body>"
        assert parse_usage(usage, "/a/{id}", "POST") == parse_usage(usage, "/a/{id}", "POST")
