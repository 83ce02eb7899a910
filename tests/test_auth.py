"""Tests for helpspec.auth -- Basic credentials for the local service."""

from __future__ import annotations

from pathlib import Path

import pytest

from helpspec.auth import AuthResult, authenticate, basic_auth_header
from helpspec.exceptions import AuthError, ConfigError
from helpspec.models import ServiceConfig


def test_basic_auth_header() -> None:
    assert basic_auth_header("riot", "secret") == "Basic cmlvdDpzZWNyZXQ="


def test_basic_auth_header_non_ascii_secret() -> None:
    assert basic_auth_header("riot", "é") == "Basic cmlvdDrDqQ=="


def test_auth_result_defaults_to_no_headers() -> None:
    assert AuthResult().headers == {}


class TestAuthenticate:
    def test_literal_secret(self) -> None:
        result = authenticate(ServiceConfig(port=1, secret_source="value:secret"))
        assert result.headers == {"Authorization": "Basic cmlvdDpzZWNyZXQ="}

    def test_custom_username(self) -> None:
        result = authenticate(
            ServiceConfig(port=1, username="admin", secret_source="value:secret")
        )
        assert result.headers["Authorization"] == basic_auth_header("admin", "secret")

    def test_secret_from_file(self, tmp_path: Path) -> None:
        secret = tmp_path / "secret"
        secret.write_text("secret\n")
        result = authenticate(ServiceConfig(port=1, secret_source=f"file:{secret}"))
        assert result.headers["Authorization"] == "Basic cmlvdDpzZWNyZXQ="

    def test_secret_from_default_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SECRET", "secret")
        result = authenticate(ServiceConfig(port=1))
        assert result.headers["Authorization"] == "Basic cmlvdDpzZWNyZXQ="

    def test_empty_secret(self) -> None:
        with pytest.raises(AuthError, match="Empty service secret"):
            authenticate(ServiceConfig(port=1, secret_source="value:"))

    def test_unresolvable_source(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SECRET", raising=False)
        with pytest.raises(ConfigError):
            authenticate(ServiceConfig(port=1))
