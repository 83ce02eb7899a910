"""Parse the free-form ``usage`` string of a Console help function.

A usage string reads like a console command line::

    GetLolSummonerV1SummonersById <id> [includeHidden]

The first token is the function name and is discarded. Every other token is
an argument whose brackets decide where it goes in the HTTP request:

* ``[name]`` and ``[<name>]`` -- optional, sent as a query parameter;
* ``<name>`` -- required; a path parameter when the URL template has a
  ``{name}`` placeholder or the method is GET or DELETE, otherwise the
  request body.

Tokens of any other shape are skipped with a debug diagnostic.
"""

from __future__ import annotations

import re
from collections.abc import Container
from typing import Optional

from helpspec.models import ParameterPlacement, UsageParameter
from helpspec.output import debug

# Matches the "{+path}" style placeholders used for catch-all path segments.
_PATH_MODIFIER_RE = re.compile(r"\{\+([^{}]*)\}")
_TEMPLATE_VAR_RE = re.compile(r"\{([^{}]+)\}")
_INVALID_NAME_CHARS = frozenset("[]<>{}")

_PATH_BIASED_METHODS = frozenset({"GET", "DELETE"})


def normalize_url_template(url: str) -> str:
    """Rewrite ``{+name}`` placeholders to plain ``{name}``.

    Example::

        >>> normalize_url_template("/riotclient/v1/{+path}")
        '/riotclient/v1/{path}'
    """
    return _PATH_MODIFIER_RE.sub(r"{\1}", url)


def template_variables(url: str) -> list[str]:
    """Return the placeholder names of a URL template, in order."""
    return _TEMPLATE_VAR_RE.findall(url.replace("+", ""))


def parse_usage(
    usage: Optional[str],
    url_template: Optional[str],
    http_method: Optional[str],
    known_arguments: Optional[Container[str]] = None,
) -> list[UsageParameter]:
    """Split a usage string into placed parameters.

    Args:
        usage: The Console ``usage`` string; ``None`` or empty yields ``[]``.
        url_template: The function's URL template. ``+`` modifiers are
            ignored when looking for ``{name}`` placeholders.
        http_method: The function's HTTP method (any case).
        known_arguments: When given, names not contained in it are skipped.

    Returns:
        The parameters in usage order. A name repeated in the usage string
        keeps its first occurrence.
    """
    if not usage:
        return []

    template = (url_template or "").replace("+", "")
    method = (http_method or "").upper()

    params: list[UsageParameter] = []
    seen: set[str] = set()
    for token in usage.split()[1:]:
        param = _parse_token(token, template, method)
        if param is None:
            debug(f"Unrecognised usage token {token!r}, skipping")
            continue
        if known_arguments is not None and param.name not in known_arguments:
            debug(f"Usage parameter {param.name!r} has no declared argument, skipping")
            continue
        if param.name in seen:
            debug(f"Usage parameter {param.name!r} repeated, keeping the first")
            continue
        seen.add(param.name)
        params.append(param)
    return params


def _parse_token(token: str, template: str, method: str) -> Optional[UsageParameter]:
    optional = _wrapped(token, "[", "]")
    inner = token[1:-1] if optional else token

    if optional:
        name = inner[1:-1] if _wrapped(inner, "<", ">") else inner
        if not _valid_name(name):
            return None
        return UsageParameter(name=name, placement=ParameterPlacement.QUERY, optional=True)

    if not _wrapped(inner, "<", ">"):
        return None
    name = inner[1:-1]
    if not _valid_name(name):
        return None
    if "{" + name + "}" in template:
        placement = ParameterPlacement.PATH
    elif method in _PATH_BIASED_METHODS:
        debug(f"{name!r} is not in the URL template but {method} places it in the path")
        placement = ParameterPlacement.PATH
    else:
        placement = ParameterPlacement.BODY
    return UsageParameter(name=name, placement=placement)


def _wrapped(token: str, opening: str, closing: str) -> bool:
    return len(token) >= 2 and token.startswith(opening) and token.endswith(closing)


def _valid_name(name: str) -> bool:
    return bool(name) and not any(ch in _INVALID_NAME_CHARS for ch in name)
