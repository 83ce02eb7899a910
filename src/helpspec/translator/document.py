"""Assemble and serialise the final OpenAPI document."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Optional

import yaml

from helpspec.models import TranslationOptions

DEFAULT_TITLE = "Local Service API"
DEFAULT_VERSION = "0.0.0"


def document_info(app_info: Optional[Mapping[str, Any]]) -> dict[str, str]:
    """Build the ``info`` block from the service's application info.

    Missing fields fall back to neutral defaults so an application-info
    endpoint is optional.
    """
    app_info = app_info or {}
    name = app_info.get("name")
    info = {
        "title": f"{name} API" if name else DEFAULT_TITLE,
        "version": str(app_info.get("version") or DEFAULT_VERSION),
    }
    sdk_version = app_info.get("sdkVersion")
    info["description"] = (
        f"Created with SDK - Version {sdk_version}" if sdk_version else "Generated from /help"
    )
    return info


def assemble_document(
    schemas: Mapping[str, Any],
    paths: Mapping[str, Any],
    app_info: Optional[Mapping[str, Any]] = None,
    base_url: Optional[str] = None,
    options: Optional[TranslationOptions] = None,
    openapi_version: str = "3.0.0",
) -> dict[str, Any]:
    """Wrap the schema and paths catalogues in an OpenAPI 3.0 envelope.

    Args:
        schemas: Output of :func:`~helpspec.translator.schemas.build_schemas`.
        paths: Output of :func:`~helpspec.translator.endpoints.build_paths`.
        app_info: The application-info payload, if one was fetched.
        base_url: Server URL; ``servers`` is omitted when ``None``.
        options: Decides whether the shared ``ForbiddenError`` response is
            declared.
        openapi_version: Value of the top-level ``openapi`` field.

    Returns:
        The complete document, keys in conventional OpenAPI order.
    """
    options = options or TranslationOptions()

    responses: dict[str, Any] = {
        "UnauthorizedError": {"description": "Missing authentication credentials"},
    }
    if options.include_forbidden_response:
        responses["ForbiddenError"] = {"description": "Wrong authentication credentials"}

    document: dict[str, Any] = {
        "openapi": openapi_version,
        "info": document_info(app_info),
    }
    if base_url:
        document["servers"] = [{"url": base_url}]
    document["paths"] = dict(paths)
    document["components"] = {
        "securitySchemes": {"basicAuth": {"type": "http", "scheme": "basic"}},
        "responses": responses,
        "schemas": dict(schemas),
    }
    document["security"] = [{"basicAuth": []}]
    return document


def format_for_path(path: str) -> str:
    """``"yaml"`` for ``.yaml``/``.yml`` paths, ``"json"`` for everything else."""
    return "yaml" if path.lower().endswith((".yaml", ".yml")) else "json"


def render_document(document: Mapping[str, Any], fmt: str = "json") -> str:
    """Serialise *document* deterministically.

    The same input always renders to the same text: JSON keeps insertion
    order with a two-space indent and a trailing newline; YAML keeps
    insertion order too (``sort_keys=False``).
    """
    if fmt == "yaml":
        return yaml.safe_dump(
            _plain(document), sort_keys=False, allow_unicode=True, default_flow_style=False
        )
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def _plain(value: Any) -> Any:
    # safe_dump refuses Mapping subclasses such as MappingProxyType.
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
