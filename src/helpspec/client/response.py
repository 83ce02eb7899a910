"""Decoding of introspection responses and saved payload files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union

import httpx

from helpspec.exceptions import IntrospectionError
from helpspec.models import IntrospectionPayloads

APP_INFO_FILE = "app-info.json"
CONSOLE_FILE = "console.json"
FULL_FILE = "full.json"


def extract_payload(response: httpx.Response, label: str) -> dict[str, Any]:
    """Decode *response* as a JSON object.

    Args:
        response: A successful response.
        label: What was fetched, for error messages.

    Raises:
        IntrospectionError: If the body is empty, not JSON, or not an object.
    """
    if not response.content:
        raise IntrospectionError(f"Empty {label} response")
    try:
        data = response.json()
    except ValueError as exc:
        raise IntrospectionError(f"{label} response is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise IntrospectionError(
            f"{label} response must be a JSON object (got {type(data).__name__})"
        )
    return data


def _read_payload(path: Path, required: bool) -> dict[str, Any]:
    if not path.is_file():
        if required:
            raise IntrospectionError(f"Payload file not found: {path}")
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise IntrospectionError(f"Cannot read payload {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise IntrospectionError(f"Payload {path} must be a JSON object")
    return data


def load_saved_payloads(directory: Union[str, Path]) -> IntrospectionPayloads:
    """Read payloads written by ``helpspec dump``.

    ``console.json`` and ``full.json`` are required; ``app-info.json`` is
    optional and its ``baseUrl`` key, when present, restores the server URL.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise IntrospectionError(f"Input directory not found: {directory}")
    app_info = _read_payload(directory / APP_INFO_FILE, required=False)
    return IntrospectionPayloads(
        console=_read_payload(directory / CONSOLE_FILE, required=True),
        full=_read_payload(directory / FULL_FILE, required=True),
        app_info=app_info,
        base_url=app_info.get("baseUrl"),
    )
