"""Dump command -- save the raw introspection payloads for offline use."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from helpspec.exceptions import HelpspecError
from helpspec.output import error, success


def dump_command(
    directory: str = typer.Argument(help="Directory to write the payload files into."),
    port: Optional[int] = typer.Option(
        None, "--port", help="Service HTTPS port (env: HELPSPEC_PORT, PORT)."
    ),
    secret_source: Optional[str] = typer.Option(
        None, "--secret-source", help="Secret source: env:VAR, file:/path, prompt or value:LITERAL."
    ),
) -> None:
    """Fetch the Console and Full help and the app info, and save them as JSON.

    The files (``app-info.json``, ``console.json``, ``full.json``) can be fed
    back with ``helpspec generate --input-dir``. The server URL is kept in
    ``app-info.json`` under ``baseUrl``.

    Example::

        helpspec dump snapshots/2024-05 --port 51234
    """
    from helpspec.client import fetch_introspection
    from helpspec.client.response import APP_INFO_FILE, CONSOLE_FILE, FULL_FILE
    from helpspec.config import atomic_write, resolve_settings

    try:
        settings = resolve_settings(cli_port=port, cli_secret_source=secret_source)
        payloads = fetch_introspection(settings.service)
    except HelpspecError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    target = Path(directory)
    app_info = dict(payloads.app_info)
    if payloads.base_url:
        app_info.setdefault("baseUrl", payloads.base_url)
    for name, data in (
        (APP_INFO_FILE, app_info),
        (CONSOLE_FILE, payloads.console),
        (FULL_FILE, payloads.full),
    ):
        atomic_write(target / name, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
    success(f"Saved introspection payloads to {target}")
