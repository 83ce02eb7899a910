"""Config commands -- view the effective configuration.

Provides the ``helpspec config`` sub-command group. Settings come from the
global ``config.json``, the project's ``helpspec.json``, ``HELPSPEC_*``
environment variables and CLI flags, in increasing precedence.
"""

from __future__ import annotations

import typer

from helpspec.exceptions import HelpspecError
from helpspec.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration.

    Prints the config directory to stderr and the resolved settings to
    stdout (table-ish plain text, Rich JSON, or raw JSON with ``--json``).

    Example::

        helpspec config show
        helpspec --json config show
    """
    from helpspec.config import get_config_dir, resolve_settings

    try:
        settings = resolve_settings()
    except HelpspecError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Config directory: {get_config_dir()}")
    format_response(settings.model_dump(mode="json"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file."),
) -> None:
    """Write a ``helpspec.json`` with default settings in the current directory.

    Example::

        helpspec config init
    """
    import json
    from pathlib import Path

    from helpspec.config import atomic_write
    from helpspec.models import Settings

    path = Path.cwd() / "helpspec.json"
    if path.exists() and not force:
        error(f"{path} already exists (use --force to overwrite)")
        raise typer.Exit(code=2)
    atomic_write(path, json.dumps(Settings().model_dump(mode="json"), indent=2) + "\n")
    success(f"Wrote {path}")
