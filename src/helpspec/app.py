"""Typer application and CLI entry point for helpspec.

This module builds the top-level Typer application and registers the
built-in sub-commands (``generate``, ``dump``, ``inspect``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler and invokes the app;
:class:`~helpspec.exceptions.HelpspecError` maps to its exit code and any
other exception is written to a crash log under the data directory.

See Also:
    :mod:`helpspec.config`: Settings resolution.
    :mod:`helpspec.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from helpspec import __version__
from helpspec.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="helpspec",
    help="Generate an OpenAPI 3.0 document from a local service's /help endpoint.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

_registered = False


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"helpspec {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show translation diagnostics (fallbacks, skipped tokens)."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~helpspec.output.OutputManager` built from
    the output flags.
    """
    from helpspec.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))


def register_commands() -> typer.Typer:
    """Attach the built-in sub-commands to :data:`app` (once) and return it."""
    global _registered
    if not _registered:
        from helpspec.commands.config import config_app
        from helpspec.commands.dump import dump_command
        from helpspec.commands.generate import generate_command
        from helpspec.commands.inspect import inspect_app

        app.command("generate")(generate_command)
        app.command("dump")(dump_command)
        app.add_typer(inspect_app, name="inspect", help="Inspect the introspection payloads.")
        app.add_typer(config_app, name="config", help="Configuration management.")
        _registered = True
    return app


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to ``<data_dir>/logs`` and return its path."""
    from helpspec.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``helpspec`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        register_commands()
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from helpspec.exceptions import HelpspecError
        from helpspec.output import error

        if isinstance(exc, HelpspecError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
