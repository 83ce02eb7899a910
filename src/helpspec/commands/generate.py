"""Generate command -- introspect the service and write the OpenAPI document.

``helpspec generate`` resolves settings, loads the override table, obtains
the introspection payloads (live, or from a ``helpspec dump`` directory
with ``--input-dir``), translates them and writes the document. Nothing is
written unless translation completes.
"""

from __future__ import annotations

from typing import Optional

import typer

from helpspec.exceptions import HelpspecError
from helpspec.models import StatusCodeStyle
from helpspec.output import error, info, success


def generate_command(
    port: Optional[int] = typer.Option(
        None, "--port", help="Service HTTPS port (env: HELPSPEC_PORT, PORT)."
    ),
    secret_source: Optional[str] = typer.Option(
        None,
        "--secret-source",
        help="Secret source: env:VAR, file:/path, prompt or value:LITERAL.",
    ),
    output_path: Optional[str] = typer.Option(
        None, "-o", "--output", help="Output file (.json, .yaml or .yml)."
    ),
    overrides: Optional[str] = typer.Option(
        None, "--overrides", help="JSON/YAML file with object name overrides."
    ),
    input_dir: Optional[str] = typer.Option(
        None, "--input-dir", help="Read payloads saved by 'helpspec dump' instead of fetching."
    ),
    status_codes: Optional[StatusCodeStyle] = typer.Option(
        None, "--status-codes", help="Success status key: range (2XX) or exact (200)."
    ),
    forbidden: Optional[bool] = typer.Option(
        None, "--forbidden/--no-forbidden", help="Declare a 403 response on every operation."
    ),
    emit_parts: Optional[bool] = typer.Option(
        None, "--emit-parts/--no-emit-parts", help="Also write schemas.json and paths.json."
    ),
) -> None:
    """Generate an OpenAPI document from the service's /help endpoint.

    Example::

        helpspec generate --port 51234 --secret-source env:SECRET
        helpspec generate --input-dir dump/ -o out/openapi.yaml
    """
    from helpspec.client import load_payloads
    from helpspec.config import effective_overrides, resolve_settings
    from helpspec.generator import generate, write_artifacts

    try:
        settings = resolve_settings(
            cli_port=port,
            cli_secret_source=secret_source,
            cli_output=output_path,
            cli_overrides_file=overrides,
            cli_generator={
                "status_code_style": status_codes,
                "include_forbidden_response": forbidden,
                "emit_parts": emit_parts,
            },
        )
        table = effective_overrides(settings)
        payloads = load_payloads(settings.service, input_dir)
        base_url = payloads.base_url
        if base_url is None and settings.service.port is not None:
            base_url = settings.service.base_url

        result = generate(payloads, settings.generator, table, base_url=base_url)
        info(
            f"Translated {len(result.schemas)} schemas and "
            f"{result.operation_count} operations on {len(result.paths)} paths"
        )
        written = write_artifacts(
            result, settings.generator.output, emit_parts=settings.generator.emit_parts
        )
    except HelpspecError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Wrote {written[-1]}")
