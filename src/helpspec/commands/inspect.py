"""Inspect commands -- examine the introspection payloads.

Provides the ``helpspec inspect`` sub-command group with read-only views of
what the service exposes: the joined function catalogue (with the HTTP
route each function maps to) and the type catalogue. Both work on a live
service or on a ``helpspec dump`` directory.
"""

from __future__ import annotations

from typing import Optional

import typer

from helpspec.exceptions import HelpspecError
from helpspec.models import IntrospectionPayloads, TranslationOptions
from helpspec.output import error, get_output, info


inspect_app = typer.Typer(no_args_is_help=True)


def _load(input_dir: Optional[str], port: Optional[int]) -> IntrospectionPayloads:
    from helpspec.client import load_payloads
    from helpspec.config import resolve_settings

    try:
        settings = resolve_settings(cli_port=port)
        return load_payloads(settings.service, input_dir)
    except HelpspecError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@inspect_app.command("functions")
def inspect_functions(
    input_dir: Optional[str] = typer.Option(None, "--input-dir", help="Saved payload directory."),
    port: Optional[int] = typer.Option(None, "--port", help="Service HTTPS port."),
) -> None:
    """List every function with its HTTP method, URL and tags.

    Functions without a console route are listed with ``-`` in place of the
    method and URL; ``generate`` skips them.

    Example::

        helpspec inspect functions --input-dir dump/
    """
    from helpspec.translator.endpoints import join_functions, operation_tags
    from helpspec.translator.usage import normalize_url_template

    payloads = _load(input_dir, port)
    options = TranslationOptions()

    rows: list[list[str]] = []
    for function in join_functions(payloads.console, payloads.full):
        console = function.console
        method = (console.http_method or "-").upper() if console else "-"
        url = normalize_url_template(console.url) if console and console.url else "-"
        rows.append([
            function.name,
            method,
            url,
            ", ".join(operation_tags(function.full, options)),
        ])

    get_output().print_table(
        ["Function", "Method", "URL", "Tags"], rows, title=f"Functions ({len(rows)})"
    )


@inspect_app.command("types")
def inspect_types(
    input_dir: Optional[str] = typer.Option(None, "--input-dir", help="Saved payload directory."),
    port: Optional[int] = typer.Option(None, "--port", help="Service HTTPS port."),
) -> None:
    """List every named type with its kind and members.

    Example::

        helpspec inspect types --input-dir dump/
    """
    from helpspec.models import EnumType, ObjectType
    from helpspec.translator.types import classify

    payloads = _load(input_dir, port)
    types = payloads.console.get("types")
    if not isinstance(types, dict) or not types:
        info("No types in the Console help payload.")
        return

    rows: list[list[str]] = []
    for name, descriptor in types.items():
        variant = classify(descriptor)
        if isinstance(variant, EnumType):
            members = [v.name for v in variant.values]
        elif isinstance(variant, ObjectType):
            members = [f.name for f in variant.fields]
        else:
            members = []
        shown = ", ".join(members[:5])
        if len(members) > 5:
            shown += "..."
        rows.append([str(name), variant.kind, shown or "-"])

    get_output().print_table(["Type", "Kind", "Members"], rows, title=f"Types ({len(rows)})")
