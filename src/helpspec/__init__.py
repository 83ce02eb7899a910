"""helpspec -- Generate OpenAPI 3.0 documents from a local service's ``/help`` endpoint.

The target service describes its own callable surface (functions, types and
events) through ``GET /help?format=...``. This package fetches the "Console"
and "Full" views of that description, translates the type grammar into
``components.schemas`` and the function catalogue into ``paths``, and writes
a complete OpenAPI document.

Typical workflow::

    PORT=51234 SECRET=xyz helpspec generate -o out/openapi.json
    helpspec dump ./payloads                      # save raw help payloads
    helpspec generate --input-dir ./payloads      # regenerate offline

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: Settings resolution, credential sources and override tables.
    client: Async HTTP client for the introspection endpoint.
    translator: Type, usage-string and endpoint translation engines.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting and diagnostics.
"""

__version__ = "0.1.0"
