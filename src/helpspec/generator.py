"""End-to-end translation of introspection payloads into an OpenAPI document.

:func:`generate` runs the pure part of the pipeline (schemas, paths,
envelope) and :func:`write_artifacts` persists the result. Keeping the two
apart means a run either produces every artifact or none: nothing is written
until translation has finished.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from helpspec.config import atomic_write
from helpspec.exceptions import ArtifactWriteError
from helpspec.models import GeneratorConfig, IntrospectionPayloads
from helpspec.output import debug, info
from helpspec.translator import (
    assemble_document,
    build_paths,
    build_schemas,
    format_for_path,
    render_document,
)

SCHEMAS_PART = "schemas.json"
PATHS_PART = "paths.json"


@dataclass
class GenerationResult:
    """Everything one run produces, before anything touches the disk."""

    schemas: dict[str, Any]
    paths: dict[str, Any]
    document: dict[str, Any]

    @property
    def operation_count(self) -> int:
        return sum(len(item) for item in self.paths.values())


def generate(
    payloads: IntrospectionPayloads,
    generator: Optional[GeneratorConfig] = None,
    overrides: Optional[Mapping[str, str]] = None,
    base_url: Optional[str] = None,
) -> GenerationResult:
    """Translate *payloads* into schemas, paths and the assembled document.

    Args:
        payloads: The Console help, Full help and application info.
        generator: Output policy; defaults apply when ``None``.
        overrides: Raw type name -> output name.
        base_url: Server URL; falls back to ``payloads.base_url``.
    """
    generator = generator or GeneratorConfig()
    options = generator.translation_options()
    overrides = dict(overrides or {})
    if overrides:
        debug(f"Applying {len(overrides)} type name override(s)")

    schemas = build_schemas(payloads.console.get("types"), overrides)
    paths = build_paths(payloads.console, payloads.full, overrides, options)
    document = assemble_document(
        schemas,
        paths,
        app_info=payloads.app_info,
        base_url=base_url or payloads.base_url,
        options=options,
        openapi_version=generator.openapi_version,
    )
    return GenerationResult(schemas=schemas, paths=paths, document=document)


def write_artifacts(
    result: GenerationResult,
    output: str,
    emit_parts: bool = False,
) -> list[Path]:
    """Write the document (JSON or YAML by extension) and, optionally, its parts.

    The parts are written as JSON next to the document. Every text is
    rendered before the first write, and the document is written first. If
    any write fails, the files already written by this call are removed.

    Returns:
        The paths written, document last.

    Raises:
        ArtifactWriteError: If a file cannot be written.
    """
    target = Path(output)
    pending = [(target, render_document(result.document, format_for_path(output)))]
    if emit_parts:
        for name, part in ((SCHEMAS_PART, result.schemas), (PATHS_PART, result.paths)):
            pending.append((target.parent / name, render_document(part, "json")))

    written: list[Path] = []
    for path, text in pending:
        try:
            atomic_write(path, text)
        except OSError as exc:
            for done in written:
                done.unlink(missing_ok=True)
            raise ArtifactWriteError(f"Cannot write {path}: {exc}") from exc
        written.append(path)

    for part_path in written[1:]:
        info(f"Wrote {part_path}")
    return written[1:] + written[:1]
