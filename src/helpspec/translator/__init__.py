"""Translation of help payloads into OpenAPI fragments.

Pure functions only: nothing in this package performs I/O besides emitting
diagnostics through :mod:`helpspec.output`.
"""

from helpspec.translator.document import assemble_document, format_for_path, render_document
from helpspec.translator.endpoints import build_paths, join_functions, translate_endpoint
from helpspec.translator.schemas import any_type_schema, build_schemas
from helpspec.translator.types import PRIMITIVE_SCHEMAS, classify, translate_type
from helpspec.translator.usage import parse_usage

__all__ = [
    "PRIMITIVE_SCHEMAS",
    "any_type_schema",
    "assemble_document",
    "build_paths",
    "build_schemas",
    "classify",
    "format_for_path",
    "join_functions",
    "parse_usage",
    "render_document",
    "translate_endpoint",
    "translate_type",
]
