"""Build ``components.schemas`` from the Console help ``types`` catalogue."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from helpspec.models import NamedReference
from helpspec.output import debug, warning
from helpspec.translator.types import ANY_TYPE, PRIMITIVE_SCHEMAS, classify, schema_for


def any_type_schema() -> dict[str, Any]:
    """The permissive fallback schema every unresolvable name points at."""
    return {
        "nullable": True,
        "anyOf": [
            {"type": "object"},
            {"type": "string"},
            {"type": "number"},
            {"type": "boolean"},
            {"type": "integer"},
            {"type": "array", "items": {}},
        ],
    }


def build_schemas(
    type_catalog: Any,
    overrides: Optional[Mapping[str, str]] = None,
    primitives: Mapping[str, Mapping[str, str]] = PRIMITIVE_SCHEMAS,
) -> dict[str, dict[str, Any]]:
    """Translate every named type into an OpenAPI schema.

    Entries keep the catalogue's order and its raw names; the override table
    only affects references *to* types. An entry with no recognisable shape
    (it classifies as a bare reference) is an opaque type and becomes an
    empty object schema. ``AnyType`` is always appended last.

    Args:
        type_catalog: The ``types`` mapping of a Console help payload.
        overrides: Raw type name -> output name.
        primitives: The primitive vocabulary.

    Returns:
        Type name -> schema, ready to be placed under
        ``components.schemas``.
    """
    schemas: dict[str, dict[str, Any]] = {}
    overrides = overrides or {}

    if not isinstance(type_catalog, Mapping):
        warning(
            f"Type catalogue is not a mapping ({type(type_catalog).__name__}); "
            "only AnyType will be emitted"
        )
        type_catalog = {}

    for name, descriptor in type_catalog.items():
        variant = classify(descriptor, primitives)
        if isinstance(variant, NamedReference):
            debug(f"Type {name!r} has no shape, emitting an empty object")
            schemas[str(name)] = {"type": "object", "properties": {}}
            continue
        schemas[str(name)] = schema_for(variant, overrides, primitives)

    if ANY_TYPE in schemas:
        debug(f"Catalogue defines {ANY_TYPE}; replacing it with the fallback schema")
        del schemas[ANY_TYPE]
    schemas[ANY_TYPE] = any_type_schema()
    return schemas
