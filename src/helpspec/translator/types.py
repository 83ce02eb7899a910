"""Classify help-payload type descriptors and lower them to OpenAPI schemas.

The "Console" help format describes types with a small, self-describing
grammar:

* primitive names -- ``"string"``, ``"int32"``, ``"bool"``, ...
* ``"vector of <T>"`` and ``"map of <T>"`` -- textual and arbitrarily nested;
* enums -- ``{"values": [{"name": "RED", "value": 0}, ...]}``;
* objects -- ``{"fields": [{"fieldName": {"type": <T>, ...}}, ...]}``;
* anything else names another type -- ``{"TypeName": {...}}`` wrappers or
  bare names.

:func:`classify` is the only place raw values become the tagged variants in
:mod:`helpspec.models`; :func:`translate_type` lowers a variant (or a raw
value, classifying it first) to a schema fragment. Both are pure: the only
side effect is a debug diagnostic when a name falls back to ``AnyType``.

Example::

    >>> translate_type("vector of map of int")
    {'type': 'array', 'items': {'type': 'object', 'additionalProperties': {'type': 'integer'}}}
    >>> translate_type({"LolSummoner": {}}, overrides={"LolSummoner": "Summoner"})
    {'$ref': '#/components/schemas/Summoner'}
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any, Optional

from helpspec.models import (
    ArrayType,
    EnumType,
    EnumValue,
    MapType,
    NamedReference,
    ObjectField,
    ObjectType,
    PrimitiveType,
    TypeDescriptor,
)
from helpspec.output import debug

ARRAY_PREFIX = "vector of "
MAP_PREFIX = "map of "
ANY_TYPE = "AnyType"
SCHEMA_REF_PREFIX = "#/components/schemas/"

# Names that can never be a real schema. "0" is what a wrapper without a
# usable key degrades to.
_DEGENERATE_NAMES = frozenset({"0", "object"})

PRIMITIVE_SCHEMAS: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "string": MappingProxyType({"type": "string"}),
    "int8": MappingProxyType({"type": "number", "format": "int32"}),
    "uint8": MappingProxyType({"type": "number", "format": "int32"}),
    "int16": MappingProxyType({"type": "number", "format": "int32"}),
    "uint16": MappingProxyType({"type": "number", "format": "int32"}),
    "int32": MappingProxyType({"type": "number", "format": "int32"}),
    "uint32": MappingProxyType({"type": "number", "format": "int32"}),
    "int64": MappingProxyType({"type": "number", "format": "int64"}),
    "uint64": MappingProxyType({"type": "number", "format": "int64"}),
    "int": MappingProxyType({"type": "integer"}),
    "float": MappingProxyType({"type": "number", "format": "float"}),
    "double": MappingProxyType({"type": "number", "format": "double"}),
    "bool": MappingProxyType({"type": "boolean"}),
    "null": MappingProxyType({"type": "null"}),
})

_VARIANTS = (PrimitiveType, ArrayType, MapType, EnumType, ObjectType, NamedReference)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def is_array_syntax(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(ARRAY_PREFIX.rstrip())


def is_map_syntax(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(MAP_PREFIX.rstrip())


def is_primitive(
    value: Any,
    primitives: Mapping[str, Mapping[str, str]] = PRIMITIVE_SCHEMAS,
) -> bool:
    """Return ``True`` if *value* is a name from the primitive vocabulary."""
    return (
        isinstance(value, str)
        and value in primitives
        and not is_array_syntax(value)
        and not is_map_syntax(value)
    )


def classify(
    descriptor: Any,
    primitives: Mapping[str, Mapping[str, str]] = PRIMITIVE_SCHEMAS,
) -> TypeDescriptor:
    """Classify a raw type descriptor into exactly one tagged variant.

    Tests run in a fixed precedence so that overlapping shapes resolve the
    same way every time:

    1. a mapping with a list of ``values`` -- :class:`EnumType`;
    2. a mapping with ``fields`` -- :class:`ObjectType`;
    3. a primitive name -- :class:`PrimitiveType`;
    4. ``"vector of ..."`` -- :class:`ArrayType`;
    5. ``"map of ..."`` -- :class:`MapType`;
    6. anything else -- :class:`NamedReference`.

    Array elements, map values and object field types are classified
    recursively. Already-classified variants are returned unchanged.

    Args:
        descriptor: A raw value taken from a help payload.
        primitives: The primitive vocabulary.

    Returns:
        The classified variant. Never raises.
    """
    if isinstance(descriptor, _VARIANTS):
        return descriptor

    if isinstance(descriptor, Mapping):
        values = descriptor.get("values")
        if isinstance(values, Sequence) and not isinstance(values, str):
            return _classify_enum(values)
        if "fields" in descriptor:
            return _classify_object(descriptor["fields"], primitives)

    if is_primitive(descriptor, primitives):
        return PrimitiveType(name=descriptor)

    if isinstance(descriptor, str):
        if descriptor.startswith(ARRAY_PREFIX):
            return ArrayType(element=classify(descriptor[len(ARRAY_PREFIX):], primitives))
        if descriptor.startswith(MAP_PREFIX):
            return MapType(value=classify(descriptor[len(MAP_PREFIX):], primitives))

    return NamedReference(name=reference_name(descriptor))


def reference_name(descriptor: Any) -> str:
    """Return the type name a named-reference descriptor points at.

    Bare strings name themselves; mappings name their first key. Anything
    without a usable key yields ``"0"``, which the resolver maps to
    ``AnyType``.
    """
    if isinstance(descriptor, str):
        return descriptor
    if isinstance(descriptor, Mapping):
        for key in descriptor:
            return str(key)
    return "0"


def _classify_enum(values: Sequence[Any]) -> EnumType:
    members: list[EnumValue] = []
    for entry in values:
        if not isinstance(entry, Mapping) or entry.get("name") is None:
            debug(f"Skipping malformed enum value: {entry!r}")
            continue
        value = entry.get("value")
        members.append(
            EnumValue(
                name=str(entry["name"]),
                value=value if isinstance(value, int) else None,
                description=entry.get("description") or None,
            )
        )
    return EnumType(values=tuple(members))


def _classify_object(
    fields: Any,
    primitives: Mapping[str, Mapping[str, str]],
) -> ObjectType:
    # Console payloads send a list of single-key mappings; a plain mapping
    # of field name to entry is accepted as well.
    if isinstance(fields, Mapping):
        pairs = list(fields.items())
    elif isinstance(fields, Sequence) and not isinstance(fields, str):
        pairs = []
        for entry in fields:
            if isinstance(entry, Mapping) and len(entry) == 1:
                pairs.extend(entry.items())
            else:
                debug(f"Skipping malformed object field: {entry!r}")
    else:
        pairs = []

    members: list[ObjectField] = []
    for name, spec in pairs:
        spec = spec if isinstance(spec, Mapping) else {}
        offset = spec.get("offset")
        members.append(
            ObjectField(
                name=str(name),
                type=classify(spec.get("type"), primitives),
                description=spec.get("description") or None,
                optional=bool(spec.get("optional", False)),
                offset=offset if isinstance(offset, int) else None,
            )
        )
    return ObjectType(fields=tuple(members))


# ---------------------------------------------------------------------------
# Translation
# ---------------------------------------------------------------------------


def translate_type(
    descriptor: Any,
    overrides: Optional[Mapping[str, str]] = None,
    primitives: Mapping[str, Mapping[str, str]] = PRIMITIVE_SCHEMAS,
) -> dict[str, Any]:
    """Translate a type descriptor into an OpenAPI schema fragment.

    Args:
        descriptor: A raw payload value or an already-classified variant.
        overrides: Raw type name -> output name, applied to named
            references only.
        primitives: The primitive vocabulary.

    Returns:
        A new schema dict: a scalar, ``array``, ``object`` with
        ``additionalProperties`` or ``properties``, a string ``enum``, or a
        ``$ref``. Total; malformed input degrades to ``AnyType``.
    """
    return schema_for(classify(descriptor, primitives), overrides or {}, primitives)


def schema_for(
    variant: TypeDescriptor,
    overrides: Optional[Mapping[str, str]] = None,
    primitives: Mapping[str, Mapping[str, str]] = PRIMITIVE_SCHEMAS,
) -> dict[str, Any]:
    """Lower an already-classified variant; see :func:`translate_type`."""
    if isinstance(variant, PrimitiveType):
        if variant.name in primitives:
            return dict(primitives[variant.name])
        return reference_schema(variant.name, overrides, primitives)
    if isinstance(variant, ArrayType):
        return {"type": "array", "items": schema_for(variant.element, overrides, primitives)}
    if isinstance(variant, MapType):
        return {
            "type": "object",
            "additionalProperties": schema_for(variant.value, overrides, primitives),
        }
    if isinstance(variant, EnumType):
        return {"type": "string", "enum": [v.name for v in variant.values]}
    if isinstance(variant, ObjectType):
        return {
            "type": "object",
            "properties": {
                f.name: schema_for(f.type, overrides, primitives) for f in variant.fields
            },
        }
    return reference_schema(variant.name, overrides, primitives)


def resolve_reference_name(
    name: str,
    overrides: Optional[Mapping[str, str]] = None,
) -> str:
    """Apply the override table and the degenerate-name policy to *name*.

    Returns:
        The override for *name* if one exists, otherwise *name* itself --
        replaced by ``AnyType`` when the result is empty, whitespace,
        ``"0"``, ``"object"``, or itself array/map syntax.
    """
    resolved = overrides.get(name, name) if overrides else name
    if not isinstance(resolved, str) or not resolved.strip():
        debug(f"Empty type name (from {name!r}), using {ANY_TYPE}")
        return ANY_TYPE
    if is_array_syntax(resolved) or is_map_syntax(resolved):
        debug(f"Nested type used as a name ({resolved!r}), using {ANY_TYPE}")
        return ANY_TYPE
    if resolved in _DEGENERATE_NAMES:
        debug(f"Unresolvable type name {resolved!r}, using {ANY_TYPE}")
        return ANY_TYPE
    return resolved


def reference_schema(
    name: str,
    overrides: Optional[Mapping[str, str]] = None,
    primitives: Mapping[str, Mapping[str, str]] = PRIMITIVE_SCHEMAS,
) -> dict[str, Any]:
    """Build the schema for a reference to the type called *name*.

    Primitives are never wrapped in a ``$ref``: a name that resolves to one
    yields the scalar fragment instead.
    """
    resolved = resolve_reference_name(name, overrides)
    if resolved in primitives:
        return dict(primitives[resolved])
    return {"$ref": SCHEMA_REF_PREFIX + resolved}
