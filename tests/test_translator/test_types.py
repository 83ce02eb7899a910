"""Tests for helpspec.translator.types -- classification and type translation.

Covers:
- Every primitive name maps to its fixed scalar fragment, never a ``$ref``
- Nested ``vector of`` / ``map of`` descriptors
- Enum and object shapes, including precedence when both keys appear
- Named references: wrappers, bare names, degenerate names -> AnyType
- Override application, including overrides that name a primitive
- The primitive table is immutable and injectable
"""

from __future__ import annotations

from typing import Any

import pytest

from helpspec.models import (
    ArrayType,
    EnumType,
    MapType,
    NamedReference,
    ObjectType,
    PrimitiveType,
)
from helpspec.translator.types import (
    PRIMITIVE_SCHEMAS,
    classify,
    reference_name,
    reference_schema,
    resolve_reference_name,
    translate_type,
)

ANY_REF = {"$ref": "#/components/schemas/AnyType"}


def _ref(name: str) -> dict[str, str]:
    return {"$ref": f"#/components/schemas/{name}"}


# ------------------------------------------------------------------ #
# Primitives
# ------------------------------------------------------------------ #


class TestPrimitives:
    @pytest.mark.parametrize("name", sorted(PRIMITIVE_SCHEMAS))
    def test_primitive_translates_to_table_entry(self, name: str) -> None:
        schema = translate_type(name)
        assert schema == dict(PRIMITIVE_SCHEMAS[name])
        assert "$ref" not in schema

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("string", {"type": "string"}),
            ("int8", {"type": "number", "format": "int32"}),
            ("uint16", {"type": "number", "format": "int32"}),
            ("uint64", {"type": "number", "format": "int64"}),
            ("int", {"type": "integer"}),
            ("float", {"type": "number", "format": "float"}),
            ("double", {"type": "number", "format": "double"}),
            ("bool", {"type": "boolean"}),
            ("null", {"type": "null"}),
        ],
    )
    def test_fixed_vocabulary(self, name: str, expected: dict[str, str]) -> None:
        assert translate_type(name) == expected

    def test_result_is_a_fresh_copy(self) -> None:
        schema = translate_type("string")
        schema["format"] = "tampered"
        assert translate_type("string") == {"type": "string"}

    def test_table_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            PRIMITIVE_SCHEMAS["uuid"] = {"type": "string"}  # type: ignore[index]

    def test_injected_vocabulary(self) -> None:
        primitives = {**PRIMITIVE_SCHEMAS, "uuid": {"type": "string", "format": "uuid"}}
        assert translate_type("uuid", primitives=primitives) == {
            "type": "string",
            "format": "uuid",
        }
        assert translate_type("uuid") == _ref("uuid")


# ------------------------------------------------------------------ #
# Arrays and maps
# ------------------------------------------------------------------ #


class TestContainers:
    def test_vector_of_primitive(self) -> None:
        assert translate_type("vector of string") == {
            "type": "array",
            "items": {"type": "string"},
        }

    def test_deeply_nested_vectors(self) -> None:
        assert translate_type("vector of vector of vector of bool") == {
            "type": "array",
            "items": {
                "type": "array",
                "items": {"type": "array", "items": {"type": "boolean"}},
            },
        }

    def test_map_of_primitive(self) -> None:
        assert translate_type("map of int") == {
            "type": "object",
            "additionalProperties": {"type": "integer"},
        }

    def test_map_of_vector_of_named(self) -> None:
        assert translate_type("map of vector of LolItem") == {
            "type": "object",
            "additionalProperties": {"type": "array", "items": _ref("LolItem")},
        }

    def test_vector_of_nothing_falls_back(self) -> None:
        assert translate_type("vector of ") == {"type": "array", "items": ANY_REF}

    def test_classify_builds_nested_variants(self) -> None:
        variant = classify("vector of map of double")
        assert isinstance(variant, ArrayType)
        assert isinstance(variant.element, MapType)
        assert variant.element.value == PrimitiveType(name="double")


# ------------------------------------------------------------------ #
# Enums and objects
# ------------------------------------------------------------------ #


class TestShapes:
    def test_enum_names_in_declaration_order(self) -> None:
        descriptor = {
            "values": [
                {"name": "RED", "value": 0},
                {"name": "BLUE", "value": 1},
                {"name": "GREEN", "value": 2},
            ]
        }
        assert translate_type(descriptor) == {
            "type": "string",
            "enum": ["RED", "BLUE", "GREEN"],
        }

    def test_malformed_enum_values_are_skipped(self) -> None:
        variant = classify({"values": [{"name": "A"}, "junk", {"value": 3}]})
        assert isinstance(variant, EnumType)
        assert [v.name for v in variant.values] == ["A"]

    def test_enum_wins_over_fields(self) -> None:
        descriptor = {"values": [{"name": "X"}], "fields": [{"a": {"type": "int"}}]}
        assert isinstance(classify(descriptor), EnumType)

    def test_object_fields_in_declared_order(self) -> None:
        descriptor = {
            "fields": [
                {"zeta": {"type": "string", "offset": 0}},
                {"alpha": {"type": "vector of int", "optional": True}},
                {"color": {"type": {"Color": {}}}},
            ]
        }
        schema = translate_type(descriptor)
        assert schema["type"] == "object"
        assert list(schema["properties"]) == ["zeta", "alpha", "color"]
        assert schema["properties"]["alpha"] == {"type": "array", "items": {"type": "integer"}}
        assert schema["properties"]["color"] == _ref("Color")

    def test_object_fields_as_mapping(self) -> None:
        variant = classify({"fields": {"id": {"type": "int64"}, "name": {"type": "string"}}})
        assert isinstance(variant, ObjectType)
        assert [f.name for f in variant.fields] == ["id", "name"]

    def test_object_field_without_type_is_any(self) -> None:
        schema = translate_type({"fields": [{"blob": {"description": "?"}}]})
        assert schema["properties"]["blob"] == ANY_REF

    def test_field_metadata_is_kept_on_the_variant(self) -> None:
        variant = classify(
            {"fields": [{"id": {"type": "int", "optional": True, "offset": 8, "description": "d"}}]}
        )
        field = variant.fields[0]
        assert (field.optional, field.offset, field.description) == (True, 8, "d")


# ------------------------------------------------------------------ #
# Named references
# ------------------------------------------------------------------ #


class TestNamedReferences:
    def test_wrapper_mapping_uses_first_key(self) -> None:
        assert translate_type({"LolSummoner": {}, "Ignored": {}}) == _ref("LolSummoner")

    def test_bare_name(self) -> None:
        assert translate_type("LolSummoner") == _ref("LolSummoner")

    def test_wrapper_naming_a_primitive_is_not_wrapped(self) -> None:
        assert translate_type({"string": {}}) == {"type": "string"}

    @pytest.mark.parametrize("raw", ["", " ", "object", "0", {}, [], None, 42])
    def test_degenerate_descriptors_resolve_to_any(self, raw: Any) -> None:
        assert translate_type(raw) == ANY_REF

    @pytest.mark.parametrize("key", ["", "  ", "object", "0", "vector of Foo", "map of Foo"])
    def test_degenerate_wrapper_keys_resolve_to_any(self, key: str) -> None:
        assert translate_type({key: {}}) == ANY_REF

    def test_reference_name(self) -> None:
        assert reference_name("Foo") == "Foo"
        assert reference_name({"Foo": 1}) == "Foo"
        assert reference_name({}) == "0"
        assert reference_name(7) == "0"

    def test_classify_is_idempotent_on_variants(self) -> None:
        variant = NamedReference(name="Foo")
        assert classify(variant) is variant
        assert translate_type(variant) == _ref("Foo")

    def test_fallback_emits_debug_diagnostic(self, verbose_output, capsys) -> None:
        translate_type("object")
        assert "AnyType" in capsys.readouterr().err


# ------------------------------------------------------------------ #
# Overrides
# ------------------------------------------------------------------ #


class TestOverrides:
    OVERRIDES = {"Foo": "Bar"}

    def test_override_applies_to_wrapper(self) -> None:
        assert translate_type({"Foo": {}}, self.OVERRIDES) == _ref("Bar")

    def test_override_applies_inside_containers(self) -> None:
        assert translate_type("vector of Foo", self.OVERRIDES) == {
            "type": "array",
            "items": _ref("Bar"),
        }
        assert translate_type("map of Foo", self.OVERRIDES)["additionalProperties"] == _ref("Bar")

    def test_override_applies_inside_objects(self) -> None:
        schema = translate_type({"fields": [{"f": {"type": {"Foo": {}}}}]}, self.OVERRIDES)
        assert schema["properties"]["f"] == _ref("Bar")

    def test_override_does_not_touch_other_names(self) -> None:
        assert translate_type("Baz", self.OVERRIDES) == _ref("Baz")

    def test_override_to_primitive(self) -> None:
        assert translate_type({"Foo": {}}, {"Foo": "string"}) == {"type": "string"}

    def test_override_to_degenerate_name(self) -> None:
        assert translate_type({"Foo": {}}, {"Foo": "vector of Bar"}) == ANY_REF
        assert translate_type({"Foo": {}}, {"Foo": ""}) == ANY_REF

    def test_override_rescues_degenerate_name(self) -> None:
        assert resolve_reference_name("object", {"object": "JsonValue"}) == "JsonValue"

    def test_reference_schema(self) -> None:
        assert reference_schema("Foo", self.OVERRIDES) == _ref("Bar")
        assert reference_schema("int") == {"type": "integer"}
