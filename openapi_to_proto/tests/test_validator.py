import re

import pytest

from openapi_to_proto.analyzer.validator import (
    check_enum,
    is_integer_enum,
    is_string_enum,
    validate_field_numbers,
    validate_schema,
)
from openapi_to_proto.errors import FieldNumberError, MalformedSchemaError, UnsupportedConstructError
from openapi_to_proto.schema_feed import SchemaHandle


def handle(body, components=None):
    return SchemaHandle(raw=body, components=components or {})


def obj(**properties):
    return {"type": "object", "properties": properties}


class TestValidateSchema:
    """Top-level schema and direct property checks"""

    def test_plain_object_passes(self):
        validate_schema("User", handle(obj(id={"type": "string"}, age={"type": "integer"})))

    @pytest.mark.parametrize("keyword", ["allOf", "anyOf"])
    def test_composition_rejected(self, keyword):
        body = {keyword: [{"type": "object"}, {"type": "object"}]}
        with pytest.raises(UnsupportedConstructError, match=f"schema 'Thing': uses '{keyword}' which is not supported"):
            validate_schema("Thing", handle(body))

    def test_not_rejected(self):
        with pytest.raises(UnsupportedConstructError, match="uses 'not'"):
            validate_schema("Thing", handle({"not": {"type": "string"}}))

    def test_composition_in_property_carries_property_context(self):
        body = obj(extra={"anyOf": [{"type": "string"}, {"type": "integer"}]})
        with pytest.raises(UnsupportedConstructError) as exc_info:
            validate_schema("Thing", handle(body))
        assert exc_info.value.schema_name == "Thing"
        assert exc_info.value.property_name == "extra"

    def test_one_of_needs_two_variants(self):
        body = {"oneOf": [{"$ref": "#/components/schemas/Dog"}], "discriminator": {"propertyName": "petType"}}
        with pytest.raises(UnsupportedConstructError, match="oneOf must have at least 2 variants"):
            validate_schema("Pet", handle(body))

    def test_one_of_needs_discriminator(self):
        body = {"oneOf": [{"$ref": "#/components/schemas/Dog"}, {"$ref": "#/components/schemas/Cat"}]}
        with pytest.raises(UnsupportedConstructError, match="oneOf requires discriminator"):
            validate_schema("Pet", handle(body))

    def test_one_of_variants_must_be_references(self):
        body = {
            "oneOf": [{"$ref": "#/components/schemas/Dog"}, {"type": "object"}],
            "discriminator": {"propertyName": "petType"},
        }
        with pytest.raises(UnsupportedConstructError, match="oneOf variant 1 must use \\$ref"):
            validate_schema("Pet", handle(body))

    def test_inline_one_of_property_rejected(self):
        body = obj(
            pet={
                "oneOf": [{"$ref": "#/components/schemas/Dog"}, {"$ref": "#/components/schemas/Cat"}],
                "discriminator": {"propertyName": "petType"},
            }
        )
        with pytest.raises(UnsupportedConstructError, match="inline oneOf not supported"):
            validate_schema("Owner", handle(body))

    def test_property_needs_type_or_ref(self):
        with pytest.raises(
            MalformedSchemaError, match="schema 'User': property 'name': property must have type or \\$ref"
        ):
            validate_schema("User", handle(obj(name={"description": "no type"})))

    def test_multi_type_property_rejected(self):
        with pytest.raises(UnsupportedConstructError, match="multi-type properties not supported"):
            validate_schema("User", handle(obj(value={"type": ["string", "integer"]})))

    def test_nullable_variants_allowed(self):
        body = obj(value={"type": ["string", "null"]}, other={"type": "string", "nullable": True})
        validate_schema("User", handle(body))

    def test_unresolved_reference(self):
        body = obj(address={"$ref": "#/components/schemas/Address"})
        with pytest.raises(MalformedSchemaError, match="schema not found"):
            validate_schema("User", handle(body))

    def test_external_reference(self):
        body = obj(address={"$ref": "other.yaml#/Address"})
        with pytest.raises(MalformedSchemaError, match="only local #/components/schemas/ references are supported"):
            validate_schema("User", handle(body))

    def test_resolved_reference_passes(self):
        components = {"Address": obj(street={"type": "string"})}
        validate_schema("User", handle(obj(address={"$ref": "#/components/schemas/Address"}), components))

    def test_field_numbers_checked(self):
        components = {
            "Pet": {
                "oneOf": [{"$ref": "#/components/schemas/Dog"}, {"$ref": "#/components/schemas/Cat"}],
                "discriminator": {"propertyName": "petType"},
            },
            "Dog": obj(petType={"type": "string"}),
            "Cat": obj(petType={"type": "string"}),
        }
        body = obj(name={"type": "string", "x-proto-number": 5}, pet={"$ref": "#/components/schemas/Pet"})
        with pytest.raises(FieldNumberError, match=re.escape("(found on 1 of 2 fields)")) as exc_info:
            validate_schema("Owner", handle(body, components))
        assert exc_info.value.schema_name == "Owner"


class TestEnums:
    """Enum checks"""

    def test_enum_needs_explicit_type(self):
        with pytest.raises(MalformedSchemaError, match="enum must have explicit type field"):
            check_enum(handle({"enum": ["a", "b"]}), "Status")

    def test_enum_rejects_null(self):
        with pytest.raises(MalformedSchemaError, match="enum cannot contain null values"):
            check_enum(handle({"type": "string", "enum": ["a", None]}), "Status")

    def test_enum_rejects_mixed_kinds(self):
        with pytest.raises(MalformedSchemaError, match=re.escape("enum contains mixed types (string and integer)")):
            check_enum(handle({"type": "string", "enum": ["active", 1]}), "Status")

    def test_enum_kind_follows_declared_type(self):
        string_enum = handle({"type": "string", "enum": ["1", "2"]})
        integer_enum = handle({"type": "integer", "enum": [1, 2]})
        check_enum(string_enum, "Code")
        assert is_string_enum(string_enum)
        assert not is_integer_enum(string_enum)
        assert is_integer_enum(integer_enum)

    def test_enum_property_validated(self):
        body = obj(status={"type": "string", "enum": ["a", None]})
        with pytest.raises(MalformedSchemaError) as exc_info:
            validate_schema("User", handle(body))
        assert exc_info.value.property_name == "status"


class TestFieldNumbers:
    """x-proto-number annotations"""

    def test_unannotated(self):
        assert validate_field_numbers(handle(obj(a={"type": "string"})), "Item") == {}

    def test_all_annotated(self):
        body = obj(
            a={"type": "string", "x-proto-number": 5},
            b={"type": "string", "x-proto-number": "1"},
        )
        assert validate_field_numbers(handle(body), "Item") == {"a": 5, "b": 1}

    def test_partial_annotation(self):
        body = obj(
            a={"type": "string", "x-proto-number": 1},
            b={"type": "string", "x-proto-number": 2},
            c={"type": "string"},
        )
        message = "schema 'Item': x-proto-number must be specified on all fields or none (found on 2 of 3 fields)"
        with pytest.raises(FieldNumberError, match=re.escape(message)):
            validate_field_numbers(handle(body), "Item")

    @pytest.mark.parametrize("value", ["abc", 1.5, True])
    def test_non_integer(self, value):
        body = obj(a={"type": "string", "x-proto-number": value})
        with pytest.raises(FieldNumberError, match="x-proto-number must be a valid integer") as exc_info:
            validate_field_numbers(handle(body), "Item")
        assert exc_info.value.property_name == "a"

    @pytest.mark.parametrize("value", [0, -3, 536870912])
    def test_out_of_range(self, value):
        body = obj(a={"type": "string", "x-proto-number": value})
        with pytest.raises(FieldNumberError, match=f"must be between 1 and 536870911, got: {value}"):
            validate_field_numbers(handle(body), "Item")

    def test_upper_bound_allowed(self):
        body = obj(a={"type": "string", "x-proto-number": 536870911})
        assert validate_field_numbers(handle(body), "Item") == {"a": 536870911}

    @pytest.mark.parametrize("value", [19000, 19500, 19999])
    def test_reserved_range(self, value):
        body = obj(a={"type": "string", "x-proto-number": value})
        with pytest.raises(FieldNumberError, match=f"x-proto-number {value} is in reserved range 19000-19999"):
            validate_field_numbers(handle(body), "Item")

    def test_duplicate_numbers(self):
        body = obj(
            a={"type": "string", "x-proto-number": 3},
            b={"type": "string", "x-proto-number": 3},
        )
        with pytest.raises(FieldNumberError, match="duplicate x-proto-number 3 used by properties 'a' and 'b'"):
            validate_field_numbers(handle(body), "Item")

    def test_annotation_beside_reference(self):
        components = {"Address": obj(street={"type": "string"})}
        body = obj(
            id={"type": "string", "x-proto-number": 1},
            address={"$ref": "#/components/schemas/Address", "x-proto-number": 2},
        )
        assert validate_field_numbers(handle(body, components), "User") == {"id": 1, "address": 2}

    def test_nested_path_in_context(self):
        body = obj(a={"type": "string", "x-proto-number": 0})
        with pytest.raises(FieldNumberError) as exc_info:
            validate_field_numbers(handle(body), "Order", "shipping")
        assert exc_info.value.property_name == "shipping.a"


if __name__ == "__main__":
    pytest.main([__file__])
