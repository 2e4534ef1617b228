"""Tests for the schema_parser module."""

import pytest

from apigen.schema_parser import (
    DynamicType,
    extract_types_from_schema,
    extract_types_from_text,
    resolve_schema_type,
)


# Named schemas available for usage tracking
_DEFINITIONS: dict = {
    "Base": {"type": "object", "properties": {"id": {"type": "integer"}}},
    "Cat": {"type": "object", "properties": {"meows": {"type": "boolean"}}},
    "Dog": {"type": "object", "properties": {"barks": {"type": "boolean"}}},
    "Player": {"type": "object", "properties": {"name": {"type": "string"}}},
    "PlayersId": {"type": "string"},
    "NewTeam": {"type": "object", "properties": {"name": {"type": "string"}}},
}


def _squash(text: str) -> str:
    return " ".join(text.split())


class TestResolveSchemaType:
    """Test OpenAPI schema -> TypeScript type conversion."""

    def test_string(self):
        assert resolve_schema_type({"type": "string"}, _DEFINITIONS) == "string"

    def test_integer_and_number(self):
        assert resolve_schema_type({"type": "integer"}, _DEFINITIONS) == "number"
        assert resolve_schema_type({"type": "number", "format": "double"}, _DEFINITIONS) == "number"

    def test_boolean(self):
        assert resolve_schema_type({"type": "boolean"}, _DEFINITIONS) == "boolean"

    def test_missing_schema_is_unknown(self):
        assert resolve_schema_type(None, _DEFINITIONS) == DynamicType.UNKNOWN

    def test_ref_normalized(self):
        schema = {"$ref": "#/components/schemas/user_profile"}
        assert resolve_schema_type(schema, _DEFINITIONS) == "UserProfile"

    def test_dangling_ref_keeps_name(self):
        assert resolve_schema_type({"$ref": "#/definitions/Ghost"}, _DEFINITIONS) == "Ghost"

    def test_one_of_union(self):
        schema = {"oneOf": [{"$ref": "#/definitions/Cat"}, {"$ref": "#/definitions/Dog"}]}
        assert resolve_schema_type(schema, _DEFINITIONS) == "Cat | Dog"

    def test_any_of_union(self):
        schema = {"anyOf": [{"type": "string"}, {"type": "integer"}]}
        assert resolve_schema_type(schema, _DEFINITIONS) == "string | number"

    def test_all_of_ref_and_inline(self):
        schema = {
            "allOf": [
                {"$ref": "#/definitions/Base"},
                {"properties": {"x": {"type": "number"}}, "required": ["x"]},
            ]
        }
        result = resolve_schema_type(schema, _DEFINITIONS)
        assert _squash(result) == "Base & { x: number; }"

    def test_all_of_refs_only(self):
        schema = {"allOf": [{"$ref": "#/definitions/Cat"}, {"$ref": "#/definitions/Dog"}]}
        assert resolve_schema_type(schema, _DEFINITIONS) == "Cat & Dog"

    def test_all_of_inline_properties_merged(self):
        schema = {
            "allOf": [
                {"properties": {"a": {"type": "string"}}},
                {"properties": {"a": {"type": "integer"}, "b": {"type": "boolean"}}, "required": ["b"]},
            ]
        }
        assert _squash(resolve_schema_type(schema, _DEFINITIONS)) == "{ a?: number; b: boolean; }"

    def test_string_enum(self):
        schema = {"type": "string", "enum": ["GK", "DF"]}
        assert resolve_schema_type(schema, _DEFINITIONS) == "'GK' | 'DF'"

    def test_untyped_enum_is_string_literals(self):
        assert resolve_schema_type({"enum": ["a", "b"]}, _DEFINITIONS) == "'a' | 'b'"

    def test_nullable_string_enum(self):
        schema = {"type": "string", "enum": ["a", None]}
        assert resolve_schema_type(schema, _DEFINITIONS) == "'a' | null"

    def test_untyped_boolean_enum_uses_js_text(self):
        assert resolve_schema_type({"enum": [True, False]}, _DEFINITIONS) == "'true' | 'false'"

    def test_enum_value_escaped(self):
        schema = {"type": "string", "enum": ["it's", "two\nlines"]}
        assert resolve_schema_type(schema, _DEFINITIONS) == "'it\\'s' | 'two\\nlines'"

    def test_array_of_refs(self):
        schema = {"type": "array", "items": {"$ref": "#/definitions/Player"}}
        assert resolve_schema_type(schema, _DEFINITIONS) == "Player[]"

    def test_array_of_enum_parenthesized(self):
        schema = {"type": "array", "items": {"type": "string", "enum": ["a", "b"]}}
        assert resolve_schema_type(schema, _DEFINITIONS) == "('a' | 'b')[]"

    def test_array_without_items(self):
        assert resolve_schema_type({"type": "array"}, _DEFINITIONS) == "unknown[]"

    def test_nested_object_indented(self):
        schema = {
            "type": "object",
            "properties": {
                "inner": {"type": "object", "properties": {"a": {"type": "string"}}},
            },
        }
        assert resolve_schema_type(schema, _DEFINITIONS) == (
            "{\n"
            "  inner?: {\n"
            "    a?: string;\n"
            "  };\n"
            "}"
        )

    def test_quoted_property_key(self):
        schema = {"properties": {"content-type": {"type": "string"}}}
        assert _squash(resolve_schema_type(schema, _DEFINITIONS)) == "{ 'content-type'?: string; }"

    def test_additional_properties_map(self):
        schema = {"type": "object", "additionalProperties": {"type": "integer"}}
        assert resolve_schema_type(schema, _DEFINITIONS) == "Record<string, number>"

    def test_free_form_object(self):
        assert resolve_schema_type({"type": "object"}, _DEFINITIONS) == DynamicType.RECORD
        assert resolve_schema_type({"type": "object", "properties": {}}, _DEFINITIONS) == "Record<string, any>"

    def test_no_type_is_any(self):
        assert resolve_schema_type({"description": "whatever"}, _DEFINITIONS) == "any"

    def test_cyclic_node_terminates(self):
        node: dict = {"type": "object", "properties": {}}
        node["properties"]["self"] = node
        assert _squash(resolve_schema_type(node, _DEFINITIONS)) == "{ self?: any; }"

    @pytest.mark.parametrize(
        "schema",
        [
            42,
            "string",
            [],
            {"type": 5},
            {"oneOf": "not-a-list"},
            {"allOf": [{}]},
            {"$ref": 7},
            {"type": "array", "items": "nope"},
            {"properties": {"a": None}, "required": "a"},
        ],
    )
    def test_malformed_input_never_raises(self, schema):
        assert isinstance(resolve_schema_type(schema, _DEFINITIONS), str)

    def test_definitions_not_mutated(self):
        before = repr(_DEFINITIONS)
        resolve_schema_type({"allOf": [{"$ref": "#/definitions/Base"}]}, _DEFINITIONS)
        assert repr(_DEFINITIONS) == before


class TestExtractTypesFromSchema:
    """Test usage tracking by walking schemas."""

    def test_nested_refs(self):
        schema = {
            "type": "object",
            "properties": {
                "pets": {"type": "array", "items": {"oneOf": [
                    {"$ref": "#/definitions/Cat"},
                    {"$ref": "#/definitions/Dog"},
                ]}},
                "owner": {"allOf": [{"$ref": "#/definitions/Player"}]},
                "extra": {"additionalProperties": {"$ref": "#/definitions/Base"}},
            },
        }
        assert extract_types_from_schema(schema) == {"Cat", "Dog", "Player", "Base"}

    def test_dangling_refs_kept(self):
        schema = {"type": "array", "items": {"$ref": "#/definitions/ghost_type"}}
        assert extract_types_from_schema(schema) == {"GhostType"}

    def test_inline_objects_record_nothing(self):
        schema = {"oneOf": [
            {"type": "object", "properties": {"kind": {"type": "string"}}},
            {"type": "object", "properties": {"count": {"type": "integer"}}},
        ]}
        assert extract_types_from_schema(schema) == set()

    def test_cycle_terminates(self):
        node: dict = {"properties": {"owner": {"$ref": "#/definitions/Player"}}}
        node["properties"]["child"] = node
        assert extract_types_from_schema(node) == {"Player"}


class TestExtractTypesFromText:
    """Test usage tracking by scanning rendered code."""

    def test_generic_argument(self):
        text = "export async function f(): Promise<Player[]> {"
        assert extract_types_from_text(text, _DEFINITIONS) == {"Player"}

    def test_parameter_annotation(self):
        text = "export async function create(data: NewTeam): Promise<any> {"
        assert extract_types_from_text(text, _DEFINITIONS) == {"NewTeam"}

    def test_function_name_is_not_a_type(self):
        text = "export async function getPlayersId(id: string): Promise<any> {"
        assert extract_types_from_text(text, _DEFINITIONS) == set()

    def test_string_literals_ignored(self):
        text = "position?: 'Player' | \"Cat\";"
        assert extract_types_from_text(text, _DEFINITIONS) == set()

    def test_only_defined_names(self):
        text = "function f(a: Ghost, b: Dog): Promise<Cat | Unknown>"
        assert extract_types_from_text(text, _DEFINITIONS) == {"Dog", "Cat"}
