"""
OpenAPI to C# type mapping.

Schemas are first reduced to an *abstract* type name (``string``, ``long``,
``DateTime``, ``array`` ...) and the abstract name is then looked up in a
per-run table of C# types. Names that are not in the table are model names
and pass through unchanged.
"""

from __future__ import annotations

from typing import Any, Final

from csharp_oas_generator.config import GeneratorConfig

_BASE_TYPE_MAPPING: Final = {
    "string": "string",
    "binary": "byte[]",
    "ByteArray": "byte[]",
    "boolean": "bool",
    "integer": "int",
    "float": "float",
    "long": "long",
    "double": "double",
    "number": "decimal",
    "decimal": "decimal",
    "DateTime": "DateTime",
    "date": "DateTime",
    "file": "System.IO.Stream",
    "array": "List",
    "list": "List",
    "map": "Dictionary",
    "object": "Object",
    "UUID": "Guid",
    "URI": "string",
    "AnyType": "Object",
}

_STRING_FORMATS: Final = {
    "date": "date",
    "date-time": "DateTime",
    "binary": "binary",
    "byte": "ByteArray",
    "uuid": "UUID",
    "uri": "URI",
}

_NUMBER_FORMATS: Final = {
    "float": "float",
    "double": "double",
    "decimal": "decimal",
}

# Types with copy-by-value semantics; optional values need a ``?`` wrapper.
VALUE_TYPES: Final = frozenset({"decimal", "bool", "int", "uint", "long", "ulong", "float", "double"})
NULLABLE_TYPES: Final = VALUE_TYPES | {"DateTime", "DateTimeOffset", "Guid"}

# C# primitives never need a model import.
LANGUAGE_PRIMITIVES: Final = NULLABLE_TYPES | {
    "string",
    "byte[]",
    "Object",
    "System.IO.Stream",
    "FileParameter",
}

NULL_MODEL: Final = "ModelNull"


def extract_ref_name(ref_string: str) -> str:
    """Extract the reference name from an OpenAPI $ref string.

    Args:
        ref_string: The $ref value (e.g., "#/components/schemas/Model").

    Returns:
        The extracted reference name (e.g., "Model").
    """
    return ref_string.split("/")[-1]


def is_map_schema(schema: dict[str, Any]) -> bool:
    """A schema is a map when it explicitly allows typed or untyped extra keys."""
    additional = schema.get("additionalProperties")
    return isinstance(additional, dict) or additional is True


def abstract_type_of(schema: dict[str, Any]) -> str:
    """Reduce a (non-reference, non-container) schema to its abstract type name."""
    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        # OpenAPI 3.1 style ``type: [string, "null"]``
        non_null = [t for t in schema_type if t != "null"]
        schema_type = non_null[0] if non_null else "null"

    schema_format = schema.get("format")

    match schema_type:
        case "string":
            return _STRING_FORMATS.get(schema_format, "string")
        case "integer":
            return "long" if schema_format == "int64" else "integer"
        case "number":
            return _NUMBER_FORMATS.get(schema_format, "number")
        case "boolean":
            return "boolean"
        case "array":
            return "array"
        case "file":
            return "file"
        case "null":
            return NULL_MODEL
        case "object":
            return "map" if is_map_schema(schema) else "object"
        case None:
            if "properties" in schema:
                return "object"
            return "map" if is_map_schema(schema) else "AnyType"
        case _:
            return "AnyType"


class TypeMapper:
    """Resolves schemas and abstract type names to C# type names."""

    def __init__(self, config: GeneratorConfig | None = None, model_namer: Any = None) -> None:  # noqa: ANN401
        self.config = config or GeneratorConfig()
        self.model_namer = model_namer
        self.type_mapping = self._build_type_mapping()
        self.instantiation_types = {
            "array": "Collection" if self.config.use_collection else "List",
            "map": "Dictionary",
        }

    def _build_type_mapping(self) -> dict[str, str]:
        mapping = dict(_BASE_TYPE_MAPPING)
        mapping["file"] = self.config.capabilities.file_type
        if self.config.use_datetime_offset:
            mapping["DateTime"] = "DateTimeOffset"
            mapping["date"] = "DateTimeOffset"
        if self.config.use_collection:
            mapping["array"] = "Collection"
            mapping["list"] = "Collection"
        return mapping

    def resolve_type(self, abstract_type: str) -> str:
        """Map an abstract type name to a C# type name; unknown names pass through."""
        return self.type_mapping.get(abstract_type, abstract_type)

    def model_name(self, name: str) -> str:
        if self.model_namer is None:
            return name
        return self.model_namer(name)

    def schema_type(self, schema: dict[str, Any] | None, visited: set[str] | None = None) -> str:
        """Convert an OpenAPI schema to a C# type string.

        Args:
            schema: The schema dictionary from the document.
            visited: Set of visited references to prevent cycles.

        Returns:
            C# type string, e.g. ``List<Pet>`` or ``Dictionary<string, int>``.
        """
        if not schema:
            return self.resolve_type("AnyType")
        if visited is None:
            visited = set()

        if "$ref" in schema:
            ref_name = extract_ref_name(schema["$ref"])
            visited.add(ref_name)
            return self.model_name(ref_name)

        abstract = abstract_type_of(schema)
        if abstract == "array":
            inner = self.schema_type(schema.get("items"), visited)
            return f"{self.resolve_type('array')}<{inner}>"
        if abstract == "map":
            additional = schema.get("additionalProperties")
            inner = self.schema_type(additional if isinstance(additional, dict) else None, visited)
            return f"{self.resolve_type('map')}<string, {inner}>"
        return self.resolve_type(abstract)

    def instantiation_type(self, schema: dict[str, Any]) -> str | None:
        """Return the concrete type used to instantiate a container schema."""
        if is_map_schema(schema):
            additional = schema.get("additionalProperties")
            inner_schema = additional if isinstance(additional, dict) else {}
            if is_map_schema(inner_schema):
                inner = self.instantiation_type(inner_schema)
            else:
                inner = self.schema_type(inner_schema or None)
            return f"{self.instantiation_types['map']}<String, {inner}>"
        if abstract_type_of(schema) == "array":
            inner = self.schema_type(schema.get("items"))
            return f"{self.instantiation_types['array']}<{inner}>"
        return None

    @staticmethod
    def is_value_type(data_type: str) -> bool:
        return data_type in VALUE_TYPES

    @staticmethod
    def is_nullable_type(data_type: str) -> bool:
        return data_type in NULLABLE_TYPES

    def nullable_type(self, data_type: str, *, nullable: bool) -> str:
        """Append ``?`` to a nullable schema of a value-like type."""
        if nullable and self.is_nullable_type(data_type):
            return f"{data_type}?"
        return data_type
