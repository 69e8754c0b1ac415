"""
OpenAPI Specification Parser for C# Client Generation.

This module parses OpenAPI 3.x documents into the intermediate model used by
the templates: models with resolved C# types and identifiers, inheritance
reconciled between parent and child schemas, and operations grouped with
their parameters.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Final

import yaml

from csharp_oas_generator.config import GeneratorConfig
from csharp_oas_generator.errors import SpecificationError
from csharp_oas_generator.naming import NameResolver
from csharp_oas_generator.parser.inheritance import dedupe_properties, reconcile
from csharp_oas_generator.parser.models import (
    ContainerKind,
    Discriminator,
    EnumVar,
    Model,
    Operation,
    Parameter,
    ParsedSpec,
    Property,
)
from csharp_oas_generator.parser.type_mapping import (
    NULL_MODEL,
    TypeMapper,
    abstract_type_of,
    extract_ref_name,
    is_map_schema,
)

logger = logging.getLogger(__name__)

_HTTP_METHODS: Final = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
_FORM_CONTENT_TYPES: Final = ("multipart/form-data", "application/x-www-form-urlencoded")
_PATTERN_WITH_MODIFIERS: Final = re.compile(r"^/(.+)/([a-z]*)$", re.DOTALL)

REGEX_MODIFIERS: Final = {
    "i": "IgnoreCase",
    "m": "Multiline",
    "s": "Singleline",
    "x": "IgnorePatternWhitespace",
}


def post_process_pattern(pattern: str | None, vendor_extensions: dict[str, Any]) -> None:
    """Split a ``/regex/flags`` pattern into ``x-regex`` and ``x-modifiers``."""
    if not pattern:
        return

    match = _PATTERN_WITH_MODIFIERS.match(pattern)
    if match:
        regex, flags = match.groups()
    else:
        regex, flags = pattern, ""

    modifiers = [REGEX_MODIFIERS[flag] for flag in flags if flag in REGEX_MODIFIERS]
    vendor_extensions["x-regex"] = regex.replace('"', '""')
    vendor_extensions["x-modifiers"] = modifiers


def _vendor_extensions(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if key.startswith("x-")}


def _schema_is_nullable(schema: dict[str, Any]) -> bool:
    if schema.get("nullable") is True:
        return True
    schema_type = schema.get("type")
    return isinstance(schema_type, list) and "null" in schema_type


def load_document(file_path: str | Path) -> dict[str, Any]:
    """Load an OpenAPI document from a JSON or YAML file."""
    path = Path(file_path)
    with path.open(encoding="utf-8") as f:
        document = json.load(f) if path.suffix.lower() == ".json" else yaml.safe_load(f)

    if not isinstance(document, dict):
        msg = "The document root must be a mapping"
        raise SpecificationError(msg, spec_path=str(path))
    return document


class OASParser:
    """Parser for OpenAPI 3.x specifications."""

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        self.config = config or GeneratorConfig()
        self.names = NameResolver(self.config)
        self.types = TypeMapper(self.config, model_namer=self.names.to_model_name)
        self.spec_data: dict[str, Any] | None = None
        self.schemas: dict[str, Any] = {}

    def parse_file(self, file_path: str | Path) -> ParsedSpec:
        """Parse OpenAPI specification from a JSON or YAML file."""
        self.spec_data = load_document(file_path)
        return self._parse_spec()

    def parse_dict(self, spec_dict: dict[str, Any]) -> ParsedSpec:
        """Parse OpenAPI specification from dictionary."""
        self.spec_data = spec_dict
        return self._parse_spec()

    def _parse_spec(self) -> ParsedSpec:
        """Parse the loaded specification."""
        if not self.spec_data:
            msg = "No specification data loaded"
            raise SpecificationError(msg)

        components = self.spec_data.get("components", {})
        self.schemas = components.get("schemas", {})
        security_schemes = components.get("securitySchemes", {})

        models = self._parse_models()
        operations = self._parse_operations()

        return ParsedSpec(
            info=self.spec_data.get("info", {}),
            servers=self.spec_data.get("servers", []),
            models=models,
            operations=operations,
            security_schemes=security_schemes,
            has_http_signature_methods=self._has_http_signature_methods(security_schemes),
        )

    @staticmethod
    def _has_http_signature_methods(security_schemes: dict[str, Any]) -> bool:
        return any(
            scheme.get("type") == "http" and str(scheme.get("scheme", "")).lower() == "signature"
            for scheme in security_schemes.values()
        )

    def _resolve_reference(self, ref: str) -> dict[str, Any]:
        """Resolve a local JSON reference."""
        if not self.spec_data:
            return {}

        resolved: Any = self.spec_data
        for part in ref.split("/")[1:]:  # Skip '#'
            if not isinstance(resolved, dict):
                return {}
            resolved = resolved.get(part)
        return resolved if isinstance(resolved, dict) else {}

    # Models

    def _parse_models(self) -> dict[str, Model]:
        models: dict[str, Model] = {}
        for schema_name, schema_data in self.schemas.items():
            models[schema_name] = self._parse_model(schema_name, schema_data)

        self._link_children(models)
        for model in self._parents_first(models):
            parent = models.get(model.parent) if model.parent else None
            reconcile(model, parent)
        for model in models.values():
            self._post_process_model(model)
        return models

    def _parse_model(self, name: str, schema_data: dict[str, Any]) -> Model:
        """Parse a single schema into a model."""
        model = Model(
            name=name,
            class_name=self.names.to_model_name(name),
            description=schema_data.get("description"),
            is_nullable=_schema_is_nullable(schema_data),
            vendor_extensions=_vendor_extensions(schema_data),
        )

        discriminator = schema_data.get("discriminator")
        if isinstance(discriminator, dict) and "propertyName" in discriminator:
            model.discriminator = Discriminator(
                property_name=discriminator["propertyName"],
                mapping={key: extract_ref_name(ref) for key, ref in discriminator.get("mapping", {}).items()},
            )

        if "enum" in schema_data:
            self._populate_enum_model(model, schema_data)
            return model

        if abstract_type_of(schema_data) == "array":
            model.is_array = True
            model.data_type = self.types.schema_type(schema_data)
            return model

        model.one_of = self._alternatives(schema_data.get("oneOf", []))
        model.any_of = self._alternatives(schema_data.get("anyOf", []))

        properties: dict[str, Any] = {}
        required: list[str] = list(schema_data.get("required", []))
        for part in schema_data.get("allOf", []):
            self._merge_all_of_part(model, part, properties, required)
        properties.update(schema_data.get("properties", {}))

        for prop_name, prop_data in properties.items():
            model.vars.append(self._create_property(prop_name, prop_data, required))
        model.vars = self._unique_by_name(model.vars)
        model.refresh_var_views()

        self._update_model_for_object(model, schema_data)
        return model

    def _populate_enum_model(self, model: Model, schema_data: dict[str, Any]) -> None:
        model.is_enum = True
        model.data_type = self.types.schema_type({k: v for k, v in schema_data.items() if k != "enum"})
        model.enum_vars = self._enum_vars(schema_data["enum"], model.data_type)

    def _alternatives(self, schemas: list[dict[str, Any]]) -> list[str]:
        alternatives: list[str] = []
        for schema in schemas:
            type_name = self.types.schema_type(schema)
            if type_name not in alternatives:
                alternatives.append(type_name)
        return alternatives

    def _merge_all_of_part(
        self,
        model: Model,
        part: dict[str, Any],
        properties: dict[str, Any],
        required: list[str],
    ) -> None:
        """Fold one ``allOf`` member into the model being built."""
        if "$ref" not in part:
            properties.update(part.get("properties", {}))
            required.extend(part.get("required", []))
            return

        ref_name = extract_ref_name(part["$ref"])
        if model.parent is None and self._is_parent_candidate(ref_name, model):
            model.parent = ref_name
            return

        # Not the parent: the referenced schema is mixed in as an interface.
        model.interfaces.append(self.names.to_model_name(ref_name))
        referenced = self.schemas.get(ref_name, {})
        for prop_name, prop_data in referenced.get("properties", {}).items():
            properties.setdefault(prop_name, prop_data)
        required.extend(referenced.get("required", []))

    def _is_parent_candidate(self, ref_name: str, model: Model) -> bool:
        if ref_name not in self.schemas:
            logger.debug("allOf reference %s of %s is not defined", ref_name, model.name)
            return False
        raw = self.schemas.get(model.name, {})
        refs = [extract_ref_name(p["$ref"]) for p in raw.get("allOf", []) if "$ref" in p]
        if len(refs) == 1:
            return True
        return "discriminator" in self.schemas[ref_name]

    @staticmethod
    def _unique_by_name(properties: list[Property]) -> list[Property]:
        seen: set[str] = set()
        unique: list[Property] = []
        for prop in properties:
            if prop.name not in seen:
                seen.add(prop.name)
                unique.append(prop)
        return unique

    def _update_model_for_object(self, model: Model, schema_data: dict[str, Any]) -> None:
        """Set map and additional-properties flags.

        Only schemas that explicitly declare ``additionalProperties`` are maps.
        """
        additional = schema_data.get("additionalProperties")
        model.is_map = is_map_schema(schema_data) and not model.vars

        if additional is None:
            model.additional_properties_allowed = not self.config.disallow_additional_properties_if_not_present
        else:
            model.additional_properties_allowed = additional is not False

        if isinstance(additional, dict):
            model.additional_properties_type = self.types.schema_type(additional)
        elif model.additional_properties_allowed:
            model.additional_properties_type = self.types.resolve_type("AnyType")

        model.is_free_form = (
            abstract_type_of(schema_data) in ("object", "AnyType")
            and not model.vars
            and not model.parent
            and not model.is_composed
            and additional is not False
        )

    def _link_children(self, models: dict[str, Model]) -> None:
        for model in models.values():
            if model.parent and model.parent in models:
                models[model.parent].children.append(model.name)

    @staticmethod
    def _parents_first(models: dict[str, Model]) -> list[Model]:
        """Order models so every parent is reconciled before its children."""
        ordered: list[Model] = []
        done: set[str] = set()

        def visit(model: Model, chain: set[str]) -> None:
            if model.name in done or model.name in chain:
                return
            parent = models.get(model.parent) if model.parent else None
            if parent is not None:
                visit(parent, chain | {model.name})
            done.add(model.name)
            ordered.append(model)

        for model in models.values():
            visit(model, set())
        return ordered

    def _post_process_model(self, model: Model) -> None:
        """Model-level adjustments applied after inheritance is reconciled."""
        if NULL_MODEL in model.one_of:
            model.is_nullable = True
            model.one_of.remove(NULL_MODEL)
        if NULL_MODEL in model.any_of:
            model.is_nullable = True
            model.any_of.remove(NULL_MODEL)

        model.all_vars = dedupe_properties(model.parent_vars + model.vars)

    # Properties

    def _create_property(self, prop_name: str, prop_data: dict[str, Any], required_fields: list[str]) -> Property:
        """Create a Property object from property data."""
        all_of = prop_data.get("allOf")
        if isinstance(all_of, list) and len(all_of) == 1 and "$ref" in all_of[0]:
            # ``allOf: [$ref]`` is the usual way to attach nullable/description to a reference.
            prop_data = {**prop_data, "$ref": all_of[0]["$ref"]}

        if "$ref" in prop_data:
            return self._create_ref_property(prop_name, prop_data, required_fields)

        abstract = abstract_type_of(prop_data)
        data_type = self.types.schema_type(prop_data)
        nullable = _schema_is_nullable(prop_data)

        prop = Property(
            name=prop_name,
            var_name=self.names.to_var_name(prop_name),
            abstract_type=abstract,
            data_type=data_type,
            required=prop_name in required_fields,
            description=prop_data.get("description"),
            is_nullable=nullable,
            is_read_only=bool(prop_data.get("readOnly", False)),
            pattern=prop_data.get("pattern"),
            min_length=prop_data.get("minLength"),
            max_length=prop_data.get("maxLength"),
            minimum=prop_data.get("minimum"),
            maximum=prop_data.get("maximum"),
            vendor_extensions=_vendor_extensions(prop_data),
        )

        if abstract == "array":
            prop.container = ContainerKind.ARRAY
            prop.items_type = self.types.schema_type(prop_data.get("items"))
            prop.instantiation_type = self.types.instantiation_type(prop_data)
        elif abstract == "map":
            prop.container = ContainerKind.MAP
            additional = prop_data.get("additionalProperties")
            prop.items_type = self.types.schema_type(additional if isinstance(additional, dict) else None)
            prop.instantiation_type = self.types.instantiation_type(prop_data)

        if "enum" in prop_data:
            self._make_enum_property(prop, prop_data)
        elif not prop.is_container:
            prop.data_type = self.types.nullable_type(data_type, nullable=nullable)

        if "default" in prop_data:
            prop.default_value = self._default_literal(prop_data["default"], prop)

        self._post_process_property(prop)
        return prop

    def _create_ref_property(self, prop_name: str, prop_data: dict[str, Any], required_fields: list[str]) -> Property:
        ref_name = extract_ref_name(prop_data["$ref"])
        referenced = self.schemas.get(ref_name, {})
        prop = Property(
            name=prop_name,
            var_name=self.names.to_var_name(prop_name),
            abstract_type=ref_name,
            data_type=self.types.schema_type(prop_data),
            required=prop_name in required_fields,
            description=prop_data.get("description") or referenced.get("description"),
            is_nullable=_schema_is_nullable(prop_data),
            is_model=True,
            vendor_extensions=_vendor_extensions(prop_data),
        )
        if "enum" in referenced:
            # Enum schemas become C# enums, which are value types.
            prop.vendor_extensions["x-enum-ref"] = True
            if prop.is_nullable:
                prop.data_type = f"{prop.data_type}?"
        self._post_process_property(prop)
        return prop

    def _make_enum_property(self, prop: Property, prop_data: dict[str, Any]) -> None:
        prop.is_enum = True
        prop.enum_name = self.names.to_enum_name(prop.name)
        prop.enum_values = list(prop_data["enum"])
        prop.enum_vars = self._enum_vars(prop.enum_values, prop.data_type)
        prop.data_type = prop.enum_name
        if prop.is_nullable:
            prop.data_type = f"{prop.enum_name}?"

    def _enum_vars(self, values: list[Any], data_type: str) -> list[EnumVar]:
        is_string = data_type == "string"
        enum_vars: list[EnumVar] = []
        for value in values:
            if value is None:
                continue
            enum_vars.append(
                EnumVar(
                    name=self.names.to_enum_var_name(str(value), data_type),
                    value=value,
                    is_string=is_string,
                )
            )
        return enum_vars

    def _default_literal(self, value: Any, prop: Property) -> str | None:  # noqa: ANN401
        """Render a schema default as a C# literal, or None when it cannot be expressed."""
        if value is None or prop.is_container:
            return None
        if prop.is_enum:
            for enum_var in prop.enum_vars:
                if enum_var.value == value:
                    return f"{prop.enum_name}.{enum_var.name}"
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            suffix = {"decimal": "M", "float": "F", "long": "L"}.get(prop.data_type.rstrip("?"), "")
            return f"{value}{suffix}"
        if prop.data_type.rstrip("?") == "string":
            return EnumVar(name="", value=value).literal
        return None

    def _post_process_property(self, prop: Property) -> None:
        is_value_type = (
            self.types.is_nullable_type(prop.data_type.rstrip("?"))
            or prop.is_enum
            or bool(prop.vendor_extensions.get("x-enum-ref"))
        )
        if not prop.is_container and is_value_type:
            prop.vendor_extensions["x-csharp-value-type"] = True
        post_process_pattern(prop.pattern, prop.vendor_extensions)
        prop.vendor_extensions["x-emit-default-value"] = self.config.optional_emit_default_values

    # Operations

    def _parse_operations(self) -> list[Operation]:
        """Parse all operations from paths."""
        operations: list[Operation] = []
        if not self.spec_data:
            return operations

        for path, path_item in self.spec_data.get("paths", {}).items():
            shared_params = path_item.get("parameters", [])
            for method, operation_data in path_item.items():
                if method.lower() not in _HTTP_METHODS:
                    continue
                operations.append(self._parse_operation(path, method.upper(), operation_data, shared_params))
        return operations

    def _parse_operation(
        self,
        path: str,
        method: str,
        operation_data: dict[str, Any],
        shared_params: list[dict[str, Any]],
    ) -> Operation:
        """Parse a single operation."""
        operation_id = operation_data.get("operationId") or f"{method.lower()}_{path}"

        parameters: list[Parameter] = []
        seen: set[tuple[str, str]] = set()
        for param_data in [*operation_data.get("parameters", []), *shared_params]:
            param = self._parse_parameter(param_data)
            if param and (param.name, param.location) not in seen:
                seen.add((param.name, param.location))
                parameters.append(param)

        consumes: list[str] = []
        request_body = operation_data.get("requestBody")
        if request_body:
            if "$ref" in request_body:
                request_body = self._resolve_reference(request_body["$ref"])
            consumes = list(request_body.get("content", {}).keys())
            parameters.extend(self._parse_request_body(request_body))

        if self.config.sort_params_by_required_flag:
            # Stable sort keeps declaration order within each group.
            parameters.sort(key=lambda p: not p.required)

        return_type, produces = self._parse_success_response(operation_data.get("responses", {}))

        return Operation(
            operation_id=operation_id,
            nickname=self.names.to_operation_name(operation_id),
            http_method=method,
            path=path,
            summary=operation_data.get("summary"),
            notes=operation_data.get("description"),
            tags=operation_data.get("tags", []),
            is_deprecated=bool(operation_data.get("deprecated", False)),
            all_params=parameters,
            return_type=return_type,
            consumes=consumes,
            produces=produces,
            auth_methods=[name for requirement in operation_data.get("security", []) for name in requirement],
            vendor_extensions=_vendor_extensions(operation_data),
        )

    def _parse_parameter(self, param_data: dict[str, Any]) -> Parameter | None:
        """Parse a parameter."""
        if "$ref" in param_data:
            param_data = self._resolve_reference(param_data["$ref"])

        name = param_data.get("name")
        if not name:
            return None

        schema = param_data.get("schema", {})
        if "$ref" in schema:
            referenced = self.schemas.get(extract_ref_name(schema["$ref"]), {})
            is_enum = "enum" in referenced
            enum_values = list(referenced.get("enum", []))
        else:
            is_enum = "enum" in schema
            enum_values = list(schema.get("enum", []))

        location = param_data.get("in", "query")
        param = Parameter(
            name=name,
            param_name=self.names.to_param_name(name),
            location=location,
            abstract_type=abstract_type_of(schema) if "$ref" not in schema else extract_ref_name(schema["$ref"]),
            data_type=self.types.schema_type(schema),
            required=bool(param_data.get("required", location == "path")),
            description=param_data.get("description"),
            is_enum=is_enum,
            enum_values=enum_values,
            is_container=abstract_type_of(schema) in ("array", "map") and "$ref" not in schema,
            vendor_extensions=_vendor_extensions(param_data),
        )
        if "$ref" in schema and is_enum:
            param.vendor_extensions["x-enum-ref"] = True
        if "default" in schema and not isinstance(schema["default"], (dict, list)):
            param.default_value = str(schema["default"])

        self._post_process_parameter(param)
        return param

    def _parse_request_body(self, request_body: dict[str, Any]) -> list[Parameter]:
        content = request_body.get("content", {})
        if not content:
            return []

        content_type = next(iter(content))
        schema = content[content_type].get("schema", {})
        required = bool(request_body.get("required", False))

        if content_type in _FORM_CONTENT_TYPES:
            if "$ref" in schema:
                schema = self.schemas.get(extract_ref_name(schema["$ref"]), {})
            required_fields = schema.get("required", [])
            form_params: list[Parameter] = []
            for prop_name, prop_schema in schema.get("properties", {}).items():
                is_file = prop_schema.get("format") == "binary"
                param = Parameter(
                    name=prop_name,
                    param_name=self.names.to_param_name(prop_name),
                    location="form",
                    abstract_type="file" if is_file else abstract_type_of(prop_schema),
                    data_type=self.types.resolve_type("file") if is_file else self.types.schema_type(prop_schema),
                    required=prop_name in required_fields,
                    description=prop_schema.get("description"),
                    is_file=is_file,
                )
                self._post_process_parameter(param)
                form_params.append(param)
            return form_params

        body_name = extract_ref_name(schema["$ref"]) if "$ref" in schema else "body"
        param = Parameter(
            name=body_name,
            param_name=self.names.to_param_name(body_name),
            location="body",
            abstract_type=body_name if "$ref" in schema else abstract_type_of(schema),
            data_type=self.types.schema_type(schema),
            required=required,
            description=request_body.get("description"),
            is_container=abstract_type_of(schema) in ("array", "map") and "$ref" not in schema,
        )
        self._post_process_parameter(param)
        return [param]

    def _post_process_parameter(self, param: Parameter) -> None:
        """Apply value-type and nullability rules to a parameter."""
        param.vendor_extensions["x-emit-default-value"] = self.config.optional_emit_default_values

        is_value_type = self.types.is_nullable_type(param.data_type) or bool(param.vendor_extensions.get("x-enum-ref"))
        if not param.is_container and is_value_type:
            param.is_value_type = True
            param.vendor_extensions["x-csharp-value-type"] = True

        if param.required or param.data_type.endswith("?"):
            return
        if param.is_value_type or self.config.nullable_reference_types:
            param.data_type = f"{param.data_type}?"

    def _parse_success_response(self, responses: dict[str, Any]) -> tuple[str | None, list[str]]:
        """Return the C# type of the first 2xx response and its content types."""
        for status_code, response_data in responses.items():
            if not str(status_code).startswith("2"):
                continue
            if "$ref" in response_data:
                response_data = self._resolve_reference(response_data["$ref"])
            content = response_data.get("content", {})
            if not content:
                return None, []
            first = next(iter(content.values()))
            schema = first.get("schema")
            return (self.types.schema_type(schema) if schema else None), list(content.keys())
        return None, []
