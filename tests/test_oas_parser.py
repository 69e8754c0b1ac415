"""Tests for parsing OpenAPI documents into the generator model."""

import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from csharp_oas_generator.config import GeneratorConfig
from csharp_oas_generator.errors import SpecificationError
from csharp_oas_generator.parser.models import Model, Operation, ParsedSpec, Property
from csharp_oas_generator.parser.oas_parser import OASParser, load_document, post_process_pattern


def find_var(model: Model, name: str) -> Property:
    return next(p for p in model.vars if p.name == name)


def find_operation(spec: ParsedSpec, operation_id: str) -> Operation:
    return next(op for op in spec.operations if op.operation_id == operation_id)


class TestDocumentLoading:
    def test_spec_metadata(self, petstore_spec: ParsedSpec) -> None:
        assert petstore_spec.title == "Swagger Petstore"
        assert petstore_spec.version == "1.2"
        assert petstore_spec.base_path == "http://petstore.example.com/v2"
        assert set(petstore_spec.security_schemes) == {"petstore_auth", "api_key"}
        assert not petstore_spec.has_http_signature_methods

    def test_yaml_and_json_parse_the_same(self, petstore_spec_path: Path, tmp_path: Path) -> None:
        document = json.loads(petstore_spec_path.read_text(encoding="utf-8"))
        yaml_path = tmp_path / "petstore.yaml"
        yaml_path.write_text(yaml.safe_dump(document, sort_keys=False), encoding="utf-8")

        from_json = OASParser().parse_file(petstore_spec_path)
        from_yaml = OASParser().parse_file(yaml_path)

        assert from_yaml.models == from_json.models
        assert from_yaml.operations == from_json.operations

    def test_non_mapping_document(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(SpecificationError, match="must be a mapping"):
            load_document(path)

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")

        with pytest.raises(json.JSONDecodeError):
            load_document(path)

    def test_empty_document(self) -> None:
        with pytest.raises(SpecificationError):
            OASParser().parse_dict({})

    def test_http_signature_detection(self) -> None:
        spec = OASParser().parse_dict(
            {
                "openapi": "3.0.0",
                "info": {"title": "t", "version": "1"},
                "paths": {},
                "components": {"securitySchemes": {"sig": {"type": "http", "scheme": "Signature"}}},
            }
        )
        assert spec.has_http_signature_methods
        assert spec.base_path == "http://localhost"


class TestModels:
    def test_models_keep_document_order(self, petstore_spec: ParsedSpec) -> None:
        assert list(petstore_spec.models) == [
            "Pet",
            "Dog",
            "Cat",
            "Tag",
            "OrderStatus",
            "Priority",
            "Order",
            "PetOrNull",
            "Metadata",
            "PetList",
        ]

    def test_pet_properties(self, petstore_spec: ParsedSpec) -> None:
        pet = petstore_spec.models["Pet"]

        assert pet.description == "A pet for sale in the pet store"
        assert pet.discriminator is not None
        assert pet.discriminator.property_name == "petType"
        assert pet.discriminator.mapping == {"Dog": "Dog", "Cat": "Cat"}
        assert [p.name for p in pet.required_vars] == ["name", "petType"]
        assert [p.name for p in pet.read_only_vars] == ["readOnlyCode"]
        assert not pet.additional_properties_allowed

        identifier = find_var(pet, "id")
        assert identifier.data_type == "long"
        assert identifier.is_value_type

        birth_date = find_var(pet, "birthDate")
        assert birth_date.abstract_type == "date"
        assert birth_date.data_type == "DateTime"

        tags = find_var(pet, "tags")
        assert tags.is_array
        assert tags.data_type == "List<Tag>"
        assert tags.items_type == "Tag"
        assert tags.instantiation_type == "List<Tag>"
        assert not tags.is_value_type

    def test_pattern_and_length_constraints(self, petstore_spec: ParsedSpec) -> None:
        name = find_var(petstore_spec.models["Pet"], "name")

        assert name.min_length == 1
        assert name.max_length == 64
        assert name.vendor_extensions["x-regex"] == "^[a-z ]+$"
        assert name.vendor_extensions["x-modifiers"] == ["IgnoreCase"]

    def test_inline_enum_property(self, petstore_spec: ParsedSpec) -> None:
        status = find_var(petstore_spec.models["Pet"], "status")

        assert status.is_enum
        assert status.enum_name == "StatusEnum"
        assert status.data_type == "StatusEnum"
        assert [v.name for v in status.enum_vars] == ["Available", "Pending", "Sold"]
        assert status.default_value == "StatusEnum.Available"
        assert status.is_value_type

    def test_reserved_property_name(self, petstore_spec: ParsedSpec) -> None:
        cat = petstore_spec.models["Cat"]
        assert [p.var_name for p in cat.vars] == ["Hunts", "_Class"]

    def test_string_enum_model(self, petstore_spec: ParsedSpec) -> None:
        status = petstore_spec.models["OrderStatus"]

        assert status.is_enum
        assert status.data_type == "string"
        assert [v.name for v in status.enum_vars] == ["Placed", "Approved", "Delivered", "Empty"]
        assert status.enum_vars[0].literal == '"placed"'

    def test_integer_enum_model(self, petstore_spec: ParsedSpec) -> None:
        priority = petstore_spec.models["Priority"]

        assert priority.data_type == "int"
        assert [v.name for v in priority.enum_vars] == ["NUMBER_1", "NUMBER_2", "NUMBER_MINUS_3"]
        assert not priority.enum_vars[2].is_string
        assert priority.enum_vars[2].literal == "-3"

    def test_order_properties(self, petstore_spec: ParsedSpec) -> None:
        order = petstore_spec.models["Order"]

        assert find_var(order, "quantity").data_type == "int"
        assert find_var(order, "quantity").minimum == 1
        assert find_var(order, "quantity").maximum == 100
        assert find_var(order, "shipDate").data_type == "DateTime?"
        assert find_var(order, "price").data_type == "decimal"
        assert find_var(order, "complete").default_value == "false"

        status = find_var(order, "status")
        assert status.data_type == "OrderStatus"
        assert status.vendor_extensions["x-enum-ref"]
        assert status.is_value_type

        priority = find_var(order, "priority")
        assert priority.data_type == "Priority?"
        assert priority.is_nullable
        assert priority.is_value_type

    def test_composed_model(self, petstore_spec: ParsedSpec) -> None:
        pet_or_null = petstore_spec.models["PetOrNull"]

        assert pet_or_null.is_composed
        assert pet_or_null.one_of == ["Dog", "Cat"]
        assert pet_or_null.is_nullable
        assert not pet_or_null.is_free_form

    def test_container_models(self, petstore_spec: ParsedSpec) -> None:
        metadata = petstore_spec.models["Metadata"]
        pet_list = petstore_spec.models["PetList"]

        assert metadata.is_map
        assert metadata.additional_properties_type == "string"
        assert pet_list.is_array
        assert pet_list.data_type == "List<Pet>"

    def test_emit_default_value_extension(self, petstore_spec_path: Path) -> None:
        spec = OASParser(GeneratorConfig(optional_emit_default_values=True)).parse_file(petstore_spec_path)
        name = find_var(spec.models["Pet"], "name")
        assert name.vendor_extensions["x-emit-default-value"] is True

    def test_additional_properties_allowed_when_not_disallowed(self, petstore_spec_path: Path) -> None:
        config = GeneratorConfig(disallow_additional_properties_if_not_present=False)
        spec = OASParser(config).parse_file(petstore_spec_path)

        tag = spec.models["Tag"]
        assert tag.additional_properties_allowed
        assert tag.additional_properties_type == "Object"

    def test_multiple_all_of_refs_become_interfaces(self) -> None:
        spec = OASParser().parse_dict(
            {
                "openapi": "3.0.0",
                "info": {"title": "t", "version": "1"},
                "paths": {},
                "components": {
                    "schemas": {
                        "Named": {"type": "object", "properties": {"name": {"type": "string"}}},
                        "Dated": {"type": "object", "properties": {"created": {"type": "string"}}},
                        "Thing": {
                            "allOf": [
                                {"$ref": "#/components/schemas/Named"},
                                {"$ref": "#/components/schemas/Dated"},
                            ]
                        },
                    }
                },
            }
        )

        thing = spec.models["Thing"]
        assert thing.parent is None
        assert thing.interfaces == ["Named", "Dated"]
        assert [p.name for p in thing.vars] == ["name", "created"]


class TestOperations:
    def test_operation_order(self, petstore_spec: ParsedSpec) -> None:
        assert [op.operation_id for op in petstore_spec.operations] == [
            "addPet",
            "findPetsByStatus",
            "getPetById",
            "deletePet",
            "uploadFile",
            "placeOrder",
            "getHealth",
        ]

    def test_body_parameter(self, petstore_spec: ParsedSpec) -> None:
        add_pet = find_operation(petstore_spec, "addPet")

        assert add_pet.nickname == "AddPet"
        assert add_pet.http_method == "POST"
        assert add_pet.consumes == ["application/json"]
        assert add_pet.return_type == "Pet"
        assert add_pet.auth_methods == ["petstore_auth"]
        body = add_pet.body_param
        assert body is not None
        assert body.param_name == "pet"
        assert body.data_type == "Pet"
        assert body.required

    def test_query_parameters(self, petstore_spec: ParsedSpec) -> None:
        find = find_operation(petstore_spec, "findPetsByStatus")
        status, limit = find.all_params

        assert status.data_type == "List<string>"
        assert status.is_container
        assert status.required
        assert limit.data_type == "int?"
        assert limit.is_value_type
        assert find.return_type == "List<Pet>"

    def test_path_level_parameters_and_required_first(self, petstore_spec: ParsedSpec) -> None:
        delete_pet = find_operation(petstore_spec, "deletePet")

        assert [p.param_name for p in delete_pet.all_params] == ["petId", "apiKey"]
        assert delete_pet.path_params[0].data_type == "long"
        assert delete_pet.header_params[0].data_type == "string"
        assert delete_pet.is_deprecated
        assert delete_pet.return_type is None

    def test_declaration_order_without_sorting(self, petstore_spec_path: Path) -> None:
        config = GeneratorConfig(sort_params_by_required_flag=False)
        spec = OASParser(config).parse_file(petstore_spec_path)

        delete_pet = find_operation(spec, "deletePet")
        assert [p.param_name for p in delete_pet.all_params] == ["apiKey", "petId"]

    def test_nullable_reference_types(self, petstore_spec_path: Path) -> None:
        spec = OASParser(GeneratorConfig(nullable_reference_types=True)).parse_file(petstore_spec_path)

        delete_pet = find_operation(spec, "deletePet")
        assert delete_pet.header_params[0].data_type == "string?"

    def test_form_parameters(self, petstore_spec: ParsedSpec) -> None:
        upload = find_operation(petstore_spec, "uploadFile")

        assert [p.param_name for p in upload.all_params] == ["petId", "additionalMetadata", "file"]
        assert upload.consumes == ["multipart/form-data"]
        assert upload.has_file_params
        file_param = upload.form_params[1]
        assert file_param.is_file
        assert file_param.data_type == "System.IO.Stream"
        assert upload.return_type == "Dictionary<string, string>"

    def test_httpclient_file_parameter(self, petstore_spec_path: Path) -> None:
        spec = OASParser(GeneratorConfig(library="httpclient")).parse_file(petstore_spec_path)

        upload = find_operation(spec, "uploadFile")
        assert upload.form_params[1].data_type == "FileParameter"

    def test_untagged_operation(self, petstore_spec: ParsedSpec) -> None:
        health = find_operation(petstore_spec, "getHealth")

        assert health.tags == []
        assert health.return_type == "string"
        assert health.produces == ["text/plain"]

    def test_enum_reference_parameter(self) -> None:
        document: dict[str, Any] = {
            "openapi": "3.0.0",
            "info": {"title": "t", "version": "1"},
            "paths": {
                "/orders": {
                    "get": {
                        "operationId": "listOrders",
                        "parameters": [
                            {"name": "status", "in": "query", "schema": {"$ref": "#/components/schemas/Status"}}
                        ],
                        "responses": {"204": {"description": "none"}},
                    }
                }
            },
            "components": {"schemas": {"Status": {"type": "string", "enum": ["open", "closed"]}}},
        }
        spec = OASParser().parse_dict(document)
        status = spec.operations[0].all_params[0]

        assert status.is_enum
        assert status.enum_values == ["open", "closed"]
        assert status.is_value_type
        assert status.data_type == "Status?"


class TestPatternPostProcessing:
    @pytest.mark.parametrize(
        ("pattern", "regex", "modifiers"),
        [
            ("/^abc$/i", "^abc$", ["IgnoreCase"]),
            ("/^a.c$/ms", "^a.c$", ["Multiline", "Singleline"]),
            ("^plain$", "^plain$", []),
            ('/say "hi"/', 'say ""hi""', []),
        ],
    )
    def test_post_process_pattern(self, pattern: str, regex: str, modifiers: list[str]) -> None:
        extensions: dict[str, Any] = {}
        post_process_pattern(pattern, extensions)

        assert extensions["x-regex"] == regex
        assert extensions["x-modifiers"] == modifiers

    def test_no_pattern(self) -> None:
        extensions: dict[str, Any] = {}
        post_process_pattern(None, extensions)
        assert extensions == {}
