"""
Intermediate representation of a parsed OpenAPI document.

Instances are created once per run by the parser, adjusted in place by the
normalization passes and handed to the templates.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ContainerKind(Enum):
    NONE = "none"
    ARRAY = "array"
    MAP = "map"


@dataclass
class EnumVar:
    """A single enum member."""

    name: str
    value: Any
    is_string: bool = True

    @property
    def literal(self) -> str:
        if self.is_string:
            escaped = str(self.value).replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        return str(self.value)


@dataclass
class Discriminator:
    """Polymorphism discriminator declared on a schema."""

    property_name: str
    mapping: dict[str, str] = field(default_factory=dict)


@dataclass
class Property:
    """Represents a schema property."""

    name: str
    var_name: str
    abstract_type: str
    data_type: str
    required: bool = False
    description: str | None = None
    container: ContainerKind = ContainerKind.NONE
    items_type: str | None = None
    instantiation_type: str | None = None
    is_nullable: bool = False
    is_read_only: bool = False
    is_enum: bool = False
    enum_name: str | None = None
    enum_values: list[Any] = field(default_factory=list)
    enum_vars: list[EnumVar] = field(default_factory=list)
    default_value: str | None = None
    is_inherited: bool = False
    is_model: bool = False
    pattern: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    minimum: float | None = None
    maximum: float | None = None
    vendor_extensions: dict[str, Any] = field(default_factory=dict)

    @property
    def is_container(self) -> bool:
        return self.container is not ContainerKind.NONE

    @property
    def is_array(self) -> bool:
        return self.container is ContainerKind.ARRAY

    @property
    def is_map(self) -> bool:
        return self.container is ContainerKind.MAP

    @property
    def is_value_type(self) -> bool:
        return bool(self.vendor_extensions.get("x-csharp-value-type"))

    def copy(self) -> Property:
        """Return an independent copy; nothing is shared with the original."""
        return copy.deepcopy(self)


@dataclass
class Parameter:
    """Represents an operation input."""

    name: str
    param_name: str
    location: str
    abstract_type: str
    data_type: str
    required: bool = False
    description: str | None = None
    default_value: str | None = None
    is_enum: bool = False
    enum_values: list[Any] = field(default_factory=list)
    is_value_type: bool = False
    is_container: bool = False
    is_file: bool = False
    vendor_extensions: dict[str, Any] = field(default_factory=dict)

    @property
    def is_path_param(self) -> bool:
        return self.location == "path"

    @property
    def is_query_param(self) -> bool:
        return self.location == "query"

    @property
    def is_header_param(self) -> bool:
        return self.location == "header"

    @property
    def is_cookie_param(self) -> bool:
        return self.location == "cookie"

    @property
    def is_form_param(self) -> bool:
        return self.location == "form"

    @property
    def is_body_param(self) -> bool:
        return self.location == "body"


@dataclass
class Operation:
    """Represents an OpenAPI operation."""

    operation_id: str
    nickname: str
    http_method: str
    path: str
    summary: str | None = None
    notes: str | None = None
    tags: list[str] = field(default_factory=list)
    is_deprecated: bool = False
    all_params: list[Parameter] = field(default_factory=list)
    return_type: str | None = None
    consumes: list[str] = field(default_factory=list)
    produces: list[str] = field(default_factory=list)
    auth_methods: list[str] = field(default_factory=list)
    vendor_extensions: dict[str, Any] = field(default_factory=dict)

    def _params_in(self, location: str) -> list[Parameter]:
        return [p for p in self.all_params if p.location == location]

    @property
    def path_params(self) -> list[Parameter]:
        return self._params_in("path")

    @property
    def query_params(self) -> list[Parameter]:
        return self._params_in("query")

    @property
    def header_params(self) -> list[Parameter]:
        return self._params_in("header")

    @property
    def cookie_params(self) -> list[Parameter]:
        return self._params_in("cookie")

    @property
    def form_params(self) -> list[Parameter]:
        return self._params_in("form")

    @property
    def body_param(self) -> Parameter | None:
        body = self._params_in("body")
        return body[0] if body else None

    @property
    def required_params(self) -> list[Parameter]:
        return [p for p in self.all_params if p.required]

    @property
    def has_file_params(self) -> bool:
        return any(p.is_file for p in self.all_params)


@dataclass
class Model:
    """Represents a named schema rendered as a C# type."""

    name: str
    class_name: str
    description: str | None = None
    vars: list[Property] = field(default_factory=list)
    parent_vars: list[Property] = field(default_factory=list)
    all_vars: list[Property] = field(default_factory=list)
    read_write_vars: list[Property] = field(default_factory=list)
    read_only_vars: list[Property] = field(default_factory=list)
    parent: str | None = None
    interfaces: list[str] = field(default_factory=list)
    children: list[str] = field(default_factory=list)
    discriminator: Discriminator | None = None
    one_of: list[str] = field(default_factory=list)
    any_of: list[str] = field(default_factory=list)
    is_map: bool = False
    is_enum: bool = False
    is_nullable: bool = False
    is_free_form: bool = False
    is_array: bool = False
    additional_properties_allowed: bool = False
    additional_properties_type: str | None = None
    data_type: str | None = None
    enum_vars: list[EnumVar] = field(default_factory=list)
    vendor_extensions: dict[str, Any] = field(default_factory=dict)

    @property
    def has_enums(self) -> bool:
        return any(p.is_enum for p in self.vars)

    @property
    def required_vars(self) -> list[Property]:
        return [p for p in self.vars if p.required]

    @property
    def optional_vars(self) -> list[Property]:
        return [p for p in self.vars if not p.required]

    @property
    def is_composed(self) -> bool:
        return bool(self.one_of or self.any_of)

    @property
    def has_discriminator(self) -> bool:
        return self.discriminator is not None

    @property
    def effective_vars(self) -> list[Property]:
        """Own properties followed by inherited ones they do not shadow."""
        own = {p.name for p in self.vars}
        return self.vars + [p for p in self.parent_vars if p.name not in own]

    def refresh_var_views(self) -> None:
        """Rebuild the read-write/read-only views after ``vars`` changed."""
        self.read_write_vars = [p for p in self.vars if not p.is_read_only]
        self.read_only_vars = [p for p in self.vars if p.is_read_only]


@dataclass
class ParsedSpec:
    """Represents a parsed OpenAPI specification."""

    info: dict[str, Any]
    servers: list[dict[str, Any]]
    models: dict[str, Model]
    operations: list[Operation]
    security_schemes: dict[str, Any] = field(default_factory=dict)
    has_http_signature_methods: bool = False

    @property
    def title(self) -> str:
        return str(self.info.get("title", ""))

    @property
    def version(self) -> str:
        return str(self.info.get("version", ""))

    @property
    def base_path(self) -> str:
        if self.servers:
            return str(self.servers[0].get("url", "http://localhost"))
        return "http://localhost"
