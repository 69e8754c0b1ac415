"""
Generator configuration.

All options are collected into a single typed ``GeneratorConfig`` built once
at the start of a run. Option values arriving as strings (from the command
line or a config file) are validated and coerced here, so an unsupported
value fails before any output is written.
"""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Final

import yaml

from csharp_oas_generator.errors import ConfigurationError
from csharp_oas_generator.frameworks import DEFAULT_FRAMEWORK, FrameworkSelection, resolve_frameworks

logger = logging.getLogger(__name__)

_TRUE_STRINGS: Final = frozenset({"true", "yes", "1", "on"})
_FALSE_STRINGS: Final = frozenset({"false", "no", "0", "off", ""})

# Options accepted by the original generator family that this one ignores.
_UNSUPPORTED_OPTIONS: Final = {
    "generate_property_changed": "generate_property_changed is not supported in the .NET Standard generator.",
    "supports_uwp": "The .NET Standard generator does not support the UWP option.",
}


class ModelPropertyNaming(Enum):
    """Casing applied to model property names."""

    ORIGINAL = "original"
    CAMEL_CASE = "camelCase"
    PASCAL_CASE = "PascalCase"
    SNAKE_CASE = "snake_case"

    @classmethod
    def parse(cls, value: str | ModelPropertyNaming) -> ModelPropertyNaming:
        if isinstance(value, cls):
            return value
        for naming in cls:
            if naming.value == value:
                return naming
        msg = (
            f"Invalid model property naming '{value}'. "
            "Must be 'original', 'camelCase', 'PascalCase' or 'snake_case'"
        )
        raise ConfigurationError(msg, option="model_property_naming")


@dataclass(frozen=True)
class LibraryCapabilities:
    """Feature switches implied by the selected HTTP library."""

    use_rest_sharp: bool
    use_http_client: bool
    needs_custom_http_method: bool
    needs_uri_builder: bool
    supports_async: bool
    file_type: str


class HttpLibrary(Enum):
    """HTTP libraries the generated client can be built on."""

    RESTSHARP = "restsharp"
    HTTPCLIENT = "httpclient"

    @property
    def description(self) -> str:
        return _LIBRARY_DESCRIPTIONS[self]

    @property
    def capabilities(self) -> LibraryCapabilities:
        return _LIBRARY_CAPABILITIES[self]

    @classmethod
    def parse(cls, value: str | HttpLibrary) -> HttpLibrary:
        if isinstance(value, cls):
            return value
        for library in cls:
            if library.value == value:
                return library
        supported = ", ".join(library.value for library in cls)
        msg = f"Invalid HTTP library {value}. Only {supported} are supported."
        raise ConfigurationError(msg, option="library")


_LIBRARY_DESCRIPTIONS: Final = {
    HttpLibrary.RESTSHARP: "RestSharp (https://github.com/restsharp/RestSharp)",
    HttpLibrary.HTTPCLIENT: (
        "HttpClient (https://docs.microsoft.com/en-us/dotnet/api/system.net.http.httpclient) "
        "(Experimental. May subject to breaking changes without further notice.)"
    ),
}

_LIBRARY_CAPABILITIES: Final = {
    HttpLibrary.RESTSHARP: LibraryCapabilities(
        use_rest_sharp=True,
        use_http_client=False,
        needs_custom_http_method=True,
        needs_uri_builder=False,
        supports_async=True,
        file_type="System.IO.Stream",
    ),
    HttpLibrary.HTTPCLIENT: LibraryCapabilities(
        use_rest_sharp=False,
        use_http_client=True,
        needs_custom_http_method=False,
        needs_uri_builder=True,
        supports_async=True,
        file_type="FileParameter",
    ),
}


def _derive_package_guid(package_name: str) -> str:
    # A fixed namespace keeps the GUID stable across runs for the same package.
    guid = uuid.uuid5(uuid.NAMESPACE_URL, f"urn:csharp-oas-generator:{package_name}")
    return "{" + str(guid).upper() + "}"


def to_bool(value: Any, option: str) -> bool:  # noqa: ANN401
    """Coerce a boolean option given as a bool or a string."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    msg = f"Invalid boolean value '{value}' for option '{option}'"
    raise ConfigurationError(msg, option=option)


@dataclass(frozen=True)
class GeneratorConfig:
    """Options for a single generation run."""

    package_name: str = "Org.OpenAPITools"
    package_version: str = "1.0.0"
    package_guid: str | None = None
    package_tags: str | None = None
    source_folder: str = "src"
    api_package: str = "Api"
    model_package: str = "Model"
    client_package: str = "Client"
    interface_prefix: str = "I"
    target_framework: str = DEFAULT_FRAMEWORK.identifier
    library: HttpLibrary = HttpLibrary.RESTSHARP
    model_property_naming: ModelPropertyNaming = ModelPropertyNaming.PASCAL_CASE
    disallow_additional_properties_if_not_present: bool = True
    optional_emit_default_values: bool = False
    conditional_serialization: bool = False
    supports_retry: bool = True
    supports_async: bool = True
    exclude_tests: bool = False
    nullable_reference_types: bool = False
    non_public_api: bool = False
    validatable: bool = True
    use_oneof_discriminator_lookup: bool = False
    case_insensitive_response_headers: bool = False
    optional_method_argument: bool = True
    hide_generation_timestamp: bool = True
    sort_params_by_required_flag: bool = True
    use_datetime_offset: bool = False
    use_collection: bool = False
    allow_unicode_identifiers: bool = False
    license_id: str | None = None
    release_note: str = "Minor update"
    name_mapping: Mapping[str, str] = field(default_factory=dict)
    frameworks: FrameworkSelection = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Values may arrive as raw strings when the dataclass is built directly.
        object.__setattr__(self, "library", HttpLibrary.parse(self.library))
        object.__setattr__(self, "model_property_naming", ModelPropertyNaming.parse(self.model_property_naming))
        if not self.package_guid:
            object.__setattr__(self, "package_guid", _derive_package_guid(self.package_name))
        object.__setattr__(
            self,
            "frameworks",
            resolve_frameworks(self.target_framework, library=self.library.value),
        )

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> GeneratorConfig:
        """Build a configuration from loosely typed options.

        Args:
            options: Option name to value. Booleans may be given as strings.

        Returns:
            The validated configuration.

        Raises:
            ConfigurationError: If an option is unknown or has an invalid value.
        """
        known = {f.name: f for f in fields(cls) if f.init}
        kwargs: dict[str, Any] = {}

        for key, value in (options or {}).items():
            if key in _UNSUPPORTED_OPTIONS:
                logger.warning(_UNSUPPORTED_OPTIONS[key])
                continue
            if key not in known:
                msg = f"Unknown generator option '{key}'"
                raise ConfigurationError(msg, option=key)
            if value is None:
                continue

            default = known[key].default
            if isinstance(default, bool):
                kwargs[key] = to_bool(value, key)
            elif key == "name_mapping":
                if not isinstance(value, Mapping):
                    msg = f"Option 'name_mapping' must be a mapping, got {type(value).__name__}"
                    raise ConfigurationError(msg, option=key)
                kwargs[key] = dict(value)
            else:
                kwargs[key] = value if isinstance(value, Enum) else str(value)

        return cls(**kwargs)

    @property
    def capabilities(self) -> LibraryCapabilities:
        return self.library.capabilities

    @property
    def package_folder(self) -> str:
        return f"{self.source_folder}/{self.package_name}"

    @property
    def client_package_dir(self) -> str:
        return f"{self.package_folder}/{self.client_package}"

    @property
    def model_package_dir(self) -> str:
        return f"{self.package_folder}/{self.model_package}"

    @property
    def api_package_dir(self) -> str:
        return f"{self.package_folder}/{self.api_package}"

    @property
    def test_package_name(self) -> str:
        return f"{self.package_name}.Test"

    @property
    def test_package_folder(self) -> str:
        return f"{self.source_folder}/{self.test_package_name}"

    @property
    def visibility(self) -> str:
        return "internal" if self.non_public_api else "public"

    @property
    def use_async(self) -> bool:
        return self.supports_async and self.capabilities.supports_async


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Load generator options from a JSON or YAML file.

    Raises:
        ConfigurationError: If the file does not contain a mapping.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    data = json.loads(text) if path.suffix.lower() == ".json" else yaml.safe_load(text)

    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Configuration file {path} must contain a mapping of option names to values"
        raise ConfigurationError(msg)
    return data
