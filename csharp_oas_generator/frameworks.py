"""
.NET target framework catalog.

A generated client is built against one or more target frameworks. The
catalog below is closed: anything outside it is a configuration error.
See https://docs.microsoft.com/en-us/dotnet/standard/net-standard
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Final

from csharp_oas_generator.errors import ConfigurationError

logger = logging.getLogger(__name__)

MULTI_TARGET_DELIMITER: Final = ";"


class FrameworkStrategy(Enum):
    """Supported target frameworks.

    Each member carries ``(identifier, description, test_target_framework,
    target_framework_identifier, target_framework_version, is_net_standard)``.
    """

    NETSTANDARD_1_3 = ("netstandard1.3", ".NET Standard 1.3 compatible", "netcoreapp2.0", ".NETStandard", "v1.3", True)
    NETSTANDARD_1_4 = ("netstandard1.4", ".NET Standard 1.4 compatible", "netcoreapp2.0", ".NETStandard", "v1.4", True)
    NETSTANDARD_1_5 = ("netstandard1.5", ".NET Standard 1.5 compatible", "netcoreapp2.0", ".NETStandard", "v1.5", True)
    NETSTANDARD_1_6 = ("netstandard1.6", ".NET Standard 1.6 compatible", "netcoreapp2.0", ".NETStandard", "v1.6", True)
    NETSTANDARD_2_0 = ("netstandard2.0", ".NET Standard 2.0 compatible", "netcoreapp2.0", ".NETStandard", "v2.0", True)
    NETSTANDARD_2_1 = ("netstandard2.1", ".NET Standard 2.1 compatible", "netcoreapp3.0", ".NETStandard", "v2.1", True)
    NETCOREAPP_2_0 = ("netcoreapp2.0", ".NET Core 2.0 compatible", "netcoreapp2.0", ".NETCoreApp", "v2.0", False)
    NETCOREAPP_2_1 = ("netcoreapp2.1", ".NET Core 2.1 compatible", "netcoreapp2.1", ".NETCoreApp", "v2.1", False)
    # The .NET Framework and .NET 5 identifiers and versions are explicit, not derived from the moniker.
    NETFRAMEWORK_4_7 = ("net47", ".NET Framework 4.7 compatible", "net47", ".NETFramework", "v4.7", False)
    NET_5_0 = ("net5.0", ".NET 5.0 compatible", "net5.0", ".NETCoreApp", "v5.0", False)

    def __init__(
        self,
        identifier: str,
        description: str,
        test_target_framework: str,
        target_framework_identifier: str,
        target_framework_version: str,
        is_net_standard: bool,  # noqa: FBT001
    ) -> None:
        self.identifier = identifier
        self.description = description
        self.test_target_framework = test_target_framework
        self.target_framework_identifier = target_framework_identifier
        self.target_framework_version = target_framework_version
        self.is_net_standard = is_net_standard

    @property
    def nuget_framework_identifier(self) -> str:
        return self.identifier.lower()

    @classmethod
    def from_identifier(cls, identifier: str) -> FrameworkStrategy | None:
        for strategy in cls:
            if strategy.identifier == identifier:
                return strategy
        return None

    @classmethod
    def catalog(cls) -> dict[str, str]:
        """Map of identifier to human description, in catalog order."""
        return {strategy.identifier: strategy.description for strategy in cls}


DEFAULT_FRAMEWORK: Final = FrameworkStrategy.NETSTANDARD_2_0

# RestSharp's built-in templates need at least .NET Standard 2.0.
_LEGACY_NET_STANDARD: Final = frozenset(
    {
        FrameworkStrategy.NETSTANDARD_1_3,
        FrameworkStrategy.NETSTANDARD_1_4,
        FrameworkStrategy.NETSTANDARD_1_5,
        FrameworkStrategy.NETSTANDARD_1_6,
    }
)


@dataclass(frozen=True)
class FrameworkSelection:
    """The resolved target frameworks and the project values derived from them."""

    strategies: tuple[FrameworkStrategy, ...]

    def _join(self, values: list[str]) -> str:
        return MULTI_TARGET_DELIMITER.join(values)

    @property
    def dotnet_framework(self) -> str:
        return self._join([s.identifier for s in self.strategies])

    @property
    def target_framework_identifier(self) -> str:
        return self._join([s.target_framework_identifier for s in self.strategies])

    @property
    def target_framework_version(self) -> str:
        return self._join([s.target_framework_version for s in self.strategies])

    @property
    def target_framework_nuget(self) -> str:
        return self._join([s.nuget_framework_identifier for s in self.strategies])

    @property
    def test_target_framework(self) -> str:
        return self._join([s.test_target_framework for s in self.strategies])

    @property
    def net_standard(self) -> bool:
        return any(s.is_net_standard for s in self.strategies)

    @property
    def multi_target(self) -> bool:
        return len(self.strategies) > 1


def resolve_frameworks(value: str | None, *, library: str | None = None) -> FrameworkSelection:
    """Resolve a ``;``-separated list of target framework identifiers.

    Args:
        value: The requested identifier(s). ``None`` or empty selects the default.
        library: The HTTP library in use, only consulted for compatibility warnings.

    Returns:
        The selection, preserving input order.

    Raises:
        ConfigurationError: If any identifier is not in the catalog.
    """
    requested = value or DEFAULT_FRAMEWORK.identifier
    strategies: list[FrameworkStrategy] = []

    for identifier in requested.split(MULTI_TARGET_DELIMITER):
        strategy = FrameworkStrategy.from_identifier(identifier.strip())
        if strategy is None:
            supported = ", ".join(FrameworkStrategy.catalog())
            msg = (
                f"The input ({requested}) contains Invalid .NET framework version: {identifier}. "
                f"List of supported versions: {supported}"
            )
            raise ConfigurationError(msg, option="target_framework")

        if library == "restsharp" and strategy in _LEGACY_NET_STANDARD:
            logger.warning("If using built-in templates, RestSharp only supports netstandard 2.0 or later.")
        strategies.append(strategy)

    selection = FrameworkSelection(strategies=tuple(strategies))
    logger.info("Generating code for .NET Framework %s", selection.dotnet_framework)
    return selection
