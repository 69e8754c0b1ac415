"""Custom exceptions for the C# OAS generator."""

from __future__ import annotations


class GeneratorError(Exception):
    """Base exception for generator errors."""


class ConfigurationError(GeneratorError, ValueError):
    """Raised when a generator option has an unsupported value.

    Configuration errors are fatal and are raised while the configuration is
    built, before any output is produced.
    """

    def __init__(self, message: str, option: str | None = None) -> None:
        self.option = option
        super().__init__(message)


class SpecificationError(GeneratorError):
    """Raised when the API description cannot be loaded at all."""

    def __init__(self, message: str, spec_path: str | None = None) -> None:
        self.spec_path = spec_path
        full_message = message if not spec_path else f"[{spec_path}] {message}"
        super().__init__(full_message)
