"""
C# OpenAPI Client Generator

A Jinja2-based generator that produces C# (.NET) API clients from OpenAPI specifications.
"""

from .config import GeneratorConfig, HttpLibrary, ModelPropertyNaming
from .errors import ConfigurationError, GeneratorError, SpecificationError
from .generator import CSharpCodeGenerator, CSharpTemplateEngine
from .parser import OASParser, ParsedSpec

__version__ = "1.0.0"
__author__ = "OpenAPI C# Generator"

__all__ = [
    "CSharpCodeGenerator",
    "CSharpTemplateEngine",
    "ConfigurationError",
    "GeneratorConfig",
    "GeneratorError",
    "HttpLibrary",
    "ModelPropertyNaming",
    "OASParser",
    "ParsedSpec",
    "SpecificationError",
]
