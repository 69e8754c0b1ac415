"""
OpenAPI Parser Module for C# Client Generation

This module provides parsing capabilities for OpenAPI specifications
and builds the normalized model the C# templates are rendered from.
"""

from .inheritance import reconcile
from .models import (
    ContainerKind,
    Discriminator,
    EnumVar,
    Model,
    Operation,
    Parameter,
    ParsedSpec,
    Property,
)
from .oas_parser import OASParser, load_document
from .type_mapping import TypeMapper

__all__ = [
    "ContainerKind",
    "Discriminator",
    "EnumVar",
    "Model",
    "OASParser",
    "Operation",
    "Parameter",
    "ParsedSpec",
    "Property",
    "TypeMapper",
    "load_document",
    "reconcile",
]
