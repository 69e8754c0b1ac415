"""
C# Code Generator Module

This module provides Jinja2-based code generation for C# API clients
from OpenAPI specifications.
"""

from .supporting_files import SupportingFile, TemplateFile, collect_supporting_files
from .template_engine import CSharpCodeGenerator, CSharpTemplateEngine

__all__ = [
    "CSharpCodeGenerator",
    "CSharpTemplateEngine",
    "SupportingFile",
    "TemplateFile",
    "collect_supporting_files",
]
