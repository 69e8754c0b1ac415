"""
Utilities Module for C# Client Generation

This module provides utility functions for file operations, string case conversions,
and identifier sanitization used throughout the C# client generation process.
"""

from .file_utils import get_relative_path, write_files_to_disk
from .string_case import (
    CSHARP_KEYWORDS,
    PROPERTY_SPECIAL_KEYWORDS,
    camelize,
    constcase,
    escape_csharp_keyword,
    is_csharp_keyword,
    lower_camelcase,
    pascalcase,
    sanitize_name,
    snakecase,
)

__all__ = [
    "CSHARP_KEYWORDS",
    "PROPERTY_SPECIAL_KEYWORDS",
    "camelize",
    "constcase",
    "escape_csharp_keyword",
    "get_relative_path",
    "is_csharp_keyword",
    "lower_camelcase",
    "pascalcase",
    "sanitize_name",
    "snakecase",
    "write_files_to_disk",
]
