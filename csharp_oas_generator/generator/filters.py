"""
Jinja2 filters for C# code generation.

This module provides custom Jinja2 filters specifically designed for
generating C# code and Markdown documentation from OpenAPI specifications.
"""

from __future__ import annotations

import re
from typing import Final

from csharp_oas_generator.utils.string_case import escape_csharp_keyword

# Semantic versioning constants
_MAX_SEMVER_PARTS = 3
_DEFAULT_VERSION = "1.0.0"

_XML_ESCAPES: Final = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
}

_PATH_PARAM_PATTERN: Final = re.compile(r"\{([^}]+)\}")
_NON_WORD_RUN_PATTERN: Final = re.compile(r"\W+")


def escape_xml(text: object) -> str:
    """Escape text for use inside XML documentation comments.

    Examples:
        >>> escape_xml("a < b & c")
        'a &lt; b &amp; c'
    """
    if text is None or text == "":
        return ""
    result = str(text)
    for char, escaped in _XML_ESCAPES.items():
        result = result.replace(char, escaped)
    return result


def csharp_doc_comment(text: str | None, indent: int = 0, tag: str = "summary") -> str:
    """Convert text to a C# XML documentation comment.

    Args:
        text: The text to convert to doc comments.
        indent: Number of spaces for base indentation.
        tag: The XML documentation element to wrap the text in.

    Returns:
        Formatted doc comment string, or an empty string for empty input.

    Example:
        >>> csharp_doc_comment("Gets a pet")
        '/// <summary>\\n/// Gets a pet\\n/// </summary>'
    """
    if not text:
        return ""

    indent_str = " " * indent
    lines = [f"{indent_str}/// <{tag}>"]
    lines.extend(f"{indent_str}/// {escape_xml(line.strip())}".rstrip() for line in text.strip().split("\n"))
    lines.append(f"{indent_str}/// </{tag}>")
    return "\n".join(lines)


def sanitize_csharp_string_literal(text: object) -> str:
    """Sanitize text for use inside a regular C# string literal.

    Args:
        text: Text to sanitize.

    Returns:
        Sanitized text safe for C# string literals.
    """
    if text is None or text == "":
        return ""

    escape_map = {
        "\\": "\\\\",
        '"': '\\"',
        "\n": "\\n",
        "\r": "\\r",
        "\t": "\\t",
    }

    result = str(text)
    for char, escaped in escape_map.items():
        result = result.replace(char, escaped)

    return result


def ensure_semver(version_str: str | None) -> str:
    """Ensure version string is valid semantic versioning format.

    Examples:
        >>> ensure_semver("1")
        '1.0.0'
        >>> ensure_semver("v1.2.3")
        '1.2.3'
    """
    if not version_str:
        return _DEFAULT_VERSION

    cleaned_version = version_str.lstrip("v")
    parts = [part.strip() for part in cleaned_version.split(".") if part.strip()]
    parts = [part if part.isdigit() else "0" for part in parts]

    if not parts:
        return _DEFAULT_VERSION

    match len(parts):
        case 1:
            parts.extend(["0", "0"])
        case 2:
            parts.append("0")
        case n if n > _MAX_SEMVER_PARTS:
            parts = parts[:_MAX_SEMVER_PARTS]

    return ".".join(parts)


def http_method_name(method: str) -> str:
    """Convert an HTTP method to the PascalCase member name used by the client.

    Examples:
        >>> http_method_name("DELETE")
        'Delete'
    """
    return method.strip().capitalize()


def non_nullable(data_type: str) -> str:
    """Strip the nullable marker from a C# type."""
    return data_type[:-1] if data_type.endswith("?") else data_type


def path_param_names(path: str) -> list[str]:
    """Return the placeholder names of an OpenAPI path, in order.

    Examples:
        >>> path_param_names("/store/order/{orderId}")
        ['orderId']
    """
    if not path:
        return []
    return _PATH_PARAM_PATTERN.findall(path)


def argument_name(var_name: str) -> str:
    """Derive a constructor argument name from a property name.

    Examples:
        >>> argument_name("PetType")
        'petType'
        >>> argument_name("Class")
        '_class'
    """
    if not var_name:
        return var_name
    return escape_csharp_keyword(var_name[0].lower() + var_name[1:])


def type_identifier(data_type: str) -> str:
    """Turn a C# type into a fragment usable inside a member name.

    Examples:
        >>> type_identifier("List<string>")
        'ListString'
    """
    words = _NON_WORD_RUN_PATTERN.split(data_type)
    return "".join(word[:1].upper() + word[1:] for word in words if word)


def regex_options(modifiers: list[str] | None) -> str:
    """Join regex modifiers into a ``RegexOptions`` expression."""
    if not modifiers:
        return "RegexOptions.CultureInvariant"
    return " | ".join(f"RegexOptions.{modifier}" for modifier in modifiers)


def markdown_escape_pipe(text: object) -> str:
    """Make text safe for a Markdown table cell."""
    if text is None or text == "":
        return ""
    return str(text).replace("|", "\\|").replace("\n", " ")


# Register filters that will be available in Jinja templates
FILTERS = {
    "csharp_doc_comment": csharp_doc_comment,
    "escape_xml": escape_xml,
    "sanitize_csharp_string_literal": sanitize_csharp_string_literal,
    "ensure_semver": ensure_semver,
    "http_method_name": http_method_name,
    "non_nullable": non_nullable,
    "path_param_names": path_param_names,
    "argument_name": argument_name,
    "type_identifier": type_identifier,
    "regex_options": regex_options,
    "md_cell": markdown_escape_pipe,
}
