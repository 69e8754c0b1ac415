"""
String case conversion utilities for C# client generation.

This module provides the casing primitives used by the naming resolver,
together with the C# reserved word table and identifier sanitization.

Based on https://github.com/okunishinishi/python-stringcase
with additional C#-specific naming conventions.
"""

import re
from collections.abc import Callable
from typing import Final

# Regex patterns for case conversion
_SNAKE_CASE_DELIMITER_PATTERN: Final = re.compile(r"[\-\.\s]")
_ACRONYM_PATTERN: Final = re.compile(r"([A-Z]+)([A-Z][a-z])")
_LOWER_UPPER_PATTERN: Final = re.compile(r"([a-z\d])([A-Z])")
_CAMELIZE_SPLIT_PATTERN: Final = re.compile(r"[_\-\s/.]+")
_BRACKETS_PATTERN: Final = re.compile(r"[\[\]]")
_SEPARATOR_PATTERN: Final = re.compile(r"[\-\.\s()/:]")
_NON_WORD_PATTERN: Final = re.compile(r"\W")
_NON_ASCII_WORD_PATTERN: Final = re.compile(r"[^a-zA-Z0-9_]")

# Reserved words are matched case-insensitively, so the table is lower case.
CSHARP_KEYWORDS: Final = frozenset(
    {
        # C# keywords
        "abstract",
        "as",
        "base",
        "bool",
        "break",
        "byte",
        "case",
        "catch",
        "char",
        "checked",
        "class",
        "const",
        "continue",
        "decimal",
        "default",
        "delegate",
        "do",
        "double",
        "else",
        "enum",
        "event",
        "explicit",
        "extern",
        "false",
        "finally",
        "fixed",
        "float",
        "for",
        "foreach",
        "goto",
        "if",
        "implicit",
        "in",
        "int",
        "interface",
        "internal",
        "is",
        "lock",
        "long",
        "namespace",
        "new",
        "null",
        "object",
        "operator",
        "out",
        "override",
        "params",
        "private",
        "protected",
        "public",
        "readonly",
        "ref",
        "return",
        "sbyte",
        "sealed",
        "short",
        "sizeof",
        "stackalloc",
        "static",
        "string",
        "struct",
        "switch",
        "this",
        "throw",
        "true",
        "try",
        "typeof",
        "uint",
        "ulong",
        "unchecked",
        "unsafe",
        "ushort",
        "using",
        "virtual",
        "void",
        "volatile",
        "while",
        # Contextual keywords that clash with generated members
        "async",
        "await",
        "dynamic",
        "var",
        "yield",
        # Names used by the generated client code
        "client",
        "configuration",
        "localvaroperation",
        "localvarpath",
        "localvarrequestoptions",
        "localvarresponse",
        "parameter",
        "system",
    }
)

# Generated model classes define these members, properties must not shadow them.
PROPERTY_SPECIAL_KEYWORDS: Final = frozenset(
    {
        "ToString",
        "ToJson",
        "GetHashCode",
        "Equals",
        "ShouldSerializeToString",
    }
)


def _convert_if_not_empty(string: str | None, conversion_func: Callable[[str], str]) -> str:
    """Safely convert a string, returning empty string if input is None or empty."""
    return conversion_func(string) if string else ""


def snakecase(string: str | None) -> str:
    """Convert string into snake_case.

    Handles various formats including camelCase with acronyms.

    Args:
        string: String to convert.

    Returns:
        Snake case string.

    Examples:
        >>> snakecase("HelloWorld")
        'hello_world'
        >>> snakecase("hello-world")
        'hello_world'
        >>> snakecase("getHTTPResponse")
        'get_http_response'
    """

    def _snakecase(s: str) -> str:
        s = _ACRONYM_PATTERN.sub(r"\1_\2", s)
        s = _LOWER_UPPER_PATTERN.sub(r"\1_\2", s)
        s = _SNAKE_CASE_DELIMITER_PATTERN.sub("_", s)
        return s.lower()

    return _convert_if_not_empty(string, _snakecase)


def camelize(string: str | None, *, lower_first: bool = False) -> str:
    """Convert string into PascalCase (or lowerCamelCase).

    Word boundaries are underscores, hyphens, whitespace, dots and slashes.
    The first letter of every word is upper-cased and the remaining letters
    are kept as they are, so existing camel humps survive.

    Args:
        string: String to convert.
        lower_first: Lower-case the first letter of the result.

    Returns:
        Camelized string.

    Examples:
        >>> camelize("user_id")
        'UserId'
        >>> camelize("userName")
        'UserName'
        >>> camelize("user_id", lower_first=True)
        'userId'
    """

    def _camelize(s: str) -> str:
        words = [word for word in _CAMELIZE_SPLIT_PATTERN.split(s) if word]
        result = "".join(word[0].upper() + word[1:] for word in words)
        if lower_first and result:
            result = result[0].lower() + result[1:]
        return result

    return _convert_if_not_empty(string, _camelize)


def pascalcase(string: str | None) -> str:
    """Convert string into PascalCase.

    Examples:
        >>> pascalcase("hello_world")
        'HelloWorld'
    """
    return camelize(string)


def lower_camelcase(string: str | None) -> str:
    """Convert string into lowerCamelCase.

    Examples:
        >>> lower_camelcase("Hello_World")
        'helloWorld'
    """
    return camelize(string, lower_first=True)


def constcase(string: str | None) -> str:
    """Convert string into CONSTANT_CASE (upper snake case).

    Examples:
        >>> constcase("helloWorld")
        'HELLO_WORLD'
    """
    return snakecase(string).upper()


def sanitize_name(name: str | None, *, allow_unicode: bool = False) -> str:
    """Remove characters that cannot appear in a C# identifier.

    Square brackets are dropped, common separators become underscores and
    any remaining non-word character is removed.

    Args:
        name: The raw name from the API description.
        allow_unicode: Keep non-ASCII letters and digits.

    Returns:
        The sanitized name, possibly empty.

    Examples:
        >>> sanitize_name("pet[id]")
        'petid'
        >>> sanitize_name("created-at")
        'created_at'
    """

    def _sanitize(s: str) -> str:
        s = _BRACKETS_PATTERN.sub("", s)
        s = _SEPARATOR_PATTERN.sub("_", s)
        pattern = _NON_WORD_PATTERN if allow_unicode else _NON_ASCII_WORD_PATTERN
        return pattern.sub("", s)

    return _convert_if_not_empty(name, _sanitize)


def is_csharp_keyword(name: str) -> bool:
    """Check if a name is a C# reserved word (case-insensitive).

    Args:
        name: The identifier name to check.

    Returns:
        True if the name is reserved, False otherwise.
    """
    return name.lower() in CSHARP_KEYWORDS


def escape_csharp_keyword(name: str) -> str:
    """Escape a reserved word or digit-leading identifier with an ``_`` prefix.

    Examples:
        >>> escape_csharp_keyword("Class")
        '_Class'
        >>> escape_csharp_keyword("name")
        'name'
    """
    if is_csharp_keyword(name) or (name and name[0].isdigit()):
        return f"_{name}"
    return name
