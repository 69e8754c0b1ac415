"""
C# identifier naming rules.

Turns names taken from an API description (schema names, property names,
enum values, operation ids) into legal, conventional C# identifiers
according to the configured model property naming policy.
"""

from __future__ import annotations

import re
from typing import Final

from csharp_oas_generator.config import GeneratorConfig, ModelPropertyNaming
from csharp_oas_generator.utils.string_case import (
    PROPERTY_SPECIAL_KEYWORDS,
    camelize,
    escape_csharp_keyword,
    is_csharp_keyword,
    sanitize_name,
    snakecase,
)

_CONSTANT_NAME_PATTERN: Final = re.compile(r"^[A-Z_]*$")
_NON_WORD_PATTERN: Final = re.compile(r"\W+")
_NUMERIC_DATATYPE_PREFIXES: Final = ("int", "long", "double", "float")

EMPTY_ENUM_NAME: Final = "Empty"

# Enum values made of a single symbol get a spelled-out member name.
SYMBOL_NAMES: Final = {
    "$": "Dollar",
    "^": "Caret",
    "|": "Pipe",
    "=": "Equal",
    "*": "Star",
    "-": "Minus",
    "&": "Ampersand",
    "%": "Percent",
    "#": "Hash",
    "@": "At",
    "!": "Exclamation",
    "+": "Plus",
    ":": "Colon",
    ";": "Semicolon",
    ">": "Greater_Than",
    "<": "Less_Than",
    ".": "Period",
    "_": "Underscore",
    "?": "Question_Mark",
    ",": "Comma",
    "'": "Quote",
    '"': "Double_Quote",
    "/": "Slash",
    "\\": "Back_Slash",
    "(": "Left_Parenthesis",
    ")": "Right_Parenthesis",
    "{": "Left_Curly_Bracket",
    "}": "Right_Curly_Bracket",
    "[": "Left_Square_Bracket",
    "]": "Right_Square_Bracket",
    "~": "Tilde",
    "`": "Backtick",
    "<=": "Less_Than_Or_Equal_To",
    ">=": "Greater_Than_Or_Equal_To",
    "!=": "Not_Equal",
}


def apply_naming_policy(name: str, policy: ModelPropertyNaming) -> str:
    """Apply the casing of a model property naming policy to ``name``."""
    match policy:
        case ModelPropertyNaming.ORIGINAL:
            return name
        case ModelPropertyNaming.CAMEL_CASE:
            return camelize(name, lower_first=True)
        case ModelPropertyNaming.PASCAL_CASE:
            return camelize(name)
        case ModelPropertyNaming.SNAKE_CASE:
            return snakecase(name)
    # Only reachable when a caller bypasses ModelPropertyNaming.parse.
    msg = f"Invalid model property naming '{policy}'"
    raise ValueError(msg)


class NameResolver:
    """Resolves raw API names to C# identifiers for one generation run."""

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        self.config = config or GeneratorConfig()
        self.name_mapping = dict(self.config.name_mapping)

    def _sanitize(self, name: str) -> str:
        return sanitize_name(name, allow_unicode=self.config.allow_unicode_identifiers)

    def to_var_name(self, name: str) -> str:
        """Resolve a model property name.

        The lookup order is: explicit name mapping, sanitizing, constant-style
        names kept as-is, naming policy, reserved word escaping, and finally
        disambiguation from the members every generated model defines.
        """
        if name in self.name_mapping:
            return self.name_mapping[name]

        name = self._sanitize(name)

        if _CONSTANT_NAME_PATTERN.match(name):
            return name

        name = apply_naming_policy(name, self.config.model_property_naming)
        name = escape_csharp_keyword(name)

        if name in PROPERTY_SPECIAL_KEYWORDS:
            return camelize(f"property_{name}")

        return name

    def to_param_name(self, name: str) -> str:
        """Resolve an operation parameter name (lowerCamelCase)."""
        if name in self.name_mapping:
            return self.name_mapping[name]

        name = self._sanitize(name)
        if _CONSTANT_NAME_PATTERN.match(name):
            return name
        return escape_csharp_keyword(camelize(name, lower_first=True))

    def to_model_name(self, name: str) -> str:
        """Resolve a schema name to a model class name."""
        name = camelize(self._sanitize(name))
        if not name:
            return "Model"
        if is_csharp_keyword(name) or name[0].isdigit():
            return f"Model{name}"
        return name

    def to_enum_name(self, property_name: str) -> str:
        """Name of the inline enum type generated for a property."""
        return f"{camelize(self._sanitize(property_name))}Enum"

    def to_enum_var_name(self, value: str, datatype: str) -> str:
        """Resolve an enum value to a member name.

        Args:
            value: The enum value as it appears in the document.
            datatype: The C# data type of the enum.

        Returns:
            The member name.

        Examples:
            >>> NameResolver().to_enum_var_name("", "string")
            'Empty'
            >>> NameResolver().to_enum_var_name("-1.5", "double")
            'NUMBER_MINUS_1_DOT_5'
        """
        if len(value) == 0:
            return EMPTY_ENUM_NAME

        if value in SYMBOL_NAMES:
            return camelize(SYMBOL_NAMES[value])

        if datatype.startswith(_NUMERIC_DATATYPE_PREFIXES):
            var_name = f"NUMBER_{value}"
            var_name = var_name.replace("-", "MINUS_")
            var_name = var_name.replace("+", "PLUS_")
            return var_name.replace(".", "_DOT_")

        var_name = camelize(value.replace(" ", "_"))
        var_name = _NON_WORD_PATTERN.sub("", var_name)

        if var_name[:1].isdigit():
            return f"_{var_name}"
        return var_name

    def to_operation_name(self, operation_id: str) -> str:
        """Resolve an operationId to a method name."""
        name = camelize(self._sanitize(operation_id))
        if is_csharp_keyword(name) or name[:1].isdigit():
            return f"Call{name}"
        return name

    def to_api_name(self, tag: str) -> str:
        """Resolve a tag to an API class name."""
        name = camelize(self._sanitize(tag)) or "Default"
        return f"{name}Api"
