"""
Naming utilities for safe code generation.

Handles case conversion, reserved word conflicts and unique name
allocation for generated identifiers, file names and directories.
"""

import re
from typing import Set
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""
    SNAKE_CASE = "snake"      # user_name
    CAMEL_CASE = "camel"      # userName
    PASCAL_CASE = "pascal"    # UserName
    KEBAB_CASE = "kebab"      # user-name
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME


SCREAMING_SNAKE_PATTERN = re.compile(r"^[A-Z][A-Z0-9]*(_[A-Z0-9]+)*$")
IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Characters a quoted string literal cannot hold as-is
STRING_ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


class NameSanitizer:
    """Handles name sanitization and case conversion."""

    def __init__(self, reserved_words: Set[str] = None, builtin_types: Set[str] = None):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin type names that might conflict
        """
        self.reserved_words = {w.lower() for w in (reserved_words or set())}
        self.builtin_types = {t.lower() for t in (builtin_types or set())}
        self._used_names: Set[str] = set()

    def sanitize_name(self, name: str, target_case: NamingCase = NamingCase.SNAKE_CASE,
                      suffix_on_conflict: str = "_") -> str:
        """
        Sanitize a name for safe use in target language.

        Pure: the same input always yields the same output. Use
        ``claim_name`` when the result must also be unique.

        Args:
            name: Original name to sanitize
            target_case: Desired case style
            suffix_on_conflict: Suffix to add for reserved words

        Returns:
            Sanitized name safe for use
        """
        cleaned = self._clean_basic(name)
        converted = self._convert_case(cleaned, target_case)

        if not converted:
            converted = "field"
        if converted[0].isdigit():
            converted = f"_{converted}"

        if converted.lower() in self.reserved_words or converted.lower() in self.builtin_types:
            converted = f"{converted}{suffix_on_conflict}"

        return converted

    def claim_name(self, name: str, target_case: NamingCase = NamingCase.PASCAL_CASE) -> str:
        """
        Sanitize a name and reserve it, appending a counter on duplicates.

        Args:
            name: Original name
            target_case: Desired case style

        Returns:
            A sanitized name not handed out before by this sanitizer
        """
        base = self.sanitize_name(name, target_case)
        return self._resolve_conflicts(base)

    def _clean_basic(self, name: str) -> str:
        """Basic name cleanup - remove invalid characters."""
        # Remove non-alphanumeric chars except underscore and hyphen
        cleaned = re.sub(r'[^a-zA-Z0-9_-]', '_', name)

        # Remove leading/trailing underscores and hyphens
        return cleaned.strip('_-')

    def _convert_case(self, name: str, target_case: NamingCase) -> str:
        """Convert name to target case style."""
        if target_case == NamingCase.SNAKE_CASE:
            return to_snake_case(name)
        elif target_case == NamingCase.CAMEL_CASE:
            return to_camel_case(name)
        elif target_case == NamingCase.PASCAL_CASE:
            return to_pascal_case(name)
        elif target_case == NamingCase.KEBAB_CASE:
            return to_kebab_case(name)
        elif target_case == NamingCase.SCREAMING_SNAKE:
            return to_snake_case(name).upper()
        else:
            return name

    def _resolve_conflicts(self, name: str) -> str:
        """Resolve duplicates against names handed out earlier."""
        candidate = name
        counter = 2
        while candidate in self._used_names:
            candidate = f"{name}{counter}"
            counter += 1

        self._used_names.add(candidate)
        return candidate

    def reset_used_names(self):
        """Reset the tracking of used names."""
        self._used_names.clear()


def to_snake_case(name: str) -> str:
    """Convert to snake_case."""
    # Replace hyphens, spaces and dots with underscores
    name = re.sub(r'[-\s.]+', '_', name)

    # Split acronyms followed by a word: HTTPServer -> HTTP_Server
    name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)

    # Insert underscore before uppercase letters
    name = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name)

    # Convert to lowercase and clean up multiple underscores
    name = name.lower()
    name = re.sub(r'_+', '_', name)

    return name.strip('_')


def to_camel_case(name: str) -> str:
    """Convert to camelCase."""
    parts = [part for part in to_snake_case(name).split('_') if part]

    if not parts:
        return name

    # First part lowercase, rest title case
    return parts[0].lower() + ''.join(part.capitalize() for part in parts[1:])


def to_pascal_case(name: str) -> str:
    """Convert to PascalCase."""
    snake = to_snake_case(name)
    return ''.join(part.capitalize() for part in snake.split('_') if part)


def to_kebab_case(name: str) -> str:
    """Convert to kebab-case."""
    return to_snake_case(name).replace('_', '-')


def is_screaming_snake_case(name: str) -> bool:
    """Check for SCREAMING_SNAKE_CASE (upper-case letters, digits, single underscores)."""
    return bool(SCREAMING_SNAKE_PATTERN.match(name))


def is_identifier(name: str) -> bool:
    """Check whether ``name`` can be used unquoted as a property key."""
    return bool(IDENTIFIER_PATTERN.match(name))


def _escape_char(char: str, quote: str) -> str:
    if char == quote:
        return f"\\{quote}"
    if char in STRING_ESCAPES:
        return STRING_ESCAPES[char]
    if ord(char) < 0x20 or ord(char) == 0x7F:
        return f"\\x{ord(char):02x}"
    return char


def quote_property(name: str, quote: str = "'") -> str:
    """Return ``name`` as-is when it is an identifier, else as an escaped string literal."""
    if is_identifier(name):
        return name
    escaped = "".join(_escape_char(char, quote) for char in name)
    return f"{quote}{escaped}{quote}"
