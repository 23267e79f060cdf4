"""
TypeScript-specific naming utilities and sanitization.

Handles TypeScript reserved words, builtin type names and naming conventions.
"""

from ...core.naming import NameSanitizer


# TypeScript reserved keywords (strict mode included)
TYPESCRIPT_RESERVED_WORDS = {
    "break",
    "case",
    "catch",
    "class",
    "const",
    "continue",
    "debugger",
    "default",
    "delete",
    "do",
    "else",
    "enum",
    "export",
    "extends",
    "false",
    "finally",
    "for",
    "function",
    "if",
    "import",
    "in",
    "instanceof",
    "new",
    "null",
    "return",
    "super",
    "switch",
    "this",
    "throw",
    "true",
    "try",
    "typeof",
    "var",
    "void",
    "while",
    "with",
    "implements",
    "interface",
    "let",
    "package",
    "private",
    "protected",
    "public",
    "static",
    "yield",
}

# Builtin and global type names a declaration must not shadow
TYPESCRIPT_BUILTIN_TYPES = {
    "any",
    "unknown",
    "never",
    "object",
    "string",
    "number",
    "boolean",
    "symbol",
    "bigint",
    "undefined",
    "array",
    "record",
    "partial",
    "required",
    "readonly",
    "pick",
    "omit",
    "promise",
    "date",
    "error",
    "function",
    "map",
    "set",
}


def create_typescript_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for TypeScript."""
    return NameSanitizer(TYPESCRIPT_RESERVED_WORDS, TYPESCRIPT_BUILTIN_TYPES)
