"""
Error taxonomy for code generation.

All failures abort a generation run. Each error carries a ``context`` dict
with whatever a presentation layer needs to point at the culprit (schema
location, module path, identifier).
"""

from typing import Any, Dict, Optional


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class DefinitionError(GeneratorError):
    """A bot or integration definition is malformed."""

    def __init__(self, message: str, location: str = ""):
        super().__init__(message, {"location": location})
        self.location = location


class SchemaTranslationError(GeneratorError):
    """A schema could not be translated."""


class UnsupportedSchemaError(SchemaTranslationError):
    """A schema construct has no mapping to the intermediate form."""

    def __init__(self, message: str, location: str = "#"):
        super().__init__(f"{message} (at {location})", {"location": location})
        self.location = location


class NamingError(GeneratorError):
    """Invalid identifier or colliding names."""


class InvalidSecretFormatError(NamingError):
    """Secret name is not SCREAMING_SNAKE_CASE."""

    def __init__(self, secret: str):
        super().__init__(
            f"Secret {secret} should be in SCREAMING_SNAKE_CASE",
            {"identifier": secret},
        )
        self.secret = secret


class DuplicateSecretError(NamingError):
    """Secret name declared more than once."""

    def __init__(self, secret: str, count: int):
        super().__init__(
            f"Secret {secret} is duplicated; it appears {count} times",
            {"identifier": secret, "count": count},
        )
        self.secret = secret
        self.count = count


class NameCollisionError(NamingError):
    """Two distinct entries map to the same generated identifier."""

    def __init__(self, identifier: str, sources: list):
        joined = ", ".join(repr(s) for s in sources)
        super().__init__(
            f"Name collision on identifier '{identifier}' between {joined}",
            {"identifier": identifier, "sources": list(sources)},
        )
        self.identifier = identifier
        self.sources = list(sources)


class ModuleStateError(GeneratorError):
    """Illegal operation on a module tree."""


class ModuleFrozenError(ModuleStateError):
    """Mutation attempted after the module tree was flattened."""

    def __init__(self, export_name: str, operation: str):
        super().__init__(
            f"Cannot {operation} module '{export_name}': tree already flattened",
            {"module": export_name, "operation": operation},
        )


class PathCollisionError(GeneratorError):
    """Two generated files resolved to the same path."""

    def __init__(self, path: str, modules: list):
        joined = ", ".join(repr(m) for m in modules)
        super().__init__(
            f"Multiple modules resolve to '{path}': {joined}",
            {"path": path, "modules": list(modules)},
        )
        self.path = path
        self.modules = list(modules)
