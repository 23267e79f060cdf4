"""
TypeScript code generator module.

Generates TypeScript declarations and re-export indexes for bot and
integration typings.
"""

from typing import Optional

from .generator import TypeScriptGenerator, create_typescript_generator
from .naming import create_typescript_sanitizer

__all__ = [
    "TypeScriptGenerator",
    "create_typescript_generator",
    "create_typescript_sanitizer",
    "get_default_generator",
]

_default_generator: Optional[TypeScriptGenerator] = None


def get_default_generator() -> TypeScriptGenerator:
    """Get the shared generator built from the default configuration."""
    global _default_generator
    if _default_generator is None:
        _default_generator = create_typescript_generator()
    return _default_generator
