"""
Language-specific code generators.

This module contains the generators for the languages typings are emitted in.
"""

from .typescript import TypeScriptGenerator, create_typescript_generator

__all__ = ["TypeScriptGenerator", "create_typescript_generator"]
