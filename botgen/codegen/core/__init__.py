"""
Core code generation building blocks.

Schema translation, naming, the module tree, configuration, templates and
the generator base class shared by every target language.
"""

from .errors import (
    GeneratorError,
    DefinitionError,
    SchemaTranslationError,
    UnsupportedSchemaError,
    NamingError,
    InvalidSecretFormatError,
    DuplicateSecretError,
    NameCollisionError,
    ModuleStateError,
    ModuleFrozenError,
    PathCollisionError,
)
from .schema import NodeKind, SchemaField, SchemaNode, to_intermediate
from .module import File, Module, ModuleKind
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .generator import CodeGenerator, GenerationResult, run_generation

__all__ = [
    "GeneratorError",
    "DefinitionError",
    "SchemaTranslationError",
    "UnsupportedSchemaError",
    "NamingError",
    "InvalidSecretFormatError",
    "DuplicateSecretError",
    "NameCollisionError",
    "ModuleStateError",
    "ModuleFrozenError",
    "PathCollisionError",
    "NodeKind",
    "SchemaField",
    "SchemaNode",
    "to_intermediate",
    "File",
    "Module",
    "ModuleKind",
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    "CodeGenerator",
    "GenerationResult",
    "run_generation",
]
