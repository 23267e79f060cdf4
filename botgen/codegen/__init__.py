"""
botgen Code Generation Module

Generates TypeScript typings from bot and integration definitions.
"""

from .registry import SectionRegistry, RegistryError, get_registry, list_supported_sections
from .core.generator import CodeGenerator, GenerationResult, run_generation
from .core.module import File, Module, ModuleKind
from .core.schema import NodeKind, SchemaField, SchemaNode, to_intermediate
from .core.config import GeneratorConfig, ConfigManager, load_config
from .languages.typescript import TypeScriptGenerator, create_typescript_generator
from .translator import SchemaTranslator
from .sections import secret_env_mapping, secret_env_variable_name, validate_secrets
from .composition import (
    create_implementation_module,
    generate_typings,
    generate_bot_implementation_typings,
    generate_integration_implementation_typings,
    generate_integration_index,
    generate_integration_instance,
    generate_bot_index,
)

# Version info
__version__ = "0.1.0"


# Convenience functions
async def generate_from_definition(definition, implementation_path=".botpress/implementation", **options):
    """
    Generate implementation typings, reporting failures as a result.

    Args:
        definition: BotDefinition or IntegrationDefinition
        implementation_path: Directory the typings are placed in
        **options: Generator, config, resolver or registry overrides

    Returns:
        GenerationResult with the generated files
    """
    return await run_generation(generate_typings(definition, implementation_path, **options))


# Export main interfaces
__all__ = [
    "SectionRegistry",
    "RegistryError",
    "get_registry",
    "list_supported_sections",
    "CodeGenerator",
    "GenerationResult",
    "run_generation",
    "File",
    "Module",
    "ModuleKind",
    "NodeKind",
    "SchemaField",
    "SchemaNode",
    "to_intermediate",
    "GeneratorConfig",
    "ConfigManager",
    "load_config",
    "TypeScriptGenerator",
    "create_typescript_generator",
    "SchemaTranslator",
    "secret_env_mapping",
    "secret_env_variable_name",
    "validate_secrets",
    "create_implementation_module",
    "generate_typings",
    "generate_bot_implementation_typings",
    "generate_integration_implementation_typings",
    "generate_integration_index",
    "generate_integration_instance",
    "generate_bot_index",
    "generate_from_definition",
]
