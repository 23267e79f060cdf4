"""
Section registry for managing available section builders.

Provides registration and instantiation of the builders that turn
definition sections into module subtrees.
"""

from typing import Any, Dict, List, Optional, Type

from .core.config import GeneratorConfig
from .sections.base import SectionBuilder
from .translator import SchemaTranslator


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


class SectionRegistry:
    """Registry for managing available section builders."""

    def __init__(self):
        """Initialize empty registry."""
        self._builders: Dict[str, Type[SectionBuilder]] = {}

    def register(
        self,
        section: str,
        builder_class: Type[SectionBuilder],
        replace: bool = False,
    ):
        """
        Register a builder for a section.

        Args:
            section: Section name (e.g., 'events', 'channels')
            builder_class: Builder class implementing SectionBuilder
            replace: If True, replace existing registration. If False, skip if exists.

        Raises:
            RegistryError: If builder class is invalid
        """
        if not isinstance(builder_class, type) or not issubclass(builder_class, SectionBuilder):
            raise RegistryError("Builder class must inherit from SectionBuilder")

        section_key = section.lower()

        # Already registered, skip silently
        if section_key in self._builders and not replace:
            return

        self._builders[section_key] = builder_class

    def unregister(self, section: str):
        """Unregister a section builder."""
        self._builders.pop(section.lower(), None)

    def get_builder_class(self, section: str) -> Type[SectionBuilder]:
        """
        Get builder class for section.

        Raises:
            RegistryError: If section not found
        """
        section_key = section.lower()
        if section_key in self._builders:
            return self._builders[section_key]

        available = self.list_sections()
        raise RegistryError(
            f"No builder registered for section: {section}. "
            f"Available: {', '.join(available)}"
        )

    def create_builder(
        self,
        section: str,
        translator: SchemaTranslator,
        config: Optional[GeneratorConfig] = None,
    ) -> SectionBuilder:
        """
        Create builder instance for section.

        Args:
            section: Section name
            translator: Schema translator the builder renders declarations with
            config: Generation settings, the translator's when omitted

        Returns:
            Builder instance
        """
        builder_class = self.get_builder_class(section)
        return builder_class(translator, config)

    def list_sections(self) -> List[str]:
        """Get list of registered section names."""
        return sorted(self._builders.keys())

    def is_supported(self, section: str) -> bool:
        return section.lower() in self._builders

    def get_section_info(self, section: str) -> Dict[str, Any]:
        """
        Get information about a registered section.

        Raises:
            RegistryError: If section not found
        """
        builder_class = self.get_builder_class(section)
        return {
            "name": section.lower(),
            "class": builder_class.__name__,
            "directory": builder_class.directory,
            "module": builder_class.__module__,
        }


# Global registry instance - created once
_global_registry: Optional[SectionRegistry] = None


def get_registry() -> SectionRegistry:
    """Get the global section registry, initializing if needed."""
    global _global_registry
    if _global_registry is None:
        _global_registry = SectionRegistry()
        _auto_register_builders()
    return _global_registry


def _auto_register_builders():
    """Register the builders for every known section."""
    from .sections import (
        ActionsBuilder,
        ChannelsBuilder,
        ConfigurationBuilder,
        EventsBuilder,
        SecretsBuilder,
        StatesBuilder,
    )

    for builder_class in (
        ConfigurationBuilder,
        EventsBuilder,
        StatesBuilder,
        ActionsBuilder,
        ChannelsBuilder,
        SecretsBuilder,
    ):
        _global_registry.register(builder_class.name, builder_class)


# Public API functions using the global registry


def register_builder(section: str, builder_class: Type[SectionBuilder], replace: bool = False):
    """Register a builder in the global registry."""
    get_registry().register(section, builder_class, replace)


def list_supported_sections() -> List[str]:
    """List all sections known to the global registry."""
    return get_registry().list_sections()
