"""Configuration section: one declaration for the configuration schema."""

from typing import TYPE_CHECKING

from ..core.module import Module
from .base import SectionBuilder

if TYPE_CHECKING:
    from ...definition import ConfigurationDefinition

CONFIGURATION_TYPE = "Configuration"


class ConfigurationBuilder(SectionBuilder):
    name = "configuration"
    directory = "configuration"

    async def create(self, section: "ConfigurationDefinition") -> Module:
        declarations = await self.translator.translate(section.schema, CONFIGURATION_TYPE)

        module = self.index_module(CONFIGURATION_TYPE, key=self.name)
        module.push_dep(
            self.content_module(
                CONFIGURATION_TYPE,
                f"configuration{self.config.file_extension}",
                declarations,
            )
        )
        return module
