"""
Base class for definition section builders.

A builder turns one section of a definition into a module subtree rooted at
a re-export index, with one content module per entry.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Sequence, TypeVar

from ...logging_config import get_logger
from ..core.config import GeneratorConfig
from ..core.module import Module
from ..core.naming import to_kebab_case
from ..translator import SchemaTranslator

logger = get_logger(__name__)

T = TypeVar("T")


def entry_doc(title: Optional[str], description: Optional[str]) -> List[str]:
    """Documentation lines for a titled, described definition entry."""
    lines = []
    if title:
        lines.append(title)
    if description:
        if lines:
            lines.append("")
        lines.extend(description.strip().split("\n"))
    return lines


class SectionBuilder(ABC):
    """Abstract base class for section builders."""

    # Registry key and attribute of the definition holding the section
    name: str = ""
    # Canonical directory the section is placed under
    directory: str = ""

    def __init__(self, translator: SchemaTranslator, config: Optional[GeneratorConfig] = None):
        self.translator = translator
        self.generator = translator.generator
        self.config = config or translator.config

    @abstractmethod
    async def create(self, section: Any) -> Module:
        """Build the module subtree for ``section``."""
        pass

    def select(self, definition: Any) -> Any:
        """Pick this builder's section out of a definition."""
        return getattr(definition, self.name)

    # Helpers shared by the builders

    def type_name(self, name: str) -> str:
        return self.generator.type_name(name)

    def file_name(self, name: str) -> str:
        return f"{to_kebab_case(name)}{self.config.file_extension}"

    def index_module(
        self,
        export_name: str,
        key: Optional[str] = None,
        aggregate: Optional[str] = None,
        doc: Sequence[str] = (),
    ) -> Module:
        """Re-export index rendered by this builder's generator."""
        return Module.reexport(
            export_name,
            path=self.config.index_file,
            key=key,
            aggregate=aggregate,
            doc=doc,
            renderer=self.generator,
        )

    def content_module(
        self, export_name: str, path: str, declarations: str, key: Optional[str] = None
    ) -> Module:
        """Content module holding generated declarations under the file header."""
        return Module(
            export_name,
            path=path,
            content=self.generator.render_file(declarations),
            key=key,
            names=self.generator.exported_names(declarations),
        )

    async def create_entries(
        self,
        entries: Mapping[str, T],
        build: Callable[[str, T], Awaitable[Module]],
    ) -> List[Module]:
        """Build one module per entry concurrently, keeping declaration order."""
        modules = await asyncio.gather(*(build(name, entry) for name, entry in entries.items()))
        logger.debug("Built %d %s module(s)", len(modules), self.name)
        return list(modules)
