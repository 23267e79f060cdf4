"""
Actions section.

Each action gets one file declaring ``<Name>Input``, ``<Name>Output`` and
``<Name> = { input: <Name>Input; output: <Name>Output }``.
"""

import asyncio
from typing import TYPE_CHECKING, Mapping

from ..core.module import Module
from .base import SectionBuilder, entry_doc

if TYPE_CHECKING:
    from ...definition import ActionDefinition


class ActionsBuilder(SectionBuilder):
    name = "actions"
    directory = "actions"
    aggregate = "Actions"

    async def create(self, section: Mapping[str, "ActionDefinition"]) -> Module:
        module = self.index_module(self.aggregate, key=self.name, aggregate=self.aggregate)
        for child in await self.create_entries(section, self._create_action):
            module.push_dep(child)
        return module

    async def _create_action(self, name: str, action: "ActionDefinition") -> Module:
        type_name = self.type_name(name)
        input_name = f"{type_name}Input"
        output_name = f"{type_name}Output"

        input_source, output_source = await asyncio.gather(
            self.translator.translate(action.input, input_name),
            self.translator.translate(action.output, output_name),
        )
        action_source = self.generator.render_object_type(
            type_name,
            [("input", input_name), ("output", output_name)],
            entry_doc(action.title, action.description),
        )

        declarations = "\n\n".join(
            source.strip("\n") for source in (input_source, output_source, action_source)
        )
        return self.content_module(type_name, self.file_name(name), declarations, key=name)
