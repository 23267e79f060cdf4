"""
States section: one declaration file per state, aggregated as ``States``.

Scope and expiry are not part of the state's type; they are carried as
``@scope`` and ``@expiry`` documentation tags on the declaration.
"""

from typing import TYPE_CHECKING, List, Mapping

from ..core.module import Module
from .base import SectionBuilder, entry_doc

if TYPE_CHECKING:
    from ...definition import StateDefinition


def state_doc(state: "StateDefinition") -> List[str]:
    lines = entry_doc(state.title, state.description)
    if lines:
        lines.append("")
    lines.append(f"@scope {state.scope.value}")
    if state.expiry is not None:
        lines.append(f"@expiry {state.expiry}")
    return lines


class StatesBuilder(SectionBuilder):
    name = "states"
    directory = "states"
    aggregate = "States"

    async def create(self, section: Mapping[str, "StateDefinition"]) -> Module:
        module = self.index_module(self.aggregate, key=self.name, aggregate=self.aggregate)
        for child in await self.create_entries(section, self._create_state):
            module.push_dep(child)
        return module

    async def _create_state(self, name: str, state: "StateDefinition") -> Module:
        type_name = self.type_name(name)
        declarations = await self.translator.translate(state.schema, type_name, state_doc(state))
        return self.content_module(type_name, self.file_name(name), declarations, key=name)
