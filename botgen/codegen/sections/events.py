"""Events section: one declaration file per event, aggregated as ``Events``."""

from typing import TYPE_CHECKING, Mapping

from ..core.module import Module
from .base import SectionBuilder, entry_doc

if TYPE_CHECKING:
    from ...definition import EventDefinition


class EventsBuilder(SectionBuilder):
    name = "events"
    directory = "events"
    aggregate = "Events"

    async def create(self, section: Mapping[str, "EventDefinition"]) -> Module:
        module = self.index_module(self.aggregate, key=self.name, aggregate=self.aggregate)
        for child in await self.create_entries(section, self._create_event):
            module.push_dep(child)
        return module

    async def _create_event(self, name: str, event: "EventDefinition") -> Module:
        type_name = self.type_name(name)
        declarations = await self.translator.translate(
            event.schema, type_name, entry_doc(event.title, event.description)
        )
        return self.content_module(type_name, self.file_name(name), declarations, key=name)
