"""
Channels section.

Two levels of nesting: the ``Channels`` index aggregates one re-export
module per channel, placed under the channel's directory, which in turn
aggregates one declaration file per message. Message types are prefixed
with the channel type so sibling channels never export the same name.
"""

from typing import TYPE_CHECKING, List, Mapping

from ..core.module import Module
from ..core.naming import to_kebab_case
from .base import SectionBuilder, entry_doc

if TYPE_CHECKING:
    from ...definition import ChannelDefinition, MessageDefinition, TagDefinition


def tag_doc(label: str, tags: Mapping[str, "TagDefinition"]) -> List[str]:
    lines = []
    for name, tag in tags.items():
        summary = tag.title or tag.description
        lines.append(f"@{label} {name} - {summary}" if summary else f"@{label} {name}")
    return lines


def channel_doc(channel: "ChannelDefinition") -> List[str]:
    return (
        tag_doc("tag", channel.tags)
        + tag_doc("conversationTag", channel.conversation_tags)
        + tag_doc("messageTag", channel.message_tags)
    )


class ChannelsBuilder(SectionBuilder):
    name = "channels"
    directory = "channels"
    aggregate = "Channels"

    async def create(self, section: Mapping[str, "ChannelDefinition"]) -> Module:
        module = self.index_module(self.aggregate, key=self.name, aggregate=self.aggregate)
        for child in await self.create_entries(section, self._create_channel):
            module.push_dep(child)
        return module

    async def _create_channel(self, name: str, channel: "ChannelDefinition") -> Module:
        channel_type = self.type_name(name)
        module = self.index_module(
            channel_type, key=name, aggregate=channel_type, doc=channel_doc(channel)
        )

        async def create_message(message_name: str, message: "MessageDefinition") -> Module:
            type_name = f"{channel_type}{self.type_name(message_name)}"
            declarations = await self.translator.translate(
                message.schema, type_name, entry_doc(message.title, message.description)
            )
            return self.content_module(
                type_name, self.file_name(message_name), declarations, key=message_name
            )

        for child in await self.create_entries(channel.messages, create_message):
            module.push_dep(child)

        module.unshift(to_kebab_case(name))
        return module
