"""Tests for botgen.codegen.composition"""

import json

import pytest

from botgen import BotDefinition, InstalledIntegration, IntegrationDefinition
from botgen.codegen import (
    generate_bot_implementation_typings,
    generate_from_definition,
    generate_integration_implementation_typings,
    generate_integration_index,
    generate_integration_instance,
    generate_bot_index,
    generate_typings,
)
from botgen.codegen.composition import (
    create_implementation_module,
    instance_identifier,
    instance_type_name,
)
from botgen.codegen.core.errors import (
    DefinitionError,
    InvalidSecretFormatError,
    NameCollisionError,
)
from botgen.codegen.registry import SectionRegistry, get_registry
from botgen.codegen.sections import EventsBuilder
from botgen.definition import (
    ActionDefinition,
    ChannelDefinition,
    ConfigurationDefinition,
    EventDefinition,
    MessageDefinition,
    StateDefinition,
    StateScope,
)

IMPLEMENTATION = ".botpress/implementation"
INSTALL = ".botpress/integrations"

ID_SCHEMA = {
    "type": "object",
    "properties": {"id": {"type": "string"}},
    "required": ["id"],
}


@pytest.fixture
def bot():
    return BotDefinition(
        configuration=ConfigurationDefinition(
            schema={
                "type": "object",
                "properties": {"authToken": {"type": "string"}},
                "required": ["authToken"],
            }
        ),
        events={"messageCreated": EventDefinition(schema=ID_SCHEMA)},
        states={"userProfile": StateDefinition(schema=ID_SCHEMA, scope=StateScope.USER)},
    )


@pytest.fixture
def integration():
    return IntegrationDefinition(
        name="notion",
        version="0.1.0",
        actions={"addPage": ActionDefinition(input=ID_SCHEMA, output=ID_SCHEMA)},
        secrets=("API_TOKEN",),
    )


@pytest.fixture
def instance():
    return InstalledIntegration(
        id="intver_123",
        name="notion",
        version="1.0.0",
        actions={"addPage": ActionDefinition(input=ID_SCHEMA, output=ID_SCHEMA)},
    )


class TestImplementationTypings:
    """Tests for bot and integration implementation typings."""

    @pytest.mark.asyncio
    async def test_bot_sections_under_implementation_path(self, bot, config, header):
        files = await generate_bot_implementation_typings(bot, IMPLEMENTATION, config=config)

        assert [f.path for f in files] == [
            f"{IMPLEMENTATION}/index.ts",
            f"{IMPLEMENTATION}/configuration/index.ts",
            f"{IMPLEMENTATION}/configuration/configuration.ts",
            f"{IMPLEMENTATION}/events/index.ts",
            f"{IMPLEMENTATION}/events/message-created.ts",
            f"{IMPLEMENTATION}/states/index.ts",
            f"{IMPLEMENTATION}/states/user-profile.ts",
        ]
        assert files[0].content == (
            f"{header}\n"
            "\n"
            "export * from './configuration/index'\n"
            "export * from './events/index'\n"
            "export * from './states/index'\n"
        )

    @pytest.mark.asyncio
    async def test_integration_includes_secrets(self, integration, config):
        files = await generate_integration_implementation_typings(
            integration, IMPLEMENTATION, config=config
        )
        paths = [f.path for f in files]

        for section in ("configuration", "events", "states", "actions", "channels", "secrets"):
            assert f"{IMPLEMENTATION}/{section}/index.ts" in paths
        assert f"{IMPLEMENTATION}/actions/add-page.ts" in paths
        assert "export * from './secrets/index'\n" in files[0].content

        secrets = next(f for f in files if f.path == f"{IMPLEMENTATION}/secrets/index.ts")
        assert "return getSecret('SECRET_API_TOKEN')" in secrets.content

    @pytest.mark.asyncio
    async def test_every_path_is_unique(self, integration):
        files = await generate_typings(integration, IMPLEMENTATION)
        paths = [f.path for f in files]
        assert len(paths) == len(set(paths))

    @pytest.mark.asyncio
    async def test_kind_is_checked(self, bot, integration, instance):
        with pytest.raises(DefinitionError):
            await generate_bot_implementation_typings(integration, IMPLEMENTATION)
        with pytest.raises(DefinitionError):
            await generate_integration_implementation_typings(bot, IMPLEMENTATION)
        with pytest.raises(DefinitionError) as exc_info:
            await create_implementation_module(instance)
        assert exc_info.value.location == "kind"

    @pytest.mark.asyncio
    async def test_custom_registry(self, bot):
        """A replaced builder changes where its section is placed."""

        class FlatEventsBuilder(EventsBuilder):
            directory = "custom-events"

        registry = SectionRegistry()
        for section in get_registry().list_sections():
            registry.register(section, get_registry().get_builder_class(section))
        registry.register("events", FlatEventsBuilder, replace=True)

        files = await generate_typings(bot, "out", registry=registry)
        paths = [f.path for f in files]
        assert "out/custom-events/index.ts" in paths
        assert "out/events/index.ts" not in paths


class TestExportedNameCollisions:
    """Tests for names reaching one index through several sections."""

    @pytest.mark.asyncio
    async def test_event_and_state_with_same_name(self):
        bot = BotDefinition(
            events={"myThing": EventDefinition(schema=ID_SCHEMA)},
            states={"myThing": StateDefinition(schema=ID_SCHEMA, scope=StateScope.BOT)},
        )
        with pytest.raises(NameCollisionError) as exc_info:
            await generate_typings(bot, IMPLEMENTATION)
        assert exc_info.value.identifier == "MyThing"
        assert exc_info.value.sources == [
            f"{IMPLEMENTATION}/events/my-thing.ts",
            f"{IMPLEMENTATION}/states/my-thing.ts",
        ]

    @pytest.mark.asyncio
    async def test_event_named_like_configuration(self):
        bot = BotDefinition(events={"configuration": EventDefinition(schema=ID_SCHEMA)})
        with pytest.raises(NameCollisionError, match="Configuration"):
            await generate_typings(bot, IMPLEMENTATION)

    @pytest.mark.asyncio
    async def test_event_named_like_secret_type(self):
        integration = IntegrationDefinition(
            name="x",
            version="1",
            events={"secret": EventDefinition(schema=ID_SCHEMA)},
            secrets=("API_TOKEN",),
        )
        with pytest.raises(NameCollisionError) as exc_info:
            await generate_typings(integration, IMPLEMENTATION)
        assert exc_info.value.identifier == "Secret"

    @pytest.mark.asyncio
    async def test_nested_declaration_names(self):
        """A nested declaration can clash with another entry's type."""
        bot = BotDefinition(
            events={
                "order": EventDefinition(
                    schema={
                        "type": "object",
                        "properties": {
                            "item": {"type": "object", "properties": {"sku": {"type": "string"}}}
                        },
                    }
                ),
                "orderItem": EventDefinition(schema=ID_SCHEMA),
            }
        )
        with pytest.raises(NameCollisionError, match="OrderItem"):
            await generate_typings(bot, IMPLEMENTATION)

    @pytest.mark.asyncio
    async def test_channel_message_types(self):
        message = MessageDefinition(schema=ID_SCHEMA)
        integration = IntegrationDefinition(
            name="x",
            version="1",
            channels={
                "foo": ChannelDefinition(messages={"barBaz": message}),
                "fooBar": ChannelDefinition(messages={"baz": message}),
            },
        )
        with pytest.raises(NameCollisionError) as exc_info:
            await generate_typings(integration, IMPLEMENTATION)
        assert exc_info.value.identifier == "FooBarBaz"

    @pytest.mark.asyncio
    async def test_distinct_names_generate(self, bot, integration):
        assert await generate_typings(bot, IMPLEMENTATION)
        assert await generate_typings(integration, IMPLEMENTATION)

    @pytest.mark.asyncio
    async def test_reported_as_failed_result(self):
        bot = BotDefinition(
            events={"myThing": EventDefinition(schema=ID_SCHEMA)},
            states={"myThing": StateDefinition(schema=ID_SCHEMA, scope=StateScope.BOT)},
        )
        result = await generate_from_definition(bot)
        assert not result.success
        assert result.files == []
        assert isinstance(result.exception, NameCollisionError)


class TestGenerationResult:
    """Tests for the error-reporting entry point."""

    @pytest.mark.asyncio
    async def test_success(self, bot):
        result = await generate_from_definition(bot)
        assert result.success
        assert result.metadata["file_count"] == len(result.files)
        assert result.metadata["paths"][0] == f"{IMPLEMENTATION}/index.ts"

    @pytest.mark.asyncio
    async def test_failure_carries_no_files(self):
        integration = IntegrationDefinition(name="x", version="1", secrets=("clientId",))
        result = await generate_from_definition(integration)
        assert not result.success
        assert result.files == []
        assert isinstance(result.exception, InvalidSecretFormatError)
        assert "SCREAMING_SNAKE_CASE" in result.error_message

    @pytest.mark.asyncio
    async def test_schema_failure(self):
        bot = BotDefinition(events={"bad": EventDefinition(schema={"not": {}})})
        result = await generate_from_definition(bot)
        assert not result.success
        assert result.exception.context["location"] == "#"


class TestIntegrationInstance:
    """Tests for installed integration instances."""

    @pytest.mark.asyncio
    async def test_files_and_sidecar(self, instance, config):
        files = await generate_integration_instance(instance, INSTALL, config=config)
        base = f"{INSTALL}/notion"

        assert [f.path for f in files] == [
            f"{base}/index.ts",
            f"{base}/configuration/index.ts",
            f"{base}/configuration/configuration.ts",
            f"{base}/events/index.ts",
            f"{base}/states/index.ts",
            f"{base}/actions/index.ts",
            f"{base}/actions/add-page.ts",
            f"{base}/channels/index.ts",
            f"{base}/integration.json",
        ]
        assert json.loads(files[-1].content) == {
            "name": "notion",
            "version": "1.0.0",
            "id": "intver_123",
        }

    @pytest.mark.asyncio
    async def test_index_declares_metadata_and_aggregate(self, instance, config, header):
        files = await generate_integration_instance(instance, INSTALL, config=config)
        assert files[0].content == (
            f"{header}\n"
            "\n"
            "import type { Configuration } from './configuration/index'\n"
            "import type { Events } from './events/index'\n"
            "import type { States } from './states/index'\n"
            "import type { Actions } from './actions/index'\n"
            "import type { Channels } from './channels/index'\n"
            "\n"
            'export const name = "notion"\n'
            'export const version = "1.0.0"\n'
            'export const id = "intver_123"\n'
            "\n"
            "export * from './configuration/index'\n"
            "export * from './events/index'\n"
            "export * from './states/index'\n"
            "export * from './actions/index'\n"
            "export * from './channels/index'\n"
            "\n"
            "export type TNotion = {\n"
            "  configuration: Configuration\n"
            "  events: Events\n"
            "  states: States\n"
            "  actions: Actions\n"
            "  channels: Channels\n"
            "}\n"
        )

    @pytest.mark.asyncio
    async def test_directory_is_kebab_case(self, config):
        instance = InstalledIntegration(id="1", name="slackBot", version="2.0.0")
        files = await generate_integration_instance(instance, INSTALL, config=config)
        assert files[0].path == f"{INSTALL}/slack-bot/index.ts"
        assert "export type TSlackBot = {" in files[0].content

    @pytest.mark.asyncio
    async def test_requires_an_instance(self, bot):
        with pytest.raises(DefinitionError):
            await generate_integration_instance(bot, INSTALL)


class TestBotIndex:
    """Tests for the hand-composed bot index."""

    @pytest.mark.asyncio
    async def test_content(self, config, header, instance):
        files = await generate_bot_index(
            IMPLEMENTATION, INSTALL, [instance, "slack-bot"], config=config
        )
        assert [f.path for f in files] == ["index.ts"]
        assert files[0].content == (
            f"{header}\n"
            "\n"
            "import * as sdk from '@botpress/sdk'\n"
            "import type * as implementation from './.botpress/implementation/index'\n"
            "import type * as notion from './.botpress/integrations/notion/index'\n"
            "import type * as slackBot from './.botpress/integrations/slack-bot/index'\n"
            "\n"
            "export * as notion from './.botpress/integrations/notion/index'\n"
            "export * as slackBot from './.botpress/integrations/slack-bot/index'\n"
            "\n"
            "export type TBot = {\n"
            "  integrations: {\n"
            "    notion: notion.TNotion\n"
            "    slackBot: slackBot.TSlackBot\n"
            "  }\n"
            "  configuration: implementation.Configuration\n"
            "  states: implementation.States\n"
            "  events: implementation.Events\n"
            "}\n"
            "\n"
            "export class Bot extends sdk.Bot<TBot> {}\n"
        )

    @pytest.mark.asyncio
    async def test_without_instances(self, config):
        files = await generate_bot_index(IMPLEMENTATION, INSTALL, [], config=config)
        content = files[0].content
        assert "export * as" not in content
        assert "export class Bot extends sdk.Bot<TBot> {}\n" in content

    @pytest.mark.asyncio
    async def test_identifier_collision(self, config):
        with pytest.raises(NameCollisionError) as exc_info:
            await generate_bot_index(IMPLEMENTATION, INSTALL, ["slack-bot", "slack_bot"], config=config)
        assert exc_info.value.identifier == "slackBot"
        assert exc_info.value.sources == ["slack-bot", "slack_bot"]

    def test_instance_names(self):
        assert instance_identifier("slack-bot") == "slackBot"
        assert instance_type_name("slack-bot") == "TSlackBot"


class TestIntegrationIndex:
    @pytest.mark.asyncio
    async def test_reexports_implementation(self, config, header):
        files = await generate_integration_index(IMPLEMENTATION, config=config)
        assert [f.path for f in files] == ["index.ts"]
        assert files[0].content == (
            f"{header}\n\nexport * from './.botpress/implementation/index'\n"
        )
