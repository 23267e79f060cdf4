"""Tests for botgen.definition"""

import dataclasses

import pytest

from botgen import (
    BotDefinition,
    InstalledIntegration,
    IntegrationDefinition,
    load_definition,
    load_installed_integration,
)
from botgen.codegen.core.errors import DefinitionError
from botgen.definition import ConfigurationDefinition, EMPTY_OBJECT_SCHEMA, StateScope

SCHEMA = {"type": "object", "properties": {"id": {"type": "string"}}}


class TestLoadBot:
    """Tests for loading bot definitions."""

    def test_kind_defaults_to_bot(self):
        definition = load_definition({})
        assert isinstance(definition, BotDefinition)
        assert definition.kind == "bot"
        assert definition.configuration.schema == EMPTY_OBJECT_SCHEMA
        assert dict(definition.events) == {}

    def test_sections(self):
        definition = load_definition(
            {
                "configuration": {"schema": SCHEMA},
                "events": {"messageCreated": {"schema": SCHEMA, "title": "Created"}},
                "states": {
                    "myState": {"type": "user", "schema": SCHEMA, "expiry": 60000},
                    "legacy": {"scope": "bot", "schema": SCHEMA},
                },
            }
        )
        assert definition.configuration.schema == SCHEMA
        assert definition.events["messageCreated"].title == "Created"
        assert definition.states["myState"].scope == StateScope.USER
        assert definition.states["myState"].expiry == 60000
        assert definition.states["legacy"].scope == StateScope.BOT
        assert list(definition.states) == ["myState", "legacy"]

    def test_configuration_defaults_to_empty_object(self):
        configuration = ConfigurationDefinition()
        assert configuration.schema == EMPTY_OBJECT_SCHEMA
        assert BotDefinition().configuration.schema == EMPTY_OBJECT_SCHEMA

    def test_definitions_are_immutable(self):
        definition = load_definition({"events": {"a": {"schema": SCHEMA}}})
        with pytest.raises(dataclasses.FrozenInstanceError):
            definition.events = {}
        with pytest.raises(TypeError):
            definition.events["b"] = definition.events["a"]


class TestLoadIntegration:
    """Tests for loading integration definitions."""

    def test_full_integration(self):
        definition = load_definition(
            {
                "kind": "integration",
                "name": "notion",
                "version": "0.1.0",
                "actions": {
                    "addPage": {"input": {"schema": SCHEMA}, "output": {"schema": SCHEMA}}
                },
                "channels": {
                    "comments": {
                        "messages": {"text": {"schema": SCHEMA}},
                        "tags": {"thread": {"title": "Thread"}},
                        "conversation": {"tags": {"id": {}}},
                        "message": {"tags": {"id": {"description": "Comment id"}}},
                    }
                },
                "secrets": ["CLIENT_ID", "CLIENT_SECRET"],
            }
        )
        assert isinstance(definition, IntegrationDefinition)
        assert definition.actions["addPage"].input == SCHEMA

        channel = definition.channels["comments"]
        assert channel.messages["text"].schema == SCHEMA
        assert channel.tags["thread"].title == "Thread"
        assert list(channel.conversation_tags) == ["id"]
        assert channel.message_tags["id"].description == "Comment id"
        assert definition.secrets == ("CLIENT_ID", "CLIENT_SECRET")

    def test_secret_format_is_not_checked_on_load(self):
        definition = load_definition(
            {"kind": "integration", "name": "x", "version": "1", "secrets": ["clientId"]}
        )
        assert definition.secrets == ("clientId",)

    def test_installed_integration(self):
        instance = load_installed_integration(
            {"id": "intver_1", "name": "notion", "version": "1.0.0", "events": {"e": {"schema": SCHEMA}}}
        )
        assert isinstance(instance, InstalledIntegration)
        assert instance.kind == "instance"
        assert not hasattr(instance, "secrets")


class TestLoadErrors:
    """Tests for malformed definitions."""

    @pytest.mark.parametrize(
        "data,location",
        [
            ({"states": {"myState": {"type": "global", "schema": SCHEMA}}}, "states.myState.type"),
            ({"states": {"s": {"type": "user", "schema": SCHEMA, "expiry": -1}}}, "states.s.expiry"),
            ({"states": {"s": {"type": "user", "schema": SCHEMA, "expiry": True}}}, "states.s.expiry"),
            ({"events": {"e": {}}}, "events.e.schema"),
            ({"events": {"e": {"schema": SCHEMA, "title": 3}}}, "events.e.title"),
            ({"events": []}, "events"),
            ({"kind": "plugin"}, "kind"),
            ({"kind": "integration", "version": "1"}, "name"),
            ({"kind": "integration", "name": "x", "version": "1", "secrets": "A"}, "secrets"),
            ({"kind": "integration", "name": "x", "version": "1", "secrets": ["A", 2]}, "secrets.1"),
            (
                {"kind": "integration", "name": "x", "version": "1", "actions": {"a": {"input": {}}}},
                "actions.a.input.schema",
            ),
            (
                {
                    "kind": "integration",
                    "name": "x",
                    "version": "1",
                    "channels": {"c": {"messages": {"m": {"schema": 1}}}},
                },
                "channels.c.messages.m.schema",
            ),
        ],
    )
    def test_location_is_reported(self, data, location):
        with pytest.raises(DefinitionError) as exc_info:
            load_definition(data)
        assert exc_info.value.location == location
        assert exc_info.value.context == {"location": location}

    def test_invalid_state_type_message(self):
        with pytest.raises(DefinitionError, match="expected one of conversation, user, bot"):
            load_definition({"states": {"myState": {"type": "global", "schema": SCHEMA}}})

    def test_root_must_be_mapping(self):
        with pytest.raises(DefinitionError):
            load_definition(["not", "a", "mapping"])
