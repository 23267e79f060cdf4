"""Tests for botgen.codegen.registry"""

import pytest

from botgen.codegen.registry import (
    RegistryError,
    SectionRegistry,
    get_registry,
    list_supported_sections,
    register_builder,
)
from botgen.codegen.sections import EventsBuilder, SectionBuilder, StatesBuilder


class TestSectionRegistry:
    """Tests for builder registration."""

    def test_default_sections(self):
        assert list_supported_sections() == [
            "actions",
            "channels",
            "configuration",
            "events",
            "secrets",
            "states",
        ]

    def test_global_registry_is_shared(self):
        assert get_registry() is get_registry()

    def test_register_skips_existing_unless_replaced(self):
        registry = SectionRegistry()
        registry.register("events", EventsBuilder)
        registry.register("events", StatesBuilder)
        assert registry.get_builder_class("events") is EventsBuilder

        registry.register("EVENTS", StatesBuilder, replace=True)
        assert registry.get_builder_class("events") is StatesBuilder

    def test_rejects_non_builders(self):
        with pytest.raises(RegistryError):
            SectionRegistry().register("events", dict)

    def test_unknown_section(self):
        registry = SectionRegistry()
        registry.register("events", EventsBuilder)
        with pytest.raises(RegistryError, match="Available: events"):
            registry.get_builder_class("widgets")

    def test_unregister(self):
        registry = SectionRegistry()
        registry.register("events", EventsBuilder)
        registry.unregister("events")
        assert not registry.is_supported("events")

    def test_create_builder(self, translator):
        builder = get_registry().create_builder("states", translator)
        assert isinstance(builder, SectionBuilder)
        assert builder.config is translator.config

    def test_section_info(self):
        info = get_registry().get_section_info("channels")
        assert info["class"] == "ChannelsBuilder"
        assert info["directory"] == "channels"

    def test_register_builder_in_global_registry(self):
        class WidgetsBuilder(EventsBuilder):
            name = "widgets"
            directory = "widgets"

        register_builder("widgets", WidgetsBuilder)
        try:
            assert "widgets" in list_supported_sections()
            assert get_registry().get_builder_class("widgets") is WidgetsBuilder

            # Existing registrations are kept unless replaced
            register_builder("widgets", StatesBuilder)
            assert get_registry().get_builder_class("widgets") is WidgetsBuilder
            register_builder("widgets", StatesBuilder, replace=True)
            assert get_registry().get_builder_class("widgets") is StatesBuilder
        finally:
            get_registry().unregister("widgets")

        assert "widgets" not in list_supported_sections()
