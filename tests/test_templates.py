"""Tests for botgen.codegen.core.templates"""

import pytest

from botgen.codegen.core.templates import TemplateError, create_template_engine
from botgen.codegen.languages.typescript import TypeScriptGenerator


class TestTemplateEngine:
    """Tests for the Jinja2 wrapper."""

    def test_in_memory_templates(self):
        engine = create_template_engine()
        engine.add_template("greeting.j2", "export const {{ name | camel_case }} = 1\n")
        assert engine.template_exists("greeting.j2")
        # Jinja drops a single trailing newline
        assert engine.render_template("greeting.j2", {"name": "my-value"}) == (
            "export const myValue = 1"
        )

    def test_case_filters(self):
        engine = create_template_engine()
        rendered = engine.render_string(
            "{{ n | snake_case }} {{ n | pascal_case }} {{ n | kebab_case }}", {"n": "userProfile"}
        )
        assert rendered == "user_profile UserProfile user-profile"

    def test_undefined_variables_fail(self):
        engine = create_template_engine()
        with pytest.raises(TemplateError):
            engine.render_string("{{ missing }}", {})

    def test_missing_template(self):
        with pytest.raises(TemplateError):
            create_template_engine().render_template("absent.j2", {})

    def test_typescript_templates_are_shipped(self, config):
        generator = TypeScriptGenerator(config)
        for name in (
            "declarations.ts.j2",
            "module_index.ts.j2",
            "secrets.ts.j2",
            "bot_index.ts.j2",
            "integration_index.ts.j2",
        ):
            assert generator.template_exists(name)
