"""Tests for botgen.codegen.core.naming"""

import pytest

from botgen.codegen.core.naming import (
    NameSanitizer,
    NamingCase,
    is_identifier,
    is_screaming_snake_case,
    quote_property,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_snake_case,
)
from botgen.codegen.languages.typescript.naming import create_typescript_sanitizer


class TestCaseConversion:
    """Tests for case conversion helpers."""

    @pytest.mark.parametrize(
        "name,snake,camel,pascal,kebab",
        [
            ("messageCreated", "message_created", "messageCreated", "MessageCreated", "message-created"),
            ("user-profile", "user_profile", "userProfile", "UserProfile", "user-profile"),
            ("HTTPServer", "http_server", "httpServer", "HttpServer", "http-server"),
            ("slack bot", "slack_bot", "slackBot", "SlackBot", "slack-bot"),
            ("addPage2", "add_page2", "addPage2", "AddPage2", "add-page2"),
        ],
    )
    def test_conversions(self, name, snake, camel, pascal, kebab):
        assert to_snake_case(name) == snake
        assert to_camel_case(name) == camel
        assert to_pascal_case(name) == pascal
        assert to_kebab_case(name) == kebab


class TestPredicates:
    def test_screaming_snake_case(self):
        assert is_screaming_snake_case("CLIENT_ID")
        assert is_screaming_snake_case("API2_KEY")
        assert not is_screaming_snake_case("clientId")
        assert not is_screaming_snake_case("CLIENT__ID")
        assert not is_screaming_snake_case("")

    def test_identifier_and_quoting(self):
        assert is_identifier("$id")
        assert not is_identifier("content-type")
        assert quote_property("name") == "name"
        assert quote_property("content-type") == "'content-type'"
        assert quote_property("it's") == "'it\\'s'"

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("a\nb", "'a\\nb'"),
            ("tab\there", "'tab\\there'"),
            ("back\\slash", "'back\\\\slash'"),
            ("bell\x07", "'bell\\x07'"),
            ("line\u2028sep", "'line\\u2028sep'"),
            ("say \"hi\"", "'say \"hi\"'"),
        ],
    )
    def test_quoted_keys_are_valid_literals(self, name, expected):
        assert quote_property(name) == expected

    def test_double_quote_style(self):
        assert quote_property("say \"hi\"", quote='"') == '"say \\"hi\\""'


class TestNameSanitizer:
    """Tests for sanitization and unique name allocation."""

    def test_sanitize_is_pure(self):
        sanitizer = NameSanitizer()
        assert sanitizer.sanitize_name("user", NamingCase.PASCAL_CASE) == "User"
        assert sanitizer.sanitize_name("user", NamingCase.PASCAL_CASE) == "User"

    def test_claim_appends_counter_from_two(self):
        sanitizer = NameSanitizer()
        assert sanitizer.claim_name("order item") == "OrderItem"
        assert sanitizer.claim_name("order-item") == "OrderItem2"
        assert sanitizer.claim_name("orderItem") == "OrderItem3"

    def test_reset(self):
        sanitizer = NameSanitizer()
        sanitizer.claim_name("a")
        sanitizer.reset_used_names()
        assert sanitizer.claim_name("a") == "A"

    def test_empty_and_numeric_names(self):
        sanitizer = NameSanitizer()
        assert sanitizer.sanitize_name("???", NamingCase.SNAKE_CASE) == "field"
        assert sanitizer.sanitize_name("2fa", NamingCase.SNAKE_CASE) == "_2fa"

    def test_typescript_reserved_and_builtin_names(self):
        sanitizer = create_typescript_sanitizer()
        assert sanitizer.sanitize_name("class", NamingCase.CAMEL_CASE) == "class_"
        assert sanitizer.sanitize_name("promise", NamingCase.PASCAL_CASE) == "Promise_"
        assert sanitizer.sanitize_name("message", NamingCase.PASCAL_CASE) == "Message"
