"""
Bot and integration definitions.

Definitions are immutable descriptions of what a bot or integration
exposes: configuration, events, states, actions, channels and secrets.
Schemas are plain JSON Schema dictionaries.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Tuple, TypeVar, Union

from .codegen.core.errors import DefinitionError
from .logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

EMPTY_OBJECT_SCHEMA: Mapping[str, Any] = MappingProxyType(
    {"type": "object", "properties": {}, "additionalProperties": False}
)


def _frozen_map(value: Optional[Mapping[str, T]] = None) -> Mapping[str, T]:
    return MappingProxyType(dict(value or {}))


class StateScope(Enum):
    """Where a state is stored."""

    CONVERSATION = "conversation"
    USER = "user"
    BOT = "bot"


@dataclass(frozen=True)
class TagDefinition:
    title: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class ConfigurationDefinition:
    schema: Mapping[str, Any] = field(default_factory=lambda: EMPTY_OBJECT_SCHEMA)


@dataclass(frozen=True)
class EventDefinition:
    schema: Mapping[str, Any]
    title: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class StateDefinition:
    schema: Mapping[str, Any]
    scope: StateScope
    expiry: Optional[int] = None  # milliseconds
    title: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class ActionDefinition:
    input: Mapping[str, Any]
    output: Mapping[str, Any]
    title: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class MessageDefinition:
    schema: Mapping[str, Any]
    title: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class ChannelDefinition:
    """A channel: its messages plus the tags carried by the channel,
    its conversations and its messages."""

    messages: Mapping[str, MessageDefinition] = field(default_factory=_frozen_map)
    tags: Mapping[str, TagDefinition] = field(default_factory=_frozen_map)
    conversation_tags: Mapping[str, TagDefinition] = field(default_factory=_frozen_map)
    message_tags: Mapping[str, TagDefinition] = field(default_factory=_frozen_map)


@dataclass(frozen=True)
class BotDefinition:
    kind: ClassVar[str] = "bot"

    configuration: ConfigurationDefinition = field(default_factory=ConfigurationDefinition)
    events: Mapping[str, EventDefinition] = field(default_factory=_frozen_map)
    states: Mapping[str, StateDefinition] = field(default_factory=_frozen_map)


@dataclass(frozen=True)
class IntegrationDefinition:
    kind: ClassVar[str] = "integration"

    name: str
    version: str
    configuration: ConfigurationDefinition = field(default_factory=ConfigurationDefinition)
    events: Mapping[str, EventDefinition] = field(default_factory=_frozen_map)
    states: Mapping[str, StateDefinition] = field(default_factory=_frozen_map)
    actions: Mapping[str, ActionDefinition] = field(default_factory=_frozen_map)
    channels: Mapping[str, ChannelDefinition] = field(default_factory=_frozen_map)
    secrets: Tuple[str, ...] = ()


@dataclass(frozen=True)
class InstalledIntegration:
    """A published integration installed into a bot. Carries no secrets."""

    kind: ClassVar[str] = "instance"

    id: str
    name: str
    version: str
    configuration: ConfigurationDefinition = field(default_factory=ConfigurationDefinition)
    events: Mapping[str, EventDefinition] = field(default_factory=_frozen_map)
    states: Mapping[str, StateDefinition] = field(default_factory=_frozen_map)
    actions: Mapping[str, ActionDefinition] = field(default_factory=_frozen_map)
    channels: Mapping[str, ChannelDefinition] = field(default_factory=_frozen_map)


Definition = Union[BotDefinition, IntegrationDefinition]


# Loading from plain mappings


def _require_mapping(value: Any, location: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DefinitionError(f"Expected an object at {location}", location)
    return value


def _optional_str(data: Mapping[str, Any], key: str, location: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise DefinitionError(f"Expected a string at {location}.{key}", f"{location}.{key}")
    return value


def _required_str(data: Mapping[str, Any], key: str, location: str) -> str:
    value = data.get(key)
    loc = f"{location}.{key}" if location else key
    if not isinstance(value, str) or not value:
        raise DefinitionError(f"Expected a non-empty string at {loc}", loc)
    return value


def _schema(data: Mapping[str, Any], key: str, location: str) -> Mapping[str, Any]:
    value = data.get(key)
    loc = f"{location}.{key}"
    if not isinstance(value, Mapping):
        raise DefinitionError(f"Expected a JSON schema at {loc}", loc)
    return value


def _entries(
    data: Mapping[str, Any], section: str, parse: Callable[[Mapping[str, Any], str], T]
) -> Mapping[str, T]:
    raw = data.get(section)
    if raw is None:
        return _frozen_map()
    raw = _require_mapping(raw, section)
    parsed: Dict[str, T] = {}
    for name, entry in raw.items():
        location = f"{section}.{name}"
        parsed[name] = parse(_require_mapping(entry, location), location)
    return _frozen_map(parsed)


def _parse_tags(data: Mapping[str, Any], location: str) -> Mapping[str, TagDefinition]:
    tags = {}
    for name, tag in _require_mapping(data, location).items():
        tag_location = f"{location}.{name}"
        tag = _require_mapping(tag or {}, tag_location)
        tags[name] = TagDefinition(
            title=_optional_str(tag, "title", tag_location),
            description=_optional_str(tag, "description", tag_location),
        )
    return _frozen_map(tags)


def _parse_configuration(data: Mapping[str, Any]) -> ConfigurationDefinition:
    raw = data.get("configuration")
    if raw is None:
        return ConfigurationDefinition()
    raw = _require_mapping(raw, "configuration")
    if "schema" not in raw:
        return ConfigurationDefinition()
    return ConfigurationDefinition(schema=_schema(raw, "schema", "configuration"))


def _parse_event(data: Mapping[str, Any], location: str) -> EventDefinition:
    return EventDefinition(
        schema=_schema(data, "schema", location),
        title=_optional_str(data, "title", location),
        description=_optional_str(data, "description", location),
    )


def _parse_state(data: Mapping[str, Any], location: str) -> StateDefinition:
    scope = data.get("type", data.get("scope"))
    try:
        state_scope = StateScope(scope)
    except ValueError:
        allowed = ", ".join(s.value for s in StateScope)
        raise DefinitionError(
            f"Invalid state type {scope!r} at {location}.type; expected one of {allowed}",
            f"{location}.type",
        ) from None

    expiry = data.get("expiry")
    if expiry is not None and (isinstance(expiry, bool) or not isinstance(expiry, int) or expiry < 0):
        raise DefinitionError(
            f"State expiry at {location}.expiry must be a non-negative integer", f"{location}.expiry"
        )

    return StateDefinition(
        schema=_schema(data, "schema", location),
        scope=state_scope,
        expiry=expiry,
        title=_optional_str(data, "title", location),
        description=_optional_str(data, "description", location),
    )


def _nested_schema(data: Mapping[str, Any], key: str, location: str) -> Mapping[str, Any]:
    # Action input and output are written as {"schema": {...}}
    value = _require_mapping(data.get(key), f"{location}.{key}")
    return _schema(value, "schema", f"{location}.{key}")


def _parse_action(data: Mapping[str, Any], location: str) -> ActionDefinition:
    return ActionDefinition(
        input=_nested_schema(data, "input", location),
        output=_nested_schema(data, "output", location),
        title=_optional_str(data, "title", location),
        description=_optional_str(data, "description", location),
    )


def _parse_message(data: Mapping[str, Any], location: str) -> MessageDefinition:
    return MessageDefinition(
        schema=_schema(data, "schema", location),
        title=_optional_str(data, "title", location),
        description=_optional_str(data, "description", location),
    )


def _parse_channel(data: Mapping[str, Any], location: str) -> ChannelDefinition:
    messages = {}
    for name, entry in _require_mapping(data.get("messages") or {}, f"{location}.messages").items():
        message_location = f"{location}.messages.{name}"
        messages[name] = _parse_message(_require_mapping(entry, message_location), message_location)

    def nested_tags(key: str) -> Mapping[str, TagDefinition]:
        section = data.get(key) or {}
        section = _require_mapping(section, f"{location}.{key}")
        return _parse_tags(section.get("tags") or {}, f"{location}.{key}.tags")

    return ChannelDefinition(
        messages=_frozen_map(messages),
        tags=_parse_tags(data.get("tags") or {}, f"{location}.tags"),
        conversation_tags=nested_tags("conversation"),
        message_tags=nested_tags("message"),
    )


def _parse_secrets(data: Mapping[str, Any]) -> Tuple[str, ...]:
    raw = data.get("secrets")
    if raw is None:
        return ()
    if isinstance(raw, (str, bytes)) or not isinstance(raw, (list, tuple)):
        raise DefinitionError("Expected a list of secret names at secrets", "secrets")
    for index, secret in enumerate(raw):
        if not isinstance(secret, str):
            raise DefinitionError(f"Expected a string at secrets.{index}", f"secrets.{index}")
    return tuple(raw)


def load_definition(data: Mapping[str, Any]) -> Definition:
    """
    Build a Definition from a plain mapping.

    The mapping's ``kind`` picks the shape; ``"bot"`` is assumed when it is
    missing. Format checks on secrets happen at generation time.

    Args:
        data: Definition as produced by an external loader

    Returns:
        BotDefinition or IntegrationDefinition

    Raises:
        DefinitionError: On malformed input, with the offending location
    """
    data = _require_mapping(data, "<root>")
    kind = data.get("kind", BotDefinition.kind)

    if kind == BotDefinition.kind:
        definition = BotDefinition(
            configuration=_parse_configuration(data),
            events=_entries(data, "events", _parse_event),
            states=_entries(data, "states", _parse_state),
        )
    elif kind == IntegrationDefinition.kind:
        definition = IntegrationDefinition(
            name=_required_str(data, "name", ""),
            version=_required_str(data, "version", ""),
            configuration=_parse_configuration(data),
            events=_entries(data, "events", _parse_event),
            states=_entries(data, "states", _parse_state),
            actions=_entries(data, "actions", _parse_action),
            channels=_entries(data, "channels", _parse_channel),
            secrets=_parse_secrets(data),
        )
    else:
        raise DefinitionError(f"Unknown definition kind {kind!r}", "kind")

    logger.debug("Loaded %s definition", definition.kind)
    return definition


def load_installed_integration(data: Mapping[str, Any]) -> InstalledIntegration:
    """
    Build an InstalledIntegration from a plain mapping.

    Raises:
        DefinitionError: On malformed input, with the offending location
    """
    data = _require_mapping(data, "<root>")
    return InstalledIntegration(
        id=_required_str(data, "id", ""),
        name=_required_str(data, "name", ""),
        version=_required_str(data, "version", ""),
        configuration=_parse_configuration(data),
        events=_entries(data, "events", _parse_event),
        states=_entries(data, "states", _parse_state),
        actions=_entries(data, "actions", _parse_action),
        channels=_entries(data, "channels", _parse_channel),
    )
