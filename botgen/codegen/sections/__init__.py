"""
Definition section builders.

Each builder turns one section of a bot or integration definition into a
module subtree.
"""

from .base import SectionBuilder, entry_doc
from .configuration import ConfigurationBuilder
from .events import EventsBuilder
from .states import StatesBuilder
from .actions import ActionsBuilder
from .channels import ChannelsBuilder
from .secrets import (
    SecretsBuilder,
    secret_env_mapping,
    secret_env_variable_name,
    validate_secrets,
)

__all__ = [
    "SectionBuilder",
    "entry_doc",
    "ConfigurationBuilder",
    "EventsBuilder",
    "StatesBuilder",
    "ActionsBuilder",
    "ChannelsBuilder",
    "SecretsBuilder",
    "secret_env_mapping",
    "secret_env_variable_name",
    "validate_secrets",
]
