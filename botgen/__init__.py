"""
botgen: typings generation for bots and integrations.

Turns bot and integration definitions into TypeScript declaration files
and re-export indexes, returned as an in-memory file list.
"""

from .definition import (
    BotDefinition,
    IntegrationDefinition,
    InstalledIntegration,
    load_definition,
    load_installed_integration,
)
from .logging_config import get_logger, setup_logging

__version__ = "0.1.0"

__all__ = [
    "BotDefinition",
    "IntegrationDefinition",
    "InstalledIntegration",
    "load_definition",
    "load_installed_integration",
    "get_logger",
    "setup_logging",
]
