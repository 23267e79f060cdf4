"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field, fields

from ...logging_config import get_logger

logger = get_logger(__name__)

GENERATED_HEADER = (
    "/* eslint-disable */\n"
    "/* tslint:disable */\n"
    "// This file is generated. Do not edit it manually."
)

DEFAULT_SECRET_ENV_PREFIX = "SECRET_"


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""
    pass


@dataclass
class GeneratorConfig:
    """Configuration shared by the generator, builders and composition."""

    # Output settings
    header: str = GENERATED_HEADER
    index_file: str = "index.ts"
    file_extension: str = ".ts"

    # Code style settings
    indent_size: int = 2
    add_comments: bool = True

    # Schema translation
    max_ref_depth: int = 16

    # Secrets are injected through environment variables named PREFIX + NAME
    secret_env_prefix: str = DEFAULT_SECRET_ENV_PREFIX

    # Installed integration instances
    sdk_package: str = "@botpress/sdk"
    instance_metadata_file: str = "integration.json"

    # Custom settings
    custom: Dict[str, Any] = field(default_factory=dict)

    @property
    def indent(self) -> str:
        return " " * self.indent_size


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._defaults: Dict[str, Any] = {
            "header": GENERATED_HEADER,
            "index_file": "index.ts",
            "file_extension": ".ts",
            "indent_size": 2,
            "add_comments": True,
            "max_ref_depth": 16,
            "secret_env_prefix": DEFAULT_SECRET_ENV_PREFIX,
        }

    def get_config(self, custom_config: Optional[Dict[str, Any]] = None,
                   config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
        """
        Get complete configuration.

        Args:
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration
        """
        # Start with defaults
        base_config = self._defaults.copy()

        # Load from file if provided
        if config_file:
            file_config = self._load_config_file(config_file)
            base_config.update(file_config)

        # Apply custom overrides
        if custom_config:
            base_config.update(custom_config)

        config = self._dict_to_config(base_config)
        for warning in self.validate_config(config):
            logger.warning("Configuration: %s", warning)
        return config

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == '.json':
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {str(e)}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {str(e)}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug("Loaded configuration file %s", path)
        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        # Extract known fields
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        # Add custom fields to the custom dict
        if custom_args:
            existing_custom = dict(config_args.get('custom', {}))
            existing_custom.update(custom_args)
            config_args['custom'] = existing_custom

        return GeneratorConfig(**config_args)

    def validate_config(self, config: GeneratorConfig) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        if not config.file_extension.startswith("."):
            warnings.append(f"file_extension should start with '.': {config.file_extension}")

        if not config.index_file.endswith(config.file_extension):
            warnings.append(
                f"index_file '{config.index_file}' does not use extension '{config.file_extension}'"
            )

        if config.indent_size < 1:
            warnings.append(f"Invalid indent_size: {config.indent_size}")

        if config.max_ref_depth < 1:
            warnings.append(f"max_ref_depth below 1 rejects every $ref: {config.max_ref_depth}")

        if config.secret_env_prefix and not config.secret_env_prefix.replace("_", "").isalnum():
            warnings.append(f"secret_env_prefix is not a valid env var prefix: {config.secret_env_prefix}")

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(custom_config: Optional[Dict[str, Any]] = None,
                config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration
    """
    manager = get_config_manager()
    return manager.get_config(custom_config, config_file)
