"""
Secrets section.

Secrets are injected into the integration through environment variables.
The variable for a secret is its name under a fixed prefix, so
``CLIENT_ID`` is read from ``SECRET_CLIENT_ID``.
"""

from collections import Counter
from typing import Dict, Sequence

from ...logging_config import get_logger
from ..core.config import DEFAULT_SECRET_ENV_PREFIX
from ..core.errors import DuplicateSecretError, InvalidSecretFormatError
from ..core.module import Module
from ..core.naming import is_screaming_snake_case
from .base import SectionBuilder

logger = get_logger(__name__)


def secret_env_variable_name(secret: str, prefix: str = DEFAULT_SECRET_ENV_PREFIX) -> str:
    """Environment variable a secret is injected through."""
    return f"{prefix}{secret}"


def validate_secrets(secrets: Sequence[str]) -> None:
    """
    Check secret names: SCREAMING_SNAKE_CASE first, then uniqueness.

    Raises:
        InvalidSecretFormatError: A name is not SCREAMING_SNAKE_CASE
        DuplicateSecretError: A name is declared more than once
    """
    for secret in secrets:
        if not is_screaming_snake_case(secret):
            raise InvalidSecretFormatError(secret)

    for secret, count in Counter(secrets).items():
        if count > 1:
            raise DuplicateSecretError(secret, count)


def secret_env_mapping(
    secrets: Sequence[str], prefix: str = DEFAULT_SECRET_ENV_PREFIX
) -> Dict[str, str]:
    """Validate ``secrets`` and map each to its environment variable, in declaration order."""
    validate_secrets(secrets)
    return {secret: secret_env_variable_name(secret, prefix) for secret in secrets}


class SecretsBuilder(SectionBuilder):
    name = "secrets"
    directory = "secrets"

    async def create(self, section: Sequence[str]) -> Module:
        mapping = secret_env_mapping(section, self.config.secret_env_prefix)
        logger.debug("Mapped %d secret(s)", len(mapping))
        content = self.generator.render_secrets(mapping)
        return Module(
            "Secrets",
            path=self.config.index_file,
            content=content,
            names=self.generator.exported_names(content),
        )
