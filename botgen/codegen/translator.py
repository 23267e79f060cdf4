"""
Schema translation facade used by the section builders.

Chains ``to_intermediate`` and the generator's ``to_type_source`` so a
builder turns a JSON Schema into declaration source in one await.
"""

from typing import Any, Optional, Sequence

from ..logging_config import get_logger
from .core.config import GeneratorConfig
from .core.generator import CodeGenerator
from .core.schema import SchemaNode, SchemaResolver, to_intermediate

logger = get_logger(__name__)


class SchemaTranslator:
    """Translate JSON Schemas to named type declarations."""

    def __init__(
        self,
        generator: CodeGenerator,
        resolver: Optional[SchemaResolver] = None,
        config: Optional[GeneratorConfig] = None,
    ):
        """
        Initialize translator.

        Args:
            generator: Language generator rendering the declarations
            resolver: Coroutine resolving external ``$ref`` URIs
            config: Generation settings, the generator's when omitted
        """
        self.generator = generator
        self.resolver = resolver
        self.config = config or generator.config

    async def to_intermediate(self, schema: Any) -> SchemaNode:
        return await to_intermediate(
            schema, resolver=self.resolver, max_ref_depth=self.config.max_ref_depth
        )

    async def translate(self, schema: Any, type_name: str, doc: Sequence[str] = ()) -> str:
        """
        Translate ``schema`` into declaration source named ``type_name``.

        Args:
            schema: JSON Schema document
            type_name: Name of the top-level declaration
            doc: Extra documentation lines for the top-level declaration

        Returns:
            Declaration source text (no file header)
        """
        node = await self.to_intermediate(schema)
        logger.debug("Translating %s (depth %d)", type_name, node.depth())
        return self.generator.to_type_source(node, type_name, doc)
