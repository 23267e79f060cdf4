"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Dict, List, Optional, Sequence
from pathlib import Path

from ...logging_config import get_logger
from .config import GeneratorConfig, load_config
from .errors import GeneratorError
from .module import File, IndexView
from .naming import to_pascal_case
from .schema import SchemaNode
from .templates import TemplateEngine, create_template_engine

logger = get_logger(__name__)


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or load_config()
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(self.get_template_directory())

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'typescript')."""
        pass

    @property
    def file_extension(self) -> str:
        """Return the file extension for generated files."""
        return self.config.file_extension

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    def type_name(self, name: str) -> str:
        """Declaration name for a definition entry."""
        return to_pascal_case(name)

    @abstractmethod
    def to_type_source(self, node: SchemaNode, type_name: str, doc: Sequence[str] = ()) -> str:
        """
        Emit named type declarations equivalent to ``node``.

        Args:
            node: Intermediate schema representation
            type_name: Name of the top-level declaration
            doc: Extra documentation lines for the top-level declaration

        Returns:
            Declaration source text
        """
        pass

    @abstractmethod
    def render_index(self, view: IndexView) -> str:
        """Render the computed content of a re-export or mixed module."""
        pass

    @abstractmethod
    def exported_names(self, source: str) -> List[str]:
        """Names declared and exported by generated ``source``, in order."""
        pass

    def render_file(self, body: str) -> str:
        """Prefix ``body`` with the generated-file header and normalize it."""
        parts = [self.config.header, body] if self.config.header else [body]
        return self.format_code("\n\n".join(p.strip("\n") for p in parts))

    def format_code(self, code: str) -> str:
        """
        Apply basic formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code ending with a single newline
        """
        # Basic cleanup - remove excessive blank lines
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 1:  # Allow max 1 consecutive blank line
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with context.

        Args:
            template_name: Template file name
            context: Template variables

        Returns:
            Rendered content
        """
        return self.template_engine.render_template(template_name, context)

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        return self.template_engine.template_exists(template_name)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, files: List[File], warnings: List[str] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generation result.

        Args:
            files: Generated files
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.files = files
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[GeneratorError] = None

    @classmethod
    def error(cls, message: str, exception: GeneratorError = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(files=[])
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


async def run_generation(generation: Awaitable[List[File]]) -> GenerationResult:
    """
    Await a generation coroutine, converting generator errors into a result.

    All-or-nothing: a failed result never carries files. Exceptions that are
    not GeneratorError propagate.

    Args:
        generation: Coroutine returning the generated file list

    Returns:
        GenerationResult with files and metadata, or the error
    """
    try:
        files = await generation
    except GeneratorError as e:
        logger.error("Code generation failed: %s", e.message)
        return GenerationResult.error(f"Code generation failed: {e.message}", exception=e)

    metadata = {
        "file_count": len(files),
        "paths": [f.path for f in files],
    }
    return GenerationResult(files, metadata=metadata)
