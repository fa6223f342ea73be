"""
Base generator interface for code generation targets.

Defines the error hierarchy, the generator contract and the result container
shared by the language generators.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from .config import GeneratorConfig, ProjectContext, load_config
from ...logging_config import get_logger

logger = get_logger(__name__)

# Asked before destructive steps: True accepts, False declines, None cancels
ConfirmCallback = Callable[[str], Optional[bool]]


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class MalformedInputError(GeneratorError):
    """The JSON input could not be parsed."""

    pass


class UnsupportedShapeError(GeneratorError):
    """The JSON input has a shape no class can be inferred from."""

    pass


class NoClassesFoundError(GeneratorError):
    """The buffer holds no class that members can be generated for."""

    pass


class UserCancelledError(GeneratorError):
    """A confirmation was cancelled; nothing further is applied."""

    pass


@dataclass
class GeneratedFile:
    """One output file of JSON conversion."""

    name: str
    content: str
    is_current_buffer: bool = False


class CodeGenerator(ABC):
    """Abstract base class for code generators."""

    def __init__(
        self,
        config: Union[GeneratorConfig, Dict[str, Any], None] = None,
        context: Optional[ProjectContext] = None,
    ):
        """
        Initialize generator with optional configuration.

        Args:
            config: Configuration, or a dict of overrides merged onto defaults
            context: Project facts (package name, flavor)
        """
        if isinstance(config, GeneratorConfig):
            self.config = config
        else:
            self.config = load_config(config)
        self.context = context or ProjectContext()

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files."""
        pass

    @abstractmethod
    def generate(self, text: str, **options) -> "GenerationResult":
        """
        Generate members for the classes of a source buffer.

        Args:
            text: Full buffer text

        Returns:
            Result holding the edits and the edited text
        """
        pass

    @abstractmethod
    def generate_from_json(self, source: Any, root_name: str, **options) -> "GenerationResult":
        """
        Generate classes from a JSON document.

        Args:
            source: JSON text or decoded value
            root_name: Name of the root class

        Returns:
            Result holding the generated files
        """
        pass

    def format_code(self, code: str) -> str:
        """
        Apply basic formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Code with trailing spaces and excess blank lines removed
        """
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 1:
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        code: str,
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
        edits: List[Any] = None,
        files: List[GeneratedFile] = None,
    ):
        """
        Initialize generation result.

        Args:
            code: Edited buffer text, or the content of the first generated file
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
            edits: Line edits applied to the buffer
            files: Generated files of JSON conversion
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.edits = edits or []
        self.files = files or []
        self.success = True
        self.error_message = None
        self.exception = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result

    @property
    def cancelled(self) -> bool:
        return isinstance(self.exception, UserCancelledError)


def generate_code(generator: CodeGenerator, text: str, **options) -> GenerationResult:
    """
    Generate members for a buffer with error handling.

    Args:
        generator: Code generator instance
        text: Buffer text
        **options: Passed to ``generator.generate``

    Returns:
        GenerationResult with edits, warnings and metadata
    """
    try:
        return generator.generate(text, **options)
    except GeneratorError as e:
        logger.info("Generation stopped: %s", e)
        return GenerationResult.error(str(e), exception=e)


def generate_json_code(
    generator: CodeGenerator, source: Any, root_name: str, **options
) -> GenerationResult:
    """
    Generate classes from JSON with error handling.

    Args:
        generator: Code generator instance
        source: JSON text or decoded value
        root_name: Name of the root class
        **options: Passed to ``generator.generate_from_json``

    Returns:
        GenerationResult with generated files
    """
    try:
        return generator.generate_from_json(source, root_name, **options)
    except GeneratorError as e:
        logger.info("JSON conversion stopped: %s", e)
        return GenerationResult.error(str(e), exception=e)
