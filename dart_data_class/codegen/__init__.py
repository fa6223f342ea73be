"""
Dart Data Class Code Generation Module

Generates data class members for Dart source and Dart classes from JSON.
"""

from typing import Any, Dict, Optional, Union

from .core.generator import (
    CodeGenerator,
    ConfirmCallback,
    GeneratedFile,
    GeneratorError,
    GenerationResult,
    generate_code,
    generate_json_code,
)
from .core.config import GeneratorConfig, ConfigManager, ProjectContext, load_config
from .languages.dart import DartDataClassGenerator, MemberKind

# Version info
__version__ = "0.1.0"


# Convenience functions
def generate_data_classes(
    text: str,
    config: Union[GeneratorConfig, Dict[str, Any], None] = None,
    context: Optional[ProjectContext] = None,
    selector: Optional[MemberKind] = None,
    class_name: Optional[str] = None,
    confirm: Optional[ConfirmCallback] = None,
) -> GenerationResult:
    """
    Generate data class members for the classes of a Dart buffer.

    Args:
        text: Dart source text
        config: Generator configuration or dict of overrides
        context: Project package name and flavor
        selector: Generate only this member
        class_name: Restrict generation to one class
        confirm: Asked before existing members are overridden

    Returns:
        GenerationResult with edits and the edited text
    """
    generator = DartDataClassGenerator(config, context)
    return generate_code(
        generator, text, selector=selector, class_name=class_name, confirm=confirm
    )


def generate_from_json(
    source: Any,
    root_name: str,
    config: Union[GeneratorConfig, Dict[str, Any], None] = None,
    context: Optional[ProjectContext] = None,
    separate: Optional[bool] = None,
    confirm: Optional[ConfirmCallback] = None,
) -> GenerationResult:
    """
    Generate Dart data classes from a JSON document.

    Args:
        source: JSON text or decoded value
        root_name: Name of the root class
        config: Generator configuration or dict of overrides
        context: Project package name and flavor
        separate: Force one file per class (True) or a single file (False)
        confirm: Asked whether to separate when the policy is ``ask``

    Returns:
        GenerationResult with generated files
    """
    generator = DartDataClassGenerator(config, context)
    return generate_json_code(
        generator, source, root_name, separate=separate, confirm=confirm
    )


# Export main interfaces
__all__ = [
    "CodeGenerator",
    "ConfigManager",
    "DartDataClassGenerator",
    "GeneratedFile",
    "GeneratorConfig",
    "GeneratorError",
    "GenerationResult",
    "MemberKind",
    "ProjectContext",
    "generate_data_classes",
    "generate_from_json",
    "load_config",
]
