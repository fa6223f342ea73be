"""
Dart data class generator.

Generates constructors, copyWith, map/JSON codecs, toString and equality
members for Dart classes, and infers Dart classes from JSON documents.
"""

from .codegen import (
    DartDataClassGenerator,
    GenerationResult,
    GeneratorConfig,
    MemberKind,
    ProjectContext,
    generate_data_classes,
    generate_from_json,
)

__version__ = "0.1.0"

__all__ = [
    "DartDataClassGenerator",
    "GenerationResult",
    "GeneratorConfig",
    "MemberKind",
    "ProjectContext",
    "generate_data_classes",
    "generate_from_json",
]
