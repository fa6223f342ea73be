"""
Core code generation components.

Provides base classes and utilities used by the language generators.
"""

from .generator import (
    CodeGenerator,
    GeneratedFile,
    GeneratorError,
    GenerationResult,
    MalformedInputError,
    NoClassesFoundError,
    UnsupportedShapeError,
    UserCancelledError,
    generate_code,
    generate_json_code,
)
from .schema import ClassModel, FieldModel, NamedPart, split_top_level
from .naming import NameSanitizer, NamingCase, create_file_name
from .config import (
    ConfigError,
    ConfigManager,
    Flavor,
    GeneratorConfig,
    HashStrategy,
    ProjectContext,
    RequiredStyle,
    SeparatePolicy,
    load_config,
)
from .templates import TemplateEngine, TemplateError

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratedFile",
    "GeneratorError",
    "GenerationResult",
    "MalformedInputError",
    "NoClassesFoundError",
    "UnsupportedShapeError",
    "UserCancelledError",
    "generate_code",
    "generate_json_code",
    # Class model
    "ClassModel",
    "FieldModel",
    "NamedPart",
    "split_top_level",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    "create_file_name",
    # Configuration system
    "ConfigError",
    "ConfigManager",
    "Flavor",
    "GeneratorConfig",
    "HashStrategy",
    "ProjectContext",
    "RequiredStyle",
    "SeparatePolicy",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
]
