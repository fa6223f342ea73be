"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

from ...logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


class RequiredStyle(Enum):
    """How non-nullable named constructor parameters are marked."""

    KEYWORD = "required"  # required this.x
    ANNOTATION = "annotation"  # @required this.x
    NONE = "none"


class HashStrategy(Enum):
    """Strategies for generating hashCode."""

    XOR = "xor"  # a.hashCode ^ b.hashCode
    COMBINATOR = "combinator"  # Object.hashAll([a, b])


class SeparatePolicy(Enum):
    """Whether JSON-inferred classes are written to separate files."""

    ASK = "ask"
    ALWAYS = "always"
    NEVER = "never"


class Flavor(Enum):
    """Ecosystem the edited project belongs to."""

    AUTO = "auto"
    FLUTTER = "flutter"
    DART = "dart"


@dataclass
class GeneratorConfig:
    """Configuration for the data class generator."""

    # Constructor
    constructor_enabled: bool = True
    constructor_default_values: bool = False
    constructor_required_style: RequiredStyle = RequiredStyle.KEYWORD

    # Members
    copy_with_enabled: bool = True
    to_map_enabled: bool = True
    from_map_enabled: bool = True
    from_map_default_values: bool = False
    to_json_enabled: bool = True
    from_json_enabled: bool = True
    to_string_enabled: bool = True
    equality_enabled: bool = True
    hash_code_enabled: bool = True
    hash_code_strategy: HashStrategy = HashStrategy.XOR
    use_equatable: bool = False

    # JSON conversion
    json_separate: SeparatePolicy = SeparatePolicy.ASK
    json_detect_timestamps: bool = False
    json_write_delay: float = 0.12

    # Review flow
    override_manual: bool = False

    # Code style
    indent_size: int = 2

    # Custom settings (unknown keys)
    custom: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Coerce string values of enum settings."""
        self.constructor_required_style = _coerce(
            RequiredStyle, self.constructor_required_style, "constructor_required_style"
        )
        self.hash_code_strategy = _coerce(
            HashStrategy, self.hash_code_strategy, "hash_code_strategy"
        )
        self.json_separate = _coerce(SeparatePolicy, self.json_separate, "json_separate")

    @property
    def indent(self) -> str:
        return " " * self.indent_size

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain JSON-compatible dictionary."""
        result = {}
        for f in fields(self):
            if f.name == "custom":
                continue
            value = getattr(self, f.name)
            result[f.name] = value.value if isinstance(value, Enum) else value
        result.update(self.custom)
        return result


@dataclass(frozen=True)
class ProjectContext:
    """Facts about the edited project, passed explicitly into generation."""

    package_name: Optional[str] = None
    flavor: Flavor = Flavor.AUTO

    def resolve(self, import_lines: List[str]) -> "ProjectContext":
        """Resolve an ``auto`` flavor against the imports of a buffer."""
        if self.flavor != Flavor.AUTO:
            return self
        is_flutter = any("package:flutter/" in line for line in import_lines)
        return ProjectContext(
            package_name=self.package_name,
            flavor=Flavor.FLUTTER if is_flutter else Flavor.DART,
        )

    @property
    def is_flutter(self) -> bool:
        return self.flavor == Flavor.FLUTTER


def _coerce(enum_cls, value, name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        valid = ", ".join(e.value for e in enum_cls)
        raise ConfigError(f"Invalid {name}: {value!r} (expected one of: {valid})")


# Editor-style setting keys mapped onto GeneratorConfig fields
SETTING_ALIASES = {
    "constructor.enabled": "constructor_enabled",
    "constructor.default_values": "constructor_default_values",
    "constructor.required": "constructor_required_style",
    "copyWith.enabled": "copy_with_enabled",
    "toMap.enabled": "to_map_enabled",
    "fromMap.enabled": "from_map_enabled",
    "fromMap.default_values": "from_map_default_values",
    "toJson.enabled": "to_json_enabled",
    "fromJson.enabled": "from_json_enabled",
    "toString.enabled": "to_string_enabled",
    "equality.enabled": "equality_enabled",
    "hashCode.enabled": "hash_code_enabled",
    "hashCode.use_jenkins": "hash_code_strategy",
    "useEquatable": "use_equatable",
    "json.separate": "json_separate",
    "override.manual": "override_manual",
}

SETTING_PREFIX = "dart_data_class_generator."


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._defaults: Dict[str, Any] = GeneratorConfig().to_dict()

    def get_config(
        self,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration.

        Args:
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration
        """
        base_config = self._defaults.copy()

        if config_file:
            file_config = self._load_config_file(config_file)
            base_config.update(self._normalize_keys(file_config))

        if custom_config:
            base_config.update(self._normalize_keys(custom_config))

        return self._dict_to_config(base_config)

    def _normalize_keys(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Translate editor-style setting keys to config field names."""
        normalized = {}
        for key, value in config.items():
            if key.startswith(SETTING_PREFIX):
                key = key[len(SETTING_PREFIX):]
            target = SETTING_ALIASES.get(key, key)

            if key == "constructor.required" and isinstance(value, bool):
                value = "required" if value else "none"
            elif key == "hashCode.use_jenkins" and isinstance(value, bool):
                value = "combinator" if value else "xor"
            elif key == "json.separate" and value in ("seperate", "separate"):
                value = "always"
            elif key == "json.separate" and value in ("current_file", "single"):
                value = "never"

            normalized[target] = value
        return normalized

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}")
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}")

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug("Loaded configuration file %s", path)
        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        if custom_args:
            existing_custom = dict(config_args.get("custom", {}))
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}")

    def validate_config(self, config: GeneratorConfig) -> List[str]:
        """
        Validate a configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        if config.indent_size < 1:
            warnings.append(f"Invalid indent_size: {config.indent_size}")

        if config.json_write_delay < 0:
            warnings.append(f"Invalid json_write_delay: {config.json_write_delay}")

        if config.use_equatable and (config.equality_enabled or config.hash_code_enabled):
            warnings.append(
                "use_equatable replaces equality/hashCode generation; "
                "equality_enabled and hash_code_enabled are ignored"
            )

        if config.custom:
            warnings.append(f"Unknown settings ignored: {', '.join(sorted(config.custom))}")

        return warnings


def load_config(
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    A new manager is built on every call so settings are always read fresh.

    Args:
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration
    """
    return ConfigManager().get_config(custom_config, config_file)


# Example configuration file for reference
EXAMPLE_CONFIG = {
    "constructor_default_values": True,
    "copy_with_enabled": True,
    "from_map_default_values": True,
    "hash_code_strategy": "combinator",
    "json_separate": "always",
    "use_equatable": False,
}
