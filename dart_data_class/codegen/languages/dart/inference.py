"""
JSON schema inference for Dart classes.

Walks an arbitrary JSON document and builds one ClassModel per object shape,
named after the keys that lead to it.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import dateparser

from ...core.config import GeneratorConfig
from ...core.generator import MalformedInputError, UnsupportedShapeError
from ...core.naming import create_file_name, singularize
from ...core.schema import ClassModel, FieldModel
from ...core.templates import render_dart_class
from ....logging_config import get_logger
from .imports import format_import
from .naming import create_dart_sanitizer, to_class_name, to_var_name

logger = get_logger(__name__)

PRIMITIVE_ARRAY_MESSAGE = "Primitive JSON arrays are not supported! Please serialize them directly."
MALFORMED_MESSAGE = "The provided JSON is malformed or couldn't be parsed!"


def detect_timestamp(value: Any) -> bool:
    """Whether a JSON string looks like a date or time."""
    if not isinstance(value, str) or len(value) < 4:
        return False
    if not any(char.isdigit() for char in value):
        return False
    return dateparser.parse(value) is not None


@dataclass
class DartFile:
    """A generated Dart file: snake_case stem plus content."""

    clazz: ClassModel
    name: str
    imports: List[str]

    @property
    def file_name(self) -> str:
        return f"{self.name}.dart"


class JsonInferencer:
    """Builds class skeletons from a JSON value."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self.classes: List[ClassModel] = []
        self.sanitizer = create_dart_sanitizer()

    def infer(self, source: Any, root_name: str) -> List[ClassModel]:
        """
        Infer classes from JSON text or an already parsed value.

        Args:
            source: JSON text, or the decoded value
            root_name: Name of the root class

        Returns:
            Classes in pre-order (root first), duplicates removed

        Raises:
            MalformedInputError: If the text is not valid JSON
            UnsupportedShapeError: If the root holds no JSON object
        """
        data = self._parse(source)

        if isinstance(data, list):
            objects = [item for item in data if isinstance(item, dict)]
            if not objects:
                raise UnsupportedShapeError(PRIMITIVE_ARRAY_MESSAGE)
            data = objects[0]
        elif not isinstance(data, dict):
            raise UnsupportedShapeError(PRIMITIVE_ARRAY_MESSAGE)

        self.classes = []
        self._visit(data, to_class_name(root_name, self.sanitizer))
        self.classes = self._remove_duplicates(self.classes)
        logger.info("Inferred %d classes from JSON", len(self.classes))
        return self.classes

    def _parse(self, source: Any) -> Any:
        if not isinstance(source, str):
            return source
        try:
            return json.loads(source)
        except json.JSONDecodeError as e:
            logger.debug("JSON parse failed: %s", e)
            raise MalformedInputError(MALFORMED_MESSAGE) from e

    def _visit(self, obj: Dict[str, Any], class_name: str) -> ClassModel:
        clazz = ClassModel(name=class_name, starts_at=1)
        # Parent is registered before its nested classes
        self.classes.append(clazz)

        for key, value in obj.items():
            field_type = self._value_type(key, value)
            clazz.fields.append(
                FieldModel(
                    raw_type=field_type,
                    json_name=key,
                    name=to_var_name(key, self.sanitizer),
                    line=len(clazz.fields) + 2,
                )
            )

        content = render_dart_class(clazz.name, clazz.fields, self.config.indent)
        clazz.lines = content.split("\n")
        clazz.ends_at = len(clazz.lines)
        return clazz

    def _value_type(self, key: str, value: Any) -> str:
        if isinstance(value, dict):
            return self._visit(value, to_class_name(key, self.sanitizer)).name
        if isinstance(value, list):
            return self._list_type(key, value)
        return self._primitive_type(value)

    def _list_type(self, key: str, items: List[Any]) -> str:
        if not items:
            return "List<dynamic>"

        element_key = singularize(key)
        first = items[0]
        if isinstance(first, dict):
            element = self._visit(first, to_class_name(element_key, self.sanitizer)).name
        elif isinstance(first, list):
            element = self._list_type(element_key, first)
        else:
            element = self._primitive_type(first)
        return f"List<{element}>"

    def _primitive_type(self, value: Any) -> str:
        # bool is a subclass of int
        if isinstance(value, bool):
            return "bool"
        if isinstance(value, int):
            return "int"
        if isinstance(value, float):
            return "double"
        if isinstance(value, str):
            if self.config.json_detect_timestamps and detect_timestamp(value):
                return "DateTime"
            return "String"
        return "dynamic"

    def _remove_duplicates(self, classes: List[ClassModel]) -> List[ClassModel]:
        """Keep the first of several classes with byte-identical text."""
        seen = set()
        result = []
        for clazz in classes:
            if clazz.content in seen:
                logger.debug("Dropping duplicate class %s", clazz.name)
                continue
            seen.add(clazz.content)
            result.append(clazz)
        return result


def generated_type_count(type_name: str, classes: List[ClassModel]) -> int:
    return sum(1 for clazz in classes if clazz.name == type_name)


def plan_files(classes: List[ClassModel]) -> List[DartFile]:
    """
    Assign file names and cross-file imports to inferred classes.

    Imports are added only for field types that map to exactly one
    generated class.

    Args:
        classes: Inferred classes in emission order

    Returns:
        One file per class, in the same order
    """
    taken = set()
    names: Dict[int, str] = {}
    for clazz in classes:
        name = create_file_name(clazz.name, taken)
        taken.add(name)
        names[id(clazz)] = name

    by_name = {clazz.name: clazz for clazz in classes}
    files = []
    for clazz in classes:
        imports = []
        for f in clazz.fields:
            target = f.base_type
            if target == clazz.name or generated_type_count(target, classes) != 1:
                continue
            imp = format_import(f"{names[id(by_name[target])]}.dart")
            if imp not in imports:
                imports.append(imp)
        files.append(DartFile(clazz=clazz, name=names[id(clazz)], imports=imports))
    return files
