"""
Dart type knowledge used by the member generator.

Maps field types to map-codec expressions and picks the collection equality
helper a class needs.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ...core.schema import FieldModel


FLUTTER_FOUNDATION = "package:flutter/foundation.dart"
FLUTTER_UMBRELLAS = (
    "package:flutter/material.dart",
    "package:flutter/widgets.dart",
    "package:flutter/cupertino.dart",
)
COLLECTION_PACKAGE = "package:collection/collection.dart"
CONVERT_LIBRARY = "dart:convert"
EQUATABLE_PACKAGE = "package:equatable/equatable.dart"
META_PACKAGE = "package:meta/meta.dart"

# Types with a dedicated map representation
DATE_TIME = "DateTime"
COLOR = "Color"
ICON_DATA = "IconData"


@dataclass(frozen=True)
class CollectionEquality:
    """Collection-aware equality helper for a class."""

    function: str  # Name used at the call site
    declaration: Optional[str]  # Local alias line, when the helper is not a top-level function
    import_path: str
    override_paths: Tuple[str, ...] = ()


def collection_equality(fields: List[FieldModel], is_flutter: bool) -> Optional[CollectionEquality]:
    """
    Choose the equality helper for the collection fields of a class.

    A single collection kind gets its kind-specific helper; mixed kinds
    fall back to deep equality.

    Args:
        fields: Fields of the class
        is_flutter: Whether the project is a Flutter project

    Returns:
        The helper to use, or None when the class has no collection fields
    """
    kinds = {f.collection_kind for f in fields if f.is_collection}
    if not kinds:
        return None

    if len(kinds) > 1:
        return CollectionEquality(
            function="collectionEquals",
            declaration="final collectionEquals = const DeepCollectionEquality().equals;",
            import_path=COLLECTION_PACKAGE,
        )

    kind = kinds.pop()
    function = f"{kind.lower()}Equals"

    if is_flutter:
        return CollectionEquality(
            function=function,
            declaration=None,
            import_path=FLUTTER_FOUNDATION,
            override_paths=FLUTTER_UMBRELLAS,
        )

    return CollectionEquality(
        function=function,
        declaration=f"final {function} = const {kind}Equality().equals;",
        import_path=COLLECTION_PACKAGE,
    )


def encode_value(field: FieldModel, value: str, from_json: bool = False) -> str:
    """Expression that converts ``value`` of the field's type into a map value."""
    null_safe = "?" if field.is_nullable else ""

    if field.is_enum:
        return f"{value}{null_safe}.index"

    if field.is_map:
        return value

    if field.is_list or field.is_set:
        element = field.element
        if element.is_primitive:
            return f"{value}{null_safe}.toList()" if field.is_set else value
        return f"{value}{null_safe}.map((x) => {encode_value(element, 'x', from_json)}).toList()"

    if field.type == DATE_TIME:
        if from_json:
            return f"{value}{null_safe}.toIso8601String()"
        return f"{value}{null_safe}.millisecondsSinceEpoch"
    if field.type == COLOR:
        return f"{value}{null_safe}.value"
    if field.type == ICON_DATA:
        return f"{value}{null_safe}.codePoint"

    if field.is_primitive:
        return value

    return f"{value}{null_safe}.toMap()"


def decode_value(field: FieldModel, value: str, from_json: bool = False) -> str:
    """Expression that rebuilds a value of the field's type from a map value."""
    if field.is_enum:
        return f"{field.type}.values[{value}]"

    if field.is_map:
        return f"{field.type}.from({value})"

    if field.is_list or field.is_set:
        element = field.element
        if element.is_primitive:
            return f"{field.type}.from({value})"
        return f"{field.type}.from({value}.map((x) => {decode_value(element, 'x', from_json)}))"

    if field.type == DATE_TIME:
        if from_json:
            return f"DateTime.parse({value})"
        return f"DateTime.fromMillisecondsSinceEpoch({value})"
    if field.type == COLOR:
        return f"Color({value})"
    if field.type == ICON_DATA:
        return f"IconData({value}, fontFamily: 'MaterialIcons')"

    if field.is_primitive:
        if from_json and field.type == "double":
            return f"{value}?.toDouble()"
        if from_json and field.type == "int":
            return f"{value}?.toInt()"
        return value

    return f"{field.type}.fromMap({value})"


def needs_default(field: FieldModel) -> bool:
    """Whether a missing map value may fall back to a literal default."""
    return (
        not field.is_nullable
        and not field.is_collection
        and not field.is_enum
        and field.type != "dynamic"
        and field.is_primitive
    )
