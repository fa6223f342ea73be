"""
Core class representation for code generation.

Parsed (or JSON-inferred) classes are normalized into ClassModel/FieldModel
instances that the member generator and edit planner work with.
"""

from dataclasses import dataclass, field
from typing import List, Optional


PRIMITIVE_TYPES = {"String", "num", "int", "double", "bool", "dynamic", "Object"}

# Default literal per non-collection type
DEFAULT_VALUES = {
    "String": "''",
    "num": "0",
    "int": "0",
    "double": "0.0",
    "bool": "false",
    "dynamic": "null",
}

ISSUE_NO_PROPERTIES = "Class must have at least one property!"
ISSUE_NO_ENDING = "Class has no ending!"
ISSUE_DUPLICATE_NAMES = "Class doesn't have unique property names!"


def split_top_level(source: str, separator: str = ",") -> List[str]:
    """Split on a separator that is not nested in <>, (), [] or {}."""
    parts = []
    depth = 0
    current = ""
    for char in source:
        if char in "<([{":
            depth += 1
        elif char in ">)]}":
            depth -= 1
        if char == separator and depth == 0:
            parts.append(current)
            current = ""
        else:
            current += char
    parts.append(current)
    return [p.strip() for p in parts if p.strip()]


@dataclass
class FieldModel:
    """Represents a single stored property of a class."""

    raw_type: str  # Declared type, possibly ending in '?'
    json_name: str  # Source property name, used as map key
    name: Optional[str] = None  # Generated identifier
    line: int = 1
    is_final: bool = True
    is_const: bool = False
    is_enum: bool = False

    def __post_init__(self):
        if self.name is None:
            self.name = self.json_name

    @property
    def is_nullable(self) -> bool:
        return self.raw_type.endswith("?")

    @property
    def type(self) -> str:
        """Declared type without the nullability marker."""
        return self.raw_type[:-1] if self.is_nullable else self.raw_type

    def _is_collection_type(self, collection: str) -> bool:
        return self.type == collection or self.type.startswith(collection + "<")

    @property
    def is_list(self) -> bool:
        return self._is_collection_type("List")

    @property
    def is_map(self) -> bool:
        return self._is_collection_type("Map")

    @property
    def is_set(self) -> bool:
        return self._is_collection_type("Set")

    @property
    def is_collection(self) -> bool:
        return self.is_list or self.is_map or self.is_set

    @property
    def collection_kind(self) -> Optional[str]:
        if self.is_list:
            return "List"
        if self.is_set:
            return "Set"
        if self.is_map:
            return "Map"
        return None

    @property
    def element(self) -> "FieldModel":
        """Element of a List/Set field; the field itself otherwise."""
        if not (self.is_list or self.is_set):
            return self

        collection = "List" if self.is_list else "Set"
        if self.type == collection:
            element_type = "dynamic"
        else:
            element_type = self.type[len(collection) + 1:-1].strip()

        return FieldModel(
            raw_type=element_type,
            json_name=self.json_name,
            name=self.name,
            line=self.line,
            is_final=self.is_final,
        )

    @property
    def element_type(self) -> str:
        return self.element.type

    @property
    def base_type(self) -> str:
        """Innermost element type of nested List/Set types."""
        current = self
        while current.is_list or current.is_set:
            current = current.element
        return current.type

    @property
    def is_primitive(self) -> bool:
        """True when values need no conversion (maps count as primitive)."""
        if self.is_map:
            return True
        if self.is_list or self.is_set:
            return self.element.is_primitive
        return self.type in PRIMITIVE_TYPES

    @property
    def default_value(self) -> str:
        if self.is_list:
            return "const []"
        if self.is_map or self.is_set:
            return "const {}"
        return DEFAULT_VALUES.get(self.type, f"{self.type}()")


@dataclass
class NamedPart:
    """A located, named span of generated member text inside a class body."""

    name: str
    starts_at: Optional[int] = None
    ends_at: Optional[int] = None
    current: Optional[str] = None
    replacement: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.starts_at is not None and self.ends_at is not None and self.current is not None

    def covers(self, line: int) -> bool:
        return self.is_valid and self.starts_at <= line <= self.ends_at


@dataclass
class ClassModel:
    """Represents one parsed class declaration.

    Line numbers are 1-based, as shown by editors.
    """

    name: Optional[str] = None
    generics: str = ""  # Full generic parameter text, e.g. '<T extends num>'
    superclass: Optional[str] = None
    mixins: List[str] = field(default_factory=list)
    interfaces: List[str] = field(default_factory=list)
    fields: List[FieldModel] = field(default_factory=list)
    is_abstract: bool = False
    modifiers: str = ""  # Annotations and modifiers before 'class', e.g. 'final'

    starts_at: Optional[int] = None
    ends_at: Optional[int] = None
    header_has_brace: bool = True
    lines: List[str] = field(default_factory=list)  # Verbatim class text, header included

    constr: Optional[str] = None  # Raw constructor text
    constr_starts_at: Optional[int] = None
    constr_ends_at: Optional[int] = None

    # Pending edits, filled in by the member generator
    constr_insert: Optional[str] = None
    append_text: str = ""
    replacements: List[NamedPart] = field(default_factory=list)
    header_changed: bool = False

    @property
    def type(self) -> str:
        """Name plus generic arguments without bounds, e.g. ``Pair<A, B>``."""
        if not self.generics:
            return self.name
        names = []
        for part in split_top_level(self.generics.strip()[1:-1]):
            names.append(part.split(" extends ")[0].strip())
        return f"{self.name}<{', '.join(names)}>"

    @property
    def content(self) -> str:
        return "\n".join(self.lines)

    @property
    def props_end_at(self) -> int:
        return self.fields[-1].line if self.fields else -1

    @property
    def class_detected(self) -> bool:
        return self.starts_at is not None

    @property
    def has_ending(self) -> bool:
        return self.ends_at is not None

    @property
    def has_fields(self) -> bool:
        return len(self.fields) > 0

    @property
    def has_constructor(self) -> bool:
        return (
            self.constr is not None
            and self.constr_starts_at is not None
            and self.constr_ends_at is not None
        )

    @property
    def has_named_constructor(self) -> bool:
        if self.constr is not None:
            stripped = self.constr.strip()
            if stripped.startswith("const"):
                stripped = stripped[len("const"):].lstrip()
            return stripped.startswith(self.name + "({")
        return True

    @property
    def few_fields(self) -> bool:
        return len(self.fields) <= 3

    @property
    def unique_field_names(self) -> bool:
        names = [f.name for f in self.fields]
        return len(names) == len(set(names))

    @property
    def is_valid(self) -> bool:
        return self.class_detected and self.has_ending and self.has_fields and self.unique_field_names

    @property
    def issue(self) -> Optional[str]:
        """Human-readable reason this class cannot be generated, if any."""
        if not self.has_fields:
            return ISSUE_NO_PROPERTIES
        if not self.has_ending:
            return ISSUE_NO_ENDING
        if not self.unique_field_names:
            return ISSUE_DUPLICATE_NAMES
        return None

    @property
    def is_widget(self) -> bool:
        return self.superclass in ("StatelessWidget", "StatefulWidget")

    @property
    def is_state(self) -> bool:
        return not self.is_widget and self.superclass is not None and self.superclass.startswith("State<")

    @property
    def uses_equatable(self) -> bool:
        return self.superclass == "Equatable" or "EquatableMixin" in self.mixins

    @property
    def has_changes(self) -> bool:
        return bool(
            self.append_text or self.replacements or self.constr_insert or self.header_changed
        )

    def replacement_at(self, line: int) -> Optional[NamedPart]:
        for part in self.replacements:
            if part.covers(line):
                return part
        return None

    def add_mixin(self, mixin: str) -> None:
        if mixin not in self.mixins:
            self.mixins.append(mixin)
            self.header_changed = True

    def set_superclass(self, superclass: str) -> None:
        if self.superclass != superclass:
            self.superclass = superclass
            self.header_changed = True
