"""
Dart member generator.

Builds constructor, copyWith, map/JSON codecs, toString and equality members
for parsed classes, and decides per member whether to append it, replace an
existing one or leave the class alone.
"""

import re
from enum import Enum
from typing import Callable, Dict, List, Optional, Set, Tuple

from ...core.config import GeneratorConfig, HashStrategy, ProjectContext, RequiredStyle
from ...core.schema import ClassModel, FieldModel, NamedPart, split_top_level
from ....logging_config import get_logger
from .imports import ImportSet, strict_equal
from .types import (
    CONVERT_LIBRARY,
    EQUATABLE_PACKAGE,
    FLUTTER_UMBRELLAS,
    META_PACKAGE,
    collection_equality,
    decode_value,
    encode_value,
    needs_default,
)

logger = get_logger(__name__)

OVERRIDE = "@override\n"

_THIS_PARAM = re.compile(r"^(?:@?required\s+)?this\.(\w+)\s*(?:=\s*(.+))?$")
_KEY_PARAM = re.compile(r"\bkey\b")


class MemberKind(Enum):
    """Generatable members, in the order they are added to a class."""

    CONSTRUCTOR = "constructor"
    COPY_WITH = "copyWith"
    TO_MAP = "toMap"
    FROM_MAP = "fromMap"
    TO_JSON = "toJson"
    FROM_JSON = "fromJson"
    TO_STRING = "toString"
    EQUALITY = "equality"
    HASH_CODE = "hashCode"
    PROPS = "props"


# Members that need a concrete, instantiable class
_CODEC_KINDS = {
    MemberKind.COPY_WITH,
    MemberKind.TO_MAP,
    MemberKind.FROM_MAP,
    MemberKind.TO_JSON,
    MemberKind.FROM_JSON,
}
_EQUALITY_KINDS = {MemberKind.EQUALITY, MemberKind.HASH_CODE, MemberKind.PROPS}


def indent_block(text: str, indent: str) -> str:
    """Indent every non-empty line of ``text``."""
    return "\n".join(indent + line if line.strip() else line for line in text.split("\n"))


def normalize_signature(line: str) -> str:
    """Drop whitespace outside generics; keep ``<A, B>`` spelled canonically."""
    result = []
    depth = 0
    for char in line.strip():
        if char == "<":
            depth += 1
        elif char == ">" and depth > 0:
            depth -= 1

        if char.isspace():
            continue
        result.append(char)
        if char == "," and depth > 0:
            result.append(" ")
    return "".join(result)


def find_part(clazz: ClassModel, name: str, finder: str) -> Optional[NamedPart]:
    """
    Locate an existing member by its signature prefix.

    Block members start at brace depth 2 and end when depth drops back to 1.
    Expression members (``=>``) end at the first line ending in ``;``.

    Args:
        clazz: Class to search
        name: Member name recorded on the part
        finder: Signature prefix, e.g. ``String toJson()``

    Returns:
        The located part, or None when the member does not exist yet
    """
    target = normalize_signature(finder)
    curly = 0
    part: Optional[NamedPart] = None
    collected: List[str] = []
    expression = False

    for index, line in enumerate(clazz.lines):
        line_no = clazz.starts_at + index
        curly += line.count("{") - line.count("}")

        if part is None:
            if not normalize_signature(line).startswith(target):
                continue
            expression = "=>" in line
            if curly != 2 and not expression:
                continue
            part = NamedPart(name=name, starts_at=line_no)

        collected.append(line)
        finished = line.rstrip().endswith(";") if expression else curly == 1
        if finished:
            part.ends_at = line_no
            part.current = "\n".join(collected)
            return part

    return None


def _split_constructor(text: str, class_name: str) -> Tuple[str, str, str, str]:
    """Split constructor text into (prefix, bracket style, parameters, rest)."""
    start = text.index(class_name + "(")
    prefix = text[:start].strip()
    open_index = start + len(class_name)

    depth = 0
    close_index = len(text) - 1
    for i in range(open_index, len(text)):
        char = text[i]
        if char in "([{":
            depth += 1
        elif char in ")]}":
            depth -= 1
            if depth == 0:
                close_index = i
                break

    inner = text[open_index + 1:close_index].strip()
    style = "("
    if inner.startswith("{") and inner.endswith("}"):
        style = "({"
        inner = inner[1:-1]
    elif inner.startswith("[") and inner.endswith("]"):
        style = "(["
        inner = inner[1:-1]

    return prefix, style, inner, text[close_index + 1:].strip()


def _split_optional_group(params: List[str]) -> Tuple[List[str], Optional[str], List[str]]:
    """Split a trailing ``{...}`` or ``[...]`` group off positional parameters.

    ``['this.x', '{int w = 3}']`` becomes ``(['this.x'], '{', ['int w = 3'])``.
    """
    if params:
        last = params[-1]
        if (last.startswith("{") and last.endswith("}")) or (
            last.startswith("[") and last.endswith("]")
        ):
            return params[:-1], last[0], split_top_level(last[1:-1])
    return params, None, []


def named_argument_fields(clazz: ClassModel) -> Set[str]:
    """Names of the fields the existing constructor takes as named arguments."""
    if clazz.has_named_constructor:
        return {f.name for f in clazz.fields}

    _, style, inner, _ = _split_constructor(clazz.constr, clazz.name)
    if style != "(":
        return set()
    _, group_open, group = _split_optional_group(split_top_level(inner))
    if group_open != "{":
        return set()

    matches = (_THIS_PARAM.match(param) for param in group)
    return {match.group(1) for match in matches if match is not None}


class MemberGenerator:
    """Generates members for a batch of classes sharing one import set."""

    def __init__(
        self,
        config: GeneratorConfig,
        imports: ImportSet,
        context: Optional[ProjectContext] = None,
        from_json: bool = False,
    ):
        """
        Initialize the member generator.

        Args:
            config: Generator configuration
            imports: Import registry of the buffer; receives required imports
            context: Project context, with a resolved flavor
            from_json: Whether the classes were inferred from JSON
        """
        self.config = config
        self.imports = imports
        self.context = context or imports.context
        self.from_json = from_json
        self.ind = config.indent

    def generate(
        self, classes: List[ClassModel], selector: Optional[MemberKind] = None
    ) -> List[ClassModel]:
        """
        Generate members for every valid class, mutating the models in place.

        Args:
            classes: Scanned classes
            selector: Generate only this member

        Returns:
            The valid classes that were processed
        """
        processed = []
        for clazz in classes:
            if not clazz.is_valid:
                logger.warning("Skipping %s: %s", clazz.name, clazz.issue)
                continue
            self.generate_class(clazz, selector)
            processed.append(clazz)
        return processed

    def generate_class(self, clazz: ClassModel, selector: Optional[MemberKind] = None) -> None:
        for kind in self.kinds_for(clazz, selector):
            logger.debug("Generating %s for %s", kind.value, clazz.name)
            MEMBER_GENERATORS[kind](self, clazz)

    def kinds_for(self, clazz: ClassModel, selector: Optional[MemberKind] = None) -> List[MemberKind]:
        """Members that apply to ``clazz`` under the current config."""
        if clazz.is_widget:
            allowed = [MemberKind.CONSTRUCTOR]
        elif clazz.is_abstract:
            allowed = [kind for kind in MemberKind if kind not in _CODEC_KINDS]
        else:
            allowed = list(MemberKind)

        # Classes extending a *Base* class get no equality members at all
        if clazz.superclass and "Base" in clazz.superclass:
            allowed = [kind for kind in allowed if kind not in _EQUALITY_KINDS]

        if selector is not None:
            return [selector] if selector in allowed else []

        config = self.config
        enabled = {
            MemberKind.CONSTRUCTOR: config.constructor_enabled,
            MemberKind.COPY_WITH: config.copy_with_enabled,
            MemberKind.TO_MAP: config.to_map_enabled,
            MemberKind.FROM_MAP: config.from_map_enabled,
            MemberKind.TO_JSON: config.to_json_enabled,
            MemberKind.FROM_JSON: config.from_json_enabled,
            MemberKind.TO_STRING: config.to_string_enabled,
            MemberKind.EQUALITY: config.equality_enabled,
            MemberKind.HASH_CODE: config.hash_code_enabled,
            MemberKind.PROPS: False,
        }
        if config.use_equatable or clazz.uses_equatable:
            enabled[MemberKind.EQUALITY] = False
            enabled[MemberKind.HASH_CODE] = False
            enabled[MemberKind.PROPS] = True

        return [kind for kind in allowed if enabled[kind]]

    # Append/replace decision

    def _append_or_replace(self, clazz: ClassModel, kind: MemberKind, method: str, finder: str) -> None:
        part = find_part(clazz, kind.value, finder)
        if part is None:
            clazz.append_text += "\n" + indent_block(method, self.ind)
            logger.debug("%s.%s: append", clazz.name, kind.value)
            return

        part.replacement = indent_block(method.replace(OVERRIDE, ""), self.ind)
        if strict_equal(part.current, part.replacement):
            logger.debug("%s.%s: unchanged", clazz.name, kind.value)
        else:
            clazz.replacements.append(part)
            logger.debug("%s.%s: replace lines %s-%s", clazz.name, kind.value, part.starts_at, part.ends_at)

    def _block(self, signature: str, body: List[str]) -> str:
        lines = [signature + " {"]
        lines.extend(self.ind + line if line else line for line in body)
        lines.append("}")
        return "\n".join(lines)

    # Constructor

    def constructor(self, clazz: ClassModel) -> None:
        preserved: Dict[str, Optional[str]] = {}
        extra_params: List[str] = []
        group_params: List[str] = []
        group_fields = set()
        group_open = None
        prefix = ""
        style = "({"
        rest = ";"

        if clazz.has_constructor:
            prefix, style, inner, rest = _split_constructor(clazz.constr, clazz.name)
            params = split_top_level(inner)
            if style == "(":
                params, group_open, group = _split_optional_group(params)
            else:
                group = []

            field_names = {f.name for f in clazz.fields}
            for target, in_group in ((params, False), (group, True)):
                for param in target:
                    match = _THIS_PARAM.match(param)
                    if match is None:
                        (group_params if in_group else extra_params).append(param)
                    elif match.group(1) in field_names:
                        preserved[match.group(1)] = match.group(2)
                        if in_group:
                            group_fields.add(match.group(1))

        if clazz.is_widget:
            if not any(_KEY_PARAM.search(p) for p in extra_params + group_params):
                extra_params.insert(0, "Key? key")
            super_key = any(p.endswith("super.key") for p in extra_params + group_params)
            if "super(" not in rest and not super_key:
                rest = ": super(key: key);"

        named = style == "({"
        params = list(extra_params)
        for f in clazz.fields:
            if f.name in group_fields:
                group_params.append(self._constructor_param(f, group_open == "{", preserved[f.name]))
            else:
                params.append(self._constructor_param(f, named, preserved.get(f.name)))

        close = {"(": ")", "({": "})", "([": "])"}[style]
        head = f"{prefix} {clazz.name}" if prefix else clazz.name
        if group_open is not None:
            # The optional group stays last and opens on the last positional line
            opener = "("
            body = [f"{self.ind}{p}," for p in params]
            if body:
                body[-1] += f" {group_open}"
            else:
                opener += group_open
            body.extend(f"{self.ind}{p}," for p in group_params)
            group_close = "}" if group_open == "{" else "]"
            text = f"{head}{opener}\n" + "\n".join(body) + f"\n{group_close})"
        elif params:
            body = "\n".join(f"{self.ind}{p}," for p in params)
            text = f"{head}{style}\n{body}\n{close}"
        else:
            text = f"{head}()"
        text += rest if rest.startswith(";") or not rest else f" {rest}"

        if clazz.has_constructor:
            part = NamedPart(
                name=MemberKind.CONSTRUCTOR.value,
                starts_at=clazz.constr_starts_at,
                ends_at=clazz.constr_ends_at,
                current=clazz.constr,
                replacement=indent_block(text, self.ind),
            )
            if not strict_equal(part.current, part.replacement):
                clazz.replacements.append(part)
        else:
            clazz.constr_insert = "\n" + indent_block(text, self.ind)

    def _constructor_param(self, f: FieldModel, named: bool, default: Optional[str]) -> str:
        param = f"this.{f.name}"
        if default is not None:
            return f"{param} = {default}"
        if not named or f.is_nullable:
            return param

        config = self.config
        if config.constructor_default_values and f.type != "dynamic" and (f.is_primitive or f.is_collection):
            return f"{param} = {f.default_value}"

        if config.constructor_required_style == RequiredStyle.KEYWORD:
            return f"required {param}"
        if config.constructor_required_style == RequiredStyle.ANNOTATION:
            self.imports.requires_import(META_PACKAGE, FLUTTER_UMBRELLAS)
            return f"@required {param}"
        return param

    # copyWith

    def copy_with(self, clazz: ClassModel) -> None:
        params = []
        for f in clazz.fields:
            param_type = f.raw_type if f.is_nullable or f.type == "dynamic" else f.raw_type + "?"
            params.append(f"{self.ind}{param_type} {f.name},")

        named = named_argument_fields(clazz)
        args = []
        for f in clazz.fields:
            value = f"{f.name} ?? this.{f.name}"
            args.append(f"{self.ind}{f.name}: {value}," if f.name in named else f"{self.ind}{value},")

        method = f"{clazz.type} copyWith({{\n" + "\n".join(params) + "\n}) {\n"
        method += f"{self.ind}return {clazz.name}(\n"
        method += "\n".join(self.ind + a for a in args)
        method += f"\n{self.ind});\n}}"

        self._append_or_replace(clazz, MemberKind.COPY_WITH, method, f"{clazz.type} copyWith(")

    # Map codec

    def to_map(self, clazz: ClassModel) -> None:
        entries = [
            f"'{f.json_name}': {encode_value(f, f.name, self.from_json)},"
            for f in clazz.fields
        ]
        body = ["return {"] + [self.ind + e for e in entries] + ["};"]
        method = self._block("Map<String, dynamic> toMap()", body)
        self._append_or_replace(clazz, MemberKind.TO_MAP, method, "Map<String, dynamic> toMap()")

    def _decode_field(self, f: FieldModel) -> str:
        value = f"map['{f.json_name}']"
        with_defaults = self.config.from_map_default_values and not f.is_nullable

        if with_defaults and f.is_collection:
            return decode_value(f, f"({value} ?? {f.default_value})", self.from_json)

        expr = decode_value(f, value, self.from_json)
        if f.is_nullable:
            if expr == value or expr.startswith(value + "?."):
                return expr
            return f"{value} != null ? {expr} : null"
        if with_defaults and needs_default(f):
            return f"{expr} ?? {f.default_value}"
        return expr

    def from_map(self, clazz: ClassModel) -> None:
        named = named_argument_fields(clazz)
        args = []
        for f in clazz.fields:
            expr = self._decode_field(f)
            args.append(f"{self.ind}{f.name}: {expr}," if f.name in named else f"{self.ind}{expr},")

        body = [f"return {clazz.name}("] + args + [");"]
        method = self._block(f"factory {clazz.name}.fromMap(Map<String, dynamic> map)", body)
        self._append_or_replace(clazz, MemberKind.FROM_MAP, method, f"factory {clazz.name}.fromMap(")

    # JSON codec

    def to_json(self, clazz: ClassModel) -> None:
        self.imports.requires_import(CONVERT_LIBRARY)
        method = "String toJson() => json.encode(toMap());"
        self._append_or_replace(clazz, MemberKind.TO_JSON, method, "String toJson()")

    def from_json(self, clazz: ClassModel) -> None:
        self.imports.requires_import(CONVERT_LIBRARY)
        method = (
            f"factory {clazz.name}.fromJson(String source) => "
            f"{clazz.name}.fromMap(json.decode(source) as Map<String, dynamic>);"
        )
        self._append_or_replace(clazz, MemberKind.FROM_JSON, method, f"factory {clazz.name}.fromJson(")

    # toString

    def to_string(self, clazz: ClassModel) -> None:
        values = ", ".join(f"{f.name}: ${f.name}" for f in clazz.fields)
        text = f"'{clazz.name}({values})'"
        if clazz.few_fields:
            method = OVERRIDE + f"String toString() => {text};"
        else:
            method = OVERRIDE + self._block("String toString()", [f"return {text};"])
        self._append_or_replace(clazz, MemberKind.TO_STRING, method, "String toString()")

    # Equality

    def equality(self, clazz: ClassModel) -> None:
        helper = collection_equality(clazz.fields, self.context.is_flutter)
        if helper is not None:
            self.imports.requires_import(helper.import_path, helper.override_paths)

        comparisons = []
        for f in clazz.fields:
            if helper is not None and f.is_collection:
                comparisons.append(f"{helper.function}(other.{f.name}, {f.name})")
            else:
                comparisons.append(f"other.{f.name} == {f.name}")

        body = ["if (identical(this, other)) return true;"]
        if helper is not None and helper.declaration:
            body.append(helper.declaration)
        body.append("")
        body.append(f"return other is {clazz.type} &&")
        for i, comparison in enumerate(comparisons):
            end = ";" if i == len(comparisons) - 1 else " &&"
            body.append(f"{self.ind}{comparison}{end}")

        method = OVERRIDE + self._block("bool operator ==(Object other)", body)
        self._append_or_replace(clazz, MemberKind.EQUALITY, method, "bool operator ==")

    def hash_code(self, clazz: ClassModel) -> None:
        names = [f.name for f in clazz.fields]

        if self.config.hash_code_strategy == HashStrategy.COMBINATOR:
            if clazz.few_fields:
                method = f"int get hashCode => Object.hashAll([{', '.join(names)}]);"
            else:
                body = ["return Object.hashAll(["]
                body += [f"{self.ind}{name}," for name in names]
                body.append("]);")
                method = self._block("int get hashCode", body)
        elif clazz.few_fields:
            method = "int get hashCode => " + " ^ ".join(f"{n}.hashCode" for n in names) + ";"
        else:
            body = [f"return {names[0]}.hashCode ^"]
            for i, name in enumerate(names[1:], start=1):
                end = ";" if i == len(names) - 1 else " ^"
                body.append(f"{self.ind}{name}.hashCode{end}")
            method = self._block("int get hashCode", body)

        self._append_or_replace(clazz, MemberKind.HASH_CODE, OVERRIDE + method, "int get hashCode")

    def props(self, clazz: ClassModel) -> None:
        if not clazz.uses_equatable:
            if clazz.superclass is None:
                clazz.set_superclass("Equatable")
            else:
                clazz.add_mixin("EquatableMixin")
        self.imports.requires_import(EQUATABLE_PACKAGE)

        names = [f.name for f in clazz.fields]
        if clazz.few_fields:
            method = f"List<Object?> get props => [{', '.join(names)}];"
        else:
            body = ["return ["] + [f"{self.ind}{name}," for name in names] + ["];"]
            method = self._block("List<Object?> get props", body)

        self._append_or_replace(clazz, MemberKind.PROPS, OVERRIDE + method, "List<Object?> get props")


MEMBER_GENERATORS: Dict[MemberKind, Callable[[MemberGenerator, ClassModel], None]] = {
    MemberKind.CONSTRUCTOR: MemberGenerator.constructor,
    MemberKind.COPY_WITH: MemberGenerator.copy_with,
    MemberKind.TO_MAP: MemberGenerator.to_map,
    MemberKind.FROM_MAP: MemberGenerator.from_map,
    MemberKind.TO_JSON: MemberGenerator.to_json,
    MemberKind.FROM_JSON: MemberGenerator.from_json,
    MemberKind.TO_STRING: MemberGenerator.to_string,
    MemberKind.EQUALITY: MemberGenerator.equality,
    MemberKind.HASH_CODE: MemberGenerator.hash_code,
    MemberKind.PROPS: MemberGenerator.props,
}
