"""
Line-oriented scanner that turns Dart source text into ClassModel instances.

There is no grammar here: classes, fields and constructors are recognised with
per-line heuristics while brace and paren depth are tracked across lines.
"""

import re
from typing import List, Optional

from ...core.schema import ClassModel, FieldModel, split_top_level
from ....logging_config import get_logger

logger = get_logger(__name__)

# Annotations and class modifiers may precede the keyword on the same line
_CLASS_HEADER = re.compile(
    r"^\s*(?:@[\w.]+(?:\([^)]*\))?\s+)*"
    r"(?:(?:abstract|base|final|interface|sealed|mixin)\s+)*class\s+[A-Za-z_$]"
)
_ABSTRACT_MODIFIERS = {"abstract", "sealed"}
_COMMENT_LINE = re.compile(r"^(//|/\*|\*)")
_ENUM_SENTINEL = re.compile(r"^//\s*enum\s*$", re.IGNORECASE)
_LINE_COMMENT = re.compile(r"\s*//.*$")
_STRING_LITERAL = re.compile(r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"")

_FIELD_EXCLUDED_SYMBOLS = ("{", "}", "=>", "@")
_FIELD_EXCLUDED_WORDS = {"static", "get", "set", "return", "factory"}
_FIELD_MARKERS = {"final", "const", "late"}
_HEADER_KEYWORDS = ("extends", "with", "implements")


def split_generic_aware(source: str) -> List[str]:
    """Split on whitespace that is not inside ``<...>``.

    ``Map<String, int> values;`` becomes ``['Map<String, int>', 'values;']``.
    """
    tokens = []
    depth = 0
    current = ""
    for char in source:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1

        if char.isspace() and depth == 0:
            if current:
                tokens.append(current)
            current = ""
        else:
            current += char
    if current:
        tokens.append(current)
    return tokens


def is_class_header(line: str) -> bool:
    return _CLASS_HEADER.match(line) is not None


def parse_header(line: str, clazz: ClassModel) -> None:
    """Fill name, generics, superclass, mixins and interfaces from a header line."""
    text = line.strip()
    clazz.header_has_brace = text.endswith("{")
    if clazz.header_has_brace:
        text = text[:-1].rstrip()

    tokens = split_generic_aware(text)
    if "class" in tokens:
        class_index = tokens.index("class")
        modifiers = tokens[:class_index]
        clazz.modifiers = " ".join(modifiers)
        clazz.is_abstract = any(m in _ABSTRACT_MODIFIERS for m in modifiers)
        tokens = tokens[class_index + 1:]
    if not tokens:
        return

    name = tokens.pop(0)
    if "<" in name:
        name, generics = name.split("<", 1)
        clazz.generics = "<" + generics
    elif tokens and tokens[0].startswith("<"):
        clazz.generics = tokens.pop(0)
    clazz.name = name

    sections = {keyword: [] for keyword in _HEADER_KEYWORDS}
    current = None
    for token in tokens:
        if token in sections:
            current = token
        elif current is not None:
            sections[current].append(token)

    if sections["extends"]:
        clazz.superclass = " ".join(sections["extends"])
    clazz.mixins = split_top_level(" ".join(sections["with"]))
    clazz.interfaces = split_top_level(" ".join(sections["implements"]))


def _strip_line_comment(line: str) -> str:
    # Keep '//' inside string literals such as URLs
    if "'" in line or '"' in line:
        return line
    return _LINE_COMMENT.sub("", line)


def _blank_strings(line: str) -> str:
    """Replace string literals with empty ones so their content is not inspected."""
    return _STRING_LITERAL.sub("''", line)


def is_field_line(line: str, class_name: str) -> bool:
    """Whether a line at the top of a class body declares a stored field."""
    stripped = _LINE_COMMENT.sub("", _blank_strings(line)).strip()
    if not stripped:
        return False
    if stripped.startswith(class_name):
        return False
    if _COMMENT_LINE.match(stripped):
        return False
    if any(symbol in stripped for symbol in _FIELD_EXCLUDED_SYMBOLS):
        return False

    words = set(re.findall(r"\w+", stripped))
    if words & _FIELD_EXCLUDED_WORDS:
        return False
    # final x = y; is a computed value
    if "final" in words and "=" in stripped:
        return False
    # Abstract method declarations
    if stripped.endswith(");"):
        return False
    return True


def parse_field(line: str, line_no: int, previous_line: str = "") -> Optional[FieldModel]:
    """
    Tokenize a field declaration line.

    Args:
        line: Source line, already known to be a field line
        line_no: 1-based line number
        previous_line: Line above, checked for the ``// enum`` sentinel

    Returns:
        Parsed field, or None if no type and name could be found
    """
    text = _strip_line_comment(line).strip()
    tokens = split_generic_aware(text)

    is_final = "final" in tokens
    is_const = "const" in tokens
    tokens = [t for t in tokens if t not in _FIELD_MARKERS]

    name = None
    type_tokens = []
    for i, token in enumerate(tokens):
        if "=" in token and not token.startswith("="):
            # int x=0;
            name = token.split("=", 1)[0]
            break
        if token.endswith(";"):
            name = token[:-1]
            break
        next_token = tokens[i + 1] if i + 1 < len(tokens) else ""
        if next_token.startswith("="):
            name = token
            break
        type_tokens.append(token)

    if not name or not type_tokens:
        return None

    return FieldModel(
        raw_type=" ".join(type_tokens),
        json_name=name,
        line=line_no,
        is_final=is_final,
        is_const=is_const,
        is_enum=_ENUM_SENTINEL.match(previous_line.strip()) is not None,
    )


def _constructor_start(line: str, class_name: str) -> bool:
    stripped = line.strip()
    if stripped.startswith("const "):
        stripped = stripped[len("const "):].lstrip()
    return stripped.startswith(class_name + "(")


class DartScanner:
    """Single forward pass over a buffer, producing one model per class."""

    def __init__(self, text: str):
        self.text = text
        self.lines = text.split("\n")

    def scan(self) -> List[ClassModel]:
        """
        Detect all classes in the buffer.

        State companion classes (``extends State<...>``) are parsed but not
        returned. Invalid classes are returned with an ``issue``.

        Returns:
            Classes in source order
        """
        classes: List[ClassModel] = []
        clazz: Optional[ClassModel] = None
        curly = 0
        paren = 0
        opened = False
        in_constructor = False

        for index, line in enumerate(self.lines):
            line_no = index + 1
            header = is_class_header(line)

            if header:
                clazz = ClassModel(starts_at=line_no)
                parse_header(line, clazz)
                curly = 0
                paren = 0
                opened = False
                in_constructor = False

                if clazz.is_state:
                    logger.debug("Skipping state class %s", clazz.name)
                else:
                    classes.append(clazz)

            if clazz is None:
                continue

            depth_before = curly
            code = _blank_strings(line)
            curly += code.count("{") - code.count("}")
            paren += code.count("(") - code.count(")")
            if "{" in code:
                opened = True

            clazz.lines.append(line)

            if not header and not clazz.has_constructor and not in_constructor:
                if depth_before == 1 and _constructor_start(line, clazz.name):
                    in_constructor = True
                    clazz.constr_starts_at = line_no
                    clazz.constr = ""

            if in_constructor:
                clazz.constr += line if not clazz.constr else "\n" + line
                if paren == 0:
                    clazz.constr_ends_at = line_no
                    in_constructor = False
            elif not header and curly == 1 and paren == 0 and is_field_line(line, clazz.name):
                previous = self.lines[index - 1] if index > 0 else ""
                field = parse_field(line, line_no, previous)
                if field is not None:
                    clazz.fields.append(field)

            if opened and curly == 0:
                clazz.ends_at = line_no
                self._log_class(clazz)
                clazz = None

        if clazz is not None:
            self._log_class(clazz)

        return classes

    def _log_class(self, clazz: ClassModel) -> None:
        if clazz.is_valid:
            logger.debug(
                "Detected class %s (lines %s-%s, %d fields)",
                clazz.name,
                clazz.starts_at,
                clazz.ends_at,
                len(clazz.fields),
            )
        elif not clazz.is_state:
            logger.warning("Class %s: %s", clazz.name, clazz.issue)


def scan_classes(text: str) -> List[ClassModel]:
    """Convenience wrapper around DartScanner."""
    return DartScanner(text).scan()
