"""
Edit planner: turns generated class changes into line edits for a buffer.
"""

from dataclasses import dataclass
from typing import List

from ...core.schema import ClassModel
from ....logging_config import get_logger
from .imports import ImportSet

logger = get_logger(__name__)


@dataclass
class TextEdit:
    """Replace lines ``start`` up to (not including) ``end`` with ``text``.

    Lines are 0-based; ``start == end`` is a pure insertion.
    """

    start: int
    end: int
    text: str

    @property
    def is_insertion(self) -> bool:
        return self.start == self.end


def render_header(clazz: ClassModel, original: str) -> str:
    """Rebuild the declaration line from the model, keeping the original indentation."""
    indent = original[: len(original) - len(original.lstrip())]

    modifiers = clazz.modifiers or ("abstract" if clazz.is_abstract else "")
    prefix = f"{modifiers} " if modifiers else ""
    header = f"{indent}{prefix}class {clazz.name}{clazz.generics}"
    if clazz.superclass:
        header += f" extends {clazz.superclass}"
    if clazz.mixins:
        header += f" with {', '.join(clazz.mixins)}"
    if clazz.interfaces:
        header += f" implements {', '.join(clazz.interfaces)}"
    if clazz.header_has_brace:
        header += " {"
    return header


def render_class(clazz: ClassModel) -> str:
    """
    Re-emit the class text with all pending changes applied.

    Args:
        clazz: Class after member generation

    Returns:
        New class text covering the original class line range
    """
    output: List[str] = []
    emitted_replacements = set()
    last_index = len(clazz.lines) - 1

    for index, line in enumerate(clazz.lines):
        line_no = clazz.starts_at + index

        if index == 0:
            output.append(render_header(clazz, line) if clazz.header_changed else line)
        else:
            part = clazz.replacement_at(line_no)
            if part is not None:
                if part.replacement not in emitted_replacements:
                    emitted_replacements.add(part.replacement)
                    output.append(part.replacement)
            else:
                if index == last_index and clazz.append_text:
                    output.append(clazz.append_text)
                output.append(line)

        if clazz.constr_insert and line_no == clazz.props_end_at:
            output.append(clazz.constr_insert)

    return "\n".join(output)


def plan_edits(classes: List[ClassModel], imports: ImportSet) -> List[TextEdit]:
    """
    Collect the edits for a buffer.

    Class edits are produced in reverse source order, followed by the import
    block edit, which always sits above every class.

    Args:
        classes: Classes after member generation
        imports: Import registry of the buffer

    Returns:
        Non-overlapping edits ordered from the bottom of the buffer up
    """
    edits: List[TextEdit] = []

    for clazz in sorted(classes, key=lambda c: c.starts_at, reverse=True):
        if not clazz.is_valid or not clazz.has_changes:
            continue
        edits.append(TextEdit(clazz.starts_at - 1, clazz.ends_at, render_class(clazz)))
        logger.debug("Planned edit for %s (lines %s-%s)", clazz.name, clazz.starts_at, clazz.ends_at)

    if imports.did_change:
        if imports.has_previous_imports:
            edits.append(TextEdit(imports.start_line, imports.end_line + 1, imports.formatted))
        else:
            edits.append(TextEdit(imports.insert_line, imports.insert_line, imports.formatted + "\n"))
        logger.debug("Planned import block edit")

    return edits


def apply_edits(text: str, edits: List[TextEdit]) -> str:
    """Apply edits to ``text``, bottom-most first so earlier offsets stay valid."""
    lines = text.split("\n")
    for edit in sorted(edits, key=lambda e: (e.start, e.end), reverse=True):
        lines[edit.start:edit.end] = edit.text.split("\n")
    return "\n".join(lines)
