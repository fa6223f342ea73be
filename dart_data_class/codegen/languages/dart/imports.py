"""
Import/export registry for Dart source buffers.

Reads the leading import/export/part block of a buffer, records imports that
generated members depend on, and re-serializes the block in a canonical order.
"""

import re
from typing import Iterable, List, Optional

from ...core.config import ProjectContext
from ....logging_config import get_logger

logger = get_logger(__name__)

_IMPORT_LIKE = ("import", "export", "part")
_LIBRARY_LINE = re.compile(r"^library\b")
_COMMENT_LINE = re.compile(r"^(//|/\*|\*)")


def is_import_like(line: str) -> bool:
    stripped = line.strip()
    return any(re.match(rf"^{keyword}\b", stripped) for keyword in _IMPORT_LIKE)


def format_import(path: str) -> str:
    """Turn ``dart:convert`` into ``import 'dart:convert';``."""
    if path.startswith("import"):
        return path
    return f"import '{path}';"


def strict_equal(a: str, b: str) -> bool:
    """Equality that ignores all whitespace."""
    return re.sub(r"\s", "", a) == re.sub(r"\s", "", b)


class ImportSet:
    """Ordered set of raw import/export/part lines of one buffer.

    Line indexes are 0-based; ``start_line``/``end_line`` span the existing
    block (both ``None`` when the buffer has no imports yet).
    """

    def __init__(self, text: str = "", context: Optional[ProjectContext] = None):
        self.text = text
        self.context = context or ProjectContext()
        self.values: List[str] = []
        self.raw_imports = ""
        self.start_line: Optional[int] = None
        self.end_line: Optional[int] = None
        self.insert_line = 0
        self._read_imports(text)

    def _read_imports(self, text: str) -> None:
        """Collect the import block, tolerating a license header and a library line."""
        lines = text.split("\n")
        raw = []
        seen_library = False

        for i, line in enumerate(lines):
            stripped = line.strip()

            if is_import_like(line):
                self.values.append(stripped)
                raw.append(line)
                if self.start_line is None:
                    self.start_line = i
                self.end_line = i
                continue

            if not stripped:
                continue

            is_leading_comment = _COMMENT_LINE.match(stripped) and not self.values
            is_library = (
                _LIBRARY_LINE.match(stripped) and not seen_library and not self.values
            )

            if is_library:
                seen_library = True
            if is_leading_comment or is_library:
                self.insert_line = i + 1
                continue

            # First line that is neither blank, tolerated nor import-like
            break

        self.raw_imports = "\n".join(raw)
        logger.debug(
            "Read %d import lines (lines %s-%s)", len(self.values), self.start_line, self.end_line
        )

    @property
    def has_imports(self) -> bool:
        return len(self.values) > 0

    @property
    def has_previous_imports(self) -> bool:
        return self.start_line is not None

    def _classify(self):
        package_name = self.context.package_name
        project_prefix = f"package:{package_name}/" if package_name else None

        builtin, external, local, relative, exports, parts = [], [], [], [], [], []
        for value in self.values:
            if value.startswith("export"):
                exports.append(value)
            elif value.startswith("part"):
                parts.append(value)
            elif "'dart:" in value or '"dart:' in value:
                builtin.append(value)
            elif project_prefix and project_prefix in value:
                local.append(value)
            elif "package:" in value:
                external.append(value)
            else:
                relative.append(value)
        return [builtin, external, local, relative, exports, parts]

    @property
    def formatted(self) -> str:
        """Imports grouped by kind, each group sorted and followed by a blank line."""
        if not self.has_imports:
            return ""

        lines: List[str] = []
        for bucket in self._classify():
            unique = sorted(set(bucket))
            if not unique:
                continue
            lines.extend(unique)
            lines.append("")

        return "\n".join(lines).rstrip("\n")

    @property
    def did_change(self) -> bool:
        return not strict_equal(self.raw_imports, self.formatted)

    def includes(self, imp: str) -> bool:
        return imp in self.values

    def push(self, imp: str) -> None:
        self.values.append(imp)

    def has_at_least_one_import(self, paths: Iterable[str]) -> bool:
        for path in paths:
            imp = format_import(path)
            if imp in self.text or self.includes(imp):
                return True
        return False

    def requires_import(self, path: str, override_paths: Iterable[str] = ()) -> bool:
        """
        Record that generated code needs ``path``.

        Args:
            path: Library path such as ``dart:convert``
            override_paths: Umbrella libraries that already provide the same API

        Returns:
            True when a new import was added
        """
        imp = format_import(path)
        if self.includes(imp) or self.has_at_least_one_import(override_paths):
            return False

        logger.debug("Adding import %s", imp)
        self.values.append(imp)
        return True

    def import_lines(self) -> List[str]:
        """Raw import lines, used to resolve the project flavor."""
        return list(self.values)
