"""
Dart data class generator.

Runs the full flow for a buffer (scan, generate members, review, plan edits)
and for JSON documents (infer classes, generate members, lay out files).
"""

from typing import Any, List, Optional

from ...core.config import SeparatePolicy
from ...core.generator import (
    CodeGenerator,
    ConfirmCallback,
    GeneratedFile,
    GenerationResult,
    NoClassesFoundError,
    UserCancelledError,
)
from ...core.naming import create_file_name
from ...core.schema import ClassModel
from ....logging_config import get_logger
from .imports import ImportSet
from .inference import JsonInferencer, plan_files
from .members import MemberGenerator, MemberKind
from .planner import apply_edits, plan_edits, render_class
from .scanner import DartScanner

logger = get_logger(__name__)

NO_CLASSES_MESSAGE = "No convertable dart classes were detected!"
SEPARATE_QUESTION = "Do you wish to separate the JSON into multiple files?"


def _ask(confirm: Optional[ConfirmCallback], question: str) -> bool:
    """Ask ``confirm``; no callback means yes, a None answer cancels."""
    if confirm is None:
        return True
    answer = confirm(question)
    if answer is None:
        raise UserCancelledError(f"Cancelled: {question}")
    return bool(answer)


class DartDataClassGenerator(CodeGenerator):
    """Generates data class members for Dart code."""

    @property
    def language_name(self) -> str:
        return "dart"

    @property
    def file_extension(self) -> str:
        return ".dart"

    def generate(
        self,
        text: str,
        selector: Optional[MemberKind] = None,
        class_name: Optional[str] = None,
        confirm: Optional[ConfirmCallback] = None,
    ) -> GenerationResult:
        """
        Generate members for the classes in ``text``.

        Args:
            text: Full buffer text
            selector: Generate only this member
            class_name: Restrict generation to one class
            confirm: Asked before existing members are overridden

        Returns:
            Result with the planned edits and the edited text

        Raises:
            NoClassesFoundError: If no valid class is found
            UserCancelledError: If a confirmation is cancelled
        """
        imports = ImportSet(text, self.context)
        context = self.context.resolve(imports.import_lines())
        imports.context = context

        classes = DartScanner(text).scan()
        if class_name is not None:
            classes = [c for c in classes if c.name == class_name]

        warnings = [f"{c.name}: {c.issue}" for c in classes if not c.is_valid]
        valid = [c for c in classes if c.is_valid]
        if not valid:
            raise NoClassesFoundError(NO_CLASSES_MESSAGE)

        MemberGenerator(self.config, imports, context).generate(valid, selector)
        self._review(valid, confirm)

        edits = plan_edits(valid, imports)
        logger.info("Generated members for %d classes (%d edits)", len(valid), len(edits))

        metadata = {
            "language": self.language_name,
            "flavor": context.flavor.value,
            "class_count": len(valid),
            "classes": [c.name for c in valid],
            "selector": selector.value if selector else None,
        }
        return GenerationResult(apply_edits(text, edits), warnings, metadata, edits=edits)

    def _review(self, classes: List[ClassModel], confirm: Optional[ConfirmCallback]) -> None:
        """Drop replacements the user declines to override."""
        for clazz in classes:
            if not clazz.replacements:
                continue

            if self.config.override_manual:
                clazz.replacements = [
                    part
                    for part in clazz.replacements
                    if _ask(confirm, f"Do you want to override {part.name} in {clazz.name}?")
                ]
            elif not _ask(
                confirm,
                f"Do you want to override changes in {clazz.name}? "
                "Custom changes to existing members will be lost.",
            ):
                logger.info("Keeping existing members of %s", clazz.name)
                clazz.replacements = []

    def generate_from_json(
        self,
        source: Any,
        root_name: str,
        separate: Optional[bool] = None,
        confirm: Optional[ConfirmCallback] = None,
    ) -> GenerationResult:
        """
        Infer classes from JSON and generate their members.

        Args:
            source: JSON text or decoded value
            root_name: Name of the root class
            separate: Force one file per class (True) or a single file (False)
            confirm: Asked whether to separate when the policy is ``ask``

        Returns:
            Result with one GeneratedFile per output file; the first one
            targets the current buffer

        Raises:
            MalformedInputError: If the JSON cannot be parsed
            UnsupportedShapeError: If the JSON holds no object
            NoClassesFoundError: If nothing could be inferred
            UserCancelledError: If the separation question is cancelled
        """
        classes = JsonInferencer(self.config).infer(source, root_name)
        if not classes:
            raise NoClassesFoundError(NO_CLASSES_MESSAGE)

        if separate is None:
            separate = self._should_separate(classes, confirm)

        context = self.context.resolve([])
        if separate:
            files = self._separate_files(classes, context)
        else:
            files = [self._single_file(classes, context, root_name)]
        files[0].is_current_buffer = True

        warnings = [f"{c.name}: {c.issue}" for c in classes if not c.is_valid]
        metadata = {
            "language": self.language_name,
            "class_count": len(classes),
            "classes": [c.name for c in classes],
            "separate": separate,
        }
        return GenerationResult(files[0].content, warnings, metadata, files=files)

    def _should_separate(self, classes: List[ClassModel], confirm: Optional[ConfirmCallback]) -> bool:
        policy = self.config.json_separate
        if policy == SeparatePolicy.ALWAYS:
            return True
        if policy == SeparatePolicy.NEVER or len(classes) == 1:
            return False
        return _ask(confirm, SEPARATE_QUESTION)

    def _separate_files(self, classes: List[ClassModel], context) -> List[GeneratedFile]:
        files = []
        for dart_file in plan_files(classes):
            imports = ImportSet("", context)
            for imp in dart_file.imports:
                imports.push(imp)

            MemberGenerator(self.config, imports, context, from_json=True).generate([dart_file.clazz])
            content = self._compose(imports, [dart_file.clazz])
            files.append(GeneratedFile(dart_file.file_name, content))
        return files

    def _single_file(self, classes: List[ClassModel], context, root_name: str) -> GeneratedFile:
        imports = ImportSet("", context)
        MemberGenerator(self.config, imports, context, from_json=True).generate(classes)
        name = create_file_name(classes[0].name or root_name) + self.file_extension
        return GeneratedFile(name, self._compose(imports, classes))

    def _compose(self, imports: ImportSet, classes: List[ClassModel]) -> str:
        parts = [imports.formatted] if imports.has_imports else []
        parts.extend(render_class(clazz) for clazz in classes)
        return self.format_code("\n\n".join(parts))
