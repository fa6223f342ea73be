"""Tests for edit planning and application."""

from dart_data_class.codegen.core.config import GeneratorConfig
from dart_data_class.codegen.languages.dart.imports import ImportSet
from dart_data_class.codegen.languages.dart.members import MemberGenerator, MemberKind
from dart_data_class.codegen.languages.dart.planner import (
    TextEdit,
    apply_edits,
    plan_edits,
    render_class,
    render_header,
)
from dart_data_class.codegen.languages.dart.scanner import scan_classes


TWO_CLASSES = "class A {\n  final int a;\n}\n\nclass B {\n  final int b;\n}\n"


class TestApplyEdits:
    """Tests for applying line edits."""

    def test_replace_and_insert(self) -> None:
        edits = [TextEdit(1, 2, "B1\nB2"), TextEdit(0, 0, "top")]
        assert apply_edits("a\nb\nc", edits) == "top\na\nB1\nB2\nc"

    def test_insertion_flag(self) -> None:
        assert TextEdit(3, 3, "x").is_insertion
        assert not TextEdit(3, 4, "x").is_insertion

    def test_no_edits(self) -> None:
        assert apply_edits("a\nb", []) == "a\nb"


class TestRenderClass:
    """Tests for re-emitting class text."""

    def test_unchanged_class(self) -> None:
        clazz = scan_classes(TWO_CLASSES)[0]
        assert render_class(clazz) == clazz.content

    def test_append_and_constructor_insert(self) -> None:
        clazz = scan_classes("class A {\n  final int a;\n\n  void run() {}\n}")[0]
        clazz.append_text = "\n  // appended"
        clazz.constr_insert = "\n  A(this.a);"
        assert render_class(clazz) == (
            "class A {\n"
            "  final int a;\n"
            "\n"
            "  A(this.a);\n"
            "\n"
            "  void run() {}\n"
            "\n"
            "  // appended\n"
            "}"
        )

    def test_header_is_rebuilt(self) -> None:
        clazz = scan_classes("  class A<T> implements I {\n  final T a;\n}")[0]
        clazz.set_superclass("Equatable")
        assert render_header(clazz, clazz.lines[0]) == "  class A<T> extends Equatable implements I {"


class TestPlanEdits:
    """Tests for collecting buffer edits."""

    def _plan(self, text, selector=MemberKind.TO_STRING):
        classes = scan_classes(text)
        imports = ImportSet(text)
        MemberGenerator(GeneratorConfig(), imports).generate(classes, selector)
        return plan_edits(classes, imports)

    def test_reverse_order(self) -> None:
        edits = self._plan(TWO_CLASSES)
        assert [e.start for e in edits] == [4, 0]
        assert edits[0].end == 7

    def test_import_edit_comes_last(self) -> None:
        edits = self._plan(TWO_CLASSES, MemberKind.TO_JSON)
        assert edits[-1] == TextEdit(0, 0, "import 'dart:convert';\n")

    def test_existing_import_block_is_replaced(self) -> None:
        text = "import 'dart:math';\n\n" + TWO_CLASSES
        edits = self._plan(text, MemberKind.TO_JSON)
        assert edits[-1] == TextEdit(0, 1, "import 'dart:convert';\nimport 'dart:math';")

    def test_unchanged_classes_have_no_edits(self) -> None:
        text = (
            "class A {\n"
            "  final int a;\n"
            "\n"
            "  @override\n"
            "  String toString() => 'A(a: $a)';\n"
            "}\n"
        )
        assert self._plan(text) == []
