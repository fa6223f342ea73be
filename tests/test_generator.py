"""End-to-end tests for buffer generation and JSON conversion."""

from dart_data_class.codegen import generate_data_classes, generate_from_json
from dart_data_class.codegen.core.generator import (
    MalformedInputError,
    NoClassesFoundError,
    UnsupportedShapeError,
)
from dart_data_class.codegen.languages.dart.generator import (
    NO_CLASSES_MESSAGE,
    SEPARATE_QUESTION,
)
from dart_data_class.codegen.languages.dart.inference import (
    MALFORMED_MESSAGE,
    PRIMITIVE_ARRAY_MESSAGE,
)
from dart_data_class.codegen.languages.dart.members import MemberKind


STALE_TO_STRING = """class Point {
  final int x;
  final int y;

  @override
  String toString() => 'Point(x: $x)';
}
"""

NESTED = '{"name": "x", "address": {"city": "y"}, "tags": [{"label": "a"}]}'


class Recorder:
    """Confirmation callback returning a fixed answer."""

    def __init__(self, answer):
        self.answer = answer
        self.questions = []

    def __call__(self, question):
        self.questions.append(question)
        return self.answer


class TestPointClass:
    """Tests for a plain class with two fields."""

    def test_members(self, run, point_source) -> None:
        code = run(point_source).code
        assert "  Point({\n    required this.x,\n    required this.y,\n  });" in code
        assert "'x': x," in code
        assert "x: map['x']," in code
        assert "String toString() => 'Point(x: $x, y: $y)';" in code
        assert "other.x == x &&" in code
        assert "other.y == y;" in code
        assert "int get hashCode => x.hashCode ^ y.hashCode;" in code

    def test_member_order(self, run, point_source) -> None:
        code = run(point_source).code
        markers = [
            "final int y;",
            "Point({",
            "Point copyWith(",
            "toMap()",
            "Point.fromMap(",
            "toJson()",
            "Point.fromJson(",
            "toString()",
            "operator ==",
            "hashCode",
        ]
        positions = [code.index(marker) for marker in markers]
        assert positions == sorted(positions)

    def test_import_is_added(self, run, point_source) -> None:
        code = run(point_source).code
        assert code.startswith("import 'dart:convert';\n\nclass Point {\n")

    def test_metadata(self, run, point_source) -> None:
        result = run(point_source)
        assert result.metadata["classes"] == ["Point"]
        assert result.metadata["flavor"] == "dart"
        assert len(result.edits) == 2

    def test_second_run_is_a_no_op(self, run, point_source) -> None:
        first = run(point_source)
        second = run(first.code)
        assert second.edits == []
        assert second.code == first.code

    def test_whitespace_changes_are_not_rewritten(self, run, point_source) -> None:
        code = run(point_source).code
        reformatted = code.replace(
            "    return other is Point &&\n      other.x == x &&\n      other.y == y;",
            "    return other is Point && other.x==x && other.y==y;",
        )
        assert reformatted != code
        assert run(reformatted).edits == []

    def test_stale_member_is_replaced(self, run, point_source) -> None:
        code = run(point_source).code
        stale = code.replace("      'y': y,\n", "")
        result = run(stale)
        assert len(result.edits) == 1
        assert result.code == code


class TestBuffers:
    """Tests for buffers with several or invalid classes."""

    def test_two_classes(self, run) -> None:
        text = "class A {\n  final int a;\n}\n\nclass B {\n  final int b;\n}\n"
        code = run(text).code
        assert code.index("class A") < code.index("A copyWith(") < code.index("class B")
        assert code.index("class B") < code.index("B copyWith(")

    def test_class_filter(self) -> None:
        text = "class A {\n  final int a;\n}\n\nclass B {\n  final int b;\n}\n"
        result = generate_data_classes(text, class_name="B", selector=MemberKind.TO_STRING)
        assert "'B(b: $b)'" in result.code
        assert "'A(a: $a)'" not in result.code

    def test_invalid_class_is_reported(self, run) -> None:
        text = "class Empty {\n}\n\nclass Point {\n  final int x;\n}\n"
        result = run(text)
        assert result.warnings == ["Empty: Class must have at least one property!"]
        assert "Point copyWith(" in result.code

    def test_no_classes(self) -> None:
        result = generate_data_classes("void main() {}\n")
        assert not result.success
        assert isinstance(result.exception, NoClassesFoundError)
        assert result.error_message == NO_CLASSES_MESSAGE


class TestReview:
    """Tests for confirming overrides of existing members."""

    def test_accepted_override(self) -> None:
        confirm = Recorder(True)
        result = generate_data_classes(
            STALE_TO_STRING, selector=MemberKind.TO_STRING, confirm=confirm
        )
        assert "String toString() => 'Point(x: $x, y: $y)';" in result.code
        assert confirm.questions == [
            "Do you want to override changes in Point? "
            "Custom changes to existing members will be lost."
        ]

    def test_declined_override(self) -> None:
        result = generate_data_classes(
            STALE_TO_STRING, selector=MemberKind.TO_STRING, confirm=Recorder(False)
        )
        assert result.success
        assert result.edits == []
        assert result.code == STALE_TO_STRING

    def test_cancelled_override(self) -> None:
        result = generate_data_classes(
            STALE_TO_STRING, selector=MemberKind.TO_STRING, confirm=Recorder(None)
        )
        assert not result.success
        assert result.cancelled

    def test_per_member_questions(self) -> None:
        confirm = Recorder(False)
        result = generate_data_classes(
            STALE_TO_STRING,
            config={"override_manual": True},
            selector=MemberKind.TO_STRING,
            confirm=confirm,
        )
        assert confirm.questions == ["Do you want to override toString in Point?"]
        assert result.edits == []

    def test_appends_need_no_confirmation(self, point_source) -> None:
        confirm = Recorder(None)
        result = generate_data_classes(point_source, confirm=confirm)
        assert result.success
        assert confirm.questions == []


class TestFromJson:
    """Tests for converting JSON documents."""

    def test_single_class(self) -> None:
        result = generate_from_json('{"id": 1, "tags": ["a", "b"]}', "Item")
        assert result.success
        assert len(result.files) == 1
        generated = result.files[0]
        assert generated.name == "item.dart"
        assert generated.is_current_buffer
        assert "final int id;" in generated.content
        assert "final List<String> tags;" in generated.content
        assert "id: map['id']?.toInt()," in generated.content
        assert "tags: List<String>.from(map['tags'])," in generated.content
        assert result.metadata["classes"] == ["Item"]
        assert result.code == generated.content

    def test_json_names_are_map_keys(self) -> None:
        content = generate_from_json('{"first-name": "a"}', "Person").files[0].content
        assert "final String firstName;" in content
        assert "'first-name': firstName," in content
        assert "firstName: map['first-name']," in content

    def test_doubles(self) -> None:
        content = generate_from_json('{"price": 1.5}', "Product").files[0].content
        assert "price: map['price']?.toDouble()," in content

    def test_timestamps(self) -> None:
        result = generate_from_json(
            '{"createdAt": "2021-03-04T10:00:00Z"}',
            "Event",
            config={"json_detect_timestamps": True},
        )
        content = result.files[0].content
        assert "final DateTime createdAt;" in content
        assert "'createdAt': createdAt.toIso8601String()," in content
        assert "createdAt: DateTime.parse(map['createdAt'])," in content

    def test_separate_files(self) -> None:
        result = generate_from_json(NESTED, "User", separate=True)
        assert [f.name for f in result.files] == ["user.dart", "address.dart", "tag.dart"]
        assert [f.is_current_buffer for f in result.files] == [True, False, False]
        user = result.files[0].content
        assert "import 'address.dart';\nimport 'tag.dart';" in user
        assert "class Address" not in user
        assert "import 'user.dart';" not in result.files[1].content

    def test_single_file(self) -> None:
        result = generate_from_json(NESTED, "User", separate=False)
        assert len(result.files) == 1
        content = result.files[0].content
        assert content.startswith("import 'dart:convert';\n")
        assert content.index("class User") < content.index("class Address") < content.index("class Tag")
        assert content.endswith("}\n")

    def test_separate_policy_from_config(self) -> None:
        result = generate_from_json(NESTED, "User", config={"json_separate": "always"})
        assert len(result.files) == 3

    def test_asks_whether_to_separate(self) -> None:
        confirm = Recorder(False)
        result = generate_from_json(NESTED, "User", confirm=confirm)
        assert confirm.questions == [SEPARATE_QUESTION]
        assert len(result.files) == 1

    def test_separation_question_cancelled(self) -> None:
        result = generate_from_json(NESTED, "User", confirm=Recorder(None))
        assert result.cancelled

    def test_single_class_is_never_asked_about(self) -> None:
        confirm = Recorder(True)
        result = generate_from_json('{"a": 1}', "Root", confirm=confirm)
        assert confirm.questions == []
        assert len(result.files) == 1

    def test_malformed(self) -> None:
        result = generate_from_json('{"a": ', "Root")
        assert not result.success
        assert isinstance(result.exception, MalformedInputError)
        assert result.error_message == MALFORMED_MESSAGE

    def test_primitive_array(self) -> None:
        result = generate_from_json("[1, 2, 3]", "Root")
        assert isinstance(result.exception, UnsupportedShapeError)
        assert result.error_message == PRIMITIVE_ARRAY_MESSAGE
