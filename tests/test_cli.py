"""Tests for the command-line interface."""

import json
from unittest.mock import MagicMock, patch

import pytest

from dart_data_class.cli import create_parser, main, make_confirm, write_generated_files
from dart_data_class.codegen.core.generator import GeneratedFile, UserCancelledError


POINT = "class Point {\n  final int x;\n  final int y;\n}\n"
STALE = """class Point {
  final int x;
  final int y;

  @override
  String toString() => 'Point(x: $x)';
}
"""
NESTED = {"name": "x", "address": {"city": "y"}}


class TestParser:
    """Tests for argument parsing."""

    def test_generate_arguments(self) -> None:
        args = create_parser().parse_args(
            ["generate", "a.dart", "--member", "toMap", "--class", "User", "-y"]
        )
        assert args.file == "a.dart"
        assert args.member == "toMap"
        assert args.class_name == "User"
        assert args.yes

    def test_from_json_needs_a_source(self) -> None:
        with pytest.raises(SystemExit):
            create_parser().parse_args(["from-json", "--name", "User"])

    def test_no_command(self) -> None:
        assert main([]) == 1


class TestGenerateCommand:
    """Tests for ``generate``."""

    def test_writes_members(self, tmp_path) -> None:
        path = tmp_path / "point.dart"
        path.write_text(POINT)
        assert main(["generate", str(path), "--yes"]) == 0
        content = path.read_text()
        assert "Point copyWith(" in content
        assert content.startswith("import 'dart:convert';")

    def test_second_run_leaves_file_alone(self, tmp_path) -> None:
        path = tmp_path / "point.dart"
        path.write_text(POINT)
        main(["generate", str(path), "--yes"])
        first = path.read_text()
        assert main(["generate", str(path), "--yes"]) == 0
        assert path.read_text() == first

    def test_dry_run(self, tmp_path) -> None:
        path = tmp_path / "point.dart"
        path.write_text(POINT)
        assert main(["generate", str(path), "--yes", "--dry-run"]) == 0
        assert path.read_text() == POINT

    def test_single_member(self, tmp_path) -> None:
        path = tmp_path / "point.dart"
        path.write_text(POINT)
        assert main(["generate", str(path), "--yes", "--member", "toString"]) == 0
        content = path.read_text()
        assert "String toString() => 'Point(x: $x, y: $y)';" in content
        assert "copyWith" not in content

    def test_declined_override(self, tmp_path) -> None:
        path = tmp_path / "point.dart"
        path.write_text(STALE)
        with patch("dart_data_class.cli.Confirm.ask", return_value=False) as mock_ask:
            assert main(["generate", str(path), "--member", "toString"]) == 0
        mock_ask.assert_called_once()
        assert path.read_text() == STALE

    def test_no_classes(self, tmp_path) -> None:
        path = tmp_path / "main.dart"
        path.write_text("void main() {}\n")
        assert main(["generate", str(path), "--yes"]) == 1

    def test_missing_file(self, tmp_path) -> None:
        assert main(["generate", str(tmp_path / "missing.dart")]) == 1

    def test_config_file(self, tmp_path) -> None:
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"copyWith.enabled": False}))
        path = tmp_path / "point.dart"
        path.write_text(POINT)
        assert main(["generate", str(path), "--yes", "--config", str(config)]) == 0
        assert "copyWith" not in path.read_text()

    def test_bad_config_file(self, tmp_path) -> None:
        path = tmp_path / "point.dart"
        path.write_text(POINT)
        assert main(["generate", str(path), "--config", str(tmp_path / "nope.json")]) == 1


class TestFromJsonCommand:
    """Tests for ``from-json``."""

    @patch("dart_data_class.cli.time.sleep")
    def test_separate_files(self, mock_sleep, tmp_path) -> None:
        source = tmp_path / "user.json"
        source.write_text(json.dumps(NESTED))
        code = main(
            ["from-json", str(source), "--name", "User", "--separate", "always", "--yes"]
        )
        assert code == 0
        assert "class User" in (tmp_path / "user.dart").read_text()
        assert "class Address" in (tmp_path / "address.dart").read_text()
        mock_sleep.assert_called_once_with(pytest.approx(0.12))

    @patch("dart_data_class.cli.time.sleep")
    def test_output_dir(self, mock_sleep, tmp_path) -> None:
        source = tmp_path / "user.json"
        source.write_text(json.dumps(NESTED))
        out = tmp_path / "models"
        code = main(
            [
                "from-json",
                str(source),
                "--name",
                "User",
                "--separate",
                "never",
                "--output-dir",
                str(out),
                "--yes",
            ]
        )
        assert code == 0
        assert sorted(p.name for p in out.iterdir()) == ["user.dart"]
        mock_sleep.assert_not_called()

    def test_dry_run_writes_nothing(self, tmp_path) -> None:
        source = tmp_path / "user.json"
        source.write_text(json.dumps(NESTED))
        assert main(["from-json", str(source), "--name", "User", "--dry-run", "--yes"]) == 0
        assert not (tmp_path / "user.dart").exists()

    def test_malformed_json(self, tmp_path) -> None:
        source = tmp_path / "bad.json"
        source.write_text('{"a": ')
        assert main(["from-json", str(source), "--name", "Bad", "--yes"]) == 1

    @patch("dart_data_class.utils.requests.get")
    def test_url(self, mock_get, tmp_path) -> None:
        response = MagicMock()
        response.text = json.dumps({"id": 1})
        response.headers = {"content-type": "application/json"}
        mock_get.return_value = response
        code = main(
            [
                "from-json",
                "--url",
                "https://example.com/item.json",
                "--name",
                "Item",
                "--output-dir",
                str(tmp_path),
                "--yes",
            ]
        )
        assert code == 0
        assert "class Item" in (tmp_path / "item.dart").read_text()


class TestWriteGeneratedFiles:
    """Tests for writing JSON conversion output."""

    def test_writes_in_order(self, tmp_path) -> None:
        files = [GeneratedFile("a.dart", "a", True), GeneratedFile("b.dart", "b")]
        written = write_generated_files(files, tmp_path, 0)
        assert written == [tmp_path / "a.dart", tmp_path / "b.dart"]
        assert (tmp_path / "b.dart").read_text() == "b"

    def test_declined_overwrite_keeps_earlier_files(self, tmp_path) -> None:
        (tmp_path / "b.dart").write_text("old")
        files = [GeneratedFile("a.dart", "a", True), GeneratedFile("b.dart", "b")]
        written = []
        with pytest.raises(UserCancelledError):
            write_generated_files(files, tmp_path, 0, lambda q: False, written)
        assert written == [tmp_path / "a.dart"]
        assert (tmp_path / "b.dart").read_text() == "old"

    def test_accepted_overwrite(self, tmp_path) -> None:
        (tmp_path / "a.dart").write_text("old")
        files = [GeneratedFile("a.dart", "new", True)]
        write_generated_files(files, tmp_path, 0, lambda q: True)
        assert (tmp_path / "a.dart").read_text() == "new"


class TestConfirm:
    """Tests for the interactive confirmation callback."""

    def test_yes_skips_questions(self) -> None:
        assert make_confirm(True) is None

    @patch("dart_data_class.cli.Confirm.ask", return_value=False)
    def test_answer_is_returned(self, mock_ask) -> None:
        assert make_confirm(False)("Continue?") is False

    @patch("dart_data_class.cli.Confirm.ask", side_effect=KeyboardInterrupt)
    def test_interrupt_cancels(self, mock_ask) -> None:
        assert make_confirm(False)("Continue?") is None


class TestConfigCommand:
    """Tests for ``config``."""

    def test_writes_example(self, tmp_path) -> None:
        out = tmp_path / "config.json"
        assert main(["config", "--example", "--output", str(out)]) == 0
        data = json.loads(out.read_text())
        assert data["hash_code_strategy"] == "combinator"
        assert data["json_separate"] == "always"

    def test_show_defaults(self) -> None:
        assert main(["config"]) == 0

