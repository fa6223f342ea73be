"""Tests for source loading helpers."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from dart_data_class.utils import (
    JSONLoaderError,
    find_package_name,
    load_json,
    load_json_from_url,
    read_text_file,
    write_text_file,
)


class TestLoadJson:
    """Tests for loading JSON text."""

    def test_from_file(self, tmp_path) -> None:
        path = tmp_path / "data.json"
        path.write_text('{"a": 1}')
        source, text = load_json(file_path=path)
        assert text == '{"a": 1}'
        assert str(path) in source

    def test_needs_exactly_one_source(self, tmp_path) -> None:
        with pytest.raises(JSONLoaderError):
            load_json()
        with pytest.raises(JSONLoaderError):
            load_json(file_path=tmp_path / "a.json", url="https://example.com")

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            read_text_file(tmp_path / "missing.json")

    def test_invalid_url(self) -> None:
        with pytest.raises(JSONLoaderError):
            load_json_from_url("not a url")

    @patch("dart_data_class.utils.requests.get")
    def test_url(self, mock_get) -> None:
        response = MagicMock()
        response.text = "[]"
        response.headers = {"content-type": "application/json"}
        mock_get.return_value = response
        source, text = load_json_from_url("https://example.com/data")
        assert text == "[]"
        mock_get.assert_called_once_with("https://example.com/data", timeout=30)

    @patch("dart_data_class.utils.requests.get", side_effect=requests.exceptions.Timeout)
    def test_url_timeout(self, mock_get) -> None:
        with pytest.raises(JSONLoaderError, match="timeout"):
            load_json_from_url("https://example.com/data.json")


class TestFiles:
    """Tests for writing files and reading pubspec names."""

    def test_write_creates_directories(self, tmp_path) -> None:
        target = write_text_file(tmp_path / "lib" / "models" / "a.dart", "x")
        assert target.read_text() == "x"

    def test_find_package_name(self, tmp_path) -> None:
        (tmp_path / "pubspec.yaml").write_text("name: my_app\nversion: 1.0.0\n")
        assert find_package_name(tmp_path / "lib" / "models" / "user.dart") == "my_app"

    def test_pubspec_without_name(self, tmp_path) -> None:
        (tmp_path / "pubspec.yaml").write_text("version: 1.0.0\n")
        assert find_package_name(tmp_path / "user.dart") is None
