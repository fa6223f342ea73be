"""Utility functions for loading sources and writing generated files.

This module provides functions for loading Dart and JSON text from files and
URLs with proper error handling. JSON text is returned unparsed; parsing and
its errors belong to the generator.
"""

import re
from pathlib import Path
from urllib.parse import urlparse

import requests

from .logging_config import get_logger

logger = get_logger(__name__)

_PUBSPEC_NAME = re.compile(r"""^name:\s*['"]?([A-Za-z0-9_]+)""")


class JSONLoaderError(Exception):
    """Custom exception for source loading errors."""

    pass


def read_text_file(file_path: str | Path) -> str:
    """Read a UTF-8 text file.

    Args:
        file_path: Path to the file.

    Returns:
        File content.

    Raises:
        FileNotFoundError: If file doesn't exist.
        JSONLoaderError: If file cannot be read.
    """
    file_path = Path(file_path)
    logger.debug(f"Reading file: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise FileNotFoundError(f"File not found: {file_path}")

    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading file {file_path}: {e}", exc_info=True)
        raise JSONLoaderError(f"Error reading file {file_path}: {e}") from e


def load_json_from_file(file_path: str | Path) -> tuple[str, str]:
    """Load JSON text from a local file.

    Args:
        file_path: Path to the JSON file.

    Returns:
        Tuple of (source description, JSON text).
    """
    file_path = Path(file_path)
    if file_path.suffix.lower() != ".json":
        logger.warning(f"File does not have .json extension: {file_path}")
        # Don't raise, just warn - might still be valid JSON

    text = read_text_file(file_path)
    logger.info(f"Loaded JSON text from {file_path}")
    return f"📄 {file_path}", text


def load_json_from_url(url: str, timeout: int = 30) -> tuple[str, str]:
    """Load JSON text from a URL.

    Args:
        url: URL to fetch JSON from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, JSON text).

    Raises:
        JSONLoaderError: If URL is invalid or the request fails.
    """
    logger.debug(f"Attempting to load JSON from URL: {url}")

    # Validate URL
    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error(f"Invalid URL format: {url}")
        raise JSONLoaderError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()

        # Check content type
        content_type = response.headers.get("content-type", "").lower()
        if "application/json" not in content_type and not url.endswith(".json"):
            logger.warning(f"URL {url} does not have JSON content type: {content_type}")

        logger.info(f"Successfully loaded JSON from {url}")
        return f"🌐 {url}", response.text

    except requests.exceptions.Timeout:
        logger.error(f"Request timeout for URL: {url}")
        raise JSONLoaderError(f"Request timeout for URL: {url}")
    except requests.exceptions.ConnectionError as e:
        logger.error(f"Connection error for URL {url}: {e}")
        raise JSONLoaderError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error(f"HTTP error {e.response.status_code} for URL: {url}")
        raise JSONLoaderError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error for URL {url}: {e}", exc_info=True)
        raise JSONLoaderError(f"Request error for URL {url}: {e}") from e


def load_json(
    file_path: str | Path | None = None,
    url: str | None = None,
    timeout: int = 30,
) -> tuple[str, str]:
    """Load JSON text from either a file or URL.

    Args:
        file_path: Path to local JSON file (mutually exclusive with url).
        url: URL to fetch JSON from (mutually exclusive with file_path).
        timeout: Request timeout in seconds (only used for URLs).

    Returns:
        Tuple of (source description, JSON text).

    Raises:
        JSONLoaderError: If neither or both parameters are provided, or loading fails.
        FileNotFoundError: If file doesn't exist.
    """
    if not file_path and not url:
        logger.error("Neither file_path nor url provided")
        raise JSONLoaderError("Either file_path or url must be provided")

    if file_path and url:
        logger.error("Both file_path and url provided")
        raise JSONLoaderError("Cannot specify both file_path and url")

    if file_path:
        return load_json_from_file(file_path)
    else:
        return load_json_from_url(url, timeout)


def write_text_file(file_path: str | Path, content: str) -> Path:
    """Write UTF-8 text, creating parent directories as needed."""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content, encoding="utf-8")
    logger.debug(f"Wrote {file_path}")
    return file_path


def find_package_name(start: str | Path) -> str | None:
    """Find the Dart package name from the nearest ``pubspec.yaml``.

    Args:
        start: File or directory inside the project.

    Returns:
        The ``name:`` entry of the pubspec, or None when there is none.
    """
    start = Path(start).resolve()
    directory = start if start.is_dir() else start.parent

    for candidate in [directory, *directory.parents]:
        pubspec = candidate / "pubspec.yaml"
        if not pubspec.is_file():
            continue
        for line in read_text_file(pubspec).splitlines():
            match = _PUBSPEC_NAME.match(line)
            if match:
                return match.group(1)
        logger.warning(f"No name entry in {pubspec}")
        return None
    return None
