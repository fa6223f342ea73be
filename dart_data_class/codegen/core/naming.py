"""
Naming utilities for safe code generation.

Handles name sanitization, case conversions, keyword conflicts,
and other naming concerns of the generated code.
"""

import re
from typing import Set, Dict, Optional
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""
    PRESERVE = "preserve"     # user_Name (only invalid characters touched)
    SNAKE_CASE = "snake"      # user_name
    CAMEL_CASE = "camel"      # userName
    PASCAL_CASE = "pascal"    # UserName


# Characters that split an identifier into words
_WORD_SEPARATORS = re.compile(r"[^A-Za-z0-9_]+")


class NameSanitizer:
    """Handles name sanitization and case conversion.

    The mapping is a pure function of its input: the same name always
    sanitizes to the same result, independent of call order.
    """

    def __init__(self, reserved_words: Set[str] = None, builtin_types: Set[str] = None,
                 digit_prefix: str = "n", fallback: str = "field"):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin type names that might conflict
            digit_prefix: Prefix for names starting with a digit
            fallback: Name used when nothing valid is left
        """
        self.reserved_words = reserved_words or set()
        self.builtin_types = builtin_types or set()
        self.digit_prefix = digit_prefix
        self.fallback = fallback
        self._name_cache: Dict[str, str] = {}

    def sanitize_name(self, name: str, target_case: NamingCase = NamingCase.PRESERVE) -> str:
        """
        Sanitize a name for safe use in target language.

        Args:
            name: Original name to sanitize
            target_case: Desired case style

        Returns:
            Sanitized name safe for use
        """
        cache_key = f"{name}_{target_case.value}"
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        # Step 1: Join words split by invalid characters
        cleaned = self._clean_basic(name)

        # Step 2: Convert to target case
        converted = self._convert_case(cleaned, target_case)

        # Step 3: Handle conflicts
        final_name = self._resolve_conflicts(converted)

        self._name_cache[cache_key] = final_name
        return final_name

    def _clean_basic(self, name: str) -> str:
        """Basic name cleanup - camel-join words around invalid characters."""
        words = [w for w in _WORD_SEPARATORS.split(name) if w]

        if not words:
            return self.fallback

        return words[0] + "".join(capitalize(w) for w in words[1:])

    def _convert_case(self, name: str, target_case: NamingCase) -> str:
        """Convert name to target case style."""
        if target_case == NamingCase.SNAKE_CASE:
            return to_snake_case(name)
        elif target_case == NamingCase.CAMEL_CASE:
            pascal = to_pascal_case(name)
            return pascal[:1].lower() + pascal[1:]
        elif target_case == NamingCase.PASCAL_CASE:
            return to_pascal_case(name)
        else:
            return name

    def _resolve_conflicts(self, name: str) -> str:
        """Resolve naming conflicts with reserved words and leading digits."""
        if name in self.reserved_words or name in self.builtin_types:
            name = self.escape_reserved(name)

        if name and name[0].isdigit():
            name = f"{self.digit_prefix}{name}"

        return name

    def escape_reserved(self, name: str) -> str:
        """Return an alternate spelling for a reserved word."""
        return f"{name}_"


def capitalize(source: str) -> str:
    """Uppercase the first character only, leaving the rest untouched."""
    return source[:1].upper() + source[1:]


def to_snake_case(name: str) -> str:
    """Convert to snake_case."""
    name = name.replace("-", "_")
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    name = name.lower()
    name = re.sub(r"_+", "_", name)
    return name.strip("_")


def to_pascal_case(name: str) -> str:
    """Convert to PascalCase, keeping inner capitals of camelCase words."""
    parts = re.split(r"[_\-\s]+", name)
    return "".join(capitalize(part) for part in parts if part)


def singularize(word: str) -> str:
    """Naive singular form used for list element class names.

    ``categories`` becomes ``category``; a single trailing ``s`` is dropped.
    """
    if word.endswith("ies"):
        word = word[: -len("ies")] + "y"
    if word.endswith("s"):
        word = word[:-1]
    return word


def create_file_name(class_name: str, taken: Optional[Set[str]] = None) -> str:
    """
    Derive a snake_case file stem from a PascalCase class name.

    Args:
        class_name: Class name, e.g. ``UserProfile``
        taken: Stems already in use; a numeric suffix is added on collision

    Returns:
        File stem such as ``user_profile`` or ``user_profile_1``
    """
    stem = to_snake_case(class_name) or "generated"
    if not taken or stem not in taken:
        return stem

    counter = 1
    while f"{stem}_{counter}" in taken:
        counter += 1
    return f"{stem}_{counter}"
