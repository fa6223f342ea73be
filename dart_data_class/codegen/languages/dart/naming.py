"""
Dart-specific naming utilities and sanitization.

Handles Dart reserved words and identifier rules for generated field names.
"""

from typing import Optional

from ...core.naming import NameSanitizer, NamingCase


# Dart reserved words that cannot be used as identifiers
DART_RESERVED_WORDS = {
    "assert",
    "break",
    "case",
    "catch",
    "class",
    "const",
    "continue",
    "default",
    "do",
    "else",
    "enum",
    "extends",
    "false",
    "final",
    "finally",
    "for",
    "if",
    "in",
    "is",
    "new",
    "null",
    "rethrow",
    "return",
    "super",
    "switch",
    "this",
    "throw",
    "true",
    "try",
    "var",
    "void",
    "while",
    "with",
}


class DartNameSanitizer(NameSanitizer):
    """Sanitizer that respells reserved words instead of suffixing them."""

    def escape_reserved(self, name: str) -> str:
        # class -> cClass, null -> nNull
        return name[0] + name[0].upper() + name[1:]


def create_dart_sanitizer() -> DartNameSanitizer:
    """Create a name sanitizer configured for Dart."""
    return DartNameSanitizer(DART_RESERVED_WORDS, digit_prefix="n", fallback="field")


def to_var_name(source: str, sanitizer: Optional[DartNameSanitizer] = None) -> str:
    """Make a valid Dart variable name from an arbitrary property name.

    ``first-name`` becomes ``firstName``, ``class`` becomes ``cClass`` and
    ``1st`` becomes ``n1st``.
    """
    sanitizer = sanitizer or create_dart_sanitizer()
    return sanitizer.sanitize_name(source, NamingCase.PRESERVE)


def to_class_name(source: str, sanitizer: Optional[DartNameSanitizer] = None) -> str:
    """Make a PascalCase Dart class name from a property name."""
    sanitizer = sanitizer or create_dart_sanitizer()
    return sanitizer.sanitize_name(source, NamingCase.PASCAL_CASE)
