"""
Dart data class generator module.

Scans Dart classes, generates data class members and merges them back into
the source, and infers Dart classes from JSON.
"""

from .generator import DartDataClassGenerator
from .imports import ImportSet
from .inference import JsonInferencer, plan_files
from .members import MemberGenerator, MemberKind, find_part
from .naming import create_dart_sanitizer, to_class_name, to_var_name
from .planner import TextEdit, apply_edits, plan_edits, render_class
from .scanner import DartScanner, scan_classes

__all__ = [
    "DartDataClassGenerator",
    "DartScanner",
    "ImportSet",
    "JsonInferencer",
    "MemberGenerator",
    "MemberKind",
    "TextEdit",
    "apply_edits",
    "create_dart_sanitizer",
    "find_part",
    "plan_edits",
    "plan_files",
    "render_class",
    "scan_classes",
    "to_class_name",
    "to_var_name",
]
