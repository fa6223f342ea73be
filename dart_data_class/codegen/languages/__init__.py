"""
Language-specific code generators.
"""

from .dart import DartDataClassGenerator

__all__ = ["DartDataClassGenerator"]
