"""
Template engine wrapper for code generation.

Provides a simple interface for Jinja2 template rendering
with common utilities for code generation.
"""

from typing import Dict, Any, List, Optional
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, DictLoader

from .naming import to_pascal_case, to_snake_case


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(self, template_dir: Optional[Path] = None):
        """
        Initialize template engine.

        Args:
            template_dir: Directory containing template files
        """
        self.template_dir = template_dir
        self._env = None
        self._setup_environment()

    def _setup_environment(self):
        """Setup Jinja2 environment with code generation utilities."""
        if self.template_dir and self.template_dir.exists():
            loader = FileSystemLoader(str(self.template_dir))
        else:
            # Use in-memory templates
            loader = DictLoader({})

        # Generated source is not markup; '<' in generic types must survive
        self._env = Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )

        self._env.filters["snake_case"] = to_snake_case
        self._env.filters["pascal_case"] = to_pascal_case
        self._env.filters["indent_lines"] = self._indent_filter

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template file
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except Exception as e:
            raise TemplateError(f"Failed to render template {template_name}: {str(e)}")

    def render_string(self, template_string: str, context: Dict[str, Any]) -> str:
        """
        Render a template string with the given context.

        Args:
            template_string: Template content as string
            context: Variables to pass to template

        Returns:
            Rendered content
        """
        try:
            template = self._env.from_string(template_string)
            return template.render(**context)
        except Exception as e:
            raise TemplateError(f"Failed to render template string: {str(e)}")

    def add_template(self, name: str, content: str):
        """
        Add an in-memory template.

        Args:
            name: Template name
            content: Template content
        """
        if not isinstance(self._env.loader, DictLoader):
            # Convert to DictLoader to support in-memory templates
            self._env.loader = DictLoader({})

        self._env.loader.mapping[name] = content

    def _indent_filter(self, value: str, spaces: int = 2) -> str:
        """Indent all non-empty lines in a string."""
        indent = " " * spaces
        lines = str(value).split("\n")
        return "\n".join(indent + line if line.strip() else line for line in lines)


# Skeleton of a class inferred from JSON, before members are generated
DART_CLASS_TEMPLATE = """\
class {{ class_name }} {
{% for field in fields %}
{{ indent }}final {{ field.raw_type }} {{ field.name }};
{% endfor %}
}"""

# Default template engine instance
_default_engine = None


def get_default_template_engine() -> TemplateEngine:
    """Get the default template engine instance."""
    global _default_engine
    if _default_engine is None:
        _default_engine = TemplateEngine()
        _default_engine.add_template("dart_class", DART_CLASS_TEMPLATE)

    return _default_engine


def render_dart_class(class_name: str, fields: List[Any], indent: str = "  ") -> str:
    """
    Convenience function to render a Dart class skeleton.

    Args:
        class_name: Name of the class
        fields: Objects with ``raw_type`` and ``name`` attributes
        indent: Indentation of the class body

    Returns:
        Rendered class text without a trailing newline
    """
    engine = get_default_template_engine()
    context = {"class_name": class_name, "fields": fields, "indent": indent}
    return engine.render_template("dart_class", context)
