"""
Base class for union rendering backends.

Defines the interface that language-specific backends implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import jinja2

from ..schema_ast.nodes import SchemaDocument
from ..synthesis.union_synthesizer import UnionDefinition


class UnionBackend(ABC):
    """Abstract base class for union rendering backends."""

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    def __init__(self, namespace: str = "models"):
        """
        Initialize the backend.

        Args:
            namespace: Module path the generated model types live in
        """
        self.namespace = namespace
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        self.prefix_template = self.jinja_env.get_template(f"prefix.{self.FILE_EXTENSION}.jinja2")

    @abstractmethod
    def render(self, definition: UnionDefinition, document: SchemaDocument | None = None) -> str:
        """
        Render a union definition to source code.

        Args:
            definition: The synthesized union
            document: The schema document, for the file banner

        Returns:
            Complete source file content
        """

    @abstractmethod
    def file_name(self, union_name: str) -> str:
        """Name of the file the union is written to."""

    def _prepare_header_context(self, document: SchemaDocument | None) -> dict[str, Any]:
        """Prepare the template context for the file banner."""
        if document is None:
            return {"title": "", "description_lines": [], "version": ""}
        return {
            "title": document.title,
            "description_lines": document.description.splitlines(),
            "version": document.version,
        }
