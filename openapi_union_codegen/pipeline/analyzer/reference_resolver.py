"""
Reference resolver for composition members.

Resolves a referenced schema name to its node in the document.
"""

from __future__ import annotations

from ..errors import UnresolvedReferenceError
from ..schema_ast.nodes import SchemaNode


class ReferenceResolver:
    """Resolves schema names to nodes."""

    def __init__(self, nodes_by_name: dict[str, SchemaNode]):
        """
        Initialize the resolver.

        Args:
            nodes_by_name: All named schemas of the document
        """
        self._definition_cache: dict[str, SchemaNode] = dict(nodes_by_name)

    @property
    def nodes(self) -> dict[str, SchemaNode]:
        return self._definition_cache

    def resolve(self, name: str, referenced_by: str) -> SchemaNode:
        """
        Resolve a schema name.

        Args:
            name: The referenced schema name
            referenced_by: Name of the schema holding the reference (for error messages)

        Returns:
            The referenced SchemaNode

        Raises:
            UnresolvedReferenceError: If no schema with that name exists
        """
        node = self._definition_cache.get(name)
        if node is None:
            raise UnresolvedReferenceError(name, referenced_by)
        return node
