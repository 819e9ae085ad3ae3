"""
Composition flattener.

Phase 2 of the pipeline: rewrite every allOf composition into one flat
object schema so that the external generator sees self-contained
definitions. Referenced bases are flattened first, so chains of
inheritance end up merged into the leaf.

Discriminators are only meaningful on the union (base) schema. A base's
discriminator is never copied into the schemas composing it; leaving it
there makes the generator emit a broken enum for every child.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from ..errors import CompositionCycleError
from ..schema_ast.nodes import Discriminator, InlineMember, RefMember, SchemaDocument, SchemaNode
from .reference_resolver import ReferenceResolver

logger = logging.getLogger(__name__)


class CompositionFlattener:
    """Flattens allOf composition over one document's schema graph."""

    def __init__(self, nodes_by_name: dict[str, SchemaNode]):
        self.resolver = ReferenceResolver(nodes_by_name)
        self._flattened: dict[str, SchemaNode] = {}
        self._in_progress: list[str] = []

    def flatten(self, node: SchemaNode) -> SchemaNode:
        """
        Flatten one node.

        Args:
            node: The node to flatten, possibly carrying allOf members

        Returns:
            A new node with no composition members. A node that is already
            flat is returned as an equal copy.

        Raises:
            UnresolvedReferenceError: If a $ref member names an undeclared schema
            CompositionCycleError: If the allOf chain references itself
        """
        if node.is_flat:
            return copy.deepcopy(node)

        if node.name in self._in_progress:
            raise CompositionCycleError(self._in_progress[self._in_progress.index(node.name) :] + [node.name])
        self._in_progress.append(node.name)
        try:
            return self._merge(node)
        finally:
            self._in_progress.pop()

    def flatten_all(self) -> dict[str, SchemaNode]:
        """Flatten every known node, in declaration order."""
        return {name: self._flatten_named(node) for name, node in self.resolver.nodes.items()}

    def _flatten_named(self, node: SchemaNode) -> SchemaNode:
        if node.name not in self._flattened:
            self._flattened[node.name] = self.flatten(node)
        return self._flattened[node.name]

    def _merge(self, node: SchemaNode) -> SchemaNode:
        properties: dict[str, Any] = {}
        required: list[str] = []
        discriminator: Discriminator | None = None
        extra: dict[str, Any] = {"type": "object"}

        for member in node.composed_from:
            if isinstance(member, RefMember):
                base = self._flatten_named(self.resolver.resolve(member.name, node.name))
                properties.update(copy.deepcopy(base.properties))
                required.extend(base.required or [])
                if base.discriminator is not None:
                    logger.debug("Not propagating discriminator of %s into %s", base.name, node.name)
            elif isinstance(member, InlineMember):
                properties.update(copy.deepcopy(member.properties))
                required.extend(member.required)
                extra.update(copy.deepcopy(member.extra))
                if member.discriminator is not None:
                    discriminator = copy.deepcopy(member.discriminator)

        properties.update(copy.deepcopy(node.properties))
        required.extend(node.required or [])
        extra.update(copy.deepcopy(node.extra))
        if node.discriminator is not None:
            discriminator = copy.deepcopy(node.discriminator)

        logger.debug("Flattened %s: %d properties from %d members", node.name, len(properties), len(node.composed_from))
        return SchemaNode(
            name=node.name,
            properties=properties,
            required=list(dict.fromkeys(required)) or None,
            discriminator=discriminator,
            extra=extra,
        )


def flatten(node: SchemaNode, nodes_by_name: dict[str, SchemaNode]) -> SchemaNode:
    """Flatten a single node against the named schemas of its document."""
    return CompositionFlattener(nodes_by_name).flatten(node)


def flatten_document(document: SchemaDocument) -> SchemaDocument:
    """Return a copy of the document with every named schema flattened."""
    nodes = CompositionFlattener(document.nodes).flatten_all()
    return SchemaDocument(
        path=document.path,
        raw=document.raw,
        nodes=nodes,
        schemas_pointer=document.schemas_pointer,
    )


def to_flattened_dict(document: SchemaDocument, strip_discriminators: bool = True) -> dict[str, Any]:
    """
    Write the (flattened) nodes back into a copy of the raw document.

    Args:
        document: A flattened document
        strip_discriminators: Drop discriminators from the output so the
            generator emits plain structs for discriminated schemas

    Returns:
        The raw document with its named schemas replaced. A document
        without named schemas is returned as an unchanged copy.
    """
    raw = copy.deepcopy(document.raw)
    schemas: Any = raw
    for key in document.schemas_pointer.split("/"):
        schemas = schemas.get(key) if isinstance(schemas, dict) else None
    if not isinstance(schemas, dict):
        return raw

    for name, node in document.nodes.items():
        if strip_discriminators and node.discriminator is not None:
            logger.info("Removing discriminator from %s", name)
        source = schemas.get(name)
        if isinstance(source, dict) and "allOf" not in source:
            # Never composed: keep the schema as written
            if strip_discriminators:
                source.pop("discriminator", None)
            continue
        schemas[name] = copy.deepcopy(node.to_dict(document.schemas_pointer, include_discriminator=not strip_discriminators))
    return raw
