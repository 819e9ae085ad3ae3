"""
Node definitions for the schema graph.

These nodes hold the named schemas of one document before and after
allOf composition is flattened. Property schemas are kept as raw
dictionaries so that wire-format metadata passes through untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class Discriminator:
    """Discriminator metadata of a polymorphic schema."""

    property_name: str = ""

    # Wire tag -> schema name, in declaration order
    mapping: dict[str, str] = field(default_factory=dict)

    def to_dict(self, schemas_pointer: str) -> dict[str, Any]:
        d: dict[str, Any] = {"propertyName": self.property_name}
        if self.mapping:
            d["mapping"] = {tag: f"#/{schemas_pointer}/{name}" for tag, name in self.mapping.items()}
        return d


@dataclass
class RefMember:
    """A composition member pointing at another named schema."""

    name: str = ""


@dataclass
class InlineMember:
    """A composition member declared inline inside the allOf list."""

    properties: dict[str, Any] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    discriminator: Discriminator | None = None

    # Any other keys of the inline fragment (description, x-* extensions, ...)
    extra: dict[str, Any] = field(default_factory=dict)


CompositionMember = RefMember | InlineMember


@dataclass
class SchemaNode:
    """A named schema."""

    name: str = ""
    properties: dict[str, Any] = field(default_factory=dict)

    # None means the schema carries no "required" attribute at all
    required: list[str] | None = None

    composed_from: list[CompositionMember] = field(default_factory=list)
    discriminator: Discriminator | None = None

    # Remaining raw keys, kept in their original order
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def is_flat(self) -> bool:
        return not self.composed_from

    def to_dict(self, schemas_pointer: str, include_discriminator: bool = True) -> dict[str, Any]:
        """Serialize back to a raw schema dictionary."""
        d: dict[str, Any] = {}
        for key, value in self.extra.items():
            d[key] = value
        if self.composed_from:
            d["allOf"] = [_member_to_dict(m, schemas_pointer) for m in self.composed_from]
        if self.properties:
            d["properties"] = self.properties
        if self.required:
            d["required"] = list(self.required)
        if include_discriminator and self.discriminator is not None:
            d["discriminator"] = self.discriminator.to_dict(schemas_pointer)
        return d


def _member_to_dict(member: CompositionMember, schemas_pointer: str) -> dict[str, Any]:
    if isinstance(member, RefMember):
        return {"$ref": f"#/{schemas_pointer}/{member.name}"}
    d: dict[str, Any] = dict(member.extra)
    if member.properties:
        d["properties"] = member.properties
    if member.required:
        d["required"] = list(member.required)
    if member.discriminator is not None:
        d["discriminator"] = member.discriminator.to_dict(schemas_pointer)
    return d


@dataclass
class SchemaDocument:
    """One loaded schema document."""

    path: Path | None = None

    # The whole parsed document, including paths, info, etc.
    raw: dict[str, Any] = field(default_factory=dict)

    # Named schemas in declaration order
    nodes: dict[str, SchemaNode] = field(default_factory=dict)

    # Slash-separated location of the named schemas, e.g. "components/schemas"
    schemas_pointer: str = "components/schemas"

    @property
    def info(self) -> dict[str, Any]:
        info = self.raw.get("info")
        return info if isinstance(info, dict) else {}

    @property
    def title(self) -> str:
        return str(self.info.get("title", "")).strip()

    @property
    def description(self) -> str:
        return str(self.info.get("description", "")).strip()

    @property
    def version(self) -> str:
        return str(self.info.get("version", "")).strip()

    def discriminated_nodes(self) -> list[SchemaNode]:
        """Nodes carrying a discriminator with an explicit mapping, in declaration order."""
        return [node for node in self.nodes.values() if node.discriminator is not None and node.discriminator.mapping]
