"""
Schema document loader.

Phase 1 of the pipeline: read an OpenAPI or JSON Schema document and
build the graph of named schema nodes with their composition edges.
Nothing is resolved here; a reference is only recorded by name.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from ...utils import ref_name
from ..errors import DocumentLoadError
from .nodes import Discriminator, InlineMember, RefMember, SchemaDocument, SchemaNode

logger = logging.getLogger(__name__)

# Where named schemas live, in lookup order
SCHEMA_LOCATIONS = (
    ("components", "schemas"),
    ("definitions",),
    ("$defs",),
)

YAML_SUFFIXES = {".yaml", ".yml"}


class _NoAliasDumper(yaml.SafeDumper):
    """Safe dumper that never emits anchors, so shared property dicts are written in full."""

    def ignore_aliases(self, data):
        return True


def load_document(path: Path | str) -> SchemaDocument:
    """Load a schema document from disk.

    Raises:
        DocumentLoadError: If the file is missing, unparsable, or not a mapping
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentLoadError(f"Cannot read schema document {path}: {e}") from e

    try:
        if path.suffix.lower() == ".json":
            raw = json.loads(text)
        else:
            raw = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DocumentLoadError(f"Cannot parse schema document {path}: {e}") from e

    document = parse_document(raw)
    document.path = path
    return document


def parse_document(raw: Any) -> SchemaDocument:
    """Build a SchemaDocument from an already parsed document."""
    if not isinstance(raw, dict):
        raise DocumentLoadError(f"Schema document must be a mapping, got {type(raw).__name__}")

    document = SchemaDocument(raw=raw)
    schemas = None
    for location in SCHEMA_LOCATIONS:
        candidate: Any = raw
        for key in location:
            candidate = candidate.get(key) if isinstance(candidate, dict) else None
        if candidate is not None:
            schemas = candidate
            document.schemas_pointer = "/".join(location)
            break

    if schemas is None:
        logger.info("No named schemas found in document")
        return document
    if not isinstance(schemas, dict):
        raise DocumentLoadError(f"'{document.schemas_pointer}' must be a mapping of named schemas")

    for name, schema in schemas.items():
        # Boolean schemas and comment strings are passed through untouched
        if not isinstance(schema, dict):
            continue
        document.nodes[name] = parse_schema_node(name, schema)

    return document


def parse_schema_node(name: str, schema: dict[str, Any]) -> SchemaNode:
    """Parse one named schema."""
    node = SchemaNode(name=name)
    for key, value in schema.items():
        if key == "allOf":
            node.composed_from = [_parse_member(name, member) for member in value or []]
        elif key == "properties":
            node.properties = dict(value or {})
        elif key == "required":
            node.required = list(value or [])
        elif key == "discriminator":
            node.discriminator = _parse_discriminator(value)
        else:
            node.extra[key] = value
    return node


def _parse_member(owner: str, member: Any) -> RefMember | InlineMember:
    if not isinstance(member, dict):
        raise DocumentLoadError(f"allOf member of '{owner}' must be a mapping")
    if "$ref" in member:
        return RefMember(name=ref_name(member["$ref"]))

    inline = InlineMember()
    for key, value in member.items():
        if key == "properties":
            inline.properties = dict(value or {})
        elif key == "required":
            inline.required = list(value or [])
        elif key == "discriminator":
            inline.discriminator = _parse_discriminator(value)
        else:
            inline.extra[key] = value
    return inline


def _parse_discriminator(value: Any) -> Discriminator | None:
    if not isinstance(value, dict):
        return None
    mapping = value.get("mapping") or {}
    return Discriminator(
        property_name=value.get("propertyName", ""),
        mapping={str(tag): ref_name(target) for tag, target in mapping.items()},
    )


def dump_document(raw: dict[str, Any], suffix: str = ".yaml") -> str:
    """Serialize a document deterministically, as YAML or JSON depending on suffix."""
    if suffix.lower() == ".json":
        return json.dumps(raw, indent=2, ensure_ascii=False) + "\n"
    return yaml.dump(
        raw,
        Dumper=_NoAliasDumper,
        sort_keys=False,
        allow_unicode=True,
        width=float("inf"),
    )
