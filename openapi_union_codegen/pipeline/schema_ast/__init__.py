"""
Schema graph module.

Contains the schema node definitions and the document loader.
"""

from __future__ import annotations

from .loader import dump_document, load_document, parse_document
from .nodes import Discriminator, InlineMember, RefMember, SchemaDocument, SchemaNode

__all__ = [
    "Discriminator",
    "InlineMember",
    "RefMember",
    "SchemaDocument",
    "SchemaNode",
    "dump_document",
    "load_document",
    "parse_document",
]
