"""
Analyzer module.

Contains reference resolution and allOf flattening.
"""

from __future__ import annotations

from .flattener import CompositionFlattener, flatten, flatten_document, to_flattened_dict
from .reference_resolver import ReferenceResolver

__all__ = [
    "CompositionFlattener",
    "ReferenceResolver",
    "flatten",
    "flatten_document",
    "to_flattened_dict",
]
