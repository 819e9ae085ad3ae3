"""
Reader module.

Recovers field lists from the structures written by the external generator.
"""

from __future__ import annotations

from .structure_reader import (
    DEFAULT_CONTRACT,
    OPENAPI_GENERATOR_RUST_7,
    ExtractionContract,
    FieldDescriptor,
    StructureDescriptor,
    parse_structure,
    read_structure,
)

__all__ = [
    "DEFAULT_CONTRACT",
    "OPENAPI_GENERATOR_RUST_7",
    "ExtractionContract",
    "FieldDescriptor",
    "StructureDescriptor",
    "parse_structure",
    "read_structure",
]
