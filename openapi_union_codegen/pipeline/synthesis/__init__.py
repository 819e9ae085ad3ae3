"""
Synthesis module.

Turns discriminator mappings and parsed structures into union definitions.
"""

from __future__ import annotations

from .union_synthesizer import (
    SkipReason,
    Skipped,
    UnionDefinition,
    UnionSynthesizer,
    VariantMapping,
    find_inline_type_references,
    synthesize,
)

__all__ = [
    "SkipReason",
    "Skipped",
    "UnionDefinition",
    "UnionSynthesizer",
    "VariantMapping",
    "find_inline_type_references",
    "synthesize",
]
