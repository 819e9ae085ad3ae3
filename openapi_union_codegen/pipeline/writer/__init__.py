"""
Writer module.

Provides atomic, validated writes of generated files.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter

__all__ = [
    "AtomicWriter",
]
