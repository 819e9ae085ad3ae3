"""
Backend module.

Renders union definitions to source code.
"""

from __future__ import annotations

from .base import UnionBackend
from .rust_backend import RustUnionBackend

__all__ = [
    "RustUnionBackend",
    "UnionBackend",
]
