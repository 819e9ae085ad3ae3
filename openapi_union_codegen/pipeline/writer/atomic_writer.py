"""
Atomic file writer for generated files.

Ensures that a union file (or a flattened schema document) is either
fully written or not written at all.
"""

from __future__ import annotations

import logging
import re
import tempfile
from collections.abc import Callable
from pathlib import Path

from ..errors import UnionWriteError

logger = logging.getLogger(__name__)


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file

    This ensures that an interrupted or rejected write never leaves
    the target file in an incomplete state.
    """

    def __init__(self, validate_rust: Callable[[str], None] | None = None):
        """Initialize the atomic writer.

        Args:
            validate_rust: Optional validation function for Rust code
        """
        self._validate_rust = validate_rust or self._default_validate_rust

    def write(
        self,
        path: Path,
        content: str,
        language: str,
        validate: bool = True,
    ) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            language: Language for validation ("rust"; anything else is not validated)
            validate: Whether to validate before finalizing

        Raises:
            UnionWriteError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self._validate_content(content, language)

            temp_path.replace(path)
            logger.debug("Wrote %s", path)

        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

    def _validate_content(self, content: str, language: str) -> None:
        if language == "rust":
            self._validate_rust(content)

    def _default_validate_rust(self, content: str) -> None:
        """Default Rust validation.

        Args:
            content: Rust code to validate

        Raises:
            UnionWriteError: If validation fails
        """
        # Structural checks only, there is no Rust parser here
        code = re.sub(r"/\*.*?\*/", "", content, flags=re.DOTALL)
        code = re.sub(r"//[^\n]*", "", code)
        code = re.sub(r'"[^"\n]*"', '""', code)

        if "pub enum " not in code:
            raise UnionWriteError("Generated Rust code has no enum definition")

        if "use serde::" not in code:
            raise UnionWriteError("Generated Rust code is missing the serde import")

        for opening, closing in ("{}", "()", "<>"):
            open_count = code.count(opening)
            close_count = code.count(closing) - (code.count("->") if closing == ">" else 0)
            if open_count != close_count:
                raise UnionWriteError(f"Generated Rust code has unbalanced '{opening}{closing}': {open_count} open, {close_count} close")
