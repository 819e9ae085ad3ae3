"""
Exceptions raised by the pipeline.

Skipped unions are not errors: the synthesizer returns a ``Skipped`` value
instead of raising. Everything here aborts the owning document only.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for errors that abort the processing of one document."""

    pass


class SchemaError(PipelineError):
    """Raised when a schema document cannot be turned into a flat schema graph."""

    pass


class DocumentLoadError(SchemaError):
    """Raised when a schema document cannot be read or parsed.

    This can happen when:
    - The file does not exist or is unreadable
    - The content is neither valid YAML nor valid JSON
    - The document does not contain a mapping of named schemas
    """

    pass


class UnresolvedReferenceError(SchemaError):
    """Raised when a composition member references an undeclared schema."""

    def __init__(self, name: str, referenced_by: str):
        super().__init__(f"Schema '{referenced_by}' references undeclared schema '{name}'")
        self.name = name
        self.referenced_by = referenced_by


class CompositionCycleError(SchemaError):
    """Raised when a chain of allOf references loops back on itself."""

    def __init__(self, chain: list[str]):
        super().__init__(f"Composition cycle: {' -> '.join(chain)}")
        self.chain = chain


class GenerationFailure(PipelineError):
    """Raised when the external code generator exits with a non-zero status."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class UnionWriteError(PipelineError):
    """Raised when rendered union source fails validation before being written."""

    pass
