"""
Pipeline - allOf flattening and discriminated union synthesis.

This module wraps an external OpenAPI code generator in two phases:

1. Phase 1 (Loader): Parse the schema document into a graph of named schemas
2. Phase 2 (Flattener): Merge allOf composition into flat object schemas
3. Phase 3 (External): Run the code generator on the flattened document
4. Phase 4 (Reader): Recover field lists from the generated structures
5. Phase 5 (Synthesizer): Build a union per discriminated schema
6. Phase 6 (Backend + Writer): Render the union and write it atomically
"""

from __future__ import annotations

from .config import PipelineConfig, ProjectEntry, ProjectManifest, SynthesisStrategy
from .errors import (
    CompositionCycleError,
    DocumentLoadError,
    GenerationFailure,
    PipelineError,
    SchemaError,
    UnionWriteError,
    UnresolvedReferenceError,
)
from .orchestrator import DocumentJob, DocumentSummary, PipelineOrchestrator, RunSummary
from .writer import AtomicWriter

__all__ = [
    "AtomicWriter",
    "CompositionCycleError",
    "DocumentJob",
    "DocumentLoadError",
    "DocumentSummary",
    "GenerationFailure",
    "PipelineConfig",
    "PipelineError",
    "PipelineOrchestrator",
    "ProjectEntry",
    "ProjectManifest",
    "RunSummary",
    "SchemaError",
    "SynthesisStrategy",
    "UnionWriteError",
    "UnresolvedReferenceError",
]
