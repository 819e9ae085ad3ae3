"""OpenAPI Union Codegen

A Python package that prepares OpenAPI documents for a third-party code
generator by flattening allOf composition, then synthesizes proper
discriminated unions from the structures the generator emits.
"""

__version__ = "0.1.0"

from .pipeline import (
    DocumentJob,
    PipelineConfig,
    PipelineOrchestrator,
    ProjectManifest,
    RunSummary,
    SynthesisStrategy,
)

__all__ = [
    "DocumentJob",
    "PipelineConfig",
    "PipelineOrchestrator",
    "ProjectManifest",
    "RunSummary",
    "SynthesisStrategy",
]
