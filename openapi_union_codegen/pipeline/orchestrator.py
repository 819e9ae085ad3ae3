"""
Pipeline orchestrator.

Runs load -> flatten -> external generation -> union synthesis for each
schema document. Stages within a document are strictly ordered; documents
are independent of each other and may be processed concurrently since
they write to disjoint directories.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from ..utils import to_snake_case
from .analyzer.flattener import flatten_document, to_flattened_dict
from .backends.rust_backend import RustUnionBackend
from .config import PipelineConfig
from .errors import PipelineError, UnionWriteError
from .generator_runner import GeneratorRunner
from .reader.structure_reader import DEFAULT_CONTRACT, ExtractionContract, StructureDescriptor, read_structure
from .schema_ast.loader import dump_document, load_document
from .schema_ast.nodes import SchemaDocument
from .synthesis.union_synthesizer import Skipped, UnionSynthesizer
from .writer.atomic_writer import AtomicWriter

logger = logging.getLogger(__name__)


@dataclass
class DocumentJob:
    """One schema document and the package it generates."""

    schema_path: Path
    output_dir: Path
    package_name: str = ""

    def __post_init__(self):
        self.schema_path = Path(self.schema_path)
        self.output_dir = Path(self.output_dir)
        if not self.package_name:
            self.package_name = self.output_dir.name


@dataclass
class DocumentSummary:
    """Outcome of processing one document."""

    schema_path: Path
    package_name: str = ""

    # Discriminated schemas found in the document
    processed: int = 0

    # Names of the unions written
    generated: list[str] = field(default_factory=list)

    skipped: list[Skipped] = field(default_factory=list)

    # Unions rendered but rejected by output validation
    write_errors: list[str] = field(default_factory=list)

    # Fatal error that stopped the document, if any
    error: str | None = None

    flattened_path: Path | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and not self.write_errors

    def describe(self) -> list[str]:
        """Human readable summary lines."""
        if self.error is not None:
            return [f"{self.schema_path}: failed: {self.error}"]
        lines = [
            f"{self.schema_path}: processed {self.processed} discriminated schema(s): "
            f"{len(self.generated)} generated, {len(self.skipped)} skipped"
        ]
        lines.extend(f"  skipped {skipped}" for skipped in self.skipped)
        lines.extend(f"  error {error}" for error in self.write_errors)
        return lines


@dataclass
class RunSummary:
    """Outcome of a whole run, one summary per document in input order."""

    documents: list[DocumentSummary] = field(default_factory=list)

    @property
    def generated(self) -> int:
        return sum(len(d.generated) for d in self.documents)

    @property
    def skipped(self) -> int:
        return sum(len(d.skipped) for d in self.documents)

    @property
    def failed(self) -> list[DocumentSummary]:
        return [d for d in self.documents if not d.ok]

    @property
    def ok(self) -> bool:
        return not self.failed


class PipelineOrchestrator:
    """Sequences the pipeline stages over a set of documents."""

    def __init__(
        self,
        config: PipelineConfig | None = None,
        runner: GeneratorRunner | None = None,
        contract: ExtractionContract = DEFAULT_CONTRACT,
    ):
        self.config = config or PipelineConfig()
        self.runner = runner or GeneratorRunner(self.config)
        self.contract = contract
        self.backend = RustUnionBackend(self.config.models_namespace)
        self.writer = AtomicWriter()

    def run(self, jobs: list[DocumentJob]) -> RunSummary:
        """Process every document and collect their summaries."""
        if self.config.jobs > 1 and len(jobs) > 1:
            with ThreadPoolExecutor(max_workers=self.config.jobs) as executor:
                summaries = list(executor.map(self.process, jobs))
        else:
            summaries = [self.process(job) for job in jobs]
        return RunSummary(documents=summaries)

    def process(self, job: DocumentJob) -> DocumentSummary:
        """Run every stage for one document. Fatal errors end up in the summary."""
        summary = DocumentSummary(schema_path=job.schema_path, package_name=job.package_name)
        logger.info("Processing %s", job.schema_path)
        try:
            document = flatten_document(load_document(job.schema_path))
            summary.flattened_path = self.write_flattened(document, job)
            if not self.config.skip_generation:
                self.runner.run(summary.flattened_path, job.output_dir, job.package_name)
        except (PipelineError, OSError) as e:
            logger.error("Aborting %s: %s", job.schema_path, e)
            summary.error = str(e)
            return summary

        self.synthesize_unions(document, job.output_dir, summary)
        logger.info(summary.describe()[0])
        return summary

    def write_flattened(self, document: SchemaDocument, job: DocumentJob) -> Path:
        """Write the flattened copy of a document to the scratch directory."""
        path = Path(self.config.scratch_dir) / job.package_name / job.schema_path.name
        content = dump_document(to_flattened_dict(document, self.config.strip_discriminators), path.suffix)
        self.writer.write(path, content, "yaml")
        logger.info("Flattened schema written to %s", path)
        return path

    def synthesize_unions(self, document: SchemaDocument, output_dir: Path, summary: DocumentSummary) -> None:
        """Synthesize and write one union per discriminated schema of a flattened document."""
        synthesizer = UnionSynthesizer(self.config.strategy)
        models_dir = Path(output_dir) / self.config.models_dir
        cache: dict[str, StructureDescriptor | None] = {}

        for node in document.discriminated_nodes():
            summary.processed += 1
            structures = {}
            for tag, schema_name in node.discriminator.mapping.items():
                if schema_name not in cache:
                    cache[schema_name] = read_structure(models_dir / f"{to_snake_case(schema_name)}.rs", self.contract)
                structures[tag] = cache[schema_name]

            result = synthesizer.synthesize(node.name, node.discriminator, structures)
            if isinstance(result, Skipped):
                logger.warning("%s, keeping the generated structure", result)
                summary.skipped.append(result)
                continue

            path = models_dir / self.backend.file_name(node.name)
            try:
                self.writer.write(path, self.backend.render(result, document), "rust", validate=self.config.validate_before_write)
            except UnionWriteError as e:
                logger.error("Not writing %s: %s", path, e)
                summary.write_errors.append(f"{node.name}: {e}")
                continue

            logger.info("Generated %s (%d variants)", path, len(result.variants))
            summary.generated.append(node.name)


def run(jobs: list[DocumentJob], config: PipelineConfig | None = None) -> RunSummary:
    """Convenience function to run the pipeline over several documents."""
    return PipelineOrchestrator(config).run(jobs)
