"""
Tests for the pipeline orchestrator.

The external generator is replaced by a stub that copies the conformance
fixtures into the package's models directory.
"""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from openapi_union_codegen.pipeline import DocumentJob, PipelineConfig, PipelineOrchestrator, SynthesisStrategy
from openapi_union_codegen.pipeline.errors import GenerationFailure
from openapi_union_codegen.pipeline.generator_runner import GeneratorRunner
from openapi_union_codegen.pipeline.synthesis import SkipReason

FIXTURES_DIR = Path(__file__).parent / "test_data" / "openapi_generator_7"
SCHEMAS_DIR = Path(__file__).parent / "test_data" / "schemas"


class StubRunner(GeneratorRunner):
    """Pretends to be the generator by copying fixture models."""

    def __init__(self, config, exclude=(), fail=False):
        super().__init__(config)
        self.exclude = set(exclude)
        self.fail = fail
        self.calls = []

    def run(self, schema_path, output_dir, package_name):
        self.calls.append((Path(schema_path), Path(output_dir), package_name))
        if self.fail:
            raise GenerationFailure("generator exited with status 1", returncode=1)
        models = Path(output_dir) / self.config.models_dir
        models.mkdir(parents=True, exist_ok=True)
        for fixture in FIXTURES_DIR.glob("*.rs"):
            if fixture.name not in self.exclude:
                shutil.copy(fixture, models / fixture.name)
        # The generator also emits the discriminated base schemas as structs
        (models / "message.rs").write_text("pub struct Message {\n}\n")
        (models / "action.rs").write_text("pub struct Action {\n}\n")


@pytest.fixture
def config(tmp_path):
    return PipelineConfig(scratch_dir=str(tmp_path / "tmp"))


def job_for(tmp_path, schema="messaging.yml", package="line-bot-messaging-api"):
    return DocumentJob(schema_path=SCHEMAS_DIR / schema, output_dir=tmp_path / "packages" / package, package_name=package)


class TestProcess:
    def test_generates_union_and_skips_inline_reference(self, tmp_path, config):
        runner = StubRunner(config)
        summary = PipelineOrchestrator(config, runner).process(job_for(tmp_path))

        assert summary.ok
        assert summary.processed == 2
        assert summary.generated == ["Message"]
        assert [s.reason for s in summary.skipped] == [SkipReason.INLINE_TYPE_REFERENCE]
        assert summary.skipped[0].union_name == "Action"

        models = tmp_path / "packages" / "line-bot-messaging-api" / "src" / "models"
        message = (models / "message.rs").read_text()
        assert "pub enum Message {" in message
        assert "impl From<models::FlexMessage> for Message" in message
        # Skipped union keeps the generated struct
        assert (models / "action.rs").read_text() == "pub struct Action {\n}\n"

    def test_wrapper_strategy_generates_both(self, tmp_path, config):
        config.strategy = SynthesisStrategy.WRAPPER
        summary = PipelineOrchestrator(config, StubRunner(config)).process(job_for(tmp_path))

        assert summary.generated == ["Message", "Action"]
        assert summary.skipped == []
        action = (tmp_path / "packages" / "line-bot-messaging-api" / "src" / "models" / "action.rs").read_text()
        assert "    Uri(Box<models::UriAction>),\n" in action
        assert "    Datetimepicker(Box<models::DatetimePickerAction>),\n" in action

    def test_generator_receives_flattened_document(self, tmp_path, config):
        runner = StubRunner(config)
        summary = PipelineOrchestrator(config, runner).process(job_for(tmp_path))

        schema_path, output_dir, package_name = runner.calls[0]
        assert schema_path == summary.flattened_path
        assert schema_path == tmp_path / "tmp" / "line-bot-messaging-api" / "messaging.yml"
        assert package_name == "line-bot-messaging-api"
        flattened = schema_path.read_text()
        assert "allOf" not in flattened
        assert "discriminator" not in flattened

    def test_missing_structure_skips_only_that_union(self, tmp_path, config):
        runner = StubRunner(config, exclude={"text_message.rs"})
        config.strategy = SynthesisStrategy.WRAPPER
        summary = PipelineOrchestrator(config, runner).process(job_for(tmp_path))

        assert summary.generated == ["Action"]
        assert summary.skipped[0].reason is SkipReason.MISSING_STRUCTURE
        assert summary.skipped[0].details == ("text (TextMessage)",)
        message = tmp_path / "packages" / "line-bot-messaging-api" / "src" / "models" / "message.rs"
        assert message.read_text() == "pub struct Message {\n}\n"

    def test_generation_failure_keeps_flattened_artifact(self, tmp_path, config):
        summary = PipelineOrchestrator(config, StubRunner(config, fail=True)).process(job_for(tmp_path))

        assert not summary.ok
        assert "status 1" in summary.error
        assert summary.processed == 0
        assert summary.flattened_path.exists()

    def test_unresolved_reference_is_fatal_for_document(self, tmp_path, config):
        runner = StubRunner(config)
        summary = PipelineOrchestrator(config, runner).process(job_for(tmp_path, schema="broken_reference.yml", package="broken"))

        assert "Missing" in summary.error
        assert runner.calls == []

    def test_malformed_document(self, tmp_path, config):
        summary = PipelineOrchestrator(config, StubRunner(config)).process(job_for(tmp_path, schema="malformed.yml", package="bad"))

        assert summary.error is not None
        assert summary.flattened_path is None

    def test_skip_generation_uses_existing_models(self, tmp_path, config):
        job = job_for(tmp_path)
        StubRunner(config).run(Path("unused.yml"), job.output_dir, job.package_name)
        config.skip_generation = True
        runner = StubRunner(config)
        summary = PipelineOrchestrator(config, runner).process(job)

        assert runner.calls == []
        assert summary.generated == ["Message"]


class TestRun:
    def test_failed_document_does_not_stop_others(self, tmp_path, config):
        jobs = [
            job_for(tmp_path, schema="broken_reference.yml", package="broken"),
            job_for(tmp_path),
        ]
        summary = PipelineOrchestrator(config, StubRunner(config)).run(jobs)

        assert [d.package_name for d in summary.documents] == ["broken", "line-bot-messaging-api"]
        assert not summary.documents[0].ok
        assert summary.documents[1].ok
        assert summary.generated == 1
        assert summary.skipped == 1
        assert len(summary.failed) == 1
        assert not summary.ok

    def test_document_without_named_schemas(self, tmp_path, config):
        config.skip_generation = True
        job = job_for(tmp_path)
        StubRunner(config).run(Path("unused.yml"), job.output_dir, job.package_name)
        jobs = [job_for(tmp_path, schema="paths_only.yml", package="health"), job]
        summary = PipelineOrchestrator(config, StubRunner(config)).run(jobs)

        schemaless, messaging = summary.documents
        assert schemaless.ok
        assert schemaless.processed == 0
        assert "/health" in schemaless.flattened_path.read_text()
        assert messaging.ok
        assert messaging.generated == ["Message"]
        assert summary.ok

    def test_concurrent_run_keeps_input_order(self, tmp_path, config):
        config.jobs = 3
        jobs = [job_for(tmp_path, package=f"pkg{i}") for i in range(3)]
        summary = PipelineOrchestrator(config, StubRunner(config)).run(jobs)

        assert [d.package_name for d in summary.documents] == ["pkg0", "pkg1", "pkg2"]
        assert summary.generated == 3

    def test_regeneration_is_byte_identical(self, tmp_path, config):
        orchestrator = PipelineOrchestrator(config, StubRunner(config))
        job = job_for(tmp_path)
        models = job.output_dir / config.models_dir

        first = orchestrator.process(job)
        flattened_first = first.flattened_path.read_bytes()
        union_first = (models / "message.rs").read_bytes()

        second = orchestrator.process(job)
        assert second.flattened_path.read_bytes() == flattened_first
        assert (models / "message.rs").read_bytes() == union_first


class TestDocumentSummary:
    def test_describe(self, tmp_path, config):
        summary = PipelineOrchestrator(config, StubRunner(config)).process(job_for(tmp_path))
        lines = summary.describe()

        assert lines[0].endswith("processed 2 discriminated schema(s): 1 generated, 1 skipped")
        assert "inline-type-reference" in lines[1]

    def test_package_name_defaults_to_directory(self, tmp_path):
        job = DocumentJob(schema_path="a.yml", output_dir=tmp_path / "my-package")

        assert job.package_name == "my-package"


class TestGeneratorRunner:
    def test_build_command(self, tmp_path):
        config = PipelineConfig(generator_config="cfg.yaml", git_user_id="me", git_repo_id="sdk")
        cmd = GeneratorRunner(config).build_command(Path("tmp/a.yml"), Path("packages/a"), "a")

        assert cmd == [
            "openapi-generator",
            "generate",
            "-i",
            "tmp/a.yml",
            "-g",
            "rust",
            "-o",
            "packages/a",
            "-p",
            "packageName=a",
            "-c",
            "cfg.yaml",
            "--git-user-id",
            "me",
            "--git-repo-id",
            "sdk",
        ]

    def test_command_with_arguments(self):
        config = PipelineConfig(generator_command="npx @openapitools/openapi-generator-cli")
        cmd = GeneratorRunner(config).build_command(Path("a.yml"), Path("out"), "a")

        assert cmd[:3] == ["npx", "@openapitools/openapi-generator-cli", "generate"]

    def test_missing_executable_is_generation_failure(self, tmp_path):
        config = PipelineConfig(generator_command="definitely-not-an-installed-generator")

        with pytest.raises(GenerationFailure):
            GeneratorRunner(config).run(tmp_path / "a.yml", tmp_path / "out", "a")
