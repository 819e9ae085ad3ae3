import logging
import sys
from pathlib import Path

import click

from .pipeline import DocumentJob, PipelineConfig, PipelineOrchestrator, ProjectManifest, RunSummary, SynthesisStrategy
from .pipeline.errors import DocumentLoadError

STRATEGIES = [s.value for s in SynthesisStrategy]


def pipeline_options(f):
    """Options shared by both commands."""
    options = [
        click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True), help="JSON pipeline configuration"),
        click.option("--strategy", "-s", default=None, type=click.Choice(STRATEGIES), help="Union synthesis strategy"),
        click.option("--generator", default=None, type=str, help="Generator command (default: openapi-generator)"),
        click.option("--generator-config", default=None, type=click.Path(exists=True), help="Configuration file passed to the generator"),
        click.option("--scratch-dir", default=None, type=click.Path(), help="Directory for flattened documents"),
        click.option("--skip-generation", is_flag=True, default=False, help="Only synthesize unions against existing generated models"),
        click.option("--verbose", "-v", is_flag=True, default=False),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def build_config(config, strategy, generator, generator_config, scratch_dir, skip_generation) -> PipelineConfig:
    try:
        pipeline_config = PipelineConfig.from_file(config) if config is not None else PipelineConfig()
    except (ValueError, AttributeError) as e:
        raise click.ClickException(f"Invalid configuration file {config}: {e}") from e

    # CLI flags override the config file when set
    if strategy is not None:
        pipeline_config.strategy = SynthesisStrategy(strategy)
    if generator is not None:
        pipeline_config.generator_command = generator
    if generator_config is not None:
        pipeline_config.generator_config = generator_config
    if scratch_dir is not None:
        pipeline_config.scratch_dir = scratch_dir
    if skip_generation:
        pipeline_config.skip_generation = True
    return pipeline_config


def report(summary: RunSummary) -> None:
    for document in summary.documents:
        for line in document.describe():
            click.echo(line)
    if len(summary.documents) > 1:
        click.echo(f"Total: {summary.generated} generated, {summary.skipped} skipped, {len(summary.failed)} failed document(s)")
    if not summary.ok:
        sys.exit(1)


@click.group()
def openapi_union_codegen():
    """Flatten allOf schemas, run the generator, and synthesize discriminated unions."""


@openapi_union_codegen.command()
@pipeline_options
@click.option("--package-name", "-n", default=None, type=str, help="Generated package name (default: package directory name)")
@click.argument("schema", type=click.Path(exists=True, resolve_path=True))
@click.argument("package_dir", type=click.Path(resolve_path=True))
def generate(config, strategy, generator, generator_config, scratch_dir, skip_generation, verbose, package_name, schema, package_dir):
    """Process a single schema document into PACKAGE_DIR."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    pipeline_config = build_config(config, strategy, generator, generator_config, scratch_dir, skip_generation)

    job = DocumentJob(schema_path=Path(schema), output_dir=Path(package_dir), package_name=package_name or "")
    report(PipelineOrchestrator(pipeline_config).run([job]))


@openapi_union_codegen.command("generate-all")
@pipeline_options
@click.option("--jobs", "-j", default=None, type=click.IntRange(min=1), help="Documents processed concurrently")
@click.argument("manifest", type=click.Path(exists=True, resolve_path=True))
def generate_all(config, strategy, generator, generator_config, scratch_dir, skip_generation, verbose, jobs, manifest):
    """Process every document listed in a project MANIFEST."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    pipeline_config = build_config(config, strategy, generator, generator_config, scratch_dir, skip_generation)
    if jobs is not None:
        pipeline_config.jobs = jobs

    try:
        project = ProjectManifest.load(manifest)
    except DocumentLoadError as e:
        raise click.ClickException(str(e)) from e

    if project.generator_config and not pipeline_config.generator_config:
        pipeline_config.generator_config = project.generator_config
    pipeline_config.git_user_id = pipeline_config.git_user_id or project.git_user_id
    pipeline_config.git_repo_id = pipeline_config.git_repo_id or project.git_repo_id

    document_jobs = [
        DocumentJob(
            schema_path=project.spec_dir / entry.spec,
            output_dir=project.output_dir / entry.package_name,
            package_name=entry.package_name,
        )
        for entry in project.projects
    ]
    report(PipelineOrchestrator(pipeline_config).run(document_jobs))
