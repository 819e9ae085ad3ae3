"""
Configuration for the union generation pipeline.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .errors import DocumentLoadError


class SynthesisStrategy(str, Enum):
    """How each union variant carries its payload."""

    INLINE_FIELDS = "inline-fields"  # Mirror the structure's fields into a tagged variant
    WRAPPER = "wrapper"  # Wrap a Box of the structure in an untagged variant


@dataclass
class PipelineConfig:
    """Configuration options for one pipeline run."""

    # Union synthesis strategy
    strategy: SynthesisStrategy = SynthesisStrategy.INLINE_FIELDS

    # External generator executable and its target language
    generator_command: str = "openapi-generator"
    generator_name: str = "rust"

    # Optional generator configuration file passed with -c
    generator_config: str = ""

    # Where flattened documents are written before generation
    scratch_dir: str = "./tmp"

    # Location of generated model files inside a package directory
    models_dir: str = "src/models"

    # Module path used to qualify model types in synthesized code
    models_namespace: str = "models"

    # Remove discriminators from the document handed to the generator
    strip_discriminators: bool = True

    # Only synthesize unions against already generated models
    skip_generation: bool = False

    # Passed through to the generator
    git_user_id: str = ""
    git_repo_id: str = ""

    # Validate rendered unions before writing them
    validate_before_write: bool = True

    # Number of documents processed concurrently
    jobs: int = 1

    @staticmethod
    def from_dict(d: dict) -> PipelineConfig:
        """Create a config from a dictionary."""
        config = PipelineConfig()
        for k, v in d.items():
            if k == "strategy" and isinstance(v, str):
                config.strategy = SynthesisStrategy(v)
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    @staticmethod
    def from_file(path: Path | str) -> PipelineConfig:
        """Create a config from a JSON file."""
        with open(path) as f:
            return PipelineConfig.from_dict(json.load(f))

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "strategy": self.strategy.value,
            "generator_command": self.generator_command,
            "generator_name": self.generator_name,
            "generator_config": self.generator_config,
            "scratch_dir": self.scratch_dir,
            "models_dir": self.models_dir,
            "models_namespace": self.models_namespace,
            "strip_discriminators": self.strip_discriminators,
            "skip_generation": self.skip_generation,
            "git_user_id": self.git_user_id,
            "git_repo_id": self.git_repo_id,
            "validate_before_write": self.validate_before_write,
            "jobs": self.jobs,
        }


@dataclass
class ProjectEntry:
    """One document listed in a project manifest."""

    spec: str = ""
    package_name: str = ""


@dataclass
class ProjectManifest:
    """Project manifest listing the documents to process.

    Attributes:
        projects: Documents and the package each one generates
        spec_dir: Directory the `spec` paths are relative to
        output_dir: Directory packages are generated into
        generator_config: Generator configuration file for every project
        git_user_id: Passed through to the generator
        git_repo_id: Passed through to the generator
    """

    projects: list[ProjectEntry] = field(default_factory=list)
    spec_dir: Path = Path(".")
    output_dir: Path = Path("packages")
    generator_config: str = ""
    git_user_id: str = ""
    git_repo_id: str = ""

    @staticmethod
    def load(path: Path | str) -> ProjectManifest:
        """Load a manifest; relative directories resolve against the manifest's directory.

        Raises:
            DocumentLoadError: If the manifest cannot be read or is malformed
        """
        path = Path(path)
        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DocumentLoadError(f"Cannot read project manifest {path}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("projects"), list):
            raise DocumentLoadError(f"Project manifest {path} must contain a 'projects' list")

        base = path.parent
        projects = []
        for entry in data["projects"]:
            if not isinstance(entry, dict) or "spec" not in entry or "packageName" not in entry:
                raise DocumentLoadError(f"Project entries need 'spec' and 'packageName': {entry!r}")
            projects.append(ProjectEntry(spec=entry["spec"], package_name=entry["packageName"]))

        generator_config = data.get("generatorConfig", "")
        return ProjectManifest(
            projects=projects,
            spec_dir=base / data.get("specDir", "."),
            output_dir=base / data.get("outputDir", "packages"),
            generator_config=str(base / generator_config) if generator_config else "",
            git_user_id=data.get("git-user-id", ""),
            git_repo_id=data.get("git-repo-id", ""),
        )
