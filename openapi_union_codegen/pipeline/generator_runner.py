"""
Runner for the external OpenAPI code generator.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path

from .config import PipelineConfig
from .errors import GenerationFailure

logger = logging.getLogger(__name__)


class GeneratorRunner:
    """Invokes `openapi-generator generate` for one flattened document."""

    def __init__(self, config: PipelineConfig):
        self.config = config

    def build_command(self, schema_path: Path, output_dir: Path, package_name: str) -> list[str]:
        """
        Build the generator command line.

        Args:
            schema_path: The flattened schema document
            output_dir: The package directory to generate into
            package_name: Name of the generated package

        Returns:
            The argument list
        """
        cmd = shlex.split(self.config.generator_command)
        cmd.extend(
            [
                "generate",
                "-i",
                str(schema_path),
                "-g",
                self.config.generator_name,
                "-o",
                str(output_dir),
                "-p",
                f"packageName={package_name}",
            ]
        )
        if self.config.generator_config:
            cmd.extend(["-c", self.config.generator_config])
        if self.config.git_user_id:
            cmd.extend(["--git-user-id", self.config.git_user_id])
        if self.config.git_repo_id:
            cmd.extend(["--git-repo-id", self.config.git_repo_id])
        return cmd

    def run(self, schema_path: Path, output_dir: Path, package_name: str) -> None:
        """
        Run the generator and wait for it to finish.

        Raises:
            GenerationFailure: If the generator cannot be started or exits non-zero
        """
        cmd = self.build_command(schema_path, output_dir, package_name)
        logger.info("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except (subprocess.SubprocessError, FileNotFoundError) as e:
            raise GenerationFailure(f"Cannot run generator '{cmd[0]}': {e}") from e

        if result.stdout:
            logger.debug(result.stdout)
        if result.returncode != 0:
            raise GenerationFailure(
                f"Generator exited with status {result.returncode} for {schema_path}",
                returncode=result.returncode,
                stderr=result.stderr,
            )
        if result.stderr:
            logger.warning(result.stderr.strip())
