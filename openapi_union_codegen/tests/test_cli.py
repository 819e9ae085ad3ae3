#!/usr/bin/env python3

import json
import shutil
from pathlib import Path

import pytest
from click.testing import CliRunner

from openapi_union_codegen.openapi_union_codegen import openapi_union_codegen

FIXTURES_DIR = Path(__file__).parent / "test_data" / "openapi_generator_7"
SCHEMAS_DIR = Path(__file__).parent / "test_data" / "schemas"


def populate_models(package_dir: Path) -> Path:
    """Lay out generated models as the generator would."""
    models = package_dir / "src" / "models"
    models.mkdir(parents=True)
    for fixture in FIXTURES_DIR.glob("*.rs"):
        shutil.copy(fixture, models / fixture.name)
    return models


class TestGenerateCommand:
    """Test cases for the single-document command"""

    def test_generate_with_existing_models(self, tmp_path):
        package = tmp_path / "my-api"
        models = populate_models(package)

        result = CliRunner().invoke(
            openapi_union_codegen,
            ["generate", str(SCHEMAS_DIR / "messaging.yml"), str(package), "--skip-generation", "--scratch-dir", str(tmp_path / "tmp")],
        )

        assert result.exit_code == 0, result.output
        assert "processed 2 discriminated schema(s): 1 generated, 1 skipped" in result.output
        assert "inline-type-reference" in result.output
        assert (models / "message.rs").exists()
        assert (tmp_path / "tmp" / "my-api" / "messaging.yml").exists()

    def test_generate_wrapper_strategy(self, tmp_path):
        package = tmp_path / "my-api"
        models = populate_models(package)

        result = CliRunner().invoke(
            openapi_union_codegen,
            ["generate", str(SCHEMAS_DIR / "messaging.yml"), str(package), "--skip-generation", "--strategy", "wrapper", "--scratch-dir", str(tmp_path / "tmp")],
        )

        assert result.exit_code == 0, result.output
        assert "2 generated, 0 skipped" in result.output
        assert "#[serde(untagged)]" in (models / "action.rs").read_text()

    def test_failed_document_exits_non_zero(self, tmp_path):
        result = CliRunner().invoke(
            openapi_union_codegen,
            ["generate", str(SCHEMAS_DIR / "broken_reference.yml"), str(tmp_path / "broken"), "--skip-generation", "--scratch-dir", str(tmp_path / "tmp")],
        )

        assert result.exit_code == 1
        assert "failed" in result.output

    def test_config_file(self, tmp_path):
        package = tmp_path / "my-api"
        models = populate_models(package)
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"strategy": "wrapper", "skip_generation": True, "scratch_dir": str(tmp_path / "tmp")}))

        result = CliRunner().invoke(openapi_union_codegen, ["generate", str(SCHEMAS_DIR / "messaging.yml"), str(package), "--config", str(config)])

        assert result.exit_code == 0, result.output
        assert "Uri(Box<models::UriAction>)" in (models / "action.rs").read_text()

    @pytest.mark.parametrize("content", ["{not json", json.dumps({"strategy": "mirror"}), json.dumps(["wrapper"])])
    def test_invalid_config_file(self, tmp_path, content):
        config = tmp_path / "config.json"
        config.write_text(content)

        result = CliRunner().invoke(openapi_union_codegen, ["generate", str(SCHEMAS_DIR / "messaging.yml"), str(tmp_path / "my-api"), "--config", str(config)])

        assert result.exit_code == 1
        assert "Invalid configuration file" in result.output
        assert not isinstance(result.exception, (ValueError, AttributeError))


class TestGenerateAllCommand:
    """Test cases for the manifest command"""

    def test_generate_all(self, tmp_path):
        shutil.copy(SCHEMAS_DIR / "messaging.yml", tmp_path / "messaging.yml")
        shutil.copy(SCHEMAS_DIR / "broken_reference.yml", tmp_path / "broken.yml")
        populate_models(tmp_path / "packages" / "messaging")
        manifest = tmp_path / "projects.json"
        manifest.write_text(
            json.dumps(
                {
                    "git-user-id": "me",
                    "git-repo-id": "sdk",
                    "projects": [
                        {"spec": "messaging.yml", "packageName": "messaging"},
                        {"spec": "broken.yml", "packageName": "broken"},
                    ],
                }
            )
        )

        result = CliRunner().invoke(
            openapi_union_codegen,
            ["generate-all", str(manifest), "--skip-generation", "--jobs", "2", "--scratch-dir", str(tmp_path / "tmp")],
        )

        assert result.exit_code == 1
        assert "1 generated, 1 skipped" in result.output
        assert "Total: 1 generated, 1 skipped, 1 failed document(s)" in result.output

    def test_invalid_manifest(self, tmp_path):
        manifest = tmp_path / "projects.json"
        manifest.write_text(json.dumps({"projects": [{"spec": "a.yml"}]}))

        result = CliRunner().invoke(openapi_union_codegen, ["generate-all", str(manifest)])

        assert result.exit_code != 0
        assert "packageName" in result.output


if __name__ == "__main__":
    pytest.main([__file__])
