"""Tests for the presubmit-gate CLI."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from presubmit_gate import __version__
from presubmit_gate.cli import ExitCode, app

runner = CliRunner()


@pytest.fixture
def config_path(write_config, sample_config):
    return write_config(sample_config)


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


class TestValidate:
    def test_valid(self, config_path):
        result = runner.invoke(app, ["validate", "--config", str(config_path)])
        assert result.exit_code == ExitCode.SUCCESS
        assert "Configuration is valid" in result.stdout

    def test_verbose_lists_presubmits(self, config_path):
        result = runner.invoke(app, ["validate", "-c", str(config_path), "-v"])
        assert result.exit_code == ExitCode.SUCCESS
        assert "e2e (explicit): /test e2e" in result.stdout
        assert "unit (automatic): /test unit" in result.stdout

    def test_missing_config(self, temp_dir):
        result = runner.invoke(app, ["validate", "--config", str(temp_dir / "missing.yaml")])
        assert result.exit_code == ExitCode.CONFIG_ERROR


class TestFilter:
    def _filter(self, config_path, *args):
        result = runner.invoke(app, ["filter", "--config", str(config_path), "--json", *args])
        assert result.exit_code == ExitCode.SUCCESS, result.output
        return json.loads(result.stdout)

    def test_test_all(self, config_path):
        decided = self._filter(config_path, "--comment", "/test all", "-f", "docs/index.md")
        assert decided == {"to_trigger": ["unit", "docs"], "to_skip": ["release-check"]}

    def test_test_all_without_doc_changes(self, config_path):
        decided = self._filter(
            config_path, "-m", "/test all", "-b", "release-1.0", "-f", "main.go"
        )
        assert decided == {"to_trigger": ["unit", "release-check"], "to_skip": ["docs"]}

    def test_explicit_command(self, config_path):
        decided = self._filter(config_path, "--comment", "/test e2e")
        assert decided == {"to_trigger": ["e2e"], "to_skip": []}

    def test_plain_output(self, config_path):
        result = runner.invoke(
            app, ["filter", "-c", str(config_path), "-m", "/test e2e"]
        )
        assert result.exit_code == ExitCode.SUCCESS
        assert "To trigger (1):" in result.stdout
        assert "e2e" in result.stdout
        assert "To skip (0):" in result.stdout

    def test_config_error(self, temp_dir):
        result = runner.invoke(
            app, ["filter", "-c", str(temp_dir / "missing.yaml"), "-m", "/test all"]
        )
        assert result.exit_code == ExitCode.CONFIG_ERROR

    def test_changed_files_from_file(self, config_path, temp_dir):
        listing = temp_dir / "changes.txt"
        listing.write_text("pkg/main.go\n\ndocs/index.md\n")

        decided = self._filter(
            config_path, "-m", "/test all", "--changed-files-from", str(listing)
        )
        assert decided == {"to_trigger": ["unit", "docs"], "to_skip": ["release-check"]}

    def test_changed_files_only_read_when_needed(self, config_path, temp_dir):
        decided = self._filter(
            config_path,
            "-m",
            "/test e2e",
            "--changed-files-from",
            str(temp_dir / "missing.txt"),
        )
        assert decided == {"to_trigger": ["e2e"], "to_skip": []}

    def test_unreadable_changed_files(self, config_path, temp_dir):
        result = runner.invoke(
            app,
            [
                "filter",
                "-c",
                str(config_path),
                "-m",
                "/test all",
                "--changed-files-from",
                str(temp_dir / "missing.txt"),
            ],
        )
        assert result.exit_code == ExitCode.EVALUATION_ERROR
        assert "docs" in result.output
