"""Unit tests for buildconf CLI module."""

import importlib
import json
from pathlib import Path

import pytest
from click.testing import CliRunner
from rich.console import Console

from buildconf.cli import cli


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep rich tables from wrapping cell values."""
    for name in ("show", "types_cmd", "validate", "_utils"):
        module = importlib.import_module(f"buildconf.commands.{name}")
        if hasattr(module, "console"):
            monkeypatch.setattr(module, "console", Console(width=200))


def _invoke(tmp_path: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(cli, ["--config", str(tmp_path / "absent.yaml"), *args])


class TestCliGroup:
    """Tests for main CLI group."""

    @pytest.mark.smoke
    def test_cli_help(self) -> None:
        """Test CLI shows help with all commands."""
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("show", "types", "validate"):
            assert command in result.output

    def test_cli_version(self) -> None:
        """Test CLI shows version."""
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "buildconf" in result.output

    def test_invalid_config(self, tmp_path: Path) -> None:
        """Test a broken config file aborts with exit code 1."""
        config = tmp_path / "config.yaml"
        config.write_text("logging:\n  level: loud\n")

        result = CliRunner().invoke(cli, ["--config", str(config), "types"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_invalid_log_level(self) -> None:
        """Test unknown log levels are rejected by click."""
        result = CliRunner().invoke(cli, ["--log-level", "loud", "types"])
        assert result.exit_code == 2


class TestTypesCommand:
    """Tests for the types command."""

    def test_lists_catalogue(self, tmp_path: Path) -> None:
        """Test every catalogue type is listed."""
        result = _invoke(tmp_path, "types")

        assert result.exit_code == 0
        for entity_type in ("pullRequests", "parallelTests", "ssh-deploy-runner", "FxCop", "OAuthProvider"):
            assert entity_type in result.output
        assert "providerType=AWS" in result.output

    def test_kind_filter(self, tmp_path: Path) -> None:
        """Test --kind restricts the listing."""
        result = _invoke(tmp_path, "types", "--kind", "buildStep")

        assert result.exit_code == 0
        assert "ssh-deploy-runner" in result.output
        assert "pullRequests" not in result.output


class TestValidateCommand:
    """Tests for the validate command."""

    def test_json_output(self, tmp_path: Path, entities_file: Path) -> None:
        """Test JSON output lists every entity and its errors."""
        result = _invoke(tmp_path, "validate", str(entities_file), "--json")

        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert [p["id"] for p in payload] == ["PR_1", "PR_2", None]
        assert [p["valid"] for p in payload] == [True, False, True]
        assert payload[1]["errors"] == [
            {
                "path": "provider.authType.token",
                "message": "mandatory 'provider.authType.token' property is not specified",
            }
        ]

    def test_table_output(self, tmp_path: Path, entities_file: Path) -> None:
        """Test the table marks invalid entities."""
        result = _invoke(tmp_path, "validate", str(entities_file))

        assert result.exit_code == 1
        assert "PR_1" in result.output
        assert "1 error(s)" in result.output
        assert "provider.authType.token" in result.output

    def test_all_valid(self, tmp_path: Path) -> None:
        """Test a clean document exits with 0."""
        path = tmp_path / "ok.yaml"
        path.write_text("kind: buildFeature\ntype: parallelTests\nparams:\n  numberOfBatches: 2\n")

        result = _invoke(tmp_path, "validate", str(path))
        assert result.exit_code == 0
        assert "valid" in result.output

    def test_malformed_document(self, tmp_path: Path) -> None:
        """Test a malformed document is reported with exit code 1."""
        path = tmp_path / "bad.yaml"
        path.write_text("kind: pipeline\ntype: x\n")

        result = _invoke(tmp_path, "validate", str(path))
        assert result.exit_code == 1
        assert "Invalid entity document" in result.output

    def test_strict_unknown_types(self, tmp_path: Path) -> None:
        """Test configured strictness rejects unknown types."""
        config = tmp_path / "config.yaml"
        config.write_text("validation:\n  fail_on_unknown_type: true\n")
        path = tmp_path / "unknown.yaml"
        path.write_text("kind: buildStep\ntype: gradle-runner\n")

        lenient = _invoke(tmp_path, "validate", str(path))
        strict = CliRunner().invoke(cli, ["--config", str(config), "validate", str(path)])
        assert lenient.exit_code == 0
        assert strict.exit_code == 1
        assert "Unknown entity type" in strict.output


class TestShowCommand:
    """Tests for the show command."""

    def test_secrets_masked(self, tmp_path: Path, entities_file: Path) -> None:
        """Test secure values are masked by default."""
        result = _invoke(tmp_path, "show", str(entities_file))

        assert result.exit_code == 0
        assert "secure:accessToken" in result.output
        assert "s3cret" not in result.output
        assert "******" in result.output
        assert "provider = 'github'" in result.output
        assert "provider.authType = 'token'" in result.output

    def test_reveal_secrets(self, tmp_path: Path, entities_file: Path) -> None:
        """Test --reveal-secrets prints secure values."""
        result = _invoke(tmp_path, "show", str(entities_file), "--reveal-secrets")

        assert result.exit_code == 0
        assert "s3cret" in result.output

    def test_unknown_variant_marked(self, tmp_path: Path) -> None:
        """Test unknown discriminators are flagged."""
        path = tmp_path / "pr.yaml"
        path.write_text("kind: buildFeature\ntype: pullRequests\nparams:\n  providerType: gitea\n")

        result = _invoke(tmp_path, "show", str(path))
        assert result.exit_code == 0
        assert "provider = 'gitea' (unknown)" in result.output
