"""Unit tests for settings loading and the CLI front door."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from mcp_console.cli import main
from mcp_console.config import Settings, load_settings


class TestLoadSettings:
    def test_defaults_without_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        settings = load_settings()
        assert settings.server.command == "node"
        assert settings.server.args == ["build/server.js"]
        assert settings.server.stderr == "ignore"
        assert settings.model.name == "gemini-2.0-flash"
        assert settings.model.api_key_env == "GEMINI_API_KEY"
        assert settings.output.latest_output == Path("src/data/ai-latest-output.txt")
        assert settings.output.user_records == Path("src/data/users.json")

    def test_default_file_in_working_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "mcp-console.yaml").write_text(
            "server:\n  command: python\n  args: [server.py]\nmodel:\n  name: other-model\n"
        )
        settings = load_settings()
        assert settings.server.command == "python"
        assert settings.server.args == ["server.py"]
        assert settings.model.name == "other-model"
        assert settings.model.api_key_env == "GEMINI_API_KEY"

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.yaml"
        path.write_text("output:\n  user_records: out/users.json\n")
        settings = load_settings(path)
        assert settings.output.user_records == Path("out/users.json")

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_settings(path) == Settings()

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="must be a YAML mapping"):
            load_settings(path)

    def test_incompatible_version_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "v2.yaml"
        path.write_text('schema_version: "2.0"\n')
        with pytest.raises(ValueError, match="Incompatible settings schema version"):
            load_settings(path)

    def test_invalid_stderr_mode_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("server:\n  stderr: loud\n")
        with pytest.raises(ValueError):
            load_settings(path)


class TestCli:
    def test_missing_config_file(self, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--config", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "settings file not found" in result.output

    def test_invalid_config_file(self, tmp_path: Path) -> None:
        path = tmp_path / "v2.yaml"
        path.write_text('schema_version: "2.0"\n')
        runner = CliRunner()
        result = runner.invoke(main, ["--config", str(path)])
        assert result.exit_code == 1
        assert "Incompatible settings schema version" in result.output

    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "mcp-console" in result.output
