from pathlib import Path

import pytest
from typer.testing import CliRunner

from cleaner.config.config import loadSettings
from cleaner.main import app

runner = CliRunner()


def _config(tmp_path: Path) -> Path:
    cfg = tmp_path / "config.yml"
    cfg.write_text(
        "\n".join([
            'org_data_dir: "cfg_org"',
            'source_dir: "cfg_src"',
            'dest_dir: "cfg_dest"',
            f'log_dir: "{(tmp_path / "logs").as_posix()}"',
            f'report_dir: "{(tmp_path / "reports").as_posix()}"',
            "lines_per_chunk: 50",
            "translation_types:",
            "  CustomApp: false",
        ]),
        encoding="utf-8",
    )
    return cfg


def test_priority_cli_over_env_over_config(tmp_path, monkeypatch):
    cfg = _config(tmp_path)

    # ENV перекрывает config
    monkeypatch.setenv("STF_CLEANER_SOURCE_DIR", "env_src")
    monkeypatch.setenv("STF_CLEANER_DEST_DIR", "env_dest")

    # CLI перекрывает ENV
    loaded = loadSettings(config_path=str(cfg), cli_overrides={"source_dir": "cli_src", "dest_dir": None})

    assert loaded.settings.org_data_dir == "cfg_org"
    assert loaded.settings.dest_dir == "env_dest"
    assert loaded.settings.source_dir == "cli_src"
    assert loaded.settings.lines_per_chunk == 50
    assert loaded.sources_used == ["config", "env", "cli"]


def test_translation_types_merge_over_defaults(tmp_path):
    loaded = loadSettings(config_path=str(_config(tmp_path)), cli_overrides={})

    assert loaded.settings.is_type_enabled("CustomApp") is False
    assert loaded.settings.is_type_enabled("CustomField") is True


def test_env_lists_and_bools(monkeypatch):
    monkeypatch.setenv("STF_CLEANER_FORCE_EXCLUDE", "CustomLabel.A, CustomLabel.B")
    monkeypatch.setenv("STF_CLEANER_ABORT_ON_UNTRANSLATED", "yes")

    settings = loadSettings(config_path=None, cli_overrides={}).settings

    assert settings.force_exclude == ("CustomLabel.A", "CustomLabel.B")
    assert settings.abort_on_untranslated is True


def test_invalid_env_bool_raises(monkeypatch):
    monkeypatch.setenv("STF_CLEANER_AUTO_ZIP", "maybe")
    with pytest.raises(ValueError):
        loadSettings(config_path=None, cli_overrides={})


def test_cli_header_shows_merged_settings(tmp_path, monkeypatch):
    cfg = _config(tmp_path)
    monkeypatch.setenv("STF_CLEANER_DEST_DIR", "env_dest")

    result = runner.invoke(app, ["--config", str(cfg), "--source-dir", "cli_src", "clean"])

    assert "org_data_dir=cfg_org source_dir=cli_src dest_dir=env_dest" in result.stdout
    assert result.exit_code == 2


def test_invalid_configuration_exits_with_2(tmp_path, monkeypatch):
    monkeypatch.setenv("STF_CLEANER_AUTO_ZIP", "maybe")
    result = runner.invoke(app, ["--log-dir", str(tmp_path / "logs"), "--report-dir", str(tmp_path / "r"), "report"])
    assert result.exit_code == 2
