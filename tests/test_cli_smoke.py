import json
from pathlib import Path

from typer.testing import CliRunner

from cleaner.main import app

runner = CliRunner()


def test_help_shows_commands():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "clean" in result.stdout
    assert "report" in result.stdout
    assert "chunk" in result.stdout
    assert "exclusions" in result.stdout


def test_clean_requires_source_dir(tmp_path: Path):
    logDir = tmp_path / "logs"
    reportDir = tmp_path / "reports"

    result = runner.invoke(
        app,
        [
            "--log-dir", str(logDir),
            "--report-dir", str(reportDir),
            "--run-id", "smoke-1",
            "--source-dir", str(tmp_path / "missing"),
            "clean",
        ],
    )

    assert result.exit_code == 2

    # Отчёт пишется даже при ошибке входных данных
    reportPath = reportDir / "report_clean_smoke-1.json"
    assert reportPath.exists()
    report = json.loads(reportPath.read_text(encoding="utf-8"))
    assert report["status"] == "FAILED"
    assert report["meta"]["command"] == "clean"
    assert (logDir / "clean_smoke-1.log").exists()


def test_chunk_rejects_negative_size(tmp_path: Path):
    result = runner.invoke(
        app,
        ["--log-dir", str(tmp_path / "logs"), "--report-dir", str(tmp_path / "reports"), "chunk", "--lines-per-chunk", "-1"],
    )
    assert result.exit_code == 2
