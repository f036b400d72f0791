from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from cleaner.domain.models import FileReport

FILE_REPORT_EXT = ".log"


def writeFileReport(report: FileReport, logsDir: str) -> str:
    """
    Назначение:
        Записывает отчёт файла <logsDir>/<file>.log (JSON).
    """
    Path(logsDir).mkdir(parents=True, exist_ok=True)
    path = Path(logsDir) / f"{report.file}{FILE_REPORT_EXT}"
    with open(path, "w", encoding="utf-8") as f:
        json.dump(report.to_dict(), f, ensure_ascii=False, indent=2)
    return str(path)


def listFileReports(logsDir: str) -> list[str]:
    root = Path(logsDir)
    if not root.is_dir():
        raise FileNotFoundError(f"Translation logs directory not found: {logsDir}")
    return sorted(str(p) for p in root.iterdir() if p.is_file() and p.suffix.lower() == FILE_REPORT_EXT)


def readFileReport(path: str) -> Any:
    """
    Назначение:
        Читает JSON отчёта файла.

    Поведение:
        - Ошибки чтения/разбора пробрасываются (OSError, ValueError).
    """
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
