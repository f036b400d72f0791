from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ReportMeta:
    """
    Назначение:
        Метаданные запуска команды.
    """

    run_id: str
    command: str
    started_at: str
    finished_at: str | None = None
    duration_ms: int | None = None


@dataclass
class ReportSummary:
    """
    Назначение:
        Счётчики запуска: файлы и строки перевода.
    """

    files_total: int = 0
    files_ok: int = 0
    files_failed: int = 0
    lines_total: int = 0
    lines_valid: int = 0
    lines_invalid: int = 0
    by_code: dict[str, int] = field(default_factory=dict)
    ops: dict[str, dict[str, int]] = field(default_factory=dict)


@dataclass
class ReportItem:
    """
    Назначение:
        Единица отчёта, привязанная к одному файлу.
    """

    status: str
    file: str
    message: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass
class ReportEnvelope:
    """
    Назначение:
        Корневой объект отчёта запуска.
    """

    status: str
    meta: ReportMeta
    summary: ReportSummary
    items: list[ReportItem]
    context: dict[str, Any] = field(default_factory=dict)
