from __future__ import annotations

from dataclasses import asdict
from typing import Any, Mapping

from cleaner.common.time import getNowIso
from cleaner.domain.reporting.models import ReportEnvelope, ReportItem, ReportMeta, ReportSummary

STATUS_OK = "OK"
STATUS_FAILED = "FAILED"


class ReportCollector:
    """
    Назначение/ответственность:
        Единый сборщик отчёта запуска для всех команд.

    Ограничения:
        - Статус: SUCCESS (нет упавших файлов), PARTIAL (есть и успешные, и упавшие),
          FAILED (все упали или статус выставлен явно).
    """

    def __init__(self, run_id: str, command: str, started_at: str | None = None) -> None:
        self.meta = ReportMeta(
            run_id=run_id,
            command=command,
            started_at=started_at or getNowIso(),
        )
        self.summary = ReportSummary()
        self.items: list[ReportItem] = []
        self.context: dict[str, Any] = {}
        self.status: str | None = None

    def set_context(self, name: str, value: dict[str, Any]) -> None:
        self.context[name] = value

    def add_op(self, name: str, *, ok: int = 0, failed: int = 0, count: int = 0) -> None:
        entry = self.summary.ops.setdefault(name, {"ok": 0, "failed": 0, "count": 0})
        entry["ok"] += ok
        entry["failed"] += failed
        entry["count"] += count

    def add_file(
        self,
        *,
        file: str,
        status: str,
        total: int = 0,
        valid: int = 0,
        invalid: int = 0,
        rejections: Mapping[str, int] | None = None,
        message: str | None = None,
        meta: dict[str, Any] | None = None,
    ) -> None:
        self.summary.files_total += 1
        if status == STATUS_FAILED:
            self.summary.files_failed += 1
        else:
            self.summary.files_ok += 1
        self.summary.lines_total += total
        self.summary.lines_valid += valid
        self.summary.lines_invalid += invalid
        for code, count in (rejections or {}).items():
            self.summary.by_code[code] = self.summary.by_code.get(code, 0) + count

        item_meta = {"total": total, "valid": valid, "invalid": invalid}
        item_meta.update(meta or {})
        self.items.append(ReportItem(status=status, file=file, message=message, meta=item_meta))

    def finish(self, finished_at: str | None = None, duration_ms: int | None = None) -> None:
        self.meta.finished_at = finished_at or getNowIso()
        self.meta.duration_ms = duration_ms
        if self.status is None:
            self.status = self._derive_status()

    def build(self) -> ReportEnvelope:
        return ReportEnvelope(
            status=self.status or self._derive_status(),
            meta=self.meta,
            summary=self.summary,
            items=self.items,
            context=self.context,
        )

    def _derive_status(self) -> str:
        if self.summary.files_failed == 0:
            return "SUCCESS"
        if self.summary.files_ok > 0:
            return "PARTIAL"
        return "FAILED"


def asdict_report(envelope: ReportEnvelope) -> dict[str, Any]:
    """
    Назначение:
        Сериализация отчёта в dict для JSON.
    """
    return {
        "status": envelope.status,
        "meta": asdict(envelope.meta),
        "summary": asdict(envelope.summary),
        "items": [asdict(item) for item in envelope.items],
        "context": envelope.context,
    }
