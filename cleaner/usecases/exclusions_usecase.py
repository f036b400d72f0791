from __future__ import annotations

import logging

from cleaner.domain.reporting.collector import ReportCollector
from cleaner.infra.exclusions.harvester import harvest_exclusions, save_exclusions
from cleaner.infra.logging.setup import logEvent


class ExclusionsUseCase:
    """
    Назначение/ответственность:
        Отдельный сбор списка исключений из логов ошибок импорта (без очистки файлов).
    """

    def __init__(self, error_logs_dir: str, exclusion_list_path: str) -> None:
        self.error_logs_dir = error_logs_dir
        self.exclusion_list_path = exclusion_list_path

    def run(self, logger: logging.Logger, report: ReportCollector, run_id: str) -> int:
        keys = harvest_exclusions(self.error_logs_dir, logger, run_id)
        if keys is None:
            return 2
        path = save_exclusions(self.exclusion_list_path, keys)
        logEvent(logger, logging.INFO, run_id, "exclusions", f"Exclusion list saved: {path}")
        report.add_op("exclusions", ok=len(keys), count=len(keys))
        report.set_context("exclusions", {"path": path, "keys": len(keys)})
        return 0
