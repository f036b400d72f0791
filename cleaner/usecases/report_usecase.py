from __future__ import annotations

import logging

from cleaner.domain.reporting.aggregator import aggregate_reports, parse_details
from cleaner.domain.reporting.collector import ReportCollector
from cleaner.infra.artifacts.file_report_io import listFileReports, readFileReport
from cleaner.infra.artifacts.summary_writer import writeSummaryCsv
from cleaner.infra.logging.setup import logEvent


class ReportUseCase:
    """
    Назначение/ответственность:
        Итоговый CSV по языкам из отчётов файлов (*.log) в translation_logs_dir.
    """

    def __init__(self, translation_logs_dir: str, summary_report_path: str) -> None:
        self.translation_logs_dir = translation_logs_dir
        self.summary_report_path = summary_report_path

    def run(self, logger: logging.Logger, report: ReportCollector, run_id: str) -> int:
        try:
            paths = listFileReports(self.translation_logs_dir)
        except FileNotFoundError as exc:
            logEvent(logger, logging.ERROR, run_id, "report", str(exc))
            return 2

        details = []
        skipped = 0
        for path in paths:
            try:
                details.append(parse_details(readFileReport(path)))
            except (OSError, ValueError) as exc:
                skipped += 1
                logEvent(logger, logging.WARNING, run_id, "report", f"Skipping unreadable report {path}: {exc}")

        rows = aggregate_reports(details)
        csvPath = writeSummaryCsv(rows, self.summary_report_path)
        logEvent(logger, logging.INFO, run_id, "report", f"Summary written: {csvPath} ({len(rows)} languages)")

        report.add_op("file_reports", ok=len(details), failed=skipped, count=len(paths))
        report.set_context("summary", {"path": csvPath, "languages": len(rows)})
        return 0
