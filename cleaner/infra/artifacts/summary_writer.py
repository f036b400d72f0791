from __future__ import annotations

import csv
from pathlib import Path

from cleaner.domain.reporting.aggregator import SUMMARY_COLUMNS, LanguageSummary


def writeSummaryCsv(rows: list[LanguageSummary], path: str) -> str:
    """
    Назначение:
        Итоговый CSV по языкам: Language,LanguageCode,TotalEntries,...
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, delimiter=",", lineterminator="\r\n")
        writer.writerow(SUMMARY_COLUMNS)
        for row in rows:
            writer.writerow(row.as_row())
    return str(target)
