from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from cleaner.domain.models import round_percent

SUMMARY_COLUMNS = (
    "Language",
    "LanguageCode",
    "TotalEntries",
    "ValidEntries",
    "InvalidEntries",
    "ValidPercent",
    "InvalidPercent",
)


@dataclass
class LanguageSummary:
    """
    Назначение:
        Сводка по одному коду языка (сумма по всем файлам с этим кодом).
    """

    language: str
    language_code: str
    total: int = 0
    valid: int = 0
    invalid: int = 0

    @property
    def valid_percent(self) -> int:
        return round_percent(self.valid, self.total)

    @property
    def invalid_percent(self) -> int:
        return round_percent(self.invalid, self.total)

    def as_row(self) -> list[Any]:
        return [
            self.language,
            self.language_code,
            self.total,
            self.valid,
            self.invalid,
            self.valid_percent,
            self.invalid_percent,
        ]


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    raise ValueError(f"Expected a number, got {value!r}")


def parse_details(raw: Any) -> dict[str, Any]:
    """
    Назначение:
        Проверяет JSON отчёта файла и возвращает его секцию details.

    Поведение:
        - Нет details или нечисловые счётчики -> ValueError.
    """
    if not isinstance(raw, Mapping) or not isinstance(raw.get("details"), Mapping):
        raise ValueError("Report has no 'details' section")
    details = raw["details"]
    return {
        "language": str(details.get("language") or ""),
        "languageCode": str(details.get("languageCode") or ""),
        "total": _as_int(details.get("total", 0)),
        "valid": _as_int(details.get("valid", 0)),
        "invalid": _as_int(details.get("invalid", 0)),
    }


def aggregate_reports(details_list: Iterable[Mapping[str, Any]]) -> list[LanguageSummary]:
    """
    Назначение:
        Группирует details из отчётов файлов по languageCode.

    Входные данные:
        details_list: Iterable[Mapping]
            Секции details, уже проверенные parse_details.

    Выходные данные:
        list[LanguageSummary] в порядке первого появления кода языка.

    Поведение:
        - total/valid/invalid суммируются; language берётся из последнего отчёта.
        - Проценты пересчитываются по суммам (округление половины вверх).
    """
    by_code: dict[str, LanguageSummary] = {}
    for details in details_list:
        code = str(details.get("languageCode") or "")
        total = _as_int(details.get("total", 0))
        valid = _as_int(details.get("valid", 0))
        invalid = _as_int(details.get("invalid", 0))
        summary = by_code.get(code)
        if summary is None:
            summary = LanguageSummary(language="", language_code=code)
            by_code[code] = summary
        summary.language = str(details.get("language") or summary.language)
        summary.total += total
        summary.valid += valid
        summary.invalid += invalid
    return list(by_code.values())
