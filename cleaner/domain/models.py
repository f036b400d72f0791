from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class VerdictCode(str, Enum):
    """
    Назначение:
        Таксономия причин вердикта по записи перевода.
    """

    OK = "OK"
    UNVERIFIED_PASS = "UNVERIFIED_PASS"
    FILE_MISSING = "FILE_MISSING"
    CONTENT_MISSING = "CONTENT_MISSING"
    INDEX_MISS = "INDEX_MISS"
    OBJECT_MISSING = "OBJECT_MISSING"
    MALFORMED_RECORD = "MALFORMED_RECORD"
    UNKNOWN_TYPE = "UNKNOWN_TYPE"
    TYPE_DISABLED = "TYPE_DISABLED"
    FORCE_EXCLUDED = "FORCE_EXCLUDED"
    EXCLUDED_BY_LOG = "EXCLUDED_BY_LOG"
    RULE_ERROR = "RULE_ERROR"


class ImportKind(str, Enum):
    METADATA = "metadata"
    DATA = "data"


@dataclass(frozen=True)
class Identifier:
    """
    Назначение:
        Типизированный ключ записи: type.object.element(.extra...).

    Инварианты:
        - Отсутствующие позиции: пустые строки, не None.
    """

    type: str
    object: str = ""
    element: str = ""
    extra: tuple[str, ...] = ()

    def with_object(self, object_name: str) -> "Identifier":
        return replace(self, object=object_name)

    def describe(self) -> str:
        return ".".join(part for part in (self.type, self.object, self.element, *self.extra) if part)


@dataclass(frozen=True)
class Record:
    """
    Назначение:
        Одна строка payload файла перевода.
    """

    line_no: int
    raw_line: str
    key: str
    identifier: Identifier
    translation_columns: tuple[str, ...]


@dataclass(frozen=True)
class ValidationVerdict:
    valid: bool
    code: VerdictCode
    reason: str | None = None

    @classmethod
    def ok(cls, reason: str | None = None) -> "ValidationVerdict":
        return cls(valid=True, code=VerdictCode.OK, reason=reason)

    @classmethod
    def reject(cls, code: VerdictCode, reason: str) -> "ValidationVerdict":
        return cls(valid=False, code=code, reason=reason)


@dataclass
class TypeTally:
    """
    Назначение:
        Счётчики по одному типу метаданных в пределах файла.
    """

    total: int = 0
    valid: int = 0
    invalid: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def valid_percent(self) -> int:
        return round_percent(self.valid, self.total)

    @property
    def invalid_percent(self) -> int:
        return round_percent(self.invalid, self.total)

    def add(self, valid: bool) -> None:
        self.total += 1
        if valid:
            self.valid += 1
        else:
            self.invalid += 1


def round_percent(part: int, total: int) -> int:
    """
    Назначение:
        Процент с округлением половины вверх; total == 0 -> 0.

    Примечание:
        validPercent и invalidPercent округляются независимо и в сумме
        могут давать не 100 (1 из 3 -> 33 / 67).
    """
    if total == 0:
        return 0
    return (part * 200 + total) // (total * 2)


@dataclass
class FileTally:
    """
    Назначение:
        Счётчики одного файла: по типам и общие.

    Инварианты:
        - valid + invalid == total для каждого типа и в целом.
    """

    by_type: dict[str, TypeTally] = field(default_factory=dict)
    total: int = 0
    valid: int = 0
    invalid: int = 0

    def record(self, metadata_type: str, valid: bool, error: str | None = None) -> None:
        tally = self.by_type.setdefault(metadata_type, TypeTally())
        tally.add(valid)
        if error:
            tally.errors.append(error)
        self.total += 1
        if valid:
            self.valid += 1
        else:
            self.invalid += 1


@dataclass(frozen=True)
class FileReport:
    """
    Назначение:
        Итоговый отчёт по одному файлу перевода (пишется один раз).
    """

    source_dir: str
    file: str
    dest_dir: str
    language: str
    language_code: str
    total: int
    valid: int
    invalid: int
    by_type: dict[str, TypeTally]

    @property
    def valid_percent(self) -> int:
        return round_percent(self.valid, self.total)

    @property
    def invalid_percent(self) -> int:
        return round_percent(self.invalid, self.total)

    def to_dict(self) -> dict[str, Any]:
        return {
            "details": {
                "sourceDir": self.source_dir,
                "file": self.file,
                "destDir": self.dest_dir,
                "language": self.language,
                "languageCode": self.language_code,
                "total": self.total,
                "valid": self.valid,
                "invalid": self.invalid,
                "validPercent": self.valid_percent,
                "invalidPercent": self.invalid_percent,
            },
            "types": {
                name: {
                    "total": t.total,
                    "valid": t.valid,
                    "invalid": t.invalid,
                    "validPercent": t.valid_percent,
                    "invalidPercent": t.invalid_percent,
                    "errors": list(t.errors),
                }
                for name, t in sorted(self.by_type.items())
            },
        }
