from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from cleaner.domain.identifier import parse_record
from cleaner.domain.models import FileReport, FileTally, ImportKind, VerdictCode
from cleaner.domain.processing.reducer import HEADER_MARKER, LineReducer, LineState, iter_payload
from cleaner.domain.validation.classifier import RecordClassifier

UNPARSED_TYPE = "ERROR"


@dataclass
class FileOutcome:
    """
    Назначение:
        Результат обработки одного файла: буферы строк и отчёт.

    Контракт:
        - metadata_lines/data_lines содержат только принятые строки (без заголовка).
        - *_content() добавляют заголовок и строку-маркер колонок, чтобы файл снова
          читался тем же автоматом.
        - bad_lines содержит отклонённые строки в исходном порядке.
    """

    file: str
    header: list[str] = field(default_factory=list)
    metadata_lines: list[str] = field(default_factory=list)
    data_lines: list[str] = field(default_factory=list)
    bad_lines: list[str] = field(default_factory=list)
    rejections: dict[str, int] = field(default_factory=dict)
    state: LineState = LineState.SCANNING_HEADER
    report: FileReport | None = None

    def metadata_content(self) -> list[str]:
        return [*self.header, HEADER_MARKER, *self.metadata_lines] if self.metadata_lines else []

    def data_content(self) -> list[str]:
        return [*self.header, HEADER_MARKER, *self.data_lines] if self.data_lines else []


class FileProcessor:
    """
    Назначение/ответственность:
        Обрабатывает строки одного .stf файла: разбор заголовка, классификация
        записей, разделение на потоки metadata/data/removed и подсчёт статистики.

    Взаимодействия:
        - LineReducer: состояние заголовок/payload.
        - RecordClassifier: вердикт по каждой записи.

    Ограничения:
        - Ничего не пишет на диск; артефакты записывает use case.
        - Исключение на одной строке отклоняет только эту строку (RULE_ERROR).
    """

    def __init__(
        self,
        classifier: RecordClassifier,
        logger: logging.Logger,
        run_id: str,
        *,
        abort_on_untranslated: bool = False,
    ):
        self.classifier = classifier
        self.logger = logger
        self.run_id = run_id
        self.abort_on_untranslated = abort_on_untranslated

    def process(self, file: str, lines: Iterable[str], source_dir: str = "", dest_dir: str = "") -> FileOutcome:
        reducer = LineReducer(abort_on_untranslated=self.abort_on_untranslated)
        outcome = FileOutcome(file=file)
        tally = FileTally()

        for payload in iter_payload(reducer, lines):
            self._process_line(payload.line_no, payload.text, outcome, tally)

        if reducer.state == LineState.ABORTED:
            self._log(logging.INFO, f"{file}: untranslated section reached, stopped reading")

        outcome.header = list(reducer.header)
        outcome.state = reducer.state
        outcome.report = FileReport(
            source_dir=source_dir,
            file=file,
            dest_dir=dest_dir,
            language=reducer.language,
            language_code=reducer.language_code,
            total=tally.total,
            valid=tally.valid,
            invalid=tally.invalid,
            by_type=tally.by_type,
        )
        self._log(
            logging.INFO,
            f"{file}: language={reducer.language or '-'} total={tally.total} "
            f"valid={tally.valid} invalid={tally.invalid}",
        )
        return outcome

    def _process_line(self, line_no: int, line: str, outcome: FileOutcome, tally: FileTally) -> None:
        metadata_type = UNPARSED_TYPE
        try:
            record = parse_record(line_no, line)
            metadata_type = record.identifier.type or UNPARSED_TYPE
            result = self.classifier.classify(record)
        except Exception as exc:
            message = f"Error processing translation line {line_no}: {exc}"
            self._log(logging.ERROR, message)
            tally.record(metadata_type, valid=False, error=message)
            outcome.bad_lines.append(line)
            self._count_rejection(outcome, VerdictCode.RULE_ERROR)
            return

        # Статистика ведётся по исходному типу ключа.
        tally.record(metadata_type, valid=result.accepted)
        if result.accepted:
            if result.import_kind == ImportKind.METADATA:
                outcome.metadata_lines.append(record.raw_line)
            else:
                outcome.data_lines.append(record.raw_line)
            return

        outcome.bad_lines.append(record.raw_line)
        self._count_rejection(outcome, result.verdict.code)
        self._log(
            logging.WARNING,
            f"rejected line={line_no} key={record.key} code={result.verdict.code.value} reason={result.verdict.reason}",
        )

    @staticmethod
    def _count_rejection(outcome: FileOutcome, code: VerdictCode) -> None:
        outcome.rejections[code.value] = outcome.rejections.get(code.value, 0) + 1

    def _log(self, level: int, message: str) -> None:
        self.logger.log(level, message, extra={"runId": self.run_id, "component": "processor"})
