from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator

HEADER_MARKER = "# KEY\tLABEL\tTRANSLATION\tOUT OF DATE"
UNTRANSLATED_SENTINEL = "------------------OUTDATED AND UNTRANSLATED-----------------"
LANGUAGE_PREFIX = "# Language:"
LANGUAGE_CODE_PREFIX = "Language code:"


class LineState(str, Enum):
    SCANNING_HEADER = "SCANNING_HEADER"
    IN_PAYLOAD = "IN_PAYLOAD"
    DONE = "DONE"
    ABORTED = "ABORTED"


@dataclass(frozen=True)
class PayloadLine:
    line_no: int
    text: str


@dataclass
class LineReducer:
    """
    Назначение/ответственность:
        Конечный автомат разбора .stf: заголовок -> payload -> конец.

    Поведение:
        - Строка-сентинел «OUTDATED AND UNTRANSLATED»: при abort_on_untranslated
          разбор прекращается (ABORTED), иначе строка пропускается.
        - До маркера "# KEY\\tLABEL..." строки копируются в заголовок; сам маркер
          отбрасывается.
        - Строки payload короче 2 символов или со вторым символом '0' пропускаются
          и не считаются.

    Ограничения:
        - Один экземпляр на файл; feed() не вызывается после DONE/ABORTED.
    """

    abort_on_untranslated: bool = False
    state: LineState = LineState.SCANNING_HEADER
    header: list[str] = field(default_factory=list)
    language: str = ""
    language_code: str = ""
    skipped: int = 0

    @property
    def finished(self) -> bool:
        return self.state in (LineState.DONE, LineState.ABORTED)

    def feed(self, line_no: int, line: str) -> PayloadLine | None:
        """
        Выходные данные:
            PayloadLine для строки данных, иначе None.
        """
        if self.finished:
            return None

        stripped = line.strip()
        if stripped == UNTRANSLATED_SENTINEL:
            if self.abort_on_untranslated:
                self.state = LineState.ABORTED
            else:
                self.skipped += 1
            return None

        if self.state == LineState.SCANNING_HEADER:
            if stripped == HEADER_MARKER:
                self.state = LineState.IN_PAYLOAD
                return None
            self.header.append(line)
            self._read_language(line)
            return None

        if len(stripped) < 2 or stripped[1] == "0":
            self.skipped += 1
            return None
        return PayloadLine(line_no=line_no, text=line)

    def finish(self) -> None:
        if self.state != LineState.ABORTED:
            self.state = LineState.DONE

    def _read_language(self, line: str) -> None:
        # "# Language: German" / "Language code: de"
        if LANGUAGE_PREFIX in line:
            self.language = _third_word(line)
        elif LANGUAGE_CODE_PREFIX in line:
            self.language_code = _third_word(line)


def _third_word(line: str) -> str:
    parts = line.strip().split(" ")
    return parts[2].strip() if len(parts) > 2 else ""


def iter_payload(reducer: LineReducer, lines: Iterable[str]) -> Iterator[PayloadLine]:
    """
    Назначение:
        Прогоняет строки через автомат и отдаёт только строки payload.
    """
    for line_no, line in enumerate(lines, start=1):
        payload = reducer.feed(line_no, line)
        if payload is not None:
            yield payload
        if reducer.finished:
            return
    reducer.finish()
