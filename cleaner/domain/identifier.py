from __future__ import annotations

from cleaner.domain.models import Identifier, Record

KEY_SEPARATOR = "."
COLUMN_SEPARATOR = "\t"

_HTML_ENTITIES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "'": "&#39;",
    '"': "&quot;",
}


def parse_identifier(key: str) -> Identifier:
    """
    Назначение:
        Разбирает ключ записи на type/object/element/extra.

    Входные данные:
        key: str
            Например: PicklistValue.Queue_Share__c.Related_Object.Complaint Analysis

    Выходные данные:
        Identifier

    Поведение:
        - Никогда не падает: недостающие позиции становятся пустыми строками.
    """
    parts = (key or "").split(KEY_SEPARATOR)
    padded = parts + [""] * (3 - len(parts))
    return Identifier(
        type=padded[0].strip(),
        object=padded[1],
        element=padded[2],
        extra=tuple(parts[3:]),
    )


def encode_html_entities(value: str) -> str:
    """
    Назначение:
        Кодирует значение так, как оно хранится внутри XML метаданных.
    """
    return "".join(_HTML_ENTITIES.get(ch, ch) for ch in value)


def parse_record(line_no: int, line: str) -> Record:
    """
    Назначение:
        Строка payload -> Record: ключ (колонка 0), Identifier и колонки перевода.

    Поведение:
        - Строка без табуляции: весь текст считается ключом, колонок перевода нет.
    """
    key, *columns = line.split(COLUMN_SEPARATOR)
    return Record(
        line_no=line_no,
        raw_line=line,
        key=key,
        identifier=parse_identifier(key),
        translation_columns=tuple(columns),
    )
