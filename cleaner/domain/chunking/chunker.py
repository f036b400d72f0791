from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from cleaner.domain.identifier import parse_record
from cleaner.domain.processing.reducer import HEADER_MARKER, LineReducer, iter_payload

CLEANED_FILE_PREFIX = "metadata_Bilingual_"


@dataclass(frozen=True)
class ChunkOptions:
    break_on_sub_types: bool = False
    lines_per_chunk: int = 0
    abort_on_untranslated: bool = False


@dataclass
class ChunkedFile:
    """
    Назначение:
        Заголовок файла и группы строк payload по ключу чанка (в порядке появления).
    """

    header: list[str] = field(default_factory=list)
    chunks: dict[str, list[str]] = field(default_factory=dict)

    def content(self, key: str) -> list[str]:
        return [*self.header, HEADER_MARKER, *self.chunks[key]]


def chunk_lines(lines: Iterable[str], options: ChunkOptions) -> ChunkedFile:
    """
    Назначение:
        Делит payload уже очищенного файла на группы по типу метаданных.

    Алгоритм:
        - break_on_sub_types -> ключ "{type}_{object}";
        - иначе lines_per_chunk > 0 -> ключ "{type}_{n}", не более lines_per_chunk строк,
          счётчик n свой для каждого типа;
        - иначе ключ "{type}".

    Инварианты:
        - Конкатенация групп (порядок внутри группы сохранён) даёт ровно payload входа.
        - Заголовок копируется в каждый чанк без изменений.
    """
    reducer = LineReducer(abort_on_untranslated=options.abort_on_untranslated)
    result = ChunkedFile()
    chunk_index: dict[str, int] = {}

    for payload in iter_payload(reducer, lines):
        identifier = parse_record(payload.line_no, payload.text).identifier
        metadata_type = identifier.type

        if options.break_on_sub_types:
            key = f"{metadata_type}_{identifier.object}"
        elif options.lines_per_chunk > 0:
            index = chunk_index.get(metadata_type, 0)
            key = f"{metadata_type}_{index}"
            if len(result.chunks.get(key, ())) >= options.lines_per_chunk:
                index += 1
                chunk_index[metadata_type] = index
                key = f"{metadata_type}_{index}"
        else:
            key = metadata_type

        result.chunks.setdefault(key, []).append(payload.text)

    result.header = list(reducer.header)
    return result


def chunk_file_name(file_name: str, key: str) -> str:
    """
    Назначение:
        metadata_Bilingual_de.stf + PicklistValue -> de_PicklistValue.stf

    Поведение:
        - Отрезается только последнее расширение: metadata_Bilingual_de.v2.stf
          -> de.v2_PicklistValue.stf, имена чанков разных входов не совпадают.
    """
    stem, dot, ext = file_name.rpartition(".")
    if not dot:
        stem, ext = file_name, ""
    stem = stem.replace(CLEANED_FILE_PREFIX, "", 1)
    if not ext:
        return f"{stem}_{key}"
    return f"{stem}_{key}.{ext}"
