from __future__ import annotations

from pathlib import Path
from typing import Iterator


def list_translation_files(source_dir: str, extension: str) -> list[str]:
    """
    Назначение:
        Имена файлов перевода в каталоге с заданным расширением (без учёта регистра).

    Поведение:
        - Подкаталоги пропускаются.
        - Нет каталога -> FileNotFoundError (обрабатывает use case).
    """
    root = Path(source_dir)
    if not root.is_dir():
        raise FileNotFoundError(f"Directory not found: {source_dir}")
    wanted = extension.lower()
    return sorted(p.name for p in root.iterdir() if p.is_file() and p.suffix.lower() == wanted)


class TranslationLineSource:
    """
    Назначение/ответственность:
        Однопроходный источник строк .stf файла (без символов конца строки).

    Ограничения:
        - CRLF и LF считаются одним переводом строки; BOM в начале файла отбрасывается.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def __iter__(self) -> Iterator[str]:
        with open(self.path, "r", encoding="utf-8-sig", newline="") as f:
            for line in f:
                yield line.rstrip("\r\n")
