from __future__ import annotations

from pathlib import Path

LINE_SEPARATOR = "\r\n"


def writeTranslationFile(destDir: str, fileName: str, lines: list[str]) -> str:
    """
    Назначение:
        Записывает строки файла перевода, разделённые CRLF, в UTF-8.

    Выходные данные:
        str
            Путь к записанному файлу.
    """
    Path(destDir).mkdir(parents=True, exist_ok=True)
    path = Path(destDir) / fileName
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(LINE_SEPARATOR.join(lines))
    return str(path)
