from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FileProcessingError(Exception):
    """
    Назначение:
        Ошибка обработки одного файла перевода целиком (чтение, запись артефактов).
    Инварианты/гарантии:
        - Не отменяет обработку соседних файлов: ловится в use case и считается как failed.
    """

    file: str
    cause: Exception

    def __str__(self) -> str:
        return f"Failed to process translation file '{self.file}': {self.cause}"


__all__ = ["FileProcessingError"]
