from __future__ import annotations

import logging

from cleaner.domain.metadata_paths import CONTENT_PATHS
from cleaner.domain.ports.metadata import ContentCacheProtocol
from cleaner.infra.logging.setup import logEvent
from cleaner.infra.metadata.layout import MetadataLayout


class ContentCache(ContentCacheProtocol):
    """
    Назначение/ответственность:
        Ленивый кэш текстов файлов метаданных на время запуска.

    Взаимодействия:
        - Путь файла выбирается по типу через CONTENT_PATHS.
        - Читает через MetadataLayout.

    Ограничения:
        - Успешное чтение кэшируется навсегда (снимок статичен в пределах запуска).
        - Неудачное чтение не кэшируется: следующий вызов прочитает файл снова.
        - Без блокировок: два потока могут одновременно прочитать один файл и
          записать одинаковое значение.
    """

    def __init__(self, layout: MetadataLayout, logger: logging.Logger, run_id: str):
        self.layout = layout
        self.logger = logger
        self.run_id = run_id
        self._entries: dict[tuple[str, str, str], str] = {}
        self.hits = 0
        self.misses = 0

    def get(self, metadata_type: str, object_name: str, element_name: str | None) -> str | None:
        key = (metadata_type, object_name, element_name or "")
        cached = self._entries.get(key)
        if cached is not None:
            self.hits += 1
            return cached

        self.misses += 1
        template = CONTENT_PATHS.get(metadata_type)
        if template is None:
            logEvent(
                self.logger,
                logging.ERROR,
                self.run_id,
                "cache",
                f"No content template for type {metadata_type}; it cannot be read/cached",
            )
            return None

        relative_path = template(object_name, element_name)
        try:
            text = self.layout.read_text(relative_path)
        except (OSError, UnicodeDecodeError) as exc:
            logEvent(
                self.logger,
                logging.WARNING,
                self.run_id,
                "cache",
                f"Cache miss and read failed for {metadata_type} {object_name} {element_name or ''}: {exc}",
            )
            return None

        logEvent(
            self.logger,
            logging.DEBUG,
            self.run_id,
            "cache",
            f"Cache miss - loaded {relative_path}",
        )
        self._entries[key] = text
        return text

    def stats(self) -> dict[str, int]:
        return {"entries": len(self._entries), "hits": self.hits, "misses": self.misses}
