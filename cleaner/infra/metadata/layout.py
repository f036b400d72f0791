from __future__ import annotations

from pathlib import Path

from cleaner.domain.ports.metadata import MetadataStoreProtocol


class MetadataLayout(MetadataStoreProtocol):
    """
    Назначение/ответственность:
        Адаптер локального снимка метаданных поверх файловой системы.

    Ограничения:
        Только чтение; относительные пути используют '/' независимо от ОС.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def resolve(self, relative_path: str) -> Path:
        return self.root.joinpath(*[part for part in relative_path.split("/") if part])

    def exists(self, relative_path: str) -> bool:
        return self.resolve(relative_path).exists()

    def read_text(self, relative_path: str) -> str:
        """
        Контракт:
            Бросает OSError/UnicodeDecodeError, обработка на стороне вызывающего.
        """
        return self.resolve(relative_path).read_text(encoding="utf-8")
