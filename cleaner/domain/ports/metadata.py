from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetadataStoreProtocol(Protocol):
    """
    Назначение:
        Доступ к локальному снимку метаданных (дерево retrieve).

    Контракт:
        - exists(relative_path) -> bool
            Путь задаётся относительно корня снимка, через '/'.
    """

    def exists(self, relative_path: str) -> bool: ...


@runtime_checkable
class ContentCacheProtocol(Protocol):
    """
    Назначение:
        Ленивый кэш содержимого файлов метаданных по (type, object, element).

    Контракт:
        - get(...) -> str | None; None, если файл недоступен (ошибка не кэшируется).
    """

    def get(self, metadata_type: str, object_name: str, element_name: str | None) -> str | None: ...


@runtime_checkable
class ReferenceLookupProtocol(Protocol):
    """
    Назначение:
        Предзагруженные справочники: адреса (страны/штаты) и custom labels.
    """

    def has_country(self, country_iso: str) -> bool: ...

    def has_state(self, country_iso: str, state_iso: str) -> bool: ...

    def has_label(self, label_name: str) -> bool: ...


@runtime_checkable
class FlowReaderProtocol(Protocol):
    """
    Назначение:
        Разбор структуры flow (экраны и их поля) для глубокой проверки.

    Контракт:
        - screens(text) -> dict[screen_name, frozenset[field_name]]
        - Некорректный XML -> ValueError.
    """

    def screens(self, flow_text: str) -> dict[str, frozenset[str]]: ...


__all__ = [
    "MetadataStoreProtocol",
    "ContentCacheProtocol",
    "ReferenceLookupProtocol",
    "FlowReaderProtocol",
]
