from __future__ import annotations

import logging
from dataclasses import dataclass

from cleaner.domain.metadata_paths import object_dir
from cleaner.domain.metadata_types import OBJECT_SCOPED_TYPES, STANDARD_OBJECT_MARKER
from cleaner.domain.models import Identifier
from cleaner.domain.ports.metadata import MetadataStoreProtocol

CUSTOM_SUFFIX = "__c"
CUSTOM_METADATA_SUFFIX = "__mdt"


@dataclass(frozen=True)
class ResolvedObject:
    identifier: Identifier
    found: bool
    note: str | None = None


class ObjectNameResolver:
    """
    Назначение/ответственность:
        Проверяет папку объекта для типов из objects/<object>/ и при необходимости
        переписывает суффикс __c -> __mdt (custom metadata экспортируются как __c).

    Ограничения:
        - Имена объектов без папки запоминаются на время жизни резолвера:
          повторный промах не обращается к файловой системе.
        - Без блокировок: одинаковая запись из двух потоков безвредна.
    """

    def __init__(self, store: MetadataStoreProtocol, logger: logging.Logger, run_id: str):
        self.store = store
        self.logger = logger
        self.run_id = run_id
        self._missing: set[str] = set()
        self._renamed: dict[str, str] = {}

    def applies_to(self, identifier: Identifier) -> bool:
        if identifier.type not in OBJECT_SCOPED_TYPES:
            return False
        if not identifier.object:
            return False
        return identifier.object.lower() != STANDARD_OBJECT_MARKER

    def resolve(self, identifier: Identifier) -> ResolvedObject:
        if not self.applies_to(identifier):
            return ResolvedObject(identifier=identifier, found=True)

        object_name = identifier.object
        if object_name in self._missing:
            return ResolvedObject(identifier=identifier, found=False, note=f"Object {object_name} does not exist")

        renamed = self._renamed.get(object_name)
        if renamed is not None:
            return ResolvedObject(identifier=identifier.with_object(renamed), found=True)

        if self.store.exists(object_dir(object_name)):
            return ResolvedObject(identifier=identifier, found=True)

        if object_name.endswith(CUSTOM_SUFFIX):
            candidate = object_name[: -len(CUSTOM_SUFFIX)] + CUSTOM_METADATA_SUFFIX
            if self.store.exists(object_dir(candidate)):
                self._renamed[object_name] = candidate
                note = f"Object {object_name} not found; using custom metadata object {candidate}"
                self.logger.log(logging.INFO, note, extra={"runId": self.run_id, "component": "resolver"})
                return ResolvedObject(identifier=identifier.with_object(candidate), found=True, note=note)

        self._missing.add(object_name)
        return ResolvedObject(identifier=identifier, found=False, note=f"Object {object_name} does not exist")

    @property
    def missing_objects(self) -> frozenset[str]:
        return frozenset(self._missing)
