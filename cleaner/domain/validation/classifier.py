from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from cleaner.domain.models import Identifier, ImportKind, Record, ValidationVerdict, VerdictCode
from cleaner.domain.validation.object_resolver import ObjectNameResolver
from cleaner.domain.validation.registry import ValidationRegistry


@dataclass(frozen=True)
class Classification:
    """
    Назначение:
        Итог по одной записи: вердикт, тип (после нормализации) и поток импорта.
    """

    identifier: Identifier
    verdict: ValidationVerdict
    import_kind: ImportKind

    @property
    def accepted(self) -> bool:
        return self.verdict.valid


class RecordClassifier:
    """
    Назначение/ответственность:
        Принимает или отклоняет запись перевода.

    Алгоритм:
        1) нормализация объекта (__c -> __mdt, проверка папки объекта);
        2) известный тип выключен в translation_types -> TYPE_DISABLED;
        3) ключ в force_exclude -> FORCE_EXCLUDED;
        4) ключ в списке исключений прошлых импортов -> EXCLUDED_BY_LOG;
        5) правило из ValidationRegistry (неизвестный тип -> UNKNOWN_TYPE).

    Взаимодействия:
        - ExclusionSet и справочники строятся один раз на запуск и только читаются.
    """

    def __init__(
        self,
        registry: ValidationRegistry,
        resolver: ObjectNameResolver,
        *,
        is_type_enabled: Callable[[str], bool],
        metadata_import_types: Iterable[str],
        force_exclude: Iterable[str] = (),
        exclusions: frozenset[str] = frozenset(),
    ):
        self.registry = registry
        self.resolver = resolver
        self.is_type_enabled = is_type_enabled
        self.metadata_import_types = frozenset(metadata_import_types)
        self.force_exclude = frozenset(force_exclude)
        self.exclusions = exclusions

    def import_kind(self, metadata_type: str) -> ImportKind:
        if metadata_type in self.metadata_import_types:
            return ImportKind.METADATA
        return ImportKind.DATA

    def classify(self, record: Record) -> Classification:
        key = record.key
        identifier = record.identifier
        kind = self.import_kind(identifier.type)

        resolved = self.resolver.resolve(identifier)
        if not resolved.found:
            verdict = ValidationVerdict.reject(VerdictCode.OBJECT_MISSING, resolved.note or "Object does not exist")
            return Classification(identifier=identifier, verdict=verdict, import_kind=kind)
        identifier = resolved.identifier

        if self.registry.supports(identifier.type) and not self.is_type_enabled(identifier.type):
            verdict = ValidationVerdict.reject(
                VerdictCode.TYPE_DISABLED,
                f"Type {identifier.type} is disabled in translation_types",
            )
        elif key in self.force_exclude:
            verdict = ValidationVerdict.reject(VerdictCode.FORCE_EXCLUDED, f"Key {key} is in force_exclude")
        elif key in self.exclusions:
            verdict = ValidationVerdict.reject(
                VerdictCode.EXCLUDED_BY_LOG,
                f"Key {key} was rejected by a previous import",
            )
        else:
            verdict = self.registry.validate(identifier)

        return Classification(identifier=identifier, verdict=verdict, import_kind=kind)
