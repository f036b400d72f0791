from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from cleaner.domain.identifier import encode_html_entities
from cleaner.domain.metadata_paths import (
    EXISTENCE_PATHS,
    OBJECT_ONLY_TYPES,
    custom_field_file,
    data_category_group_file,
    flow_file,
    record_type_file,
    workflow_file,
)
from cleaner.domain.metadata_types import STANDARD_OBJECT_MARKER
from cleaner.domain.models import Identifier, ValidationVerdict, VerdictCode
from cleaner.domain.ports.metadata import (
    ContentCacheProtocol,
    FlowReaderProtocol,
    MetadataStoreProtocol,
    ReferenceLookupProtocol,
)

GLOBAL_VALUE_SET_SUFFIX = "__gsv"
FLOW_FIELD_ELEMENT = "field"


@dataclass(frozen=True)
class ValidationContext:
    """
    Назначение:
        Всё, что нужно правилам: снимок метаданных, кэш содержимого, справочники и флаги.
    """

    store: MetadataStoreProtocol
    cache: ContentCacheProtocol
    references: ReferenceLookupProtocol
    flow_reader: FlowReaderProtocol
    force_include_unverifiable: bool = False
    check_flow_structure: bool = False


Rule = Callable[[Identifier, ValidationContext], ValidationVerdict]


def _malformed(identifier: Identifier, missing: str) -> ValidationVerdict:
    return ValidationVerdict.reject(
        VerdictCode.MALFORMED_RECORD,
        f"{identifier.type} key '{identifier.describe()}' has no {missing}",
    )


def _file_verdict(ctx: ValidationContext, path: str) -> ValidationVerdict:
    if ctx.store.exists(path):
        return ValidationVerdict.ok()
    return ValidationVerdict.reject(VerdictCode.FILE_MISSING, f"{path} does not exist")


def _contains_marker(text: str | None, marker: str) -> bool:
    return text is not None and marker in text


def make_existence_rule(metadata_type: str) -> Rule:
    """
    Назначение:
        Правило «только существование»: путь строится по шаблону типа.
    """
    template = EXISTENCE_PATHS[metadata_type]
    needs_element = metadata_type not in OBJECT_ONLY_TYPES

    def rule(identifier: Identifier, ctx: ValidationContext) -> ValidationVerdict:
        if not identifier.object:
            return _malformed(identifier, "object name")
        if needs_element and not identifier.element:
            return _malformed(identifier, "element name")
        return _file_verdict(ctx, template(identifier.object, identifier.element))

    return rule


def picklist_value_rule(identifier: Identifier, ctx: ValidationContext) -> ValidationVerdict:
    """
    Назначение:
        PicklistValue.<object>.<field>.<value>

    Алгоритм:
        - object == standard -> valid (стандартные picklist нельзя проверить без
          таблицы соответствия стандартных полей).
        - поле global value set (__gsv) -> valid.
        - иначе поле должно существовать и содержать <fullName>value</fullName>.
    """
    if identifier.object.lower() == STANDARD_OBJECT_MARKER:
        return ValidationVerdict.ok("standard picklist accepted without check")
    if identifier.element.endswith(GLOBAL_VALUE_SET_SUFFIX):
        return ValidationVerdict.ok("global value set picklist accepted without check")
    if not identifier.object or not identifier.element:
        return _malformed(identifier, "object/field name")

    field_path = custom_field_file(identifier.object, identifier.element)
    if not ctx.store.exists(field_path):
        return ValidationVerdict.reject(
            VerdictCode.FILE_MISSING,
            f"Field {identifier.object}.{identifier.element} does not exist; picklist value not evaluated",
        )
    if not identifier.extra or not identifier.extra[0]:
        return _malformed(identifier, "picklist value")

    value = encode_html_entities(identifier.extra[0])
    content = ctx.cache.get(identifier.type, identifier.object, identifier.element)
    if _contains_marker(content, f"<fullName>{value}</fullName>"):
        return ValidationVerdict.ok()
    return ValidationVerdict.reject(
        VerdictCode.CONTENT_MISSING,
        f"Picklist value {value} not found in {field_path}",
    )


def record_type_rule(identifier: Identifier, ctx: ValidationContext) -> ValidationVerdict:
    if not identifier.object or not identifier.element:
        return _malformed(identifier, "object/record type name")

    path = record_type_file(identifier.object, identifier.element)
    verdict = _file_verdict(ctx, path)
    if not verdict.valid or not identifier.extra or not identifier.extra[0]:
        return verdict

    # Запись ссылается ещё и на поле внутри record type.
    field_name = encode_html_entities(identifier.extra[0])
    content = ctx.cache.get(identifier.type, identifier.object, identifier.element)
    if _contains_marker(content, f"<fullName>{field_name}</fullName>"):
        return ValidationVerdict.ok()
    return ValidationVerdict.reject(
        VerdictCode.CONTENT_MISSING,
        f"Field {field_name} not referenced by record type {identifier.object}.{identifier.element}",
    )


def data_category_rule(identifier: Identifier, ctx: ValidationContext) -> ValidationVerdict:
    if not identifier.object or not identifier.element:
        return _malformed(identifier, "group/category name")

    group_path = data_category_group_file(identifier.object)
    if not ctx.store.exists(group_path):
        return ValidationVerdict.reject(
            VerdictCode.FILE_MISSING,
            f"Data Category Group {identifier.object} does not exist; category not evaluated",
        )
    content = ctx.cache.get(identifier.type, identifier.object, None)
    if _contains_marker(content, f"<name>{identifier.element}</name>"):
        return ValidationVerdict.ok()
    return ValidationVerdict.reject(
        VerdictCode.CONTENT_MISSING,
        f"Data category {identifier.element} not found in {group_path}",
    )


def workflow_task_rule(identifier: Identifier, ctx: ValidationContext) -> ValidationVerdict:
    if not identifier.object or not identifier.element:
        return _malformed(identifier, "object/task name")

    path = workflow_file(identifier.object)
    if not ctx.store.exists(path):
        return ValidationVerdict.reject(VerdictCode.FILE_MISSING, f"{path} does not exist")
    content = ctx.cache.get(identifier.type, identifier.object, identifier.element)
    if _contains_marker(content, f"<fullName>{identifier.element}</fullName>"):
        return ValidationVerdict.ok()
    return ValidationVerdict.reject(
        VerdictCode.CONTENT_MISSING,
        f"Workflow task {identifier.element} not found in {path}",
    )


def flow_rule(identifier: Identifier, ctx: ValidationContext) -> ValidationVerdict:
    """
    Назначение:
        Flow.Flow.<flow>.<version>.<screen>.<elementType>.<field>...

    Алгоритм:
        - flow-meta.xml должен существовать.
        - При check_flow_structure и достаточном числе частей ключа экран
          (и поле, если elementType == Field) должны присутствовать в структуре flow.
    """
    if not identifier.element:
        return _malformed(identifier, "flow name")

    path = flow_file(identifier.element)
    if not ctx.store.exists(path):
        return ValidationVerdict.reject(VerdictCode.FILE_MISSING, f"Flow {identifier.element} does not exist")
    if not ctx.check_flow_structure or len(identifier.extra) < 3:
        return ValidationVerdict.ok()

    screen_name = identifier.extra[1]
    element_type = identifier.extra[2]
    content = ctx.cache.get(identifier.type, identifier.object, identifier.element)
    if content is None:
        return ValidationVerdict.reject(VerdictCode.FILE_MISSING, f"Flow {identifier.element} could not be read")
    try:
        screens = ctx.flow_reader.screens(content)
    except ValueError as exc:
        return ValidationVerdict.reject(VerdictCode.CONTENT_MISSING, f"Flow {identifier.element}: {exc}")

    if screen_name not in screens:
        return ValidationVerdict.reject(
            VerdictCode.CONTENT_MISSING,
            f"Screen {screen_name} does not exist in flow {identifier.element}",
        )
    if element_type.lower() == FLOW_FIELD_ELEMENT:
        field_name = identifier.extra[3] if len(identifier.extra) > 3 else ""
        if field_name not in screens[screen_name]:
            return ValidationVerdict.reject(
                VerdictCode.CONTENT_MISSING,
                f"Field {field_name} does not exist on screen {screen_name} in flow {identifier.element}",
            )
    return ValidationVerdict.ok()


def custom_label_rule(identifier: Identifier, ctx: ValidationContext) -> ValidationVerdict:
    if not identifier.object:
        return _malformed(identifier, "label name")
    if ctx.references.has_label(identifier.object):
        return ValidationVerdict.ok()
    return ValidationVerdict.reject(VerdictCode.INDEX_MISS, f"Custom label {identifier.object} does not exist")


def address_country_rule(identifier: Identifier, ctx: ValidationContext) -> ValidationVerdict:
    if not identifier.object:
        return _malformed(identifier, "country ISO code")
    if ctx.references.has_country(identifier.object):
        return ValidationVerdict.ok()
    return ValidationVerdict.reject(VerdictCode.INDEX_MISS, f"Country {identifier.object} not in address settings")


def address_state_rule(identifier: Identifier, ctx: ValidationContext) -> ValidationVerdict:
    if not identifier.object or not identifier.element:
        return _malformed(identifier, "country/state ISO code")
    if ctx.references.has_state(identifier.object, identifier.element):
        return ValidationVerdict.ok()
    return ValidationVerdict.reject(
        VerdictCode.INDEX_MISS,
        f"State {identifier.element} not in address settings for country {identifier.object}",
    )


def unverifiable_rule(identifier: Identifier, ctx: ValidationContext) -> ValidationVerdict:
    """
    Назначение:
        Типы без локальной проверки: решение задаётся force_include_types_with_missing_check.
    """
    if ctx.force_include_unverifiable:
        return ValidationVerdict(valid=True, code=VerdictCode.UNVERIFIED_PASS, reason="no local check; force included")
    return ValidationVerdict.reject(
        VerdictCode.UNVERIFIED_PASS,
        f"No local check for {identifier.type}; force include disabled",
    )
