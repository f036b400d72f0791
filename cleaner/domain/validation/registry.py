from __future__ import annotations

from cleaner.domain.metadata_paths import EXISTENCE_PATHS
from cleaner.domain.metadata_types import UNVERIFIABLE_TYPES
from cleaner.domain.models import Identifier, ValidationVerdict, VerdictCode
from cleaner.domain.validation.rules import (
    Rule,
    ValidationContext,
    address_country_rule,
    address_state_rule,
    custom_label_rule,
    data_category_rule,
    flow_rule,
    make_existence_rule,
    picklist_value_rule,
    record_type_rule,
    unverifiable_rule,
    workflow_task_rule,
)


def build_default_rules() -> dict[str, Rule]:
    """
    Назначение:
        Таблица стратегий type -> правило для всех поддерживаемых типов.
    """
    rules: dict[str, Rule] = {name: make_existence_rule(name) for name in EXISTENCE_PATHS}
    rules.update(
        {
            "PicklistValue": picklist_value_rule,
            "RecordType": record_type_rule,
            "DataCategory": data_category_rule,
            "WorkflowTask": workflow_task_rule,
            "Flow": flow_rule,
            "CustomLabel": custom_label_rule,
            "AddressCountry": address_country_rule,
            "AddressState": address_state_rule,
        }
    )
    for name in UNVERIFIABLE_TYPES:
        rules[name] = unverifiable_rule
    return rules


class ValidationRegistry:
    """
    Назначение/ответственность:
        Решает, существует ли в снимке метаданных элемент, на который ссылается ключ.

    Взаимодействия:
        - Правила получают ValidationContext (хранилище, кэш, справочники, флаги).

    Ограничения:
        - Неизвестный тип -> UNKNOWN_TYPE, а не исключение.
        - Исключение внутри правила превращается в вердикт RULE_ERROR.
    """

    def __init__(self, context: ValidationContext, rules: dict[str, Rule] | None = None):
        self.context = context
        self.rules = rules if rules is not None else build_default_rules()

    def supports(self, metadata_type: str) -> bool:
        return metadata_type in self.rules

    def validate(self, identifier: Identifier) -> ValidationVerdict:
        rule = self.rules.get(identifier.type)
        if rule is None:
            return ValidationVerdict.reject(
                VerdictCode.UNKNOWN_TYPE,
                f"Metadata type '{identifier.type}' has no validation rule; "
                f"add it to the registry or disable it in translation_types",
            )
        try:
            return rule(identifier, self.context)
        except Exception as exc:
            return ValidationVerdict.reject(
                VerdictCode.RULE_ERROR,
                f"Rule for {identifier.type} failed on '{identifier.describe()}': {exc}",
            )
