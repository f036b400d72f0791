from __future__ import annotations

# Типы метаданных, для которых есть правило проверки существования.
KNOWN_METADATA_TYPES: tuple[str, ...] = (
    "AddressCountry",
    "AddressState",
    "ApexSharingReason",
    "ButtonOrLink",
    "CrtColumn",
    "CrtLayoutSection",
    "CustomApp",
    "CustomField",
    "CustomLabel",
    "CustomReportType",
    "DataCategory",
    "DataCategoryGroup",
    "FieldSet",
    "Flow",
    "LayoutSection",
    "LookupFilter",
    "ManagedContentNodeType",
    "ManagedContentType",
    "PathAssistantStepInfo",
    "PicklistValue",
    "QuickAction",
    "RecordType",
    "Scontrol",
    "StandardFieldHelp",
    "ValidationFormula",
    "WebTab",
    "WorkflowTask",
)

# Типы, чьи метаданные лежат в objects/<object>/; к ним применяется
# проверка папки объекта и замена __c -> __mdt.
OBJECT_SCOPED_TYPES: frozenset[str] = frozenset(
    {
        "ApexSharingReason",
        "ButtonOrLink",
        "CustomField",
        "FieldSet",
        "LookupFilter",
        "PicklistValue",
        "RecordType",
        "StandardFieldHelp",
        "ValidationFormula",
    }
)

# Нет надёжной локальной проверки; вердикт задаётся настройкой
# force_include_types_with_missing_check.
UNVERIFIABLE_TYPES: frozenset[str] = frozenset(
    {
        "ManagedContentNodeType",
        "ManagedContentType",
        "PathAssistantStepInfo",
    }
)

STANDARD_OBJECT_MARKER = "standard"
