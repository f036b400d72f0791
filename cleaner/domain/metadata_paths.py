from __future__ import annotations

from typing import Callable

# Шаблоны путей внутри снимка метаданных (относительно корня, разделитель '/').


def object_dir(object_name: str) -> str:
    return f"objects/{object_name}"


def custom_field_file(object_name: str, field_name: str) -> str:
    return f"objects/{object_name}/fields/{field_name}__c.field-meta.xml"


def record_type_file(object_name: str, record_type: str) -> str:
    return f"objects/{object_name}/recordTypes/{record_type}.recordType-meta.xml"


def workflow_file(object_name: str) -> str:
    return f"workflows/{object_name}.workflow-meta.xml"


def data_category_group_file(group_name: str) -> str:
    return f"datacategorygroups/{group_name}.datacategorygroup-meta.xml"


def flow_file(flow_name: str) -> str:
    return f"flows/{flow_name}.flow-meta.xml"


def report_type_file(report_type: str) -> str:
    return f"reportTypes/{report_type}.reportType-meta.xml"


ADDRESS_SETTINGS_FILE = "settings/Address.settings-meta.xml"
CUSTOM_LABELS_FILE = "labels/CustomLabels.labels-meta.xml"

# Шаблоны существования: type -> (object, element) -> путь.
EXISTENCE_PATHS: dict[str, Callable[[str, str], str]] = {
    "ButtonOrLink": lambda o, e: f"objects/{o}/webLinks/{e}.webLink-meta.xml",
    "CustomApp": lambda o, e: f"applications/{o}.app-meta.xml",
    "CustomField": custom_field_file,
    "LayoutSection": lambda o, e: f"layouts/{o}-{e}.layout-meta.xml",
    "LookupFilter": custom_field_file,
    "ValidationFormula": lambda o, e: f"objects/{o}/validationRules/{e}.validationRule-meta.xml",
    "WebTab": lambda o, e: f"tabs/{o}.tab-meta.xml",
    "ApexSharingReason": lambda o, e: f"objects/{o}/sharingReasons/{e}__c.sharingReason-meta.xml",
    "CustomReportType": lambda o, e: report_type_file(o),
    "CrtLayoutSection": lambda o, e: report_type_file(o),
    "CrtColumn": lambda o, e: report_type_file(o),
    "DataCategoryGroup": lambda o, e: data_category_group_file(o),
    "Scontrol": lambda o, e: f"scontrols/{o}.scf-meta.xml",
    "StandardFieldHelp": lambda o, e: object_dir(o),
    "FieldSet": lambda o, e: f"objects/{o}/fieldSets/{e}.fieldSet-meta.xml",
    "QuickAction": lambda o, e: f"quickActions/{o}.{e}.quickAction-meta.xml",
}

# Существование проверяемых типов, которым нужен только object.
OBJECT_ONLY_TYPES = frozenset(
    {
        "CustomApp",
        "WebTab",
        "CustomReportType",
        "CrtLayoutSection",
        "CrtColumn",
        "DataCategoryGroup",
        "Scontrol",
        "StandardFieldHelp",
    }
)

# Шаблоны файлов, содержимое которых читается через ContentCache.
CONTENT_PATHS: dict[str, Callable[[str, str | None], str]] = {
    "PicklistValue": lambda o, e: custom_field_file(o, e or ""),
    "WorkflowTask": lambda o, e: workflow_file(o),
    "DataCategory": lambda o, e: data_category_group_file(o),
    "RecordType": lambda o, e: record_type_file(o, e or ""),
    "Flow": lambda o, e: flow_file(e or ""),
}
