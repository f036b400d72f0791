import logging
from pathlib import Path

from cleaner.config.config import Settings
from cleaner.domain.identifier import parse_record
from cleaner.domain.models import ImportKind, VerdictCode
from cleaner.domain.validation.classifier import RecordClassifier
from cleaner.domain.validation.object_resolver import ObjectNameResolver
from cleaner.domain.validation.registry import ValidationRegistry
from cleaner.domain.validation.rules import ValidationContext
from cleaner.infra.metadata.content_cache import ContentCache
from cleaner.infra.metadata.flow_structure import FlowStructureReader
from cleaner.infra.metadata.layout import MetadataLayout
from cleaner.infra.metadata.reference_indexes import ReferenceIndexes


class CountingLayout(MetadataLayout):
    def __init__(self, root):
        super().__init__(root)
        self.calls: list[str] = []

    def exists(self, relative_path: str) -> bool:
        self.calls.append(relative_path)
        return super().exists(relative_path)


def _write(root: Path, relative: str, text: str = "<x/>") -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _classifier(root: Path, settings: Settings | None = None, exclusions=frozenset(), layout=None):
    settings = settings or Settings()
    layout = layout or MetadataLayout(root)
    logger = logging.getLogger("test.classifier")
    context = ValidationContext(
        store=layout,
        cache=ContentCache(layout, logger, "run-1"),
        references=ReferenceIndexes(),
        flow_reader=FlowStructureReader(),
    )
    return RecordClassifier(
        ValidationRegistry(context),
        ObjectNameResolver(layout, logger, "run-1"),
        is_type_enabled=settings.is_type_enabled,
        metadata_import_types=settings.metadata_import_types,
        force_exclude=settings.force_exclude,
        exclusions=exclusions,
    )


def _classify(classifier: RecordClassifier, key: str):
    return classifier.classify(parse_record(1, f"{key}\tlabel\ttranslation\t-"))


def test_custom_metadata_suffix_is_normalized(tmp_path: Path):
    _write(tmp_path, "objects/Routing__mdt/fields/Reason__c.field-meta.xml")
    classifier = _classifier(tmp_path)

    result = _classify(classifier, "CustomField.Routing__c.Reason.FieldLabel")
    assert result.accepted is True
    assert result.identifier.object == "Routing__mdt"


def test_missing_object_short_circuits_and_is_remembered(tmp_path: Path):
    layout = CountingLayout(tmp_path)
    classifier = _classifier(tmp_path, layout=layout)

    first = _classify(classifier, "CustomField.Ghost__c.Reason.FieldLabel")
    assert first.verdict.code == VerdictCode.OBJECT_MISSING
    calls_after_first = len(layout.calls)

    second = _classify(classifier, "CustomField.Ghost__c.Other.FieldLabel")
    assert second.verdict.code == VerdictCode.OBJECT_MISSING
    assert len(layout.calls) == calls_after_first
    assert "Ghost__c" in classifier.resolver.missing_objects


def test_normalization_skips_non_object_types(tmp_path: Path):
    _write(tmp_path, "tabs/Invoice__c.tab-meta.xml")
    classifier = _classifier(tmp_path)

    result = _classify(classifier, "WebTab.Invoice__c")
    assert result.accepted is True
    assert result.identifier.object == "Invoice__c"


def test_exclusion_list_rejects_even_when_metadata_exists(tmp_path: Path):
    _write(tmp_path, "objects/Account/fields/Region__c.field-meta.xml")
    key = "CustomField.Account.Region.FieldLabel"
    classifier = _classifier(tmp_path, exclusions=frozenset({key}))

    result = _classify(classifier, key)
    assert result.accepted is False
    assert result.verdict.code == VerdictCode.EXCLUDED_BY_LOG


def test_force_exclude_checked_before_exclusion_list(tmp_path: Path):
    _write(tmp_path, "objects/Account/fields/Region__c.field-meta.xml")
    key = "CustomField.Account.Region.FieldLabel"
    settings = Settings(force_exclude=(key,))
    classifier = _classifier(tmp_path, settings=settings, exclusions=frozenset({key}))

    assert _classify(classifier, key).verdict.code == VerdictCode.FORCE_EXCLUDED


def test_disabled_type_is_rejected(tmp_path: Path):
    _write(tmp_path, "applications/Sales.app-meta.xml")
    types = dict(Settings().translation_types)
    types["CustomApp"] = False
    classifier = _classifier(tmp_path, settings=Settings(translation_types=types))

    assert _classify(classifier, "CustomApp.Sales").verdict.code == VerdictCode.TYPE_DISABLED


def test_import_kind_follows_metadata_import_types(tmp_path: Path):
    _write(tmp_path, "applications/Sales.app-meta.xml")
    _write(tmp_path, "tabs/Invoice__c.tab-meta.xml")
    settings = Settings(metadata_import_types=("CustomApp",))
    classifier = _classifier(tmp_path, settings=settings)

    assert _classify(classifier, "CustomApp.Sales").import_kind == ImportKind.METADATA
    assert _classify(classifier, "WebTab.Invoice__c").import_kind == ImportKind.DATA


def test_unknown_type_is_not_reported_as_disabled(tmp_path: Path):
    classifier = _classifier(tmp_path)
    assert _classify(classifier, "Wombat.Thing.Other").verdict.code == VerdictCode.UNKNOWN_TYPE
