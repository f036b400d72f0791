import logging
from pathlib import Path

from cleaner.config.config import Settings
from cleaner.domain.processing.file_processor import FileProcessor
from cleaner.domain.processing.reducer import HEADER_MARKER
from cleaner.domain.validation.classifier import RecordClassifier
from cleaner.domain.validation.object_resolver import ObjectNameResolver
from cleaner.domain.validation.registry import ValidationRegistry
from cleaner.domain.validation.rules import ValidationContext
from cleaner.infra.metadata.content_cache import ContentCache
from cleaner.infra.metadata.flow_structure import FlowStructureReader
from cleaner.infra.metadata.layout import MetadataLayout
from cleaner.infra.metadata.reference_indexes import CountryEntry, ReferenceIndexes

HEADER = [
    "# Use the Bilingual file to review translations.",
    "# Language: Spanish",
    "Language code: es",
]


def _write(root: Path, relative: str, text: str = "<x/>") -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _processor(root: Path, settings: Settings | None = None) -> FileProcessor:
    settings = settings or Settings()
    layout = MetadataLayout(root)
    logger = logging.getLogger("test.processor")
    context = ValidationContext(
        store=layout,
        cache=ContentCache(layout, logger, "run-1"),
        references=ReferenceIndexes(countries={"US": CountryEntry("US", "United States")}),
        flow_reader=FlowStructureReader(),
    )
    classifier = RecordClassifier(
        ValidationRegistry(context),
        ObjectNameResolver(layout, logger, "run-1"),
        is_type_enabled=settings.is_type_enabled,
        metadata_import_types=settings.metadata_import_types,
        force_exclude=settings.force_exclude,
    )
    return FileProcessor(classifier, logger, "run-1", abort_on_untranslated=settings.abort_on_untranslated)


def test_missing_field_file_is_rejected_and_counted(tmp_path: Path):
    (tmp_path / "objects" / "Account" / "fields").mkdir(parents=True)
    line = "CustomField.Account.Status.FieldLabel\tStatus\tEstado\t-"

    outcome = _processor(tmp_path).process("Bilingual_es.stf", [*HEADER, HEADER_MARKER, line])

    assert outcome.bad_lines == [line]
    assert outcome.metadata_lines == []
    tally = outcome.report.by_type["CustomField"]
    assert (tally.total, tally.valid, tally.invalid) == (1, 0, 1)
    assert outcome.rejections == {"FILE_MISSING": 1}


def test_known_country_is_accepted(tmp_path: Path):
    line = "AddressCountry.US\tUnited States\tEstados Unidos\t-"

    outcome = _processor(tmp_path).process("Bilingual_es.stf", [*HEADER, HEADER_MARKER, line])

    assert outcome.metadata_lines == [line]
    assert outcome.metadata_content() == [*HEADER, HEADER_MARKER, line]
    assert outcome.report.language == "Spanish"
    assert outcome.report.language_code == "es"


def test_tally_conservation(tmp_path: Path):
    _write(tmp_path, "objects/Account/fields/Region__c.field-meta.xml")
    _write(tmp_path, "applications/Sales.app-meta.xml")
    lines = [
        *HEADER,
        HEADER_MARKER,
        "CustomField.Account.Region.FieldLabel\tRegion\tRegión\t-",
        "CustomField.Account.Tier.FieldLabel\tTier\tNivel\t-",
        "CustomApp.Sales\tSales\tVentas\t-",
        "AddressCountry.ZZ\tNowhere\tNinguna\t-",
        "Wombat.Thing.Other\tX\tY\t-",
        "",
    ]

    outcome = _processor(tmp_path).process("Bilingual_es.stf", lines)
    report = outcome.report

    accepted = len(outcome.metadata_lines) + len(outcome.data_lines)
    assert accepted + len(outcome.bad_lines) == report.total == 5
    assert report.valid == accepted == 2
    assert report.invalid == 3
    for tally in report.by_type.values():
        assert tally.valid + tally.invalid == tally.total


def test_data_and_metadata_streams_are_split(tmp_path: Path):
    _write(tmp_path, "applications/Sales.app-meta.xml")
    _write(tmp_path, "tabs/Invoice__c.tab-meta.xml")
    settings = Settings(metadata_import_types=("CustomApp",))
    app_line = "CustomApp.Sales\tSales\tVentas\t-"
    tab_line = "WebTab.Invoice__c\tInvoices\tFacturas\t-"

    outcome = _processor(tmp_path, settings).process("f.stf", [HEADER_MARKER, app_line, tab_line])

    assert outcome.metadata_lines == [app_line]
    assert outcome.data_lines == [tab_line]


def test_error_on_one_line_rejects_only_that_line(tmp_path: Path):
    processor = _processor(tmp_path)
    original = processor.classifier.classify

    def flaky(record):
        if record.key == "CustomLabel.Broken":
            raise OSError("disk error")
        return original(record)

    processor.classifier.classify = flaky
    lines = [HEADER_MARKER, "CustomLabel.Broken\tA\tB\t-", "AddressCountry.US\tUS\tEE.UU.\t-"]

    outcome = processor.process("f.stf", lines)

    assert outcome.bad_lines == ["CustomLabel.Broken\tA\tB\t-"]
    assert outcome.metadata_lines == ["AddressCountry.US\tUS\tEE.UU.\t-"]
    errors = outcome.report.by_type["CustomLabel"].errors
    assert len(errors) == 1
    assert "disk error" in errors[0]
    assert outcome.rejections == {"RULE_ERROR": 1}


def test_report_json_shape(tmp_path: Path):
    outcome = _processor(tmp_path).process(
        "Bilingual_es.stf",
        [*HEADER, HEADER_MARKER, "AddressCountry.US\tA\tB\t-", "AddressCountry.ZZ\tA\tB\t-", "AddressCountry.XX\tA\tB\t-"],
        source_dir="input",
        dest_dir="output",
    )

    data = outcome.report.to_dict()

    assert data["details"] == {
        "sourceDir": "input",
        "file": "Bilingual_es.stf",
        "destDir": "output",
        "language": "Spanish",
        "languageCode": "es",
        "total": 3,
        "valid": 1,
        "invalid": 2,
        "validPercent": 33,
        "invalidPercent": 67,
    }
    assert data["types"]["AddressCountry"] == {
        "total": 3,
        "valid": 1,
        "invalid": 2,
        "validPercent": 33,
        "invalidPercent": 67,
        "errors": [],
    }


def test_classifier_receives_parsed_records(tmp_path: Path):
    processor = _processor(tmp_path)
    original = processor.classifier.classify
    seen = []

    def spy(record):
        seen.append(record)
        return original(record)

    processor.classifier.classify = spy
    processor.process("f.stf", [HEADER_MARKER, "AddressCountry.US\tUnited States\tEstados Unidos\t-"])

    assert len(seen) == 1
    assert seen[0].line_no == 2
    assert seen[0].key == "AddressCountry.US"
    assert seen[0].translation_columns == ("United States", "Estados Unidos", "-")
