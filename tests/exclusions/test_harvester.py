import json
import logging
from pathlib import Path

from cleaner.infra.exclusions.harvester import build_exclusion_set, extract_invalid_key, harvest_exclusions

LOG_LINES = [
    "Invalid key: [PicklistValue.Case.Origin.Fax]. The key's translation type must match the file's translation type. ,",
    "Invalid key CustomField.Account.Old.FieldLabel: Some keys are appended with their sort order for uniqueness. "
    "Re-export your file and ensure that the keys in both files match.,",
    "Imported 200 rows",
]

LOGGER = logging.getLogger("test.exclusions")


def test_extract_invalid_key_variants():
    assert extract_invalid_key("Invalid key: [CustomLabel.Greeting]") == "CustomLabel.Greeting"
    assert extract_invalid_key("Imported 200 rows") is None


def test_harvest_dedups_and_sorts(tmp_path: Path):
    logs = tmp_path / "errorLogs"
    logs.mkdir()
    (logs / "import1.txt").write_text("\n".join(LOG_LINES), encoding="utf-8")
    (logs / "import2.txt").write_text(LOG_LINES[0] + "\r\n", encoding="utf-8")

    keys = harvest_exclusions(str(logs), LOGGER, "run-1")

    assert keys == [
        "CustomField.Account.Old.FieldLabel",
        "PicklistValue.Case.Origin.Fax",
    ]


def test_harvest_persists_list(tmp_path: Path):
    logs = tmp_path / "errorLogs"
    logs.mkdir()
    (logs / "import.log").write_text("Invalid key: [CustomLabel.Old]", encoding="utf-8")
    listPath = tmp_path / "invalidTranslationEntries.json"

    exclusions = build_exclusion_set(str(logs), str(listPath), LOGGER, "run-1")

    assert exclusions == frozenset({"CustomLabel.Old"})
    assert json.loads(listPath.read_text(encoding="utf-8")) == ["CustomLabel.Old"]


def test_missing_log_dir_falls_back_to_saved_list(tmp_path: Path):
    listPath = tmp_path / "invalidTranslationEntries.json"
    listPath.write_text(json.dumps(["CustomLabel.Saved"]), encoding="utf-8")

    exclusions = build_exclusion_set(str(tmp_path / "nope"), str(listPath), LOGGER, "run-1")

    assert exclusions == frozenset({"CustomLabel.Saved"})
