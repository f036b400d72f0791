import pytest

from cleaner.domain.models import round_percent
from cleaner.domain.reporting.aggregator import aggregate_reports, parse_details


def _report(code: str, language: str, total: int, valid: int, invalid: int) -> dict:
    return {
        "details": {
            "sourceDir": "input",
            "file": f"Bilingual_{code}.stf",
            "destDir": "output",
            "language": language,
            "languageCode": code,
            "total": total,
            "valid": valid,
            "invalid": invalid,
            "validPercent": 0,
            "invalidPercent": 0,
        },
        "types": {},
    }


def test_rounding_is_independent_half_up():
    assert round_percent(1, 3) == 33
    assert round_percent(2, 3) == 67
    assert round_percent(1, 8) == 13
    assert round_percent(0, 0) == 0


def test_reports_with_same_language_code_are_summed():
    details = [
        parse_details(_report("de", "German", 10, 7, 3)),
        parse_details(_report("fr", "French", 3, 1, 2)),
        parse_details(_report("de", "German", 10, 8, 2)),
    ]

    rows = aggregate_reports(details)

    assert [row.as_row() for row in rows] == [
        ["German", "de", 20, 15, 5, 75, 25],
        ["French", "fr", 3, 1, 2, 33, 67],
    ]


def test_zero_total_gives_zero_percent():
    rows = aggregate_reports([parse_details(_report("ja", "Japanese", 0, 0, 0))])
    assert rows[0].as_row() == ["Japanese", "ja", 0, 0, 0, 0, 0]


def test_parse_details_rejects_bad_reports():
    with pytest.raises(ValueError):
        parse_details({"types": {}})
    with pytest.raises(ValueError):
        parse_details({"details": {"languageCode": "de", "total": "many"}})
