import logging
from pathlib import Path

from cleaner.infra.metadata.layout import MetadataLayout
from cleaner.infra.metadata.reference_indexes import build_reference_indexes, parse_address_settings

ADDRESS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<AddressSettings xmlns="http://soap.sforce.com/2006/04/metadata">
    <countriesAndStates>
        <countries>
            <active>true</active>
            <isoCode>US</isoCode>
            <label>United States</label>
            <states>
                <isoCode>CA</isoCode>
                <label>California</label>
            </states>
            <states>
                <isoCode>NY</isoCode>
                <label>New York</label>
            </states>
        </countries>
        <countries>
            <isoCode>DE</isoCode>
            <label>Germany</label>
        </countries>
    </countriesAndStates>
</AddressSettings>
"""

LABELS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<CustomLabels xmlns="http://soap.sforce.com/2006/04/metadata">
    <labels>
        <fullName>Greeting</fullName>
        <value>Hello</value>
    </labels>
    <labels>
        <fullName>Farewell</fullName>
        <value>Bye</value>
    </labels>
</CustomLabels>
"""


def _write(root: Path, relative: str, text: str) -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_address_settings_are_nested_by_country(tmp_path: Path):
    countries = parse_address_settings(ADDRESS_XML)
    assert set(countries) == {"US", "DE"}
    assert set(countries["US"].states_by_code) == {"CA", "NY"}
    assert countries["US"].states_by_code["CA"].label == "California"
    assert countries["DE"].states_by_code == {}


def test_build_indexes_from_metadata_tree(tmp_path: Path):
    _write(tmp_path, "settings/Address.settings-meta.xml", ADDRESS_XML)
    _write(tmp_path, "labels/CustomLabels.labels-meta.xml", LABELS_XML)

    indexes = build_reference_indexes(MetadataLayout(tmp_path), logging.getLogger("test.refs"), "run-1")

    assert indexes.has_country("US")
    assert indexes.has_state("US", "NY")
    assert not indexes.has_state("DE", "NY")
    assert indexes.has_label("Farewell")
    assert not indexes.has_label("Unknown")


def test_missing_or_broken_files_give_empty_indexes(tmp_path: Path):
    _write(tmp_path, "settings/Address.settings-meta.xml", "<AddressSettings><countriesAndStates>")

    indexes = build_reference_indexes(MetadataLayout(tmp_path), logging.getLogger("test.refs"), "run-1")

    assert indexes.countries == {}
    assert indexes.labels == frozenset()
    assert not indexes.has_country("US")
