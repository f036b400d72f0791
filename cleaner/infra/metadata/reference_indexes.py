from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from cleaner.domain.metadata_paths import ADDRESS_SETTINGS_FILE, CUSTOM_LABELS_FILE
from cleaner.domain.ports.metadata import ReferenceLookupProtocol
from cleaner.infra.logging.setup import logEvent
from cleaner.infra.metadata.layout import MetadataLayout


@dataclass(frozen=True)
class StateEntry:
    iso_code: str
    label: str | None = None


@dataclass(frozen=True)
class CountryEntry:
    """
    Назначение:
        Страна из Address settings со штатами, проиндексированными по ISO коду.
    """

    iso_code: str
    label: str | None = None
    states_by_code: dict[str, StateEntry] = field(default_factory=dict)


@dataclass(frozen=True)
class ReferenceIndexes(ReferenceLookupProtocol):
    """
    Назначение/ответственность:
        Неизменяемые справочники, построенные один раз до обработки файлов.

    Поля:
        countries: dict[str, CountryEntry]
            country ISO -> страна (штаты во вложенном states_by_code).
        labels: frozenset[str]
            fullName всех custom labels.
    """

    countries: dict[str, CountryEntry] = field(default_factory=dict)
    labels: frozenset[str] = frozenset()

    def has_country(self, country_iso: str) -> bool:
        return country_iso in self.countries

    def has_state(self, country_iso: str, state_iso: str) -> bool:
        country = self.countries.get(country_iso)
        if country is None:
            return False
        return state_iso in country.states_by_code

    def has_label(self, label_name: str) -> bool:
        return label_name in self.labels


def _child_text(element: ET.Element, tag: str) -> str | None:
    child = element.find(f"{{*}}{tag}")
    if child is None or child.text is None:
        return None
    return child.text.strip()


def parse_address_settings(xml_text: str) -> dict[str, CountryEntry]:
    """
    Назначение:
        Строит индекс стран/штатов из Address.settings-meta.xml.

    Входные данные:
        xml_text: str
            AddressSettings/countriesAndStates/countries[isoCode, label, states[isoCode, label]]

    Выходные данные:
        dict[str, CountryEntry]

    Поведение:
        - Некорректный XML -> ET.ParseError (обрабатывает вызывающий).
        - Страны без isoCode пропускаются.
    """
    root = ET.fromstring(xml_text)
    countries: dict[str, CountryEntry] = {}
    for country in root.iterfind("{*}countriesAndStates/{*}countries"):
        iso = _child_text(country, "isoCode")
        if not iso:
            continue
        states: dict[str, StateEntry] = {}
        for state in country.iterfind("{*}states"):
            state_iso = _child_text(state, "isoCode")
            if state_iso:
                states[state_iso] = StateEntry(iso_code=state_iso, label=_child_text(state, "label"))
        countries[iso] = CountryEntry(iso_code=iso, label=_child_text(country, "label"), states_by_code=states)
    return countries


def parse_custom_labels(xml_text: str) -> frozenset[str]:
    root = ET.fromstring(xml_text)
    names = set()
    for label in root.iterfind("{*}labels"):
        name = _child_text(label, "fullName")
        if name:
            names.add(name)
    return frozenset(names)


def build_reference_indexes(layout: MetadataLayout, logger: logging.Logger, run_id: str) -> ReferenceIndexes:
    """
    Назначение:
        Загружает справочники адресов и custom labels из снимка метаданных.

    Поведение:
        - Отсутствующий или битый файл -> пустой справочник и запись в лог;
          правила AddressCountry/AddressState/CustomLabel тогда всегда отклоняют записи.
    """
    countries: dict[str, CountryEntry] = {}
    try:
        countries = parse_address_settings(layout.read_text(ADDRESS_SETTINGS_FILE))
        logEvent(logger, logging.INFO, run_id, "references", f"Address data loaded: {len(countries)} countries")
    except (OSError, UnicodeDecodeError) as exc:
        logEvent(
            logger,
            logging.ERROR,
            run_id,
            "references",
            f"Could not load address settings ({ADDRESS_SETTINGS_FILE}); address translations will be rejected: {exc}",
        )
    except ET.ParseError as exc:
        logEvent(logger, logging.ERROR, run_id, "references", f"Error parsing address settings: {exc}")

    labels: frozenset[str] = frozenset()
    try:
        labels = parse_custom_labels(layout.read_text(CUSTOM_LABELS_FILE))
        logEvent(logger, logging.INFO, run_id, "references", f"Custom labels loaded: {len(labels)}")
    except (OSError, UnicodeDecodeError) as exc:
        logEvent(
            logger,
            logging.WARNING,
            run_id,
            "references",
            f"Could not load custom labels ({CUSTOM_LABELS_FILE}); label translations will be rejected: {exc}",
        )
    except ET.ParseError as exc:
        logEvent(logger, logging.ERROR, run_id, "references", f"Error parsing custom labels: {exc}")

    return ReferenceIndexes(countries=countries, labels=labels)
