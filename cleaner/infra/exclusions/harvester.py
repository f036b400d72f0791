from __future__ import annotations

import json
import logging
from pathlib import Path

from cleaner.infra.logging.setup import logEvent

INVALID_KEY_MARKERS = ("Invalid key: ", "Invalid key ")

# Пояснения, которые платформа дописывает после ключа.
TRAILING_EXPLANATIONS = (
    ". The key's translation type must match the file's translation type. ,",
    ": Some keys are appended with their sort order for uniqueness. "
    "Re-export your file and ensure that the keys in both files match.,",
)


def extract_invalid_key(line: str) -> str | None:
    """
    Назначение:
        Достаёт ключ записи из строки лога импорта вида
        "Invalid key: [PicklistValue.Case.Origin.Fax]. The key's translation type ...".

    Выходные данные:
        str | None
            None, если строка не содержит диагностики «invalid key».
    """
    if not any(marker in line for marker in INVALID_KEY_MARKERS):
        return None
    cleaned = line
    for marker in INVALID_KEY_MARKERS:
        cleaned = cleaned.replace(marker, "", 1)
    cleaned = cleaned.replace("[", "", 1).replace("]", "", 1)
    for explanation in TRAILING_EXPLANATIONS:
        cleaned = cleaned.replace(explanation, "", 1).strip()
    return cleaned or None


def harvest_exclusions(error_logs_dir: str, logger: logging.Logger, run_id: str) -> list[str] | None:
    """
    Назначение:
        Собирает ключи из всех файлов логов ошибок импорта.

    Выходные данные:
        list[str] | None
            Отсортированный список без дублей; None, если каталога нет.

    Поведение:
        - Нечитаемый файл логируется и пропускается.
    """
    root = Path(error_logs_dir)
    if not root.is_dir():
        logEvent(
            logger,
            logging.WARNING,
            run_id,
            "exclusions",
            f"Error log directory {error_logs_dir} not found; invalid key harvesting skipped",
        )
        return None

    keys: set[str] = set()
    for path in sorted(root.iterdir()):
        if not path.is_file():
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logEvent(logger, logging.ERROR, run_id, "exclusions", f"Could not read error log {path}: {exc}")
            continue
        for line in text.split("\n"):
            key = extract_invalid_key(line)
            if key:
                keys.add(key)

    result = sorted(keys)
    logEvent(logger, logging.INFO, run_id, "exclusions", f"Found {len(result)} invalid key entries to remove")
    return result


def save_exclusions(path: str, keys: list[str]) -> str:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        json.dump(keys, f, ensure_ascii=False, indent=2)
    return str(target)


def load_exclusions(path: str, logger: logging.Logger, run_id: str) -> list[str]:
    """
    Назначение:
        Читает ранее сохранённый список исключений.

    Поведение:
        - Нет файла -> пустой список; битый JSON -> пустой список и ошибка в логе.
    """
    target = Path(path)
    if not target.exists():
        return []
    try:
        with open(target, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logEvent(logger, logging.ERROR, run_id, "exclusions", f"Could not load exclusion list {path}: {exc}")
        return []
    if not isinstance(data, list):
        logEvent(logger, logging.ERROR, run_id, "exclusions", f"Exclusion list {path} is not a JSON array")
        return []
    return [str(item) for item in data]


def build_exclusion_set(
    error_logs_dir: str,
    exclusion_list_path: str,
    logger: logging.Logger,
    run_id: str,
) -> frozenset[str]:
    """
    Назначение:
        Строит ExclusionSet для запуска очистки.

    Алгоритм:
        - Есть каталог логов -> собрать ключи и сохранить в exclusion_list_path.
        - Нет каталога -> загрузить список предыдущего запуска.
    """
    harvested = harvest_exclusions(error_logs_dir, logger, run_id)
    if harvested is None:
        keys = load_exclusions(exclusion_list_path, logger, run_id)
        logEvent(logger, logging.INFO, run_id, "exclusions", f"Loaded {len(keys)} keys from {exclusion_list_path}")
        return frozenset(keys)
    try:
        save_exclusions(exclusion_list_path, harvested)
    except OSError as exc:
        logEvent(logger, logging.ERROR, run_id, "exclusions", f"Could not save exclusion list {exclusion_list_path}: {exc}")
    return frozenset(harvested)
