from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
import os
import yaml

from cleaner.domain.metadata_types import KNOWN_METADATA_TYPES

ENV_PREFIX = "STF_CLEANER_"


def _default_translation_types() -> dict[str, bool]:
    return {name: True for name in KNOWN_METADATA_TYPES}


def _default_metadata_import_types() -> tuple[str, ...]:
    return KNOWN_METADATA_TYPES


@dataclass(frozen=True)
class Settings:
    # Metadata snapshot / translation files
    org_data_dir: str = "./orgData"
    source_dir: str = "./input"
    dest_dir: str = "./output"
    source_file_ext: str = ".stf"
    removed_dir: str = "./removed"
    translation_logs_dir: str = "./translationLogs"

    # Exclusions
    error_logs_dir: str = "./errorLogs"
    exclusion_list_path: str = "./invalidTranslationEntries.json"
    force_exclude: tuple[str, ...] = ()

    # Validation behaviour
    translation_types: dict[str, bool] = field(default_factory=_default_translation_types)
    metadata_import_types: tuple[str, ...] = field(default_factory=_default_metadata_import_types)
    force_include_types_with_missing_check: bool = False
    abort_on_untranslated: bool = False
    check_flow_structure: bool = False

    # Chunking
    chunks_input_dir: str = "./output"
    chunks_output_dir: str = "./chunks"
    break_chunks_on_sub_types: bool = False
    lines_per_chunk: int = 0

    # Reports / logs
    summary_report_path: str = "./reports/Translation Cleaning Final Report.csv"
    log_dir: str = "./logs"
    report_dir: str = "./reports"
    log_level: str = "INFO"

    # Packaging
    auto_zip: bool = False
    zip_dir: str = "."

    def is_type_enabled(self, metadata_type: str) -> bool:
        return bool(self.translation_types.get(metadata_type, False))


@dataclass(frozen=True)
class LoadedSettings:
    settings: Settings
    sources_used: list[str]


_BOOL_FIELDS = {
    "force_include_types_with_missing_check",
    "abort_on_untranslated",
    "check_flow_structure",
    "break_chunks_on_sub_types",
    "auto_zip",
}
_INT_FIELDS = {"lines_per_chunk"}
_LIST_FIELDS = {"force_exclude", "metadata_import_types"}
_DICT_FIELDS = {"translation_types"}


def _read_yaml_config(path: Path) -> dict:
    if not path.exists():
        return {}
    if not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            return {}
        return data


def _env_get(name: str) -> str | None:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v.strip()


def parse_bool(v: str) -> bool:
    vv = v.lower()
    if vv in ("1", "true", "yes", "y"):
        return True
    if vv in ("0", "false", "no", "n"):
        return False
    raise ValueError(f"Invalid boolean env value: {v}")


def _parse_env_value(name: str, raw: str):
    if name in _BOOL_FIELDS:
        return parse_bool(raw)
    if name in _INT_FIELDS:
        return int(raw)
    if name in _LIST_FIELDS:
        return tuple(item.strip() for item in raw.split(",") if item.strip())
    return raw


def _coerce_config_value(name: str, value):
    """
    Назначение:
        Приводит значение из YAML к типу поля Settings.

    Поведение:
        - Некорректный тип -> ValueError с именем ключа.
    """
    if value is None:
        return None
    if name in _DICT_FIELDS:
        if not isinstance(value, dict):
            raise ValueError(f"Config key '{name}' must be a mapping")
        return {str(k): bool(v) for k, v in value.items()}
    if name in _LIST_FIELDS:
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"Config key '{name}' must be a list")
        return tuple(str(item) for item in value)
    if name in _BOOL_FIELDS:
        if isinstance(value, str):
            return parse_bool(value)
        return bool(value)
    if name in _INT_FIELDS:
        return int(value)
    return str(value)


def loadSettings(
    config_path: str | None,
    cli_overrides: dict,
) -> LoadedSettings:
    """
    Назначение:
        Собирает итоговые настройки запуска.

    Входные данные:
        config_path: str | None
            Путь к config.yml (может отсутствовать).
        cli_overrides: dict
            Явно переданные параметры CLI (None = не задано).

    Выходные данные:
        LoadedSettings

    Алгоритм:
        Priority: CLI > ENV > config > defaults.
        translation_types из конфига накладывается поверх значений по умолчанию,
        чтобы конфиг мог выключить отдельный тип, не перечисляя все остальные.
    """
    sources: list[str] = []
    defaults = Settings()
    known = [f.name for f in fields(Settings)]

    # 1) config file
    cfg: dict = {}
    if config_path:
        cfg = _read_yaml_config(Path(config_path))
        if cfg:
            sources.append("config")

    # 2) env
    env = {name: _env_get(f"{ENV_PREFIX}{name.upper()}") for name in known if name not in _DICT_FIELDS}
    if any(v is not None for v in env.values()):
        sources.append("env")

    # merge config -> env -> cli
    merged = {name: getattr(defaults, name) for name in known}
    for name in known:
        if name not in cfg:
            continue
        value = _coerce_config_value(name, cfg[name])
        if value is None:
            continue
        if name in _DICT_FIELDS:
            merged[name] = {**merged[name], **value}
        else:
            merged[name] = value

    # apply env
    for name, raw in env.items():
        if raw is not None:
            merged[name] = _parse_env_value(name, raw)

    # 3) apply CLI overrides (only those explicitly passed)
    if any(v is not None for v in cli_overrides.values()):
        sources.append("cli")

    for k, v in cli_overrides.items():
        if v is None:
            continue
        merged[k] = v

    if merged["lines_per_chunk"] < 0:
        raise ValueError("lines_per_chunk must be >= 0")

    return LoadedSettings(settings=Settings(**merged), sources_used=sources)
