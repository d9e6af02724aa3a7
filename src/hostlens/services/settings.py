"""Settings dataclass and persistence helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from ..host.types import DEFAULT_LANGUAGE_SUFFIXES, LanguageTag

__all__ = ["Settings", "SettingsStore", "default_settings_path"]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".hostlens"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_VERSION = 1
_SETTINGS_PATH_ENV = "HOSTLENS_SETTINGS_PATH"
_ENV_OVERRIDES: Mapping[str, str] = {
    "HOSTLENS_LOG_DIR": "log_dir",
}
_PATH_LIST_ENV_OVERRIDES: Mapping[str, str] = {
    "HOSTLENS_SOURCE_ROOTS": "source_roots",
    "HOSTLENS_MANUAL_ROOTS": "manual_roots",
}
_NAME_LIST_ENV_OVERRIDES: Mapping[str, str] = {
    "HOSTLENS_DISABLED_TOOLS": "disabled_tools",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "HOSTLENS_DEBUG_LOGGING": "debug_logging",
    "HOSTLENS_CASE_SENSITIVE_COMPLETION": "case_sensitive_completion",
}
_INT_ENV_OVERRIDES: Mapping[str, str] = {
    "HOSTLENS_MAX_RESULT_CHARS": "max_result_chars",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}


def default_settings_path() -> Path:
    """Settings location, honouring ``HOSTLENS_SETTINGS_PATH``."""

    override = os.environ.get(_SETTINGS_PATH_ENV)
    return Path(override).expanduser() if override else _DEFAULT_SETTINGS_PATH


@dataclass(slots=True)
class Settings:
    """User-configurable settings persisted between sessions.

    Attributes:
        source_roots: Directories scanned for definitions.
        manual_roots: Directories holding Markdown manuals.
        language_suffixes: Extra file suffix to language tag entries, merged
            over the builtin table.
        disabled_tools: Tools registered in the disabled state.
        case_sensitive_completion: Whether completion queries match case.
        debug_logging: Log at DEBUG instead of WARNING.
        log_dir: Directory for the rotating log file.
        max_result_chars: Truncate longer text results (0 = unlimited).
    """

    source_roots: list[str] = field(default_factory=list)
    manual_roots: list[str] = field(default_factory=list)
    language_suffixes: dict[str, str] = field(default_factory=dict)
    disabled_tools: list[str] = field(default_factory=list)
    case_sensitive_completion: bool = True
    debug_logging: bool = False
    log_dir: str | None = None
    max_result_chars: int = 0

    def language_tags(self) -> dict[str, str]:
        """Builtin suffix table with the configured entries applied.

        Unknown tags are skipped with a warning.
        """

        table = dict(DEFAULT_LANGUAGE_SUFFIXES)
        valid = {tag.value for tag in LanguageTag}
        for suffix, tag in self.language_suffixes.items():
            key = suffix if suffix.startswith(".") else f".{suffix}"
            value = str(tag).strip().lower()
            if value not in valid:
                LOGGER.warning("Ignoring unknown language tag %r for suffix %s", tag, key)
                continue
            table[key.lower()] = value
        return table


class SettingsStore:
    """Persistence adapter for :class:`Settings`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or default_settings_path()

    @property
    def path(self) -> Path:
        """Return the resolved path backing this store."""

        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Load settings from disk, applying CLI/environment overrides when present."""

        payload = self._read_payload()
        settings = Settings()
        if payload:
            data = _filter_fields(payload)
            try:
                settings = _coerce(Settings(**data))
            except (TypeError, ValueError) as exc:
                LOGGER.warning("Settings payload contained unexpected data: %s", exc)
                settings = Settings()
            LOGGER.debug(
                "Settings loaded from %s: %d source roots, %d manual roots",
                self._path,
                len(settings.source_roots),
                len(settings.manual_roots),
            )

        if overrides:
            settings = self._apply_overrides(settings, overrides, source="CLI")

        settings = self._apply_env_overrides(settings)
        return settings

    def save(self, settings: Settings) -> Path:
        """Persist settings to disk with atomic file writes."""

        payload = self._serialize(settings)
        body = json.dumps(payload, indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _serialize(self, settings: Settings) -> Dict[str, Any]:
        data = asdict(settings)
        data["version"] = _SETTINGS_VERSION
        return data

    def _read_payload(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
            payload = json.loads(text)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s does not hold an object", self._path)
            return {}
        return payload

    def _apply_overrides(
        self,
        settings: Settings,
        overrides: Mapping[str, Any],
        *,
        source: str = "runtime",
    ) -> Settings:
        allowed = {field.name for field in fields(Settings)}
        filtered: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in allowed or value is None:
                continue
            filtered[key] = value
        suffix_override = filtered.get("language_suffixes")
        if isinstance(suffix_override, Mapping):
            merged = dict(settings.language_suffixes)
            merged.update(suffix_override)
            filtered["language_suffixes"] = merged
        if filtered:
            LOGGER.debug("Applying %s settings overrides: %s", source, sorted(filtered))
            settings = replace(settings, **filtered)
        return settings

    def _apply_env_overrides(self, settings: Settings) -> Settings:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in _ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value
        for env_name, field_name in _PATH_LIST_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = [item for item in value.split(os.pathsep) if item]
        for env_name, field_name in _NAME_LIST_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = [item.strip() for item in value.split(",") if item.strip()]
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        for env_name, field_name in _INT_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            try:
                overrides[field_name] = int(value, 10)
            except ValueError:
                LOGGER.warning(
                    "Environment override %s=%s is not a valid integer",
                    env_name,
                    value,
                )
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="environment")
        return settings


def _filter_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {field.name for field in fields(Settings)}
    result: Dict[str, Any] = {}
    for key, value in payload.items():
        if key not in allowed:
            continue
        result[key] = value
    return result


def _coerce(settings: Settings) -> Settings:
    """Normalise loosely typed JSON values."""

    def _str_list(value: Any, name: str) -> list[str]:
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list):
            raise ValueError(f"{name} must be a list of strings")
        return [str(item) for item in value]

    if not isinstance(settings.language_suffixes, dict):
        raise ValueError("language_suffixes must be an object")
    return replace(
        settings,
        source_roots=_str_list(settings.source_roots, "source_roots"),
        manual_roots=_str_list(settings.manual_roots, "manual_roots"),
        disabled_tools=_str_list(settings.disabled_tools, "disabled_tools"),
        language_suffixes={str(k): str(v) for k, v in settings.language_suffixes.items()},
        case_sensitive_completion=bool(settings.case_sensitive_completion),
        debug_logging=bool(settings.debug_logging),
        max_result_chars=int(settings.max_result_chars or 0),
    )
