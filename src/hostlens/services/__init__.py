"""Service layer: persisted settings."""

from .settings import Settings, SettingsStore, default_settings_path

__all__ = ["Settings", "SettingsStore", "default_settings_path"]
