"""Command-line interface package for the changeset reporter."""

from .app import build_parser, create_source, main, run
from .settings import ReporterSettings, SettingsError, settings_from_args

__all__ = [
    "ReporterSettings",
    "SettingsError",
    "build_parser",
    "create_source",
    "main",
    "run",
    "settings_from_args",
]
