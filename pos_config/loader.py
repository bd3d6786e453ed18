"""
Settings loader (``pos_config.loader``).

Responsibility
--------------
Reads and writes ``StoreSettings`` as a YAML document.  The settings
screen edits a few fields at a time; ``update_settings`` merges those
changes into the current settings, re-validates, and the caller persists
the result with ``save_settings``.

Failure modes
-------------
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Top-level document not a mapping -> ``ConfigurationError``.
* Invalid values -> ``ConfigurationError`` from ``StoreSettings``.
* Missing file -> defaults (a store that has not run setup yet).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from pos_config.schema import StoreSettings
from pos_kernel.exceptions import ConfigurationError
from pos_kernel.logging_config import get_logger

logger = get_logger("config.loader")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("<root>", f"{path} must contain a mapping")
    return data


def load_settings(path: str | Path) -> StoreSettings:
    """Load store settings from ``path``; defaults when the file is absent."""
    path = Path(path)
    if not path.exists():
        logger.info("settings_file_missing", extra={"path": str(path)})
        return StoreSettings.with_defaults()
    settings = StoreSettings.from_dict(load_yaml_file(path))
    logger.info(
        "settings_loaded",
        extra={
            "path": str(path),
            "store_name": settings.store_name,
            "currency": settings.currency,
            "enable_tax": settings.enable_tax,
            "payroll_type": settings.payroll_type,
        },
    )
    return settings


def save_settings(settings: StoreSettings, path: str | Path) -> Path:
    """Write settings to ``path`` as YAML and return the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(settings.to_dict(), f, sort_keys=True, allow_unicode=True)
    logger.info("settings_saved", extra={"path": str(path)})
    return path


def update_settings(settings: StoreSettings, **changes: Any) -> StoreSettings:
    """Return ``settings`` with ``changes`` merged in and re-validated."""
    merged = settings.to_dict()
    merged.update(changes)
    updated = StoreSettings.from_dict(merged)
    logger.info("settings_updated", extra={"changed": sorted(changes)})
    return updated
