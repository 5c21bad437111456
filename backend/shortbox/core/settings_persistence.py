"""Settings persistence to JSON file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog

from shortbox.core.config import get_settings, reload_settings

logger = structlog.get_logger("shortbox.settings_persistence")


def get_settings_file_path() -> Path:
    """Get path to settings.json file."""
    return get_settings().config_dir / "settings.json"


def load_settings_file() -> dict[str, Any]:  # noqa: ANN001
    """Read settings.json, returning an empty dict when missing or unreadable."""
    settings_file = get_settings_file_path()
    if not settings_file.exists():
        return {}
    try:
        with settings_file.open("r") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Failed to read settings file", path=str(settings_file), error=str(e))
        return {}
    return data if isinstance(data, dict) else {}


def save_settings_to_file(settings_dict: dict[str, Any]) -> None:  # noqa: ANN001
    """Merge settings into settings.json and reload settings.

    Top-level keys replace existing ones, so a "matching" section is written
    as a whole.

    Args:
        settings_dict: JSON-serializable settings to save
    """
    settings_file = get_settings_file_path()

    try:
        settings_file.parent.mkdir(parents=True, exist_ok=True)

        existing = load_settings_file()
        existing.update(settings_dict)

        with settings_file.open("w") as f:
            json.dump(existing, f, indent=2)

        logger.info(
            "Settings saved to file",
            path=str(settings_file),
            settings=list(settings_dict.keys()),
        )

        reload_settings()

    except Exception as e:
        logger.error(
            "Failed to save settings to file",
            path=str(settings_file),
            error=str(e),
            exc_info=True,
        )
        raise
