"""Persisted user preferences (API key and last-used scan inputs)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from street_scanner.utils.io import ensure_dir

logger = logging.getLogger(__name__)

API_KEY = "google_maps_api_key"


def load_preferences(path: Path) -> Dict[str, Any]:
    """Read the preferences document.

    A missing file is an empty document; an unreadable one is logged and
    treated the same way.

    @param path JSON file path.
    @return Preferences dict.
    """
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.error("Error loading config file %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.error("Ignoring config file %s: expected a JSON object", path)
        return {}
    return data


def save_preferences(path: Path, prefs: Dict[str, Any]) -> None:
    """Write the preferences document.

    @param path JSON file path.
    @param prefs Preferences dict.
    @return None
    """
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8") as f:
        json.dump(prefs, f, indent=2)


def masked(prefs: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of prefs with the API key hidden.

    @param prefs Preferences dict.
    @return Printable copy.
    """
    out = dict(prefs)
    key = out.get(API_KEY)
    if key:
        out[API_KEY] = "*" * max(0, len(key) - 4) + key[-4:]
    return out
