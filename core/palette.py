"""Project colour presets and fallbacks."""
from __future__ import annotations

import re
from typing import Dict, List

COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")

# Tailwind 500-series hues offered in the project form.
PRESET_COLORS: List[Dict[str, str]] = [
    {"name": "Holiday Red", "value": "#ef4444"},
    {"name": "Pine Green", "value": "#22c55e"},
    {"name": "Winter Blue", "value": "#3b82f6"},
    {"name": "Gold", "value": "#eab308"},
    {"name": "Berry Purple", "value": "#a855f7"},
    {"name": "Cozy Orange", "value": "#f97316"},
    {"name": "Bright Pink", "value": "#ec4899"},
    {"name": "Rose", "value": "#f43f5e"},
]

# Used when a task's project no longer resolves.
MONTH_FALLBACK_COLOR = "#3b82f6"
DIAL_FALLBACK_COLOR = "#cbd5e1"

DEFAULT_PROJECTS = [
    {"name": "Holiday Baking", "color": PRESET_COLORS[0]["value"]},
    {"name": "Gift Shopping", "color": PRESET_COLORS[1]["value"]},
    {"name": "Home Decoration", "color": PRESET_COLORS[3]["value"]},
]


def normalize_color(value: str) -> str:
    """Validate ``#RRGGBB`` and return it lower-cased."""
    text = (value or "").strip()
    if not COLOR_RE.match(text):
        raise ValueError("Color must be in #RRGGBB format")
    return text.lower()


def preset_options() -> Dict[str, str]:
    """Return mapping of dropdown values -> labels."""
    return {item["value"]: item["name"] for item in PRESET_COLORS}


__all__ = [
    "COLOR_RE",
    "DEFAULT_PROJECTS",
    "DIAL_FALLBACK_COLOR",
    "MONTH_FALLBACK_COLOR",
    "PRESET_COLORS",
    "normalize_color",
    "preset_options",
]
