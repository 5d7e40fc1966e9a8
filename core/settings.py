"""Centralized application configuration."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import os
import sys


def get_default_data_dir(
    app_name: str,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return an OS-specific user data directory for ``app_name``.

    ``PLANNER_DATA_DIR`` wins over the platform defaults when set.
    """

    platform_id = (platform or sys.platform).lower()
    environ = dict(os.environ if env is None else env)
    override = environ.get("PLANNER_DATA_DIR")
    if override:
        return Path(override).expanduser()

    home_dir = Path(home or Path.home())
    sanitized = app_name.strip() or "app"
    sanitized = sanitized.replace("/", "-").replace("\\", "-")

    if platform_id.startswith("win"):
        base = Path(environ.get("APPDATA") or home_dir / "AppData" / "Roaming")
    elif platform_id == "darwin":
        base = home_dir / "Library" / "Application Support"
    else:
        base = Path(environ.get("XDG_DATA_HOME") or home_dir / ".local" / "share")

    return base.expanduser() / sanitized


APP_NAME = "Family Planner"


DATA_DIR = get_default_data_dir(APP_NAME)
LOG_DIR = DATA_DIR / "logs"

for _dir in (DATA_DIR, LOG_DIR):
    _dir.mkdir(parents=True, exist_ok=True)


DB_PATH = DATA_DIR / "planner.db"
CONFIG_PATH = DATA_DIR / "config.json"


@dataclass(frozen=True)
class ThemeColors:
    surface_bg: str = "#F8FAFC"
    outline: str = "#E2E8F0"
    text_subtle: str = "#94A3B8"
    text_strong: str = "#1E293B"
    accent: str = "#4F46E5"
    today_ring: str = "#6366F1"
    drag_target_bg: str = "#EEF2FF"
    outside_month_bg: str = "#F8FAFC"
    active_dot: str = "#EF4444"
    done_icon: str = "#22C55E"


@dataclass(frozen=True)
class MonthGridSettings:
    # 6 = Sunday in ``date.weekday()`` numbering
    week_start: int = 6
    max_visible: int = 3
    cell_min_height: int = 120
    weekday_labels: tuple[str, ...] = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass(frozen=True)
class UISettings:
    app_title: str = APP_NAME
    theme_mode: str = "light"
    color_scheme_seed: str = "#4F46E5"
    window_min_width: int = 1000
    window_min_height: int = 700
    side_panel_width: int = 280
    tick_interval_sec: int = 60
    default_duration_minutes: int = 60
    time_step_minutes: int = 15
    theme: ThemeColors = ThemeColors()
    month: MonthGridSettings = MonthGridSettings()


UI = UISettings()


@dataclass(frozen=True)
class DialSettings:
    """Geometry of the two-ring day dial."""

    view_size: int = 340
    radius_am: int = 80
    radius_pm: int = 120
    stroke_width: int = 30
    face_inset: int = 10
    marker_inset: int = 25
    hand_overshoot: int = 10
    ring_color: str = "#6366f1"
    ring_alpha_active: float = 0.15
    ring_alpha_idle: float = 0.05
    hand_color: str = "#EF4444"

    @property
    def center(self) -> float:
        return self.view_size / 2


DIAL = DialSettings()


@dataclass(frozen=True)
class ScoringSettings:
    alpha_floor: float = 0.15
    text_alpha_threshold: float = 0.5
    light_hues: tuple[str, ...] = ("#eab308", "#f97316", "#bef264", "#fde047")
    light_text: str = "#ffffff"
    dark_text: str = "#1e293b"


SCORING = ScoringSettings()


@dataclass(frozen=True)
class ApiSettings:
    host: str = "127.0.0.1"
    port: int = 3001
    default_url: str = "http://localhost:3001"
    url_env: str = "PLANNER_API_URL"
    timeout_sec: float = 10.0
    cors_origins: tuple[str, ...] = ("*",)


API = ApiSettings()


@dataclass(frozen=True)
class AISettings:
    model: str = "gemini-2.5-flash"
    target_month: int = 12
    ideas_per_task: int = 3
    api_key_envs: tuple[str, ...] = ("GEMINI_API_KEY", "API_KEY")


AI = AISettings()


__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "LOG_DIR",
    "DB_PATH",
    "CONFIG_PATH",
    "UI",
    "DIAL",
    "SCORING",
    "API",
    "AI",
    "DialSettings",
    "get_default_data_dir",
]
