"""Simple JSON-backed configuration store."""
from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from core.settings import API, CONFIG_PATH


BACKENDS = ("local", "remote")


@dataclass
class AppConfig:
    """User preferences persisted to ``config.json``."""

    backend: str = "local"
    api_url: Optional[str] = None
    last_viewed_month: Optional[str] = None  # YYYY-MM

    def resolved_api_url(self, env: Optional[Dict[str, str]] = None) -> str:
        environ = os.environ if env is None else env
        return (environ.get(API.url_env) or self.api_url or API.default_url).rstrip("/")


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _load_raw(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_config(path: Optional[Path] = None) -> AppConfig:
    target = path or CONFIG_PATH
    data = _load_raw(target)
    backend = data.get("backend")
    return AppConfig(
        backend=backend if backend in BACKENDS else "local",
        api_url=data.get("api_url"),
        last_viewed_month=data.get("last_viewed_month"),
    )


def save_config(config: AppConfig, path: Optional[Path] = None) -> None:
    target = path or CONFIG_PATH
    _ensure_parent(target)
    payload = json.dumps(asdict(config), ensure_ascii=False, indent=2, sort_keys=True)
    tmp = target.with_suffix(".tmp")
    try:
        tmp.write_text(payload, encoding="utf-8")
        tmp.replace(target)
    finally:
        if tmp.exists():
            try:
                tmp.unlink()
            except OSError:
                pass


def update_config(path: Optional[Path] = None, **changes: Any) -> AppConfig:
    target = path or CONFIG_PATH
    cfg = load_config(target)
    for key, value in changes.items():
        if key == "backend" and value not in BACKENDS:
            raise ValueError(f"Unknown backend: {value}")
        if hasattr(cfg, key):
            setattr(cfg, key, value)
    save_config(cfg, target)
    return cfg


__all__ = ["AppConfig", "BACKENDS", "load_config", "save_config", "update_config"]
