"""Rotating file loggers shared by the services."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from core.settings import LOG_DIR


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def log_path(name: str, log_dir: Optional[Path] = None) -> Path:
    short = name.split(".")[-1] or "planner"
    return Path(log_dir or LOG_DIR) / f"{short}.log"


def ensure_logger(name: str, log_dir: Optional[Path] = None) -> logging.Logger:
    """Return ``name`` with a rotating file handler attached exactly once."""

    logger = logging.getLogger(name)
    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        path = log_path(name, log_dir)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    return logger


def read_log(name: str, lines: int = 100, log_dir: Optional[Path] = None) -> str:
    path = log_path(name, log_dir)
    try:
        with open(path, "r", encoding="utf-8") as fh:
            content = fh.readlines()
    except FileNotFoundError:
        return "No log entries yet."
    return "\n".join(line.rstrip("\n") for line in content[-lines:])


__all__ = ["LOG_FORMAT", "ensure_logger", "log_path", "read_log"]
