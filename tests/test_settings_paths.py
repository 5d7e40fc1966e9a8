from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import logging

from core import settings
from core.logs import ensure_logger, log_path, read_log
from storage.config import AppConfig, load_config, save_config, update_config

import pytest


def test_linux_data_dir_with_xdg():
    env = {"XDG_DATA_HOME": "/tmp/xdg"}
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="linux",
        env=env,
        home=Path("/home/test"),
    )
    assert result == Path("/tmp/xdg") / settings.APP_NAME


def test_linux_data_dir_default_home():
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="linux",
        env={},
        home=Path("/home/test"),
    )
    assert result == Path("/home/test/.local/share") / settings.APP_NAME


def test_macos_data_dir_ignores_appdata():
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="darwin",
        env={"APPDATA": "C:/nope"},
        home=Path("/Users/test"),
    )
    expected = Path("/Users/test/Library/Application Support") / settings.APP_NAME
    assert result == expected


def test_windows_data_dir_appdata():
    env = {"APPDATA": "C:/Users/test/AppData/Roaming"}
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="win32",
        env=env,
        home=Path("C:/Users/test"),
    )
    expected = Path(env["APPDATA"]) / settings.APP_NAME
    assert result == expected


def test_data_dir_override():
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="linux",
        env={"PLANNER_DATA_DIR": "/srv/planner"},
        home=Path("/home/test"),
    )
    assert result == Path("/srv/planner")


def test_runtime_paths_inside_data_dir():
    assert settings.DB_PATH.parent == settings.DATA_DIR
    assert settings.CONFIG_PATH.parent == settings.DATA_DIR
    assert settings.LOG_DIR.parent == settings.DATA_DIR


def test_dial_geometry_defaults():
    assert settings.DIAL.center == 170
    assert settings.DIAL.radius_pm - settings.DIAL.radius_am == 40
    assert settings.UI.month.week_start == 6


def test_config_roundtrip_and_validation(tmp_path):
    path = tmp_path / "config.json"
    assert load_config(path) == AppConfig()

    save_config(AppConfig(backend="remote", api_url="http://api:3001/"), path)
    cfg = load_config(path)
    assert cfg.backend == "remote"
    assert cfg.resolved_api_url(env={}) == "http://api:3001"
    assert cfg.resolved_api_url(env={"PLANNER_API_URL": "http://other"}) == "http://other"
    assert not path.with_suffix(".tmp").exists()

    cfg = update_config(path, last_viewed_month="2024-12")
    assert load_config(path).last_viewed_month == "2024-12"
    with pytest.raises(ValueError):
        update_config(path, backend="cloud")


def test_config_ignores_corrupt_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_config(path).backend == "local"


def test_rotating_logger_writes_and_tails(tmp_path):
    logger = ensure_logger("planner.test_tail", log_dir=tmp_path)
    again = ensure_logger("planner.test_tail", log_dir=tmp_path)
    assert again is logger
    assert sum(isinstance(h, logging.Handler) for h in logger.handlers) == 1

    for i in range(5):
        logger.info("line %d", i)
    for handler in logger.handlers:
        handler.flush()

    assert log_path("planner.test_tail", tmp_path) == tmp_path / "test_tail.log"
    tail = read_log("planner.test_tail", lines=2, log_dir=tmp_path)
    assert tail.splitlines()[-1].endswith("line 4")
    assert len(tail.splitlines()) == 2
    assert read_log("planner.missing", log_dir=tmp_path) == "No log entries yet."
