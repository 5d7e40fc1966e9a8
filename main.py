# main.py
import os, sys
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
import flet as ft

from core.logs import ensure_logger
from core.settings import APP_NAME, UI
from services.api_client import HttpGateway
from services.gateway import PersistenceGateway
from services.sql_gateway import SqlGateway
from storage.config import AppConfig, load_config
from storage.db import init_db
from ui.app_shell import AppShell

logger = ensure_logger("planner.app")


def build_gateway(config: AppConfig) -> PersistenceGateway:
    """Local SQLite store by default; the REST backend when configured."""
    if config.backend == "remote":
        url = config.resolved_api_url()
        logger.info("Using remote backend at %s", url)
        return HttpGateway(url)
    init_db()
    return SqlGateway()


def main(page: ft.Page):
    page.title = UI.app_title
    page.theme_mode = UI.theme_mode
    page.theme = ft.Theme(color_scheme_seed=UI.color_scheme_seed)
    page.appbar = ft.AppBar(title=ft.Text(APP_NAME), center_title=False)
    page.padding = 0
    page.window.min_width = UI.window_min_width
    page.window.min_height = UI.window_min_height

    config = load_config()
    shell = AppShell(page, build_gateway(config), config)
    shell.mount()


def run():
    ft.app(target=main)


if __name__ == "__main__":
    run()
