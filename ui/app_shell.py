# ui/app_shell.py
from __future__ import annotations

import asyncio
from concurrent.futures import Future
from datetime import date, datetime
from typing import Optional

import flet as ft

from core.logs import read_log
from core.settings import AI, UI
from services.gateway import PersistenceGateway
from services.planner import PlannerState
from storage.config import AppConfig, update_config

from .dialogs import AIPlannerDialog, LogDialog, TaskDialog
from .pages.day import DayPage
from .pages.month import MonthPage
from .project_panel import ProjectPanel

MONTH_VIEW = "month"
DAY_VIEW = "day"


def _parse_month(value: Optional[str]):
    try:
        year, month = (int(part) for part in (value or "").split("-", 1))
    except ValueError:
        return None
    if 1 <= month <= 12:
        return year, month
    return None


class AppShell:
    def __init__(self, page: ft.Page, gateway: PersistenceGateway, config: AppConfig):
        self.page = page
        self.config = config

        # gateway calls leave the UI thread; the result is not awaited
        self.state = PlannerState(gateway, dispatch=lambda fn: page.run_thread(fn))
        self.state.subscribe(self.refresh)

        self.page.title = UI.app_title
        self.page.horizontal_alignment = ft.CrossAxisAlignment.STRETCH
        self.page.vertical_alignment = ft.MainAxisAlignment.START

        # December of the current year unless another month was viewed last
        self.year, self.month = _parse_month(config.last_viewed_month) or (date.today().year, AI.target_month)
        self.active_view = MONTH_VIEW

        self._month = MonthPage(self)
        self._day = DayPage(self)
        self._panel = ProjectPanel(self)

        self.title_text = ft.Text("", size=24, weight=ft.FontWeight.BOLD)
        self.month_nav = ft.Row(
            [
                ft.IconButton(ft.Icons.CHEVRON_LEFT, tooltip="Previous month", on_click=lambda e: self.shift_month(-1)),
                ft.IconButton(ft.Icons.TODAY, tooltip="Current month", on_click=lambda e: self.go_today()),
                ft.IconButton(ft.Icons.CHEVRON_RIGHT, tooltip="Next month", on_click=lambda e: self.shift_month(1)),
            ],
            spacing=4,
        )
        self.loading_ring = ft.ProgressRing(width=18, height=18, visible=False)
        header = ft.Row(
            [
                ft.Row([self.month_nav, self.title_text, self.loading_ring], spacing=12),
                ft.Row(
                    [
                        ft.OutlinedButton("New task", icon=ft.Icons.ADD, on_click=lambda e: self.open_new_task()),
                        ft.FilledButton("AI Planner", icon=ft.Icons.AUTO_AWESOME, on_click=lambda e: self.open_ai_planner()),
                        ft.IconButton(ft.Icons.RECEIPT_LONG, tooltip="Logs", on_click=lambda e: self.open_logs()),
                    ],
                    spacing=8,
                ),
            ],
            alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
        )

        self.content = ft.Container(expand=True)
        self.nav = ft.NavigationRail(
            selected_index=0,
            label_type=ft.NavigationRailLabelType.ALL,
            min_width=90,
            group_alignment=-0.9,
            on_change=self.on_nav_change,
            destinations=[
                ft.NavigationRailDestination(
                    icon=ft.Icons.CALENDAR_MONTH_OUTLINED,
                    selected_icon=ft.Icons.CALENDAR_MONTH,
                    label="Month",
                ),
                ft.NavigationRailDestination(
                    icon=ft.Icons.SCHEDULE_OUTLINED,
                    selected_icon=ft.Icons.SCHEDULE,
                    label="Day",
                ),
            ],
        )

        self.root = ft.Row(
            controls=[
                ft.Container(self.nav, width=88, bgcolor=UI.theme.surface_bg),
                ft.VerticalDivider(width=1),
                ft.Container(
                    ft.Column(
                        [header, ft.Row([self.content, self._panel.view], expand=True, spacing=12,
                                        vertical_alignment=ft.CrossAxisAlignment.STRETCH)],
                        spacing=12,
                        expand=True,
                    ),
                    expand=True,
                    padding=20,
                ),
            ],
            expand=True,
            spacing=0,
        )

        self._tick_task: Optional[Future] = None

    # ---------- mount / teardown ----------
    def mount(self):
        self.page.controls.clear()
        self.page.add(self.root)
        self.page.on_disconnect = lambda e: self.teardown()
        self.page.on_close = lambda e: self.teardown()
        self.state.load()
        self._start_tick()

    def teardown(self):
        self._stop_tick()
        self.state.unsubscribe(self.refresh)

    # ---------- one-minute tick ----------
    def _has_open_overlay(self) -> bool:
        return any(getattr(c, "open", False) for c in (self.page.overlay or []))

    def _start_tick(self):
        self._stop_tick()

        async def _loop():
            while True:
                await asyncio.sleep(UI.tick_interval_sec)
                if self._has_open_overlay():
                    continue
                self.refresh()

        self._tick_task = self.page.run_task(_loop)

    def _stop_tick(self):
        if self._tick_task:
            self._tick_task.cancel()
        self._tick_task = None

    # ---------- rendering ----------
    def refresh(self):
        self.loading_ring.visible = self.state.loading
        self._panel.load()
        if self.active_view == DAY_VIEW:
            self.title_text.value = self._day.day.strftime("%B %Y")
            self.month_nav.visible = False
            self._day.load(datetime.now())
            self.content.content = self._day.view
        else:
            self.title_text.value = self._month.title(self.year, self.month)
            self.month_nav.visible = True
            self._month.load()
            self.content.content = self._month.view
        self.page.update()

    def show_month(self):
        self.active_view = MONTH_VIEW
        self.nav.selected_index = 0
        self.refresh()

    def open_day(self, day: date):
        self._day.set_day(day)
        self.active_view = DAY_VIEW
        self.nav.selected_index = 1
        self.refresh()

    def on_nav_change(self, e: ft.ControlEvent):
        if int(e.control.selected_index) == 1:
            self.open_day(self._day.day)
        else:
            self.show_month()

    # ---------- month navigation ----------
    def shift_month(self, delta: int):
        index = self.year * 12 + (self.month - 1) + delta
        self.year, self.month = divmod(index, 12)
        self.month += 1
        self._remember_month()
        self.refresh()

    def go_today(self):
        today = date.today()
        self.year, self.month = today.year, today.month
        self._remember_month()
        self.refresh()

    def _remember_month(self):
        value = f"{self.year:04d}-{self.month:02d}"
        try:
            self.config = update_config(last_viewed_month=value)
        except OSError as exc:
            self.state.logger.warning("Could not save last viewed month: %s", exc)

    # ---------- dialogs ----------
    def open_new_task(self):
        day = self._day.day if self.active_view == DAY_VIEW else None
        TaskDialog(self, day=day).open()

    def open_ai_planner(self):
        AIPlannerDialog(self, on_done=lambda n: self.toast(f"Added {n} tasks to your calendar")).open()

    def open_logs(self):
        LogDialog(self).open()

    def read_log(self, name: str, lines: int = 100) -> str:
        return read_log(name, lines)

    def toast(self, text: str):
        self.page.open(ft.SnackBar(ft.Text(text)))


__all__ = ["AppShell"]
