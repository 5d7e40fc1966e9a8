# ui/pages/month.py
from __future__ import annotations

from datetime import date
from typing import List, Optional

import flet as ft

from core.month_grid import DayCell
from core.scoring import task_style
from core.settings import UI
from ui.dialogs import TaskDialog

THEME = UI.theme
GRID = UI.month

MONTH_TITLES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


class MonthPage:
    """
    Month grid with Sunday-first weeks.
    - Each cell shows up to three tasks, "+N more" for the rest.
    - Chips are draggable between day cells; dropping changes only the date.
    - Clicking a day opens its dial view.
    """

    def __init__(self, app):
        self.app = app
        self.state = app.state
        self.current_drag_task_id: Optional[str] = None

        self.grid = ft.Column(spacing=0, expand=True)
        weekday_row = ft.Row(
            [
                ft.Container(
                    ft.Text(label, size=12, weight=ft.FontWeight.W_600, color=THEME.text_subtle),
                    expand=True,
                    alignment=ft.alignment.center,
                    padding=6,
                )
                for label in GRID.weekday_labels
            ],
            spacing=0,
        )
        self.view = ft.Container(
            content=ft.Column([weekday_row, ft.Divider(height=1), self.grid], spacing=0, expand=True),
            expand=True,
            border=ft.border.all(0.5, THEME.outline),
            border_radius=12,
            clip_behavior=ft.ClipBehavior.HARD_EDGE,
        )

    def title(self, year: int, month: int) -> str:
        return f"{MONTH_TITLES[month - 1]} {year}"

    # ===== build =====
    def load(self):
        year, month = self.app.year, self.app.month
        cells = self.state.month_cells(year, month)
        rows: List[ft.Control] = []
        for start in range(0, len(cells), 7):
            week = cells[start:start + 7]
            rows.append(
                ft.Row(
                    [self._build_cell(cell) for cell in week],
                    spacing=0,
                    expand=True,
                    vertical_alignment=ft.CrossAxisAlignment.STRETCH,
                )
            )
        self.grid.controls = rows

    def _build_cell(self, cell: DayCell) -> ft.Control:
        number = ft.Container(
            ft.Text(
                str(cell.date.day),
                size=12,
                weight=ft.FontWeight.BOLD if cell.is_today else ft.FontWeight.W_500,
                color=ft.Colors.WHITE if cell.is_today else (
                    THEME.text_strong if cell.is_current_month else THEME.text_subtle
                ),
            ),
            width=24,
            height=24,
            border_radius=12,
            alignment=ft.alignment.center,
            bgcolor=THEME.today_ring if cell.is_today else None,
        )
        header_items: List[ft.Control] = [number]
        if cell.all_completed:
            header_items.append(ft.Icon(ft.Icons.CHECK_CIRCLE, size=14, color=THEME.done_icon))

        body: List[ft.Control] = [
            ft.Row(header_items, alignment=ft.MainAxisAlignment.SPACE_BETWEEN),
        ]
        body += [self._build_chip(task, task.id == cell.active_task_id) for task in cell.visible]
        if cell.more_label:
            body.append(ft.Text(cell.more_label, size=10, color=THEME.text_subtle, italic=True))

        content = ft.Container(
            content=ft.Column(body, spacing=3, tight=True),
            padding=6,
            expand=True,
            bgcolor=None if cell.is_current_month else THEME.outside_month_bg,
            border=ft.border.only(
                right=ft.BorderSide(0.5, THEME.outline),
                bottom=ft.BorderSide(0.5, THEME.outline),
            ),
            on_click=lambda e, d=cell.date: self.app.open_day(d),
        )
        drop = ft.DragTarget(
            group="task",
            content=content,
            on_will_accept=lambda e, c=content: self._highlight(c, True),
            on_leave=lambda e, c=content, cur=cell.is_current_month: self._highlight(c, False, cur),
            on_accept=lambda e, d=cell.date: self._on_drop_accept(d, e),
        )
        return ft.Container(drop, expand=True)

    def _build_chip(self, task, is_active: bool) -> ft.Control:
        style = task_style(task, self.state.project_for(task))
        label = ft.Text(
            f"{task.start_time} {task.title}",
            size=11,
            color=style.text_color,
            no_wrap=True,
            overflow=ft.TextOverflow.ELLIPSIS,
            expand=True,
            style=ft.TextStyle(decoration=ft.TextDecoration.LINE_THROUGH) if task.completed else None,
        )
        row: List[ft.Control] = []
        if is_active:
            row.append(ft.Container(width=6, height=6, border_radius=3, bgcolor=THEME.active_dot))
        row.append(label)
        chip = ft.Container(
            content=ft.Row(row, spacing=4, vertical_alignment=ft.CrossAxisAlignment.CENTER),
            bgcolor=style.argb,
            border=ft.border.only(left=ft.BorderSide(3, style.border)),
            border_radius=4,
            padding=ft.padding.symmetric(horizontal=4, vertical=2),
            tooltip=task.title,
            on_click=lambda e, t=task: TaskDialog(self.app, t).open(),
        )
        return ft.Draggable(
            group="task",
            data=task.id,
            on_drag_start=lambda e, tid=task.id: self._remember_drag(tid),
            content=chip,
            content_feedback=ft.Container(
                content=ft.Text(task.title, size=12),
                padding=8, bgcolor="#ffffff", border_radius=6, border=ft.border.all(0.5, THEME.outline),
            ),
        )

    # ===== drag & drop =====
    def _remember_drag(self, task_id: str):
        self.current_drag_task_id = task_id

    def _highlight(self, cell: ft.Container, on: bool, current_month: bool = True):
        if on:
            cell.bgcolor = THEME.drag_target_bg
        else:
            cell.bgcolor = None if current_month else THEME.outside_month_bg
        cell.update()

    def _on_drop_accept(self, day: date, e: ft.DragTargetEvent):
        task_id = self.current_drag_task_id
        if task_id is None:
            src = self.app.page.get_control(e.src_id)
            task_id = getattr(src, "data", None)
        self.current_drag_task_id = None
        if not task_id:
            return self.app.toast("Could not determine the dragged task")
        self.state.move_task(task_id, day)


__all__ = ["MonthPage", "MONTH_TITLES"]
