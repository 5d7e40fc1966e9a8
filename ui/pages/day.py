# ui/pages/day.py
from __future__ import annotations

import math
from datetime import date, datetime
from typing import List, Optional

import flet as ft
import flet.canvas as cv

from core.radial import AM, PM, Segment, clock_hand, hit_test, polar_to_cartesian, ring_fills, ring_radius
from core.settings import DIAL, UI
from ui.dialogs import TaskDialog, idea_icon

THEME = UI.theme
C = DIAL.center


def _arc_shape(seg: Segment, *, stroke: float, color: str, alpha: float) -> cv.Arc:
    # Canvas angles start at three o'clock; dial angles start at twelve.
    r = seg.arc.radius
    return cv.Arc(
        x=seg.arc.cx - r,
        y=seg.arc.cy - r,
        width=2 * r,
        height=2 * r,
        start_angle=math.radians(seg.arc.start_angle - 90),
        sweep_angle=math.radians(seg.arc.sweep_degrees),
        use_center=False,
        paint=ft.Paint(
            color=ft.Colors.with_opacity(alpha, color),
            stroke_width=stroke,
            style=ft.PaintingStyle.STROKE,
            stroke_cap=ft.StrokeCap.ROUND,
        ),
    )


class DayPage:
    """Clock dial for one day plus the details card of the selected task."""

    def __init__(self, app):
        self.app = app
        self.state = app.state
        self.day: date = date.today()
        self.segments: List[Segment] = []

        self.weekday_text = ft.Text("", size=20, weight=ft.FontWeight.BOLD, color=THEME.text_strong)
        self.date_text = ft.Text("", size=13, weight=ft.FontWeight.W_500, color=THEME.accent)
        self.clock_text = ft.Text("", size=22, weight=ft.FontWeight.BOLD, font_family="monospace")
        header = ft.Row(
            [
                ft.Row(
                    [
                        ft.IconButton(ft.Icons.ARROW_BACK, tooltip="Back to month", on_click=lambda e: self.app.show_month()),
                        ft.Column([self.weekday_text, self.date_text], spacing=0),
                    ]
                ),
                ft.Row(
                    [
                        self.clock_text,
                        ft.IconButton(ft.Icons.ADD, tooltip="New task", on_click=lambda e: TaskDialog(self.app, day=self.day).open()),
                    ]
                ),
            ],
            alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
        )

        self.canvas = cv.Canvas(width=DIAL.view_size, height=DIAL.view_size)
        dial = ft.GestureDetector(
            content=ft.Container(self.canvas, width=DIAL.view_size, height=DIAL.view_size),
            on_tap_down=self._on_tap,
            mouse_cursor=ft.MouseCursor.CLICK,
        )
        self.details = ft.Container(width=420)

        self.view = ft.Container(
            content=ft.Column(
                [
                    header,
                    ft.Divider(height=1),
                    ft.Column(
                        [ft.Container(dial, alignment=ft.alignment.center, padding=10), self.details],
                        horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                        scroll=ft.ScrollMode.AUTO,
                        expand=True,
                    ),
                ],
                spacing=8,
                expand=True,
            ),
            expand=True,
            padding=16,
            bgcolor=ft.Colors.WHITE,
            border=ft.border.all(0.5, THEME.outline),
            border_radius=12,
        )

    def set_day(self, day: date):
        self.day = day

    # ===== build =====
    def load(self, now: Optional[datetime] = None):
        now = now or datetime.now()
        self.segments = self.state.day_segments(self.day, now)
        selected = self.state.selected_task(self.day, now)

        self.weekday_text.value = self.day.strftime("%A")
        self.date_text.value = self.day.strftime("%B %d").replace(" 0", " ")
        self.clock_text.value = now.strftime("%I:%M %p").lstrip("0")

        self.canvas.shapes = self._dial_shapes(now, selected.id if selected else None)
        self.details.content = self._details_card(selected)

    def _dial_shapes(self, now: datetime, selected_id: Optional[str]) -> List[cv.Shape]:
        fills = ring_fills(now)
        top_x, top_y = polar_to_cartesian(C, C, C - DIAL.marker_inset, 0)
        shapes: List[cv.Shape] = [
            cv.Circle(C, C, C - DIAL.face_inset, paint=ft.Paint(color=ft.Colors.WHITE)),
            cv.Text(
                top_x, top_y, "12",
                style=ft.TextStyle(size=14, weight=ft.FontWeight.BOLD, color=THEME.text_subtle),
                alignment=ft.alignment.center,
            ),
        ]
        for ring in (PM, AM):
            shapes.append(
                cv.Circle(
                    C, C, ring_radius(ring),
                    paint=ft.Paint(
                        color=ft.Colors.with_opacity(fills[ring], DIAL.ring_color),
                        stroke_width=DIAL.stroke_width,
                        style=ft.PaintingStyle.STROKE,
                    ),
                )
            )

        for seg in self.segments:
            if seg.is_active:
                shapes.append(_arc_shape(seg, stroke=DIAL.stroke_width + 8, color=seg.color, alpha=0.3))
            shapes.append(_arc_shape(seg, stroke=DIAL.stroke_width, color=seg.color, alpha=seg.alpha))
            if seg.task_id == selected_id:
                shapes.append(_arc_shape(seg, stroke=2, color=ft.Colors.BLACK, alpha=0.2))

        hand = clock_hand(now)
        tip_x, tip_y = polar_to_cartesian(C, C, DIAL.radius_pm + DIAL.hand_overshoot, hand.angle)
        hand_paint = ft.Paint(color=DIAL.hand_color, stroke_width=2, stroke_cap=ft.StrokeCap.ROUND)
        shapes += [
            cv.Line(C, C, tip_x, tip_y, paint=hand_paint),
            cv.Circle(C, C, 4, paint=ft.Paint(color=DIAL.hand_color)),
            cv.Circle(tip_x, tip_y, 3, paint=ft.Paint(color=DIAL.hand_color)),
        ]
        return shapes

    def _details_card(self, task) -> ft.Control:
        if task is None:
            return ft.Column(
                [
                    ft.Text("Select a time slot on the dial", size=13, color=THEME.text_subtle),
                    ft.Text("to view details", size=11, color=THEME.text_subtle),
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                spacing=2,
            )

        project = self.state.project_for(task)
        badge = ft.Container(
            ft.Text(project.name.upper() if project else "", size=10, weight=ft.FontWeight.BOLD, color=ft.Colors.WHITE),
            bgcolor=project.color if project else "#cbd5e1",
            padding=ft.padding.symmetric(horizontal=6, vertical=2),
            border_radius=4,
        )
        checklist: List[ft.Control] = [
            ft.Checkbox(
                label=item.text,
                value=item.completed,
                on_change=lambda e, iid=item.id: self.state.toggle_checklist_item(task.id, iid),
            )
            for item in task.checklist
        ]
        if not checklist:
            checklist.append(ft.Text("No items in checklist.", size=12, italic=True, color=THEME.text_subtle))

        body: List[ft.Control] = [
            ft.Row(
                [
                    ft.Column(
                        [
                            badge,
                            ft.Text(task.title, weight=ft.FontWeight.BOLD, size=15),
                            ft.Row(
                                [ft.Icon(ft.Icons.SCHEDULE, size=12, color=THEME.text_subtle),
                                 ft.Text(f"{task.start_time} - {task.end_time}", size=12, color=THEME.text_subtle)],
                                spacing=4,
                            ),
                        ],
                        spacing=4,
                        expand=True,
                    ),
                    ft.TextButton("Edit", on_click=lambda e: TaskDialog(self.app, task).open()),
                ],
                vertical_alignment=ft.CrossAxisAlignment.START,
            ),
            ft.Divider(height=1),
            *checklist,
        ]
        if task.content_ideas:
            body += [
                ft.Divider(height=1),
                ft.Text("CONTENT IDEAS", size=11, weight=ft.FontWeight.W_600, color=THEME.text_subtle),
                ft.Row(
                    [
                        ft.Container(
                            ft.Column(
                                [idea_icon(idea.type), ft.Text(idea.text, size=10, max_lines=2, text_align=ft.TextAlign.CENTER)],
                                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                                spacing=4,
                            ),
                            width=96,
                            padding=8,
                            bgcolor=THEME.surface_bg,
                            border=ft.border.all(0.5, THEME.outline),
                            border_radius=8,
                        )
                        for idea in task.content_ideas
                    ],
                    scroll=ft.ScrollMode.AUTO,
                ),
            ]
        return ft.Container(
            ft.Column(body, spacing=6),
            padding=16,
            bgcolor=ft.Colors.WHITE,
            border=ft.border.all(0.5, THEME.outline),
            border_radius=12,
            shadow=ft.BoxShadow(blur_radius=8, color=ft.Colors.with_opacity(0.08, ft.Colors.BLACK)),
        )

    # ===== interaction =====
    def _on_tap(self, e: ft.TapEvent):
        seg = hit_test(self.segments, e.local_x, e.local_y)
        if seg is not None:
            self.state.select_task(self.day, seg.task_id)


__all__ = ["DayPage"]
