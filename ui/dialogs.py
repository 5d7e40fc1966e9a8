# ui/dialogs.py
from __future__ import annotations

from datetime import date, datetime
from typing import Callable, List, Optional

import flet as ft

from core.settings import UI
from helpers.datetime_utils import next_slot, parse_date_input, parse_time_input
from models.task import ChecklistItem, Task
from services.schedule_generator import GenerationError

THEME = UI.theme

IDEA_ICONS = {
    "video": (ft.Icons.VIDEOCAM_OUTLINED, "#A855F7"),
    "story": (ft.Icons.DATA_USAGE, "#EC4899"),
    "image": (ft.Icons.IMAGE_OUTLINED, "#3B82F6"),
}


def idea_icon(kind: str) -> ft.Icon:
    icon, color = IDEA_ICONS.get(kind, (ft.Icons.IMAGE_OUTLINED, THEME.text_subtle))
    return ft.Icon(icon, size=14, color=color)


def show_alert(page: ft.Page, title: str, message: str) -> ft.AlertDialog:
    """Blocking alert: modal until the user presses OK."""

    dlg = ft.AlertDialog(modal=True, title=ft.Text(title), content=ft.Text(message))
    dlg.actions = [ft.TextButton("OK", on_click=lambda e: page.close(dlg))]
    dlg.actions_alignment = ft.MainAxisAlignment.END
    page.open(dlg)
    return dlg


def _fmt_time(value) -> Optional[str]:
    parsed = parse_time_input(value)
    return parsed.strftime("%H:%M") if parsed else None


class TaskDialog:
    """Create/edit form for one task, including its checklist."""

    def __init__(self, app, task: Optional[Task] = None, *, day: Optional[date] = None):
        self.app = app
        self.state = app.state
        self.task = task
        self.checklist: List[ChecklistItem] = list(task.checklist) if task else []

        if task:
            start, end = task.start_time, task.end_time
        else:
            start, end = next_slot(
                datetime.now(), step=UI.time_step_minutes, duration=UI.default_duration_minutes
            )
        day = task.date if task else (day or date.today())

        self.title_tf = ft.TextField(label="Title", value=task.title if task else "", autofocus=True)
        self.project_dd = ft.Dropdown(
            label="Project",
            value=task.project_id if task else (self.state.projects[0].id if self.state.projects else None),
            options=[ft.dropdown.Option(p.id, p.name) for p in self.state.projects],
        )
        self.date_tf = ft.TextField(label="Date", value=day.isoformat(), hint_text="YYYY-MM-DD", width=150)
        self.start_tf = ft.TextField(label="Start", value=start, hint_text="HH:mm", width=100)
        self.end_tf = ft.TextField(label="End", value=end, hint_text="HH:mm", width=100)
        self.desc_tf = ft.TextField(
            label="Description", value=(task.description or "") if task else "", multiline=True, min_lines=2
        )
        self.done_cb = ft.Checkbox(label="Completed", value=task.completed if task else False)
        self.new_item_tf = ft.TextField(hint_text="Add checklist item", expand=True, on_submit=self._add_item)
        self.items_col = ft.Column(spacing=2)
        self.error_text = ft.Text("", color=ft.Colors.RED_400, size=12)

        ideas = []
        for idea in task.content_ideas if task else []:
            ideas.append(ft.Row([idea_icon(idea.type), ft.Text(idea.text, size=12, expand=True)], spacing=6))

        actions: List[ft.Control] = []
        if task:
            actions.append(
                ft.TextButton("Delete", icon=ft.Icons.DELETE_OUTLINE, on_click=self._delete,
                              style=ft.ButtonStyle(color=ft.Colors.RED_400))
            )
        actions += [
            ft.TextButton("Cancel", on_click=lambda e: self.close()),
            ft.FilledButton("Save", on_click=self._save),
        ]

        self.dialog = ft.AlertDialog(
            modal=False,
            title=ft.Text("Edit task" if task else "New task"),
            content=ft.Container(
                width=480,
                content=ft.Column(
                    [
                        self.title_tf,
                        self.project_dd,
                        ft.Row([self.date_tf, self.start_tf, self.end_tf], spacing=8),
                        self.desc_tf,
                        self.done_cb,
                        ft.Text("Checklist", weight=ft.FontWeight.W_600),
                        self.items_col,
                        ft.Row([self.new_item_tf, ft.IconButton(ft.Icons.ADD, on_click=self._add_item)]),
                        *([ft.Text("Content ideas", weight=ft.FontWeight.W_600), *ideas] if ideas else []),
                        self.error_text,
                    ],
                    tight=True,
                    scroll=ft.ScrollMode.AUTO,
                    spacing=10,
                ),
            ),
            actions=actions,
            actions_alignment=ft.MainAxisAlignment.END,
        )
        self._render_items()

    def open(self):
        self.app.page.open(self.dialog)

    def close(self):
        self.app.page.close(self.dialog)

    # ----- checklist editing -----
    def _render_items(self):
        self.items_col.controls = [self._item_row(item) for item in self.checklist]

    def _item_row(self, item: ChecklistItem) -> ft.Control:
        def _toggle(e, item_id=item.id):
            self.checklist = [
                c.model_copy(update={"completed": bool(e.control.value)}) if c.id == item_id else c
                for c in self.checklist
            ]

        def _remove(e, item_id=item.id):
            self.checklist = [c for c in self.checklist if c.id != item_id]
            self._render_items()
            self.app.page.update()

        return ft.Row(
            [
                ft.Checkbox(value=item.completed, on_change=_toggle),
                ft.Text(item.text, expand=True),
                ft.IconButton(ft.Icons.CLOSE, icon_size=16, on_click=_remove),
            ],
            spacing=4,
        )

    def _add_item(self, e):
        text = (self.new_item_tf.value or "").strip()
        if not text:
            return
        self.checklist.append(ChecklistItem(text=text))
        self.new_item_tf.value = ""
        self._render_items()
        self.app.page.update()

    # ----- actions -----
    def _payload(self) -> dict:
        parsed_date = parse_date_input(self.date_tf.value)
        payload = {
            "project_id": self.project_dd.value or "",
            "title": (self.title_tf.value or "").strip(),
            "date": parsed_date.isoformat() if parsed_date else self.date_tf.value,
            "start_time": _fmt_time(self.start_tf.value) or self.start_tf.value,
            "end_time": _fmt_time(self.end_tf.value) or self.end_tf.value,
            "description": (self.desc_tf.value or "").strip() or None,
            "checklist": [c.model_dump() for c in self.checklist],
            "content_ideas": [i.model_dump() for i in self.task.content_ideas] if self.task else [],
            "completed": bool(self.done_cb.value),
        }
        if self.task:
            payload["id"] = self.task.id
        return payload

    def _save(self, e):
        payload = self._payload()
        if not payload["title"]:
            self.error_text.value = "Title is required."
            self.app.page.update()
            return
        saved = self.state.update_task(payload) if self.task else self.state.create_task(payload)
        if saved is None:
            self.error_text.value = "Check the date (YYYY-MM-DD) and that start is before end (HH:mm)."
            self.app.page.update()
            return
        self.close()

    def _delete(self, e):
        if self.task:
            self.state.delete_task(self.task.id)
        self.close()


class AIPlannerDialog:
    """Prompt -> preview -> confirm flow for generated schedules."""

    def __init__(self, app, on_done: Optional[Callable[[int], None]] = None):
        self.app = app
        self.state = app.state
        self.on_done = on_done
        self.preview: List[Task] = []

        self.prompt_tf = ft.TextField(
            label="What are your goals for this month?",
            hint_text=(
                "e.g., I want to bake cookies every Saturday morning and plan a family "
                "movie night every Friday evening."
            ),
            multiline=True,
            min_lines=4,
        )
        self.progress = ft.ProgressRing(width=18, height=18, visible=False)
        self.preview_col = ft.Column(spacing=6, scroll=ft.ScrollMode.AUTO, height=240, visible=False)
        self.generate_btn = ft.FilledButton("Generate", icon=ft.Icons.AUTO_AWESOME, on_click=self._generate)
        self.confirm_btn = ft.FilledButton(
            "Add to calendar", icon=ft.Icons.EVENT_AVAILABLE, on_click=self._confirm, disabled=True
        )

        if self.state.projects:
            body: List[ft.Control] = [
                self.prompt_tf,
                ft.Text(
                    'Be specific about timing ("weekend mornings", "after 5pm") for better scheduling.',
                    size=12,
                    color=THEME.text_subtle,
                ),
                ft.Row([self.generate_btn, self.progress]),
                self.preview_col,
            ]
        else:
            body = [ft.Text("Please define some projects first before using the AI Planner.")]
            self.generate_btn.disabled = True

        self.dialog = ft.AlertDialog(
            modal=True,
            title=ft.Row([ft.Icon(ft.Icons.AUTO_AWESOME, color=ft.Colors.AMBER), ft.Text("AI Planner Assistant")]),
            content=ft.Container(width=560, content=ft.Column(body, tight=True, spacing=12)),
            actions=[ft.TextButton("Close", on_click=lambda e: self.close()), self.confirm_btn],
            actions_alignment=ft.MainAxisAlignment.END,
        )

    def open(self):
        self.app.page.open(self.dialog)

    def close(self):
        self.app.page.close(self.dialog)

    def _set_busy(self, busy: bool):
        self.progress.visible = busy
        self.generate_btn.disabled = busy
        self.app.page.update()

    def _generate(self, e):
        prompt = (self.prompt_tf.value or "").strip()
        if not prompt:
            return
        self.preview = []
        self._set_busy(True)
        try:
            self.preview = self.state.generate_schedule(prompt)
        except GenerationError as exc:
            self.state.logger.error("AI planner failed: %s", exc)
            self.preview = []
            self._render_preview()
            self._set_busy(False)
            show_alert(self.app.page, "AI Planner", "Failed to generate schedule. Please try again.")
            return
        self._render_preview()
        self._set_busy(False)

    def _render_preview(self):
        rows: List[ft.Control] = []
        if self.preview:
            rows.append(ft.Text(f"Suggested Schedule ({len(self.preview)} tasks)", weight=ft.FontWeight.W_600))
        for task in self.preview:
            project = self.state.project_for(task)
            rows.append(
                ft.Container(
                    padding=8,
                    border=ft.border.all(0.5, THEME.outline),
                    border_radius=8,
                    content=ft.Row(
                        [
                            ft.Container(
                                width=8, height=8, border_radius=4,
                                bgcolor=project.color if project else "#cbd5e1",
                            ),
                            ft.Column(
                                [
                                    ft.Text(task.title, weight=ft.FontWeight.W_500, size=13),
                                    ft.Text(
                                        f"{task.date.isoformat()} • {task.start_time} - {task.end_time}",
                                        size=11, color=THEME.text_subtle,
                                    ),
                                    ft.Text(
                                        f"{len(task.checklist)} tasks • {len(task.content_ideas)} content ideas",
                                        size=11, color=THEME.text_subtle,
                                    ),
                                ],
                                spacing=2,
                                expand=True,
                            ),
                        ],
                        vertical_alignment=ft.CrossAxisAlignment.START,
                    ),
                )
            )
        self.preview_col.controls = rows
        self.preview_col.visible = bool(rows)
        self.confirm_btn.disabled = not self.preview

    def _confirm(self, e):
        created = self.state.accept_generated(self.preview)
        self.preview = []
        self.close()
        if self.on_done:
            self.on_done(len(created))


LOG_SOURCES = ("planner.state", "planner.api", "planner.ai", "planner.storage", "planner.app")


class LogDialog:
    """Tail of one of the rotating log files."""

    def __init__(self, app):
        self.app = app
        self.source_dd = ft.Dropdown(
            label="Log",
            value=LOG_SOURCES[0],
            options=[ft.dropdown.Option(name, name.split(".")[-1]) for name in LOG_SOURCES],
            on_change=self.refresh,
        )
        self.log_view = ft.Text("", selectable=True, size=12, font_family="monospace")
        self.dlg = ft.AlertDialog(
            title=ft.Text("Logs"),
            content=ft.Container(
                ft.Column(
                    [
                        self.source_dd,
                        ft.Container(
                            ft.Column([self.log_view], scroll=ft.ScrollMode.AUTO),
                            height=320,
                            padding=10,
                            bgcolor=UI.theme.surface_bg,
                        ),
                    ],
                    spacing=8,
                    tight=True,
                ),
                width=640,
            ),
            actions=[
                ft.TextButton("Refresh", on_click=self.refresh),
                ft.TextButton("Close", on_click=lambda e: self.app.page.close(self.dlg)),
            ],
        )

    def open(self):
        self.log_view.value = self.app.read_log(self.source_dd.value)
        self.app.page.open(self.dlg)

    def refresh(self, e=None):
        self.log_view.value = self.app.read_log(self.source_dd.value)
        self.app.page.update()


__all__ = ["AIPlannerDialog", "LOG_SOURCES", "LogDialog", "TaskDialog", "idea_icon", "show_alert"]
