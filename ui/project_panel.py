# ui/project_panel.py
from __future__ import annotations

from typing import List

import flet as ft

from core.palette import PRESET_COLORS, preset_options
from core.settings import UI

THEME = UI.theme


class ProjectPanel:
    """Side panel: project list, add form and per-project progress bars."""

    def __init__(self, app):
        self.app = app
        self.state = app.state

        self.list_col = ft.Column(spacing=4)
        self.progress_col = ft.Column(spacing=10)

        self.name_tf = ft.TextField(label="Project name", dense=True, on_submit=self._save)
        self.color_dd = ft.Dropdown(
            label="Color",
            value=PRESET_COLORS[0]["value"],
            options=[ft.dropdown.Option(value, name) for value, name in preset_options().items()],
        )
        self.desc_tf = ft.TextField(label="Description", dense=True)
        self.form = ft.Column(
            [
                self.name_tf,
                self.color_dd,
                self.desc_tf,
                ft.Row(
                    [
                        ft.TextButton("Cancel", on_click=lambda e: self._toggle_form(False)),
                        ft.FilledButton("Add", on_click=self._save),
                    ],
                    alignment=ft.MainAxisAlignment.END,
                ),
            ],
            spacing=8,
            visible=False,
        )

        self.view = ft.Container(
            width=UI.side_panel_width,
            padding=12,
            border=ft.border.all(0.5, THEME.outline),
            border_radius=12,
            content=ft.Column(
                [
                    ft.Row(
                        [
                            ft.Text("Projects", size=16, weight=ft.FontWeight.W_600),
                            ft.IconButton(ft.Icons.ADD, tooltip="New project", on_click=lambda e: self._toggle_form(True)),
                        ],
                        alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                    ),
                    self.form,
                    self.list_col,
                    ft.Divider(height=1),
                    ft.Text("Progress", size=16, weight=ft.FontWeight.W_600),
                    self.progress_col,
                ],
                spacing=10,
                scroll=ft.ScrollMode.AUTO,
                expand=True,
            ),
        )

    def load(self):
        self.list_col.controls = [self._project_row(p) for p in self.state.projects]
        if not self.state.projects:
            self.list_col.controls.append(ft.Text("No projects yet.", size=12, color=THEME.text_subtle))

        rows: List[ft.Control] = []
        for row in self.state.project_progress():
            rows.append(
                ft.Column(
                    [
                        ft.Row(
                            [
                                ft.Text(row.project.name, size=12, expand=True, no_wrap=True,
                                        overflow=ft.TextOverflow.ELLIPSIS),
                                ft.Text(f"{row.score}%", size=12, weight=ft.FontWeight.W_600),
                            ]
                        ),
                        ft.ProgressBar(
                            value=row.score / 100,
                            color=row.project.color,
                            bgcolor=THEME.outline,
                            bar_height=6,
                            border_radius=3,
                        ),
                    ],
                    spacing=4,
                )
            )
        if not rows:
            rows.append(ft.Text("Add tasks to see progress.", size=12, color=THEME.text_subtle))
        self.progress_col.controls = rows

    def _project_row(self, project) -> ft.Control:
        return ft.Row(
            [
                ft.Container(width=10, height=10, border_radius=5, bgcolor=project.color),
                ft.Text(project.name, size=13, expand=True, tooltip=project.description),
                ft.IconButton(
                    ft.Icons.DELETE_OUTLINE,
                    icon_size=16,
                    tooltip="Delete project",
                    on_click=lambda e, pid=project.id: self.state.delete_project(pid),
                ),
            ],
            spacing=8,
        )

    def _toggle_form(self, show: bool):
        self.form.visible = show
        if not show:
            self.name_tf.value = ""
            self.desc_tf.value = ""
            self.name_tf.error_text = None
        self.app.page.update()

    def _save(self, e):
        name = (self.name_tf.value or "").strip()
        if not name:
            self.name_tf.error_text = "Name is required"
            self.app.page.update()
            return
        project = self.state.add_project(name, self.color_dd.value, (self.desc_tf.value or "").strip())
        if project is None:
            self.name_tf.error_text = "Could not add project"
            self.app.page.update()
            return
        self._toggle_form(False)


__all__ = ["ProjectPanel"]
