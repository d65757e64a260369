from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import replace
from datetime import date

import flet as ft

from studydesk.config.settings import settings
from studydesk.domain.logic import edits, schedule, timer
from studydesk.domain.logic.averages import Decision, recompute_semester, recompute_year, semester_status, year_status
from studydesk.domain.logic.grading import GradeBand, classify
from studydesk.domain.logic.report import Notice, calculation_notice, format_average, summarize_semester
from studydesk.domain.logic.validation import parse_coefficient, parse_number
from studydesk.domain.models.defaults import default_semester, default_year
from studydesk.domain.models.entities import Average, Complete
from studydesk.services.records import RecordStore

logger = logging.getLogger(__name__)

WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

BAND_COLORS = {
    GradeBand.TRES_BIEN: ft.Colors.GREEN_500,
    GradeBand.BIEN: ft.Colors.BLUE_500,
    GradeBand.ASSEZ_BIEN: ft.Colors.YELLOW_700,
    GradeBand.PASSABLE: ft.Colors.ORANGE_500,
    GradeBand.A_RATTRAPER: ft.Colors.RED_500,
}

PRIORITY_COLORS = {
    "high": ft.Colors.RED_500,
    "medium": ft.Colors.YELLOW_700,
    "low": ft.Colors.GREEN_500,
}


def _number_text(value: float | None) -> str:
    return "" if value is None or math.isnan(value) else f"{value:g}"


def _average_label(average: Average) -> ft.Text:
    band = classify(average)
    if band is None:
        return ft.Text("N/A", color=ft.Colors.GREY_500)
    return ft.Text(f"{format_average(average)} • {band.value}", color=BAND_COLORS[band], weight=ft.FontWeight.BOLD)


class StudyDeskApp:
    def __init__(self, page: ft.Page) -> None:
        self.page = page
        self.page.title = "StudyDesk"
        self.page.scroll = ft.ScrollMode.AUTO
        self.records = RecordStore.from_settings()

        self.semester = self.records.load_semester() or recompute_semester(default_semester())
        self.year = self.records.load_year() or recompute_year(default_year())
        self.tasks = self.records.load_tasks() or ()

        self.timer_settings = timer.TimerSettings(
            work_minutes=settings.work_minutes,
            break_minutes=settings.break_minutes,
            long_break_minutes=settings.long_break_minutes,
            sessions_until_long_break=settings.sessions_until_long_break,
        )
        self.timer = timer.initial_state(self.timer_settings)
        self.timer_mode = ft.Text(size=20, weight=ft.FontWeight.BOLD)
        self.timer_clock = ft.Text(size=56, weight=ft.FontWeight.BOLD)
        self.timer_bar = ft.ProgressBar(width=320, value=0)
        self.timer_sessions = ft.Text()
        self.timer_toggle = ft.ElevatedButton("Start", on_click=self.handle_timer_toggle)

        self.selected_date = date.today()
        self.shown_month = (self.selected_date.year, self.selected_date.month)
        self.editing_task_id: str | None = None

        self.dashboard_container = ft.Container()
        self.calendar_container = ft.Container()
        self.semester_container = ft.Container()
        self.year_container = ft.Container()

    def run(self) -> None:
        tabs = ft.Tabs(
            selected_index=0,
            tabs=[
                ft.Tab(text="Dashboard", content=self.dashboard_container),
                ft.Tab(text="Focus Timer", content=self.timer_view()),
                ft.Tab(text="Calendar", content=self.calendar_container),
                ft.Tab(text="Semester", content=self.semester_container),
                ft.Tab(text="Year", content=self.year_container),
            ],
            expand=1,
        )
        self.page.add(ft.Text("StudyDesk", size=28, weight=ft.FontWeight.BOLD), tabs)
        self.refresh_all()
        self.page.run_task(self.run_timer)

    def refresh_all(self) -> None:
        self.dashboard_container.content = self.dashboard_view()
        self.calendar_container.content = self.calendar_view()
        self.semester_container.content = self.semester_view()
        self.year_container.content = self.year_view()
        self.render_timer()
        self.page.update()

    def notify(self, notice: Notice) -> None:
        self.page.open(
            ft.SnackBar(
                ft.Text(f"{notice.title}: {notice.description}"),
                bgcolor=ft.Colors.RED_400 if notice.is_error else ft.Colors.GREEN_400,
            )
        )

    # Dashboard

    def dashboard_view(self) -> ft.Control:
        today = date.today()
        todays = schedule.todays_tasks(self.tasks, today)
        upcoming = schedule.upcoming_tasks(self.tasks, today)
        sem_status = semester_status(self.semester)
        status = year_status(self.year)

        today_lines = [ft.Text(f"• {t.time} {t.title}") for t in todays] or [ft.Text("No tasks today")]
        upcoming_lines = [
            ft.Text(f"• {t.title} ({t.date} {t.time}), in {schedule.days_until(t, today)} day(s)") for t in upcoming
        ] or [ft.Text("No upcoming tasks")]

        return ft.Column(
            [
                ft.Text(today.strftime("%A, %d %B %Y"), size=18),
                ft.Text("Today", size=20, weight=ft.FontWeight.BOLD),
                *today_lines,
                ft.Text("Upcoming", size=20, weight=ft.FontWeight.BOLD),
                *upcoming_lines,
                ft.Divider(),
                ft.Row([ft.Text(f"{self.semester.name}:"), _average_label(self.semester.average)]),
                ft.Text(f"Semester status: {sem_status.value if sem_status else 'N/A'}"),
                ft.Row([ft.Text(f"Year {self.year.name}:"), _average_label(self.year.average)]),
                ft.Text(f"Annual status: {status.value if status else 'N/A'}"),
            ]
        )

    # Focus timer

    def timer_view(self) -> ft.Control:
        return ft.Column(
            [
                self.timer_mode,
                self.timer_clock,
                self.timer_bar,
                ft.Row(
                    [
                        self.timer_toggle,
                        ft.OutlinedButton("Reset", on_click=self.handle_timer_reset),
                        ft.OutlinedButton("Skip", on_click=self.handle_timer_skip),
                    ]
                ),
                self.timer_sessions,
                ft.Divider(),
                self.timer_settings_view(),
            ],
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
        )

    def timer_settings_view(self) -> ft.Control:
        current = self.timer_settings

        def slider(label: str, field: str, value: int, low: int, high: int) -> ft.Control:
            caption = ft.Text(f"{label}: {value}")

            def changed(e: ft.ControlEvent) -> None:
                number = int(float(e.control.value))
                caption.value = f"{label}: {number}"
                self.update_timer_settings(**{field: number})

            return ft.Column(
                [
                    caption,
                    ft.Slider(
                        min=low, max=high, divisions=high - low, value=min(max(value, low), high), width=320, on_change=changed
                    ),
                ],
                spacing=0,
            )

        def switch(label: str, field: str, value: bool) -> ft.Control:
            return ft.Switch(
                label=label,
                value=value,
                on_change=lambda e: self.update_timer_settings(**{field: bool(e.control.value)}),
            )

        return ft.Column(
            [
                ft.Text("Timer Settings", size=18, weight=ft.FontWeight.BOLD),
                slider("Focus duration (minutes)", "work_minutes", current.work_minutes, 1, 60),
                slider("Short break (minutes)", "break_minutes", current.break_minutes, 1, 30),
                slider("Long break (minutes)", "long_break_minutes", current.long_break_minutes, 5, 60),
                slider("Sessions until long break", "sessions_until_long_break", current.sessions_until_long_break, 2, 8),
                switch("Auto-start breaks", "auto_start_breaks", current.auto_start_breaks),
                switch("Auto-start focus sessions", "auto_start_pomodoros", current.auto_start_pomodoros),
                switch("Notify when a phase ends", "notify_on_finish", current.notify_on_finish),
            ]
        )

    def update_timer_settings(self, **changes) -> None:
        self.timer_settings = replace(self.timer_settings, **changes)
        self.timer = timer.apply_settings(self.timer, self.timer_settings)
        self.render_timer()
        self.page.update()

    def render_timer(self) -> None:
        self.timer_mode.value = timer.mode_label(self.timer.mode)
        self.timer_clock.value = timer.format_time(self.timer.remaining_seconds)
        self.timer_bar.value = timer.progress(self.timer, self.timer_settings) / 100
        self.timer_sessions.value = f"Completed sessions: {self.timer.completed_sessions}"
        self.timer_toggle.text = "Pause" if self.timer.is_active else "Start"

    async def run_timer(self) -> None:
        while True:
            await asyncio.sleep(1)
            if not self.timer.is_active:
                continue
            previous_mode = self.timer.mode
            self.timer = timer.tick(self.timer, self.timer_settings)
            if self.timer.mode != previous_mode and self.timer_settings.notify_on_finish:
                self.notify(Notice(f"{timer.mode_label(previous_mode)} finished", timer.mode_label(self.timer.mode)))
            self.render_timer()
            self.page.update()

    def handle_timer_toggle(self, _: ft.ControlEvent) -> None:
        self.timer = timer.toggle(self.timer)
        self.render_timer()
        self.page.update()

    def handle_timer_reset(self, _: ft.ControlEvent) -> None:
        self.timer = timer.reset(self.timer, self.timer_settings)
        self.render_timer()
        self.page.update()

    def handle_timer_skip(self, _: ft.ControlEvent) -> None:
        self.timer = timer.skip(self.timer, self.timer_settings)
        self.render_timer()
        self.page.update()

    # Calendar

    def set_tasks(self, tasks: tuple) -> None:
        self.tasks = tasks
        self.records.save_tasks(tasks)
        self.refresh_all()

    def shift_month(self, delta: int) -> None:
        year, month = self.shown_month
        month += delta
        if month < 1:
            year, month = year - 1, 12
        elif month > 12:
            year, month = year + 1, 1
        self.shown_month = (year, month)
        self.refresh_all()

    def select_date(self, day: date) -> None:
        self.selected_date = day
        self.refresh_all()

    def calendar_view(self) -> ft.Control:
        year, month = self.shown_month
        task_dates = {t.date for t in self.tasks}

        grid_rows = [ft.Row([ft.Container(ft.Text(d, weight=ft.FontWeight.BOLD), width=44) for d in WEEKDAYS])]
        for week in schedule.month_grid(year, month):
            cells = []
            for day in week:
                if day is None:
                    cells.append(ft.Container(width=44))
                    continue
                current = date(year, month, day)
                cells.append(
                    ft.Container(
                        ft.Text(str(day), weight=ft.FontWeight.BOLD if current.isoformat() in task_dates else None),
                        width=44,
                        padding=6,
                        border_radius=6,
                        bgcolor=ft.Colors.BLUE_100 if current == self.selected_date else None,
                        on_click=lambda _, d=current: self.select_date(d),
                    )
                )
            grid_rows.append(ft.Row(cells))

        editing = next((t for t in self.tasks if t.id == self.editing_task_id), None)
        title = ft.TextField(label="Title", value=editing.title if editing else "", width=300)
        description = ft.TextField(label="Description", value=editing.description if editing else "", width=300)
        time_field = ft.TextField(
            label="Time (HH:MM)", value=editing.time if editing else schedule.DEFAULT_TIME, width=140
        )
        duration = ft.TextField(
            label="Duration (min)", value=str(editing.duration if editing else schedule.DEFAULT_DURATION), width=140
        )
        priority = ft.Dropdown(
            label="Priority",
            options=[ft.dropdown.Option(p) for p in schedule.PRIORITIES],
            value=editing.priority if editing else "medium",
            width=140,
        )
        error = ft.Text(color=ft.Colors.RED)

        def submit_task(_: ft.ControlEvent) -> None:
            minutes = parse_number(duration.value)
            fields = {
                "title": (title.value or "").strip(),
                "description": description.value or "",
                "time": time_field.value or "",
                "priority": priority.value or "medium",
            }
            try:
                if editing is None:
                    task = schedule.new_task(
                        fields["title"],
                        self.selected_date.isoformat(),
                        fields["time"],
                        description=fields["description"],
                        duration=int(minutes) if minutes else None,
                        priority=fields["priority"],
                    )
                    self.set_tasks(schedule.add_task(self.tasks, task))
                    self.notify(Notice("Task added", f"{task.title} has been scheduled for {task.date}"))
                else:
                    tasks = schedule.update_task(
                        self.tasks, editing.id, duration=int(minutes) if minutes else 0, **fields
                    )
                    self.editing_task_id = None
                    self.set_tasks(tasks)
                    self.notify(Notice("Task updated", f"{fields['title']} has been updated"))
            except schedule.TaskValidationError as exc:
                error.value = str(exc)
                self.page.update()

        def edit_task(task_id: str | None) -> None:
            self.editing_task_id = task_id
            self.refresh_all()

        day_tasks = [
            ft.Row(
                [
                    ft.Checkbox(
                        label=f"{t.time} {t.title} ({t.duration} min)",
                        value=t.completed,
                        on_change=lambda _, tid=t.id: self.set_tasks(schedule.toggle_completion(self.tasks, tid)),
                    ),
                    ft.Container(width=10, height=10, border_radius=5, bgcolor=PRIORITY_COLORS.get(t.priority)),
                    ft.IconButton(icon=ft.Icons.EDIT, on_click=lambda _, tid=t.id: edit_task(tid)),
                    ft.IconButton(
                        icon=ft.Icons.DELETE,
                        on_click=lambda _, tid=t.id: self.set_tasks(schedule.delete_task(self.tasks, tid)),
                    ),
                ]
            )
            for t in schedule.tasks_for_date(self.tasks, self.selected_date)
        ] or [ft.Text("No tasks for this day")]

        form_buttons = [ft.ElevatedButton("Update Task" if editing else "Add Task", on_click=submit_task)]
        if editing:
            form_buttons.append(ft.OutlinedButton("Cancel", on_click=lambda _: edit_task(None)))

        return ft.Column(
            [
                ft.Row(
                    [
                        ft.IconButton(icon=ft.Icons.CHEVRON_LEFT, on_click=lambda _: self.shift_month(-1)),
                        ft.Text(date(year, month, 1).strftime("%B %Y"), size=20, weight=ft.FontWeight.BOLD),
                        ft.IconButton(icon=ft.Icons.CHEVRON_RIGHT, on_click=lambda _: self.shift_month(1)),
                    ]
                ),
                *grid_rows,
                ft.Divider(),
                ft.Text(f"Tasks on {self.selected_date.isoformat()}", size=18, weight=ft.FontWeight.BOLD),
                *day_tasks,
                ft.Divider(),
                ft.Text(f"Edit task ({editing.date})" if editing else "New task", weight=ft.FontWeight.BOLD),
                title,
                description,
                ft.Row([time_field, duration, priority]),
                ft.Row(form_buttons),
                error,
            ]
        )

    # Semester

    def edit_semester(self, semester, rerender: bool = False) -> None:
        self.semester = semester
        if rerender:
            self.refresh_all()

    def relink_year(self) -> None:
        relinked = edits.relink_semester(self.year, self.semester)
        if relinked is not self.year:
            self.year = recompute_year(relinked)

    def calculate_semester(self, _: ft.ControlEvent) -> None:
        self.semester = recompute_semester(self.semester)
        logger.info("Recomputed %r: %s", self.semester.name, format_average(self.semester.average))
        if isinstance(self.semester.average, Complete):
            self.semester = self.records.save_semester(self.semester)
        self.relink_year()
        self.notify(calculation_notice("Semester", self.semester.average))
        self.refresh_all()

    def save_semester(self, _: ft.ControlEvent) -> None:
        self.semester = self.records.save_semester(self.semester)
        self.relink_year()
        self.notify(Notice("Data saved", "Your semester data has been saved locally"))
        self.refresh_all()

    def load_semester(self, _: ft.ControlEvent) -> None:
        loaded = self.records.load_semester()
        if loaded is None:
            self.notify(Notice("No saved data", "No previously saved data was found", is_error=True))
            return
        self.semester = loaded
        self.relink_year()
        stamp = self.records.last_calculation()
        self.notify(Notice("Data loaded", f"Semester data from {stamp:%Y-%m-%d} has been restored" if stamp else "Semester data restored"))
        self.refresh_all()

    def clear_semester(self, _: ft.ControlEvent) -> None:
        self.records.clear_semester()
        self.semester = recompute_semester(default_semester())
        self.relink_year()
        self.notify(Notice("Data cleared", "All semester data has been reset"))
        self.refresh_all()

    def module_row(self, unit_id: str, module) -> ft.Control:
        def score_field(label: str, component: str, value: float | None, enabled: bool = True) -> ft.TextField:
            return ft.TextField(
                label=label,
                value=_number_text(value),
                width=90,
                disabled=not enabled,
                keyboard_type=ft.KeyboardType.NUMBER,
                on_change=lambda e: self.edit_semester(
                    edits.set_score(self.semester, unit_id, module.id, component, parse_number(e.control.value))
                ),
            )

        return ft.Row(
            [
                ft.TextField(
                    label="Module",
                    value=module.name,
                    width=220,
                    on_change=lambda e: self.edit_semester(
                        edits.update_module(self.semester, unit_id, module.id, name=e.control.value)
                    ),
                ),
                ft.TextField(
                    label="Coef",
                    value=_number_text(module.coefficient),
                    width=70,
                    on_change=lambda e: self.edit_semester(
                        edits.update_module(
                            self.semester, unit_id, module.id, coefficient=parse_coefficient(e.control.value)
                        )
                    ),
                ),
                ft.Switch(
                    label="TD",
                    value=module.has_practical,
                    on_change=lambda e: self.edit_semester(
                        edits.update_module(self.semester, unit_id, module.id, has_practical=e.control.value), True
                    ),
                ),
                ft.Switch(
                    label="TP",
                    value=module.has_lab,
                    on_change=lambda e: self.edit_semester(
                        edits.update_module(self.semester, unit_id, module.id, has_lab=e.control.value), True
                    ),
                ),
                score_field("EMD", "exam", module.scores.exam),
                score_field("TD", "practical", module.scores.practical, module.has_practical),
                score_field("TP", "lab", module.scores.lab, module.has_lab),
                _average_label(module.average),
                ft.IconButton(
                    icon=ft.Icons.DELETE,
                    on_click=lambda _: self.edit_semester(edits.remove_module(self.semester, unit_id, module.id), True),
                ),
            ],
            wrap=True,
        )

    def semester_view(self) -> ft.Control:
        summary = summarize_semester(self.semester)
        unit_cards = []
        for unit in self.semester.units:
            unit_cards.append(
                ft.Card(
                    content=ft.Container(
                        padding=12,
                        content=ft.Column(
                            [
                                ft.Row(
                                    [
                                        ft.TextField(
                                            label="Unit",
                                            value=unit.name,
                                            width=220,
                                            on_change=lambda e, uid=unit.id: self.edit_semester(
                                                edits.update_unit(self.semester, uid, name=e.control.value)
                                            ),
                                        ),
                                        ft.TextField(
                                            label="Coef",
                                            value=_number_text(unit.coefficient),
                                            width=70,
                                            on_change=lambda e, uid=unit.id: self.edit_semester(
                                                edits.update_unit(
                                                    self.semester, uid, coefficient=parse_coefficient(e.control.value)
                                                )
                                            ),
                                        ),
                                        _average_label(unit.average),
                                        ft.IconButton(
                                            icon=ft.Icons.DELETE,
                                            on_click=lambda _, uid=unit.id: self.edit_semester(
                                                edits.remove_unit(self.semester, uid), True
                                            ),
                                        ),
                                    ]
                                ),
                                *[self.module_row(unit.id, m) for m in unit.modules],
                                ft.TextButton(
                                    "Add Module",
                                    on_click=lambda _, uid=unit.id: self.edit_semester(
                                        edits.add_module(self.semester, uid), True
                                    ),
                                ),
                            ]
                        ),
                    )
                )
            )

        return ft.Column(
            [
                ft.TextField(
                    label="Semester",
                    value=self.semester.name,
                    width=300,
                    on_change=lambda e: self.edit_semester(edits.rename(self.semester, e.control.value)),
                ),
                ft.Text(
                    f"Total coefficient: {summary.total_coefficient:g} • "
                    f"Modules: {summary.completed_modules}/{summary.total_modules} complete"
                ),
                *unit_cards,
                ft.Row(
                    [
                        ft.OutlinedButton("Add Unit", on_click=lambda _: self.edit_semester(edits.add_unit(self.semester), True)),
                        ft.ElevatedButton("Calculate", on_click=self.calculate_semester),
                        ft.OutlinedButton("Save", on_click=self.save_semester),
                        ft.OutlinedButton("Load", on_click=self.load_semester),
                        ft.OutlinedButton("Clear", on_click=self.clear_semester),
                    ]
                ),
                ft.Row([ft.Text("Semester average:", size=18), _average_label(self.semester.average)]),
            ]
        )

    # Year

    def edit_year(self, year, rerender: bool = False) -> None:
        self.year = year
        if rerender:
            self.refresh_all()

    def calculate_year(self, _: ft.ControlEvent) -> None:
        self.year = recompute_year(self.year)
        self.notify(calculation_notice("Annual", self.year.average))
        self.refresh_all()

    def save_year(self, _: ft.ControlEvent) -> None:
        self.year = self.records.save_year(self.year)
        self.notify(Notice("Data saved", "Your yearly data has been saved locally"))
        self.refresh_all()

    def load_year(self, _: ft.ControlEvent) -> None:
        loaded = self.records.load_year()
        if loaded is None:
            self.notify(Notice("No saved data", "No previously saved yearly data was found", is_error=True))
            return
        self.year = loaded
        self.notify(Notice("Data loaded", f"Academic year {loaded.name} has been restored"))
        self.refresh_all()

    def year_view(self) -> ft.Control:
        status = year_status(self.year)
        rows = []
        for entry in self.year.semesters:
            linked = entry.semester is not None
            rows.append(
                ft.Row(
                    [
                        ft.TextField(
                            label="Semester",
                            value=entry.name,
                            width=200,
                            on_change=lambda e, rid=entry.id: self.edit_year(
                                edits.update_semester_result(self.year, rid, name=e.control.value)
                            ),
                        ),
                        ft.TextField(
                            label="Average",
                            value=_number_text(entry.entered_average),
                            width=100,
                            disabled=linked,
                            on_change=lambda e, rid=entry.id: self.edit_year(
                                edits.update_semester_result(
                                    self.year, rid, entered_average=parse_number(e.control.value)
                                )
                            ),
                        ),
                        ft.TextField(
                            label="Coef",
                            value=_number_text(entry.coefficient),
                            width=70,
                            on_change=lambda e, rid=entry.id: self.edit_year(
                                edits.update_semester_result(
                                    self.year, rid, coefficient=parse_coefficient(e.control.value)
                                )
                            ),
                        ),
                        ft.TextButton(
                            "Unlink" if linked else "Use current semester",
                            on_click=lambda _, rid=entry.id, was_linked=linked: self.edit_year(
                                edits.update_semester_result(
                                    self.year, rid, semester=None if was_linked else self.semester
                                ),
                                True,
                            ),
                        ),
                        ft.Text(
                            f"Linked to {entry.semester.name}" if linked else "Entered average",
                            italic=True,
                            color=ft.Colors.GREY_600,
                        ),
                        _average_label(entry.average),
                        ft.IconButton(
                            icon=ft.Icons.DELETE,
                            on_click=lambda _, rid=entry.id: self.edit_year(
                                edits.remove_semester_result(self.year, rid), True
                            ),
                        ),
                    ],
                    wrap=True,
                )
            )

        return ft.Column(
            [
                ft.TextField(
                    label="Academic Year",
                    value=self.year.name,
                    hint_text="2025-2026",
                    width=300,
                    on_change=lambda e: self.edit_year(edits.rename(self.year, e.control.value)),
                ),
                *rows,
                ft.Row(
                    [
                        ft.OutlinedButton(
                            "Add Semester", on_click=lambda _: self.edit_year(edits.add_semester_result(self.year), True)
                        ),
                        ft.ElevatedButton("Calculate", on_click=self.calculate_year),
                        ft.OutlinedButton("Save", on_click=self.save_year),
                        ft.OutlinedButton("Load", on_click=self.load_year),
                    ]
                ),
                ft.Row([ft.Text("Annual average:", size=18), _average_label(self.year.average)]),
                ft.Text(
                    status.value if status else "N/A",
                    size=20,
                    weight=ft.FontWeight.BOLD,
                    color=ft.Colors.GREEN_500 if status is Decision.ADMIS else ft.Colors.RED_500,
                ),
            ]
        )


def main(page: ft.Page) -> None:
    StudyDeskApp(page).run()
