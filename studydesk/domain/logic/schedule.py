from __future__ import annotations

import calendar
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Iterable

from studydesk.domain.logic.edits import new_id
from studydesk.domain.models.entities import CalendarTask

PRIORITIES = ("low", "medium", "high")
DEFAULT_TIME = "09:00"
DEFAULT_DURATION = 60
PREVIEW_LIMIT = 3


class TaskValidationError(ValueError):
    pass


def _validate(task: CalendarTask) -> CalendarTask:
    if not task.title.strip() or not task.date or not task.time:
        raise TaskValidationError("Please fill in all required fields")
    try:
        datetime.strptime(f"{task.date} {task.time}", "%Y-%m-%d %H:%M")
    except ValueError as exc:
        raise TaskValidationError(f"Invalid date or time: {task.date} {task.time}") from exc
    if task.priority not in PRIORITIES:
        raise TaskValidationError(f"Unsupported priority: {task.priority}")
    if task.duration <= 0:
        raise TaskValidationError("Duration must be greater than 0")
    return task


def new_task(
    title: str,
    date_value: str,
    time_value: str = DEFAULT_TIME,
    description: str = "",
    duration: int | None = None,
    priority: str = "medium",
) -> CalendarTask:
    return _validate(
        CalendarTask(
            id=new_id("task"),
            title=title.strip(),
            date=date_value,
            time=time_value,
            description=description or "",
            duration=duration or DEFAULT_DURATION,
            priority=priority or "medium",
        )
    )


def _find(tasks: tuple[CalendarTask, ...], task_id: str) -> int:
    for index, task in enumerate(tasks):
        if task.id == task_id:
            return index
    raise KeyError(task_id)


def add_task(tasks: tuple[CalendarTask, ...], task: CalendarTask) -> tuple[CalendarTask, ...]:
    return tasks + (_validate(task),)


def update_task(tasks: tuple[CalendarTask, ...], task_id: str, **changes: Any) -> tuple[CalendarTask, ...]:
    index = _find(tasks, task_id)
    updated = _validate(replace(tasks[index], **changes))
    return tasks[:index] + (updated,) + tasks[index + 1 :]


def delete_task(tasks: tuple[CalendarTask, ...], task_id: str) -> tuple[CalendarTask, ...]:
    index = _find(tasks, task_id)
    return tasks[:index] + tasks[index + 1 :]


def toggle_completion(tasks: tuple[CalendarTask, ...], task_id: str) -> tuple[CalendarTask, ...]:
    index = _find(tasks, task_id)
    task = tasks[index]
    return tasks[:index] + (replace(task, completed=not task.completed),) + tasks[index + 1 :]


def tasks_for_date(tasks: Iterable[CalendarTask], day: date) -> list[CalendarTask]:
    key = day.isoformat()
    return [t for t in tasks if t.date == key]


def todays_tasks(tasks: Iterable[CalendarTask], today: date) -> list[CalendarTask]:
    return tasks_for_date(tasks, today)[:PREVIEW_LIMIT]


def upcoming_tasks(tasks: Iterable[CalendarTask], today: date) -> list[CalendarTask]:
    key = today.isoformat()
    pending = [t for t in tasks if t.date >= key and not t.completed]
    pending.sort(key=lambda t: (t.date, t.time))
    return pending[:PREVIEW_LIMIT]


def days_until(task: CalendarTask, today: date) -> int:
    return (date.fromisoformat(task.date) - today).days


def month_grid(year: int, month: int) -> list[list[int | None]]:
    """Weeks of day numbers, Sunday first; days outside the month are None."""
    weeks = calendar.Calendar(firstweekday=calendar.SUNDAY).monthdayscalendar(year, month)
    return [[day or None for day in week] for week in weeks]
