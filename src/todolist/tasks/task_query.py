# src/todolist/tasks/task_query.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .task_models import Task, TaskPriority, TaskStatus


class DateWindow(StrEnum):
    TODAY = "today"
    WEEK = "week"
    OVERDUE = "overdue"


class SortField(StrEnum):
    CREATED = "created"
    PRIORITY = "priority"
    DUE_DATE = "due_date"


_NO_FILTER = ("", "all")
_NO_WINDOW = ("", "all", "none")


@dataclass(slots=True, frozen=True)
class TaskFilter:
    status: str = "all"
    priority: str = "all"
    date: str = ""

    def status_value(self) -> TaskStatus | None:
        # Anything other than active/completed selects every task.
        raw = (self.status or "").strip().lower()
        if raw in _NO_FILTER:
            return None
        try:
            return TaskStatus(raw)
        except ValueError:
            return None

    def priority_value(self) -> TaskPriority | str | None:
        """Unknown priorities come back as the raw string, which no task matches."""
        raw = (self.priority or "").strip().lower()
        if raw in _NO_FILTER:
            return None
        try:
            return TaskPriority(raw)
        except ValueError:
            return raw

    def date_window(self) -> DateWindow | None:
        raw = (self.date or "").strip().lower()
        if raw in _NO_WINDOW:
            return None
        try:
            return DateWindow(raw)
        except ValueError:
            return None


@dataclass(slots=True, frozen=True)
class TaskSort:
    field: str = "created"
    order: str = "desc"

    def sort_field(self) -> SortField:
        # Unrecognized fields sort by creation time.
        try:
            return SortField((self.field or "").strip().lower())
        except ValueError:
            return SortField.CREATED

    @property
    def descending(self) -> bool:
        return (self.order or "").strip().lower() == "desc"


def filter_by_priority(tasks: Iterable[Task], priority: TaskPriority | str) -> list[Task]:
    return [t for t in tasks if t.priority == priority]


def intersect_tasks(working: Iterable[Task], window: Iterable[Task]) -> list[Task]:
    """
    Tasks present in both lists (matched by id).

    Result order and task instances come from `window`, not `working`.
    """
    keep = {t.id for t in working}
    return [t for t in window if t.id in keep]


def sort_tasks(tasks: Iterable[Task], sort: TaskSort) -> list[Task]:
    """Stable sort; the requested order fully overrides the incoming one."""
    items = list(tasks)
    field = sort.sort_field()
    desc = sort.descending

    if field == SortField.PRIORITY:
        return sorted(items, key=lambda t: t.priority.rank, reverse=desc)

    if field == SortField.DUE_DATE:
        # Undated tasks go last in both directions.
        dated = [t for t in items if t.due_date is not None]
        undated = [t for t in items if t.due_date is None]
        dated.sort(key=lambda t: t.due_date, reverse=desc)
        return dated + undated

    return sorted(items, key=lambda t: t.created_at, reverse=desc)
