# src/todolist/tasks/task_service.py

"""
Task operations service.

Validates input and runs single-task mutations as load -> mutate -> update
against the injected repository. The derived date queries (today / week /
overdue) are in-process filters over one get_all() scan.

Repository errors propagate unchanged; nothing here retries.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from ..core.context import OpContext
from ..core.ports import TaskRepo
from .errors import InvalidTaskInputError
from .task_models import Task, TaskPriority, TaskStatus, ensure_aware, new_task, utc_now

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _require_title(title: str) -> None:
    if not title or not title.strip():
        raise InvalidTaskInputError("task title cannot be empty")


def start_of_local_day(now: datetime) -> datetime:
    local = now.astimezone()
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


class TaskService:
    def __init__(self, repo: TaskRepo, *, clock: Clock | None = None) -> None:
        self._repo = repo
        self._clock: Clock = clock or utc_now

    @property
    def repo(self) -> TaskRepo:
        return self._repo

    def _now(self) -> datetime:
        return ensure_aware(self._clock())

    # ---- mutations ----

    def create_task(
        self,
        title: str,
        description: str,
        *,
        priority: TaskPriority | None = None,
        due_date: datetime | None = None,
        ctx: OpContext | None = None,
    ) -> Task:
        _require_title(title)

        task = new_task(title, description, now=self._now())
        # Applied before the single create() so the stored record is complete.
        if priority is not None:
            task.priority = priority
        if due_date is not None:
            task.due_date = ensure_aware(due_date)

        self._repo.create(task, ctx=ctx)
        logger.info("Task created id=%s priority=%s", task.id, task.priority.value)
        return task

    def update_task(
        self,
        task_id: str,
        title: str,
        description: str,
        *,
        ctx: OpContext | None = None,
    ) -> Task:
        task = self._repo.get_by_id(task_id, ctx=ctx)
        _require_title(title)
        task.update_details(title, description, now=self._now())
        self._repo.update(task, ctx=ctx)
        return task

    def mark_complete(self, task_id: str, *, ctx: OpContext | None = None) -> Task:
        task = self._repo.get_by_id(task_id, ctx=ctx)
        task.mark_complete(now=self._now())
        self._repo.update(task, ctx=ctx)
        return task

    def mark_active(self, task_id: str, *, ctx: OpContext | None = None) -> Task:
        task = self._repo.get_by_id(task_id, ctx=ctx)
        task.mark_active(now=self._now())
        self._repo.update(task, ctx=ctx)
        return task

    def set_priority(
        self, task_id: str, priority: TaskPriority, *, ctx: OpContext | None = None
    ) -> Task:
        task = self._repo.get_by_id(task_id, ctx=ctx)
        task.set_priority(priority, now=self._now())
        self._repo.update(task, ctx=ctx)
        return task

    def set_due_date(
        self, task_id: str, due_date: datetime | None, *, ctx: OpContext | None = None
    ) -> Task:
        """due_date=None clears the deadline."""
        task = self._repo.get_by_id(task_id, ctx=ctx)
        task.set_due_date(due_date, now=self._now())
        self._repo.update(task, ctx=ctx)
        return task

    def delete_task(self, task_id: str, *, ctx: OpContext | None = None) -> None:
        self._repo.delete(task_id, ctx=ctx)
        logger.info("Task deleted id=%s", task_id)

    # ---- reads ----

    def get_task(self, task_id: str, *, ctx: OpContext | None = None) -> Task:
        return self._repo.get_by_id(task_id, ctx=ctx)

    def get_all_tasks(self, *, ctx: OpContext | None = None) -> list[Task]:
        return self._repo.get_all(ctx=ctx)

    def get_tasks_by_status(
        self, status: TaskStatus, *, ctx: OpContext | None = None
    ) -> list[Task]:
        return self._repo.get_by_status(status, ctx=ctx)

    def get_tasks_by_priority(
        self, priority: TaskPriority, *, ctx: OpContext | None = None
    ) -> list[Task]:
        return self._repo.get_by_priority(priority, ctx=ctx)

    def get_overdue_tasks(self, *, ctx: OpContext | None = None) -> list[Task]:
        now = self._now()
        return [t for t in self._repo.get_all(ctx=ctx) if t.is_overdue(now)]

    def get_today_tasks(self, *, ctx: OpContext | None = None) -> list[Task]:
        """Tasks due in [local midnight, local midnight + 24h)."""
        start = start_of_local_day(self._now())
        end = start + timedelta(hours=24)
        return [
            t
            for t in self._repo.get_all(ctx=ctx)
            if t.due_date is not None and start <= t.due_date < end
        ]

    def get_week_tasks(self, *, ctx: OpContext | None = None) -> list[Task]:
        """Tasks due strictly within the next 7 days."""
        now = self._now()
        end = now + timedelta(days=7)
        return [
            t
            for t in self._repo.get_all(ctx=ctx)
            if t.due_date is not None and now < t.due_date < end
        ]
