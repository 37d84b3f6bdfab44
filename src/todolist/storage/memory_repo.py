# src/todolist/storage/memory_repo.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime

from ..core.context import OpContext
from ..tasks.errors import TaskNotFoundError
from ..tasks.task_models import Task, TaskPriority, TaskStatus, ensure_aware
from .rwlock import RWLock

logger = logging.getLogger(__name__)


def newest_first(tasks: Iterable[Task]) -> list[Task]:
    return sorted(tasks, key=lambda t: t.created_at, reverse=True)


class MemoryTaskRepository:
    """
    In-memory task repository.

    No durability: state is lost on process exit. Used as the last fallback
    when neither SQLite nor the file store can be opened.

    Thread-safety:
    - reads share the RWLock, writes hold it exclusively
    - tasks are copied on the way in and on the way out
    """

    backend_name = "memory"

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}
        self._lock = RWLock()

    def close(self) -> None:
        """No resources to release."""
        return

    # ---- write path ----

    def _commit(self, tasks: dict[str, Task], ctx: OpContext | None) -> None:
        """Install the new mapping. Called with the write lock held."""
        self._tasks = tasks

    def create(self, task: Task, *, ctx: OpContext | None = None) -> None:
        with self._lock.write_locked():
            pending = dict(self._tasks)
            pending[task.id] = replace(task)
            self._commit(pending, ctx)
        logger.debug("Task created id=%s backend=%s", task.id, self.backend_name)

    def update(self, task: Task, *, ctx: OpContext | None = None) -> None:
        with self._lock.write_locked():
            if task.id not in self._tasks:
                raise TaskNotFoundError(task.id)
            pending = dict(self._tasks)
            pending[task.id] = replace(task)
            self._commit(pending, ctx)
        logger.debug("Task updated id=%s backend=%s", task.id, self.backend_name)

    def delete(self, task_id: str, *, ctx: OpContext | None = None) -> None:
        with self._lock.write_locked():
            if task_id not in self._tasks:
                raise TaskNotFoundError(task_id)
            pending = dict(self._tasks)
            del pending[task_id]
            self._commit(pending, ctx)
        logger.debug("Task deleted id=%s backend=%s", task_id, self.backend_name)

    # ---- read path ----

    def _select(self, predicate: Callable[[Task], bool] | None = None) -> list[Task]:
        with self._lock.read_locked():
            found = [
                replace(t) for t in self._tasks.values() if predicate is None or predicate(t)
            ]
        return newest_first(found)

    def get_by_id(self, task_id: str, *, ctx: OpContext | None = None) -> Task:
        with self._lock.read_locked():
            task = self._tasks.get(task_id)
            if task is None:
                raise TaskNotFoundError(task_id)
            return replace(task)

    def get_all(self, *, ctx: OpContext | None = None) -> list[Task]:
        return self._select()

    def get_by_status(self, status: TaskStatus, *, ctx: OpContext | None = None) -> list[Task]:
        return self._select(lambda t: t.status == status)

    def get_by_priority(
        self, priority: TaskPriority, *, ctx: OpContext | None = None
    ) -> list[Task]:
        return self._select(lambda t: t.priority == priority)

    def get_by_date_range(
        self, start: datetime, end: datetime, *, ctx: OpContext | None = None
    ) -> list[Task]:
        start, end = ensure_aware(start), ensure_aware(end)
        return self._select(lambda t: start < t.created_at < end)

    def count(self, *, ctx: OpContext | None = None) -> int:
        with self._lock.read_locked():
            return len(self._tasks)
