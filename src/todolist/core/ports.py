# src/todolist/core/ports.py

"""
Ports (interfaces) used by the task services.

Services depend on this Protocol instead of concrete backends, so the in-memory,
file and SQLite repositories stay swappable and tests can pass fakes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from ..tasks.task_models import Task, TaskPriority, TaskStatus
from .context import OpContext


class TaskRepo(Protocol):
    """
    Task storage contract.

    - bulk reads return tasks newest-created first
    - get_by_id / update / delete raise TaskNotFoundError for unknown ids
    - returned tasks are copies; mutate them and call update() to persist
    """

    def create(self, task: Task, *, ctx: OpContext | None = None) -> None: ...
    def get_by_id(self, task_id: str, *, ctx: OpContext | None = None) -> Task: ...
    def get_all(self, *, ctx: OpContext | None = None) -> list[Task]: ...
    def get_by_status(self, status: TaskStatus, *, ctx: OpContext | None = None) -> list[Task]: ...
    def get_by_priority(
        self, priority: TaskPriority, *, ctx: OpContext | None = None
    ) -> list[Task]: ...
    def get_by_date_range(
        self, start: datetime, end: datetime, *, ctx: OpContext | None = None
    ) -> list[Task]: ...
    def update(self, task: Task, *, ctx: OpContext | None = None) -> None: ...
    def delete(self, task_id: str, *, ctx: OpContext | None = None) -> None: ...
    def count(self, *, ctx: OpContext | None = None) -> int: ...
    def close(self) -> None: ...
