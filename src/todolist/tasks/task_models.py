# src/todolist/tasks/task_models.py

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from .errors import InvalidTaskInputError


class TaskStatus(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | TaskStatus) -> TaskStatus:
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise InvalidTaskInputError(f"unknown task status: {raw!r}") from None


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: str | TaskPriority) -> TaskPriority:
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise InvalidTaskInputError(f"unknown task priority: {raw!r}") from None

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    TaskPriority.LOW: 1,
    TaskPriority.MEDIUM: 2,
    TaskPriority.HIGH: 3,
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Naive datetimes are taken as local wall-clock time."""
    if value.tzinfo is None:
        return value.astimezone()
    return value


def generate_task_id() -> str:
    return secrets.token_hex(8)


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None
    created_at: datetime
    updated_at: datetime

    # ---- state transitions ----

    def touch(self, now: datetime | None = None) -> None:
        # updated_at never moves backwards, even if the wall clock does.
        ts = ensure_aware(now) if now is not None else utc_now()
        if ts < self.updated_at:
            ts = self.updated_at
        self.updated_at = ts

    def mark_complete(self, now: datetime | None = None) -> None:
        self.status = TaskStatus.COMPLETED
        self.touch(now)

    def mark_active(self, now: datetime | None = None) -> None:
        self.status = TaskStatus.ACTIVE
        self.touch(now)

    def set_priority(self, priority: TaskPriority, now: datetime | None = None) -> None:
        self.priority = priority
        self.touch(now)

    def set_due_date(self, due_date: datetime | None, now: datetime | None = None) -> None:
        self.due_date = ensure_aware(due_date) if due_date is not None else None
        self.touch(now)

    def update_details(self, title: str, description: str, now: datetime | None = None) -> None:
        self.title = title
        self.description = description
        self.touch(now)

    def is_overdue(self, now: datetime | None = None) -> bool:
        if self.due_date is None or self.status == TaskStatus.COMPLETED:
            return False
        ts = ensure_aware(now) if now is not None else utc_now()
        return self.due_date < ts

    # ---- snapshot wire shape ----

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
        }
        if self.due_date is not None:
            out["due_date"] = self.due_date.isoformat()
        out["created_at"] = self.created_at.isoformat()
        out["updated_at"] = self.updated_at.isoformat()
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        raw_due = data.get("due_date")
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            status=TaskStatus.parse(data.get("status") or TaskStatus.ACTIVE),
            priority=TaskPriority.parse(data.get("priority") or TaskPriority.MEDIUM),
            due_date=ensure_aware(datetime.fromisoformat(raw_due)) if raw_due else None,
            created_at=ensure_aware(datetime.fromisoformat(data["created_at"])),
            updated_at=ensure_aware(datetime.fromisoformat(data["updated_at"])),
        )


def new_task(title: str, description: str, *, now: datetime | None = None) -> Task:
    """Build a fresh active, medium-priority task with created_at == updated_at."""
    ts = ensure_aware(now) if now is not None else utc_now()
    return Task(
        id=generate_task_id(),
        title=title,
        description=description,
        status=TaskStatus.ACTIVE,
        priority=TaskPriority.MEDIUM,
        due_date=None,
        created_at=ts,
        updated_at=ts,
    )
