# src/todolist/tasks/task_api.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from ..core.context import OpContext
from .errors import InvalidTaskInputError
from .task_models import Task, TaskPriority, TaskStatus
from .task_query import (
    DateWindow,
    TaskFilter,
    TaskSort,
    filter_by_priority,
    intersect_tasks,
    sort_tasks,
)
from .task_service import TaskService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CreateTaskRequest:
    title: str
    description: str = ""
    priority: str = ""
    due_date: datetime | None = None


class TaskApi:
    """
    Surface consumed by shells (console, GUI, ...).

    Thin layer over TaskService plus the filter/intersect/sort pipeline.
    Every call either returns a full result or raises a TaskError.
    """

    def __init__(self, service: TaskService) -> None:
        self._service = service

    @property
    def service(self) -> TaskService:
        return self._service

    def create_task(self, req: CreateTaskRequest, *, ctx: OpContext | None = None) -> Task:
        priority: TaskPriority | None = None
        if req.priority:
            try:
                priority = TaskPriority.parse(req.priority)
            except InvalidTaskInputError:
                # Unknown priority on create keeps the default.
                logger.debug("Ignoring unknown priority on create: %r", req.priority)

        return self._service.create_task(
            req.title,
            req.description,
            priority=priority,
            due_date=req.due_date,
            ctx=ctx,
        )

    def get_task(self, task_id: str, *, ctx: OpContext | None = None) -> Task:
        return self._service.get_task(task_id, ctx=ctx)

    def get_all_tasks(self, *, ctx: OpContext | None = None) -> list[Task]:
        return self.get_filtered_and_sorted(
            TaskFilter(status="all"), TaskSort(field="created", order="desc"), ctx=ctx
        )

    def get_filtered_and_sorted(
        self,
        task_filter: TaskFilter,
        sort: TaskSort,
        *,
        ctx: OpContext | None = None,
    ) -> list[Task]:
        """
        1. base set by status (or everything)
        2. narrow by priority
        3. intersect with the date-window set (window order wins)
        4. sort
        """
        # Unknown status/date values mean "no filter"; an unknown priority matches nothing.
        status = task_filter.status_value()
        priority = task_filter.priority_value()
        window = task_filter.date_window()

        if status is None:
            tasks = self._service.get_all_tasks(ctx=ctx)
        else:
            tasks = self._service.get_tasks_by_status(status, ctx=ctx)

        if priority is not None:
            tasks = filter_by_priority(tasks, priority)

        if window == DateWindow.TODAY:
            tasks = intersect_tasks(tasks, self._service.get_today_tasks(ctx=ctx))
        elif window == DateWindow.WEEK:
            tasks = intersect_tasks(tasks, self._service.get_week_tasks(ctx=ctx))
        elif window == DateWindow.OVERDUE:
            tasks = intersect_tasks(tasks, self._service.get_overdue_tasks(ctx=ctx))

        return sort_tasks(tasks, sort)

    def update_task(
        self, task_id: str, title: str, description: str, *, ctx: OpContext | None = None
    ) -> Task:
        return self._service.update_task(task_id, title, description, ctx=ctx)

    def toggle_status(self, task_id: str, *, ctx: OpContext | None = None) -> Task:
        task = self._service.get_task(task_id, ctx=ctx)
        if task.status == TaskStatus.ACTIVE:
            return self._service.mark_complete(task_id, ctx=ctx)
        return self._service.mark_active(task_id, ctx=ctx)

    def set_priority(
        self, task_id: str, priority: str | TaskPriority, *, ctx: OpContext | None = None
    ) -> Task:
        return self._service.set_priority(task_id, TaskPriority.parse(priority), ctx=ctx)

    def set_due_date(
        self, task_id: str, due_date: datetime | None, *, ctx: OpContext | None = None
    ) -> Task:
        return self._service.set_due_date(task_id, due_date, ctx=ctx)

    def delete_task(self, task_id: str, *, ctx: OpContext | None = None) -> None:
        self._service.delete_task(task_id, ctx=ctx)
