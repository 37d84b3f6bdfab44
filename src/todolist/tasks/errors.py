# src/todolist/tasks/errors.py

"""
Task error taxonomy.

Every error carries a stable `kind` string so shells can render "kind: message"
without matching on classes.
"""

from __future__ import annotations


class TaskError(Exception):
    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class TaskNotFoundError(TaskError, LookupError):
    kind = "not_found"

    def __init__(self, task_id: str) -> None:
        super().__init__(f"task with id {task_id} not found")
        self.task_id = task_id


class InvalidTaskInputError(TaskError, ValueError):
    kind = "invalid_input"


class StorageUnavailableError(TaskError):
    """Backend could not be constructed. Only the backend factory recovers from this."""

    kind = "storage_unavailable"


class StorageIOError(TaskError):
    kind = "io_failure"


class StorageWriteError(StorageIOError):
    kind = "write_failure"


class OperationCanceledError(TaskError):
    kind = "canceled"


class DeadlineExceededError(OperationCanceledError):
    kind = "deadline_exceeded"
