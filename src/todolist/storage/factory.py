# src/todolist/storage/factory.py

from __future__ import annotations

import logging

from ..core.ports import TaskRepo
from ..tasks.errors import StorageUnavailableError
from .file_repo import DEFAULT_TASKS_FILE, FileTaskRepository
from .memory_repo import MemoryTaskRepository
from .sqlite_repo import SqliteTaskRepository

logger = logging.getLogger(__name__)


def open_task_repo(settings) -> TaskRepo:
    """
    Pick the most durable backend that can be opened:

      database_url set -> SQLite
      otherwise        -> JSON file under data_dir
      last resort      -> in-memory

    Each failure is logged and degrades to the next tier; this never raises.
    """
    database_url = (getattr(settings, "database_url", "") or "").strip()
    if database_url:
        try:
            return SqliteTaskRepository(
                database_url,
                timeout=float(getattr(settings, "db_timeout_seconds", 30.0)),
            )
        except StorageUnavailableError as exc:
            logger.warning("SQLite backend unavailable, falling back to file store: %s", exc)

    data_dir = getattr(settings, "data_dir", None)
    if data_dir is not None:
        try:
            return FileTaskRepository(
                data_dir,
                file_name=getattr(settings, "tasks_file_name", DEFAULT_TASKS_FILE),
            )
        except StorageUnavailableError as exc:
            logger.warning("File backend unavailable, falling back to memory: %s", exc)

    logger.warning("Using in-memory task storage; tasks will not survive a restart.")
    return MemoryTaskRepository()
