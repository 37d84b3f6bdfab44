# src/todolist/storage/sqlite_repo.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from ..core.context import OpContext, check_ctx
from ..tasks.errors import (
    StorageIOError,
    StorageUnavailableError,
    StorageWriteError,
    TaskError,
    TaskNotFoundError,
)
from ..tasks.task_models import Task, TaskPriority, TaskStatus, ensure_aware
from .rwlock import RWLock

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MICROSECOND = timedelta(microseconds=1)

# Progress handler granularity (SQLite VM instructions between ctx checks).
_PROGRESS_STEPS = 1000

_COLUMNS = "id, title, description, status, priority, due_date, created_at, updated_at"


def _to_micros(value: datetime) -> int:
    # Naive values are local time, as everywhere else in the model.
    return (ensure_aware(value) - _EPOCH) // _MICROSECOND


def _from_micros(value: int) -> datetime:
    return _EPOCH + timedelta(microseconds=int(value))


def resolve_sqlite_path(database: str | Path) -> Path:
    """
    Accept a bare path or a sqlite URL:
    - sqlite:///relative/tasks.db
    - sqlite:////absolute/tasks.db

    Any other scheme (postgres://, mysql://, ...) is reported as unavailable so
    the backend factory can fall back to the next tier.
    """
    if isinstance(database, Path):
        return database.expanduser()

    raw = str(database).strip()
    if not raw:
        raise StorageUnavailableError("empty database URL")

    if "://" not in raw:
        return Path(raw).expanduser()

    scheme, _, rest = raw.partition("://")
    if scheme.lower() not in ("sqlite", "sqlite3"):
        raise StorageUnavailableError(f"unsupported database URL scheme: {scheme}")

    path = rest[1:] if rest.startswith("/") else rest
    path = path.split("?", 1)[0]
    if not path or path == ":memory:":
        raise StorageUnavailableError("sqlite URL must point to a database file")
    return Path(path).expanduser()


class SqliteTaskRepository:
    """
    SQLite task repository.

    Schema setup is idempotent (CREATE ... IF NOT EXISTS) and runs once at
    construction; there are no migrations.

    Thread-safety:
    - each call opens its own SQLite connection
    - an instance-level RWLock gives the same single-writer / many-reader
      discipline as the in-memory backends

    Cancellation:
    - connect timeout is bounded by the ctx deadline
    - a progress handler aborts running statements once ctx is cancelled/expired
    """

    backend_name = "sqlite"

    def __init__(self, database: str | Path, *, timeout: float = 30.0) -> None:
        self._db_path = resolve_sqlite_path(database)
        self._timeout = float(timeout)
        self._lock = RWLock()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._ensure_schema()
            total = self.count()
        except (OSError, sqlite3.Error, TaskError) as exc:
            raise StorageUnavailableError(
                f"failed to open sqlite database {self._db_path}: {exc}"
            ) from exc
        logger.info("SqliteTaskRepository ready db=%s total=%s", self._db_path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    @property
    def path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self, ctx: OpContext | None = None) -> sqlite3.Connection:
        timeout = self._timeout
        remaining = ctx.remaining() if ctx is not None else None
        if remaining is not None:
            timeout = min(timeout, remaining)

        conn = sqlite3.connect(str(self._db_path), timeout=timeout)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        if ctx is not None:
            conn.set_progress_handler(lambda: 1 if ctx.done() else 0, _PROGRESS_STEPS)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    @staticmethod
    def _translate(exc: sqlite3.Error, ctx: OpContext | None, *, write: bool) -> TaskError:
        if ctx is not None:
            err = ctx.error()
            if err is not None:
                return err
        if write:
            return StorageWriteError(f"sqlite write failed: {exc}")
        return StorageIOError(f"sqlite read failed: {exc}")

    @contextlib.contextmanager
    def _session(self, ctx: OpContext | None, *, write: bool) -> Iterator[sqlite3.Connection]:
        check_ctx(ctx)
        guard = self._lock.write_locked() if write else self._lock.read_locked()
        with guard:
            # ctx may have expired while waiting for the lock.
            check_ctx(ctx)
            try:
                conn = self._get_conn(ctx)
            except sqlite3.Error as exc:
                raise self._translate(exc, ctx, write=write) from exc
            try:
                yield conn
                if write:
                    # Closing without commit discards the statement.
                    check_ctx(ctx)
                    conn.commit()
            except sqlite3.Error as exc:
                with contextlib.suppress(sqlite3.Error):
                    conn.rollback()
                raise self._translate(exc, ctx, write=write) from exc
            finally:
                conn.close()

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    status TEXT NOT NULL CHECK (status IN ('active', 'completed')),
                    priority TEXT NOT NULL CHECK (priority IN ('low', 'medium', 'high')),
                    due_date INTEGER,
                    created_at INTEGER NOT NULL,
                    updated_at INTEGER NOT NULL
                )
                """
            )
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_priority ON tasks(priority)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_due_date ON tasks(due_date)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=str(row["id"]),
            title=str(row["title"]),
            description=str(row["description"] or ""),
            status=TaskStatus(row["status"]),
            priority=TaskPriority(row["priority"]),
            due_date=_from_micros(row["due_date"]) if row["due_date"] is not None else None,
            created_at=_from_micros(row["created_at"]),
            updated_at=_from_micros(row["updated_at"]),
        )

    def _query_tasks(self, where: str, params: tuple[Any, ...], ctx: OpContext | None) -> list[Task]:
        sql = f"SELECT {_COLUMNS} FROM tasks {where} ORDER BY created_at DESC"
        with self._session(ctx, write=False) as conn:
            rows = conn.execute(sql, params).fetchall()
        return [self._row_to_task(r) for r in rows]

    # ---- public API ----

    def count(self, *, ctx: OpContext | None = None) -> int:
        with self._session(ctx, write=False) as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
        return int(n)

    def create(self, task: Task, *, ctx: OpContext | None = None) -> None:
        with self._session(ctx, write=True) as conn:
            conn.execute(
                f"INSERT INTO tasks ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    task.id,
                    task.title,
                    task.description,
                    task.status.value,
                    task.priority.value,
                    _to_micros(task.due_date) if task.due_date is not None else None,
                    _to_micros(task.created_at),
                    _to_micros(task.updated_at),
                ),
            )
        logger.debug("Task created id=%s backend=%s", task.id, self.backend_name)

    def get_by_id(self, task_id: str, *, ctx: OpContext | None = None) -> Task:
        with self._session(ctx, write=False) as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE id = ?",
                (task_id,),
            ).fetchone()
        if row is None:
            raise TaskNotFoundError(task_id)
        return self._row_to_task(row)

    def get_all(self, *, ctx: OpContext | None = None) -> list[Task]:
        return self._query_tasks("", (), ctx)

    def get_by_status(self, status: TaskStatus, *, ctx: OpContext | None = None) -> list[Task]:
        return self._query_tasks("WHERE status = ?", (status.value,), ctx)

    def get_by_priority(
        self, priority: TaskPriority, *, ctx: OpContext | None = None
    ) -> list[Task]:
        return self._query_tasks("WHERE priority = ?", (priority.value,), ctx)

    def get_by_date_range(
        self, start: datetime, end: datetime, *, ctx: OpContext | None = None
    ) -> list[Task]:
        return self._query_tasks(
            "WHERE created_at > ? AND created_at < ?",
            (_to_micros(start), _to_micros(end)),
            ctx,
        )

    def update(self, task: Task, *, ctx: OpContext | None = None) -> None:
        with self._session(ctx, write=True) as conn:
            cur = conn.execute(
                """
                UPDATE tasks
                SET title = ?, description = ?, status = ?, priority = ?,
                    due_date = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    task.title,
                    task.description,
                    task.status.value,
                    task.priority.value,
                    _to_micros(task.due_date) if task.due_date is not None else None,
                    _to_micros(task.updated_at),
                    task.id,
                ),
            )
            if cur.rowcount == 0:
                raise TaskNotFoundError(task.id)
        logger.debug("Task updated id=%s backend=%s", task.id, self.backend_name)

    def delete(self, task_id: str, *, ctx: OpContext | None = None) -> None:
        with self._session(ctx, write=True) as conn:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            if cur.rowcount == 0:
                raise TaskNotFoundError(task_id)
        logger.debug("Task deleted id=%s backend=%s", task_id, self.backend_name)
