# src/todolist/storage/file_repo.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

from ..core.context import OpContext, check_ctx
from ..tasks.errors import OperationCanceledError, StorageUnavailableError, StorageWriteError
from ..tasks.task_models import Task
from .memory_repo import MemoryTaskRepository

logger = logging.getLogger(__name__)

DEFAULT_TASKS_FILE = "tasks.json"


class FileTaskRepository(MemoryTaskRepository):
    """
    JSON snapshot task repository.

    The in-memory mapping is the read path; every create/update/delete rewrites
    the full snapshot:
    - serialize all tasks (created_at ascending)
    - write + fsync <file>.tmp
    - os.replace() it over the canonical file, then fsync the directory

    The rename is the only visibility point, so the canonical file is either the
    old snapshot or the new one. The in-memory mapping is swapped only after the
    rename succeeds; the write lock covers both.
    """

    backend_name = "file"

    def __init__(self, data_dir: str | Path, *, file_name: str = DEFAULT_TASKS_FILE) -> None:
        super().__init__()
        self._data_dir = Path(data_dir).expanduser()
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailableError(
                f"failed to create data directory {self._data_dir}: {exc}"
            ) from exc

        self._path = self._data_dir / file_name
        self._tmp_path = self._path.with_name(self._path.name + ".tmp")
        self._tasks = self._load()
        logger.info("FileTaskRepository ready path=%s total=%s", self._path, len(self._tasks))

    @property
    def path(self) -> Path:
        return self._path

    # ---- snapshot io ----

    def _load(self) -> dict[str, Task]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text("utf-8")
            if not raw.strip():
                return {}
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("snapshot must be a JSON list")
            tasks = [Task.from_dict(item) for item in data]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise StorageUnavailableError(f"failed to load tasks from {self._path}: {exc}") from exc
        return {t.id: t for t in tasks}

    def _write_temp(self, payload: str) -> None:
        with open(self._tmp_path, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())

    def _fsync_dir(self) -> None:
        # Persist the rename itself; not every platform can open a directory.
        with contextlib.suppress(OSError):
            fd = os.open(self._data_dir, os.O_RDONLY)
            try:
                os.fsync(fd)
            finally:
                os.close(fd)

    def _discard_temp(self) -> None:
        with contextlib.suppress(OSError):
            self._tmp_path.unlink(missing_ok=True)

    def _write_snapshot(self, tasks: dict[str, Task], ctx: OpContext | None) -> None:
        ordered = sorted(tasks.values(), key=lambda t: t.created_at)
        payload = json.dumps([t.to_dict() for t in ordered], ensure_ascii=False, indent=2)
        try:
            self._write_temp(payload)
            # Last chance to abort: after this the new snapshot is visible.
            check_ctx(ctx)
            os.replace(self._tmp_path, self._path)
            self._fsync_dir()
        except OperationCanceledError:
            self._discard_temp()
            raise
        except OSError as exc:
            self._discard_temp()
            raise StorageWriteError(f"failed to write snapshot {self._path}: {exc}") from exc

    def _commit(self, tasks: dict[str, Task], ctx: OpContext | None) -> None:
        check_ctx(ctx)
        self._write_snapshot(tasks, ctx)
        self._tasks = tasks
