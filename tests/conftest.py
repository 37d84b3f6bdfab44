# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from todolist.cli.bootstrap import create_initial_state
from todolist.core.ports import TaskRepo
from todolist.core.state import AppState
from todolist.storage.file_repo import FileTaskRepository
from todolist.storage.memory_repo import MemoryTaskRepository
from todolist.storage.sqlite_repo import SqliteTaskRepository
from todolist.tasks.task_api import TaskApi
from todolist.tasks.task_service import TaskService

from .fakes import FakeClock

# Local noon, mid-June: far from midnight and DST switches in any zone.
START = datetime(2026, 6, 10, 12, 0, 0).astimezone()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(START)


@pytest.fixture(params=["memory", "file", "sqlite"])
def repo(request: pytest.FixtureRequest, tmp_path: Path) -> Iterator[TaskRepo]:
    """Every backend must satisfy the same contract."""
    r: TaskRepo
    if request.param == "memory":
        r = MemoryTaskRepository()
    elif request.param == "file":
        r = FileTaskRepository(tmp_path / "data")
    else:
        r = SqliteTaskRepository(tmp_path / "tasks.sqlite3")
    yield r
    r.close()


@pytest.fixture()
def service(repo: TaskRepo, clock: FakeClock) -> TaskService:
    return TaskService(repo, clock=clock)


@pytest.fixture()
def api(service: TaskService) -> TaskApi:
    return TaskApi(service)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap code.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todolist-test",
        log_level="DEBUG",
        log_dir=tmp_path / "logs",
        database_url="",
        data_dir=tmp_path / "data",
        tasks_file_name="tasks.json",
        db_timeout_seconds=5.0,
        console_enabled=False,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FakeClock) -> AppState:
    """AppState wired through the real bootstrap (file backend under tmp_path)."""
    return create_initial_state(settings=settings, clock=clock)
