# tests/test_factory.py

from __future__ import annotations

import logging
from pathlib import Path
from types import SimpleNamespace

import pytest

from todolist.storage.factory import open_task_repo
from todolist.storage.file_repo import FileTaskRepository
from todolist.storage.memory_repo import MemoryTaskRepository
from todolist.storage.sqlite_repo import SqliteTaskRepository


def test_database_url_selects_sqlite(settings: SimpleNamespace, tmp_path: Path) -> None:
    settings.database_url = f"sqlite:///{tmp_path}/tasks.sqlite3"
    repo = open_task_repo(settings)
    assert isinstance(repo, SqliteTaskRepository)
    assert repo.path == tmp_path / "tasks.sqlite3"


def test_no_database_url_selects_file_store(settings: SimpleNamespace) -> None:
    repo = open_task_repo(settings)
    assert isinstance(repo, FileTaskRepository)
    assert repo.path == settings.data_dir / "tasks.json"


def test_unreachable_database_falls_back_to_file(
    settings: SimpleNamespace, caplog: pytest.LogCaptureFixture
) -> None:
    settings.database_url = "postgres://user:pw@db.invalid:5432/todo"
    with caplog.at_level(logging.WARNING, logger="todolist.storage.factory"):
        repo = open_task_repo(settings)

    assert isinstance(repo, FileTaskRepository)
    assert "SQLite backend unavailable" in caplog.text


def test_unusable_data_dir_falls_back_to_memory(
    settings: SimpleNamespace, tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", "utf-8")
    settings.data_dir = blocker / "data"

    with caplog.at_level(logging.WARNING, logger="todolist.storage.factory"):
        repo = open_task_repo(settings)

    assert isinstance(repo, MemoryTaskRepository)
    assert not isinstance(repo, FileTaskRepository)
    assert "File backend unavailable" in caplog.text


def test_full_degradation_chain(settings: SimpleNamespace, tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", "utf-8")
    settings.database_url = "mysql://nowhere/todo"
    settings.data_dir = blocker / "data"

    repo = open_task_repo(settings)
    assert type(repo) is MemoryTaskRepository
