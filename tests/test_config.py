# tests/test_config.py

from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from todolist.config import Settings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    # No stray .env from the working tree, no inherited TODOLIST_* values.
    monkeypatch.chdir(tmp_path)
    for name in (
        "TODOLIST_APP_NAME",
        "TODOLIST_LOG_LEVEL",
        "TODOLIST_DATABASE_URL",
        "DATABASE_URL",
        "TODOLIST_DATA_DIR",
        "TODOLIST_TASKS_FILE",
        "TODOLIST_LOG_DIR",
        "TODOLIST_DB_TIMEOUT",
        "TODOLIST_CONSOLE_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.app_name == "todolist"
    assert s.database_url == ""
    assert s.data_dir == Path.home() / ".todolist"
    assert s.log_dir == s.data_dir
    assert s.tasks_file_name == "tasks.json"
    assert s.db_timeout_seconds == 30.0
    assert s.console_enabled is True


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TODOLIST_DATA_DIR", str(tmp_path / "d"))
    monkeypatch.setenv("TODOLIST_DATABASE_URL", "sqlite:///x.db")
    monkeypatch.setenv("TODOLIST_DB_TIMEOUT", "not-a-number")
    monkeypatch.setenv("TODOLIST_CONSOLE_ENABLED", "off")

    s = Settings.from_env()
    assert s.data_dir == tmp_path / "d"
    assert s.log_dir == tmp_path / "d"
    assert s.database_url == "sqlite:///x.db"
    assert s.db_timeout_seconds == 30.0
    assert s.console_enabled is False


def test_plain_database_url_is_accepted(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite:///fallback.db")
    assert Settings.from_env().database_url == "sqlite:///fallback.db"


def test_dotenv_file_is_loaded(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    # set-then-delete so monkeypatch restores the variable load_dotenv writes
    monkeypatch.setenv("TODOLIST_APP_NAME", "placeholder")
    monkeypatch.delenv("TODOLIST_APP_NAME")

    (tmp_path / ".env").write_text("TODOLIST_APP_NAME=from-dotenv\n", "utf-8")
    assert Settings.from_env().app_name == "from-dotenv"


def test_package_metadata_points_at_readme() -> None:
    root = Path(__file__).resolve().parents[1]
    meta = tomllib.loads((root / "pyproject.toml").read_text("utf-8"))["project"]
    assert meta["readme"] == "README.md"
    assert (root / meta["readme"]).is_file()
    assert "python-dotenv" in meta["dependencies"][0]
