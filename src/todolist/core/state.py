# src/todolist/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_api import TaskApi
from ..tasks.task_service import TaskService
from .ports import TaskRepo


@dataclass
class AppState:
    # Settings kept on the state for shells/commands that need paths or names.
    settings: Any

    repo: TaskRepo
    service: TaskService
    api: TaskApi

    @property
    def backend_name(self) -> str:
        return str(getattr(self.repo, "backend_name", type(self.repo).__name__))
