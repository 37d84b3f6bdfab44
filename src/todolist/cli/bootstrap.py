# src/todolist/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- opens the task repository through the backend fallback chain,
- wires repository -> TaskService -> TaskApi into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..storage.factory import open_task_repo
from ..tasks.task_api import TaskApi
from ..tasks.task_service import Clock, TaskService

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None, clock: Clock | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    repo = open_task_repo(settings)
    service = TaskService(repo, clock=clock)
    state = AppState(
        settings=settings,
        repo=repo,
        service=service,
        api=TaskApi(service),
    )
    logger.info("Task backend selected: %s", state.backend_name)
    return state


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.repo.close()
    except Exception:
        logger.exception("Failed to close task repository.")
