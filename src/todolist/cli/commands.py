# src/todolist/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import datetime
from typing import cast

from ..core.state import AppState
from ..tasks.errors import InvalidTaskInputError, TaskError
from ..tasks.task_api import CreateTaskRequest
from ..tasks.task_models import Task, TaskStatus
from ..tasks.task_query import TaskFilter, TaskSort

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        TaskError from a handler is rendered as "kind: message".
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskError as exc:
            logger.debug("Command /%s failed: %s", name, exc)
            return f"{exc.kind}: {exc}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting / parsing helpers ----


def _fmt_ts(value: datetime) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M")


def format_task(task: Task, *, now: datetime | None = None) -> str:
    mark = "x" if task.status == TaskStatus.COMPLETED else " "
    extra = [task.priority.value]
    if task.due_date is not None:
        extra.append(f"due {_fmt_ts(task.due_date)}")
        if task.is_overdue(now):
            extra.append("OVERDUE")
    line = f"{task.id}  [{mark}] {task.title}  ({', '.join(extra)})"
    if task.description:
        line += f"\n      {task.description}"
    return line


def _split_title(args: list[str]) -> tuple[str, str]:
    """'buy milk | two bottles' -> ('buy milk', 'two bottles')."""
    title, _, description = " ".join(args).partition("|")
    return title.strip(), description.strip()


def parse_due_date(raw: str) -> datetime | None:
    """'none' clears; otherwise ISO-8601 (date or date+time, local time if no offset)."""
    if raw.strip().lower() in ("none", "-", "clear"):
        return None
    try:
        return datetime.fromisoformat(raw.strip())
    except ValueError:
        raise InvalidTaskInputError(f"bad date {raw!r}, expected YYYY-MM-DD[THH:MM]") from None


def _parse_list_args(args: list[str]) -> tuple[TaskFilter, TaskSort]:
    opts: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep:
            raise InvalidTaskInputError(f"expected key=value, got {arg!r}")
        opts[key.strip().lower()] = value.strip()

    unknown = set(opts) - {"status", "priority", "date", "sort", "order"}
    if unknown:
        raise InvalidTaskInputError(f"unknown list option(s): {', '.join(sorted(unknown))}")

    task_filter = TaskFilter(
        status=opts.get("status", "all"),
        priority=opts.get("priority", "all"),
        date=opts.get("date", ""),
    )
    sort = TaskSort(field=opts.get("sort", "created"), order=opts.get("order", "desc"))
    return task_filter, sort


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title> [| description]"""
    title, description = _split_title(args)
    task = state.api.create_task(CreateTaskRequest(title=title, description=description))
    return f"Created:\n{format_task(task)}"


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list                                 -> everything, newest first
    /list status=active priority=high     -> filters
    /list date=overdue sort=due_date order=asc
    """
    task_filter, sort = _parse_list_args(args)
    tasks = state.api.get_filtered_and_sorted(task_filter, sort)
    if not tasks:
        return "No tasks."
    lines = [f"Tasks ({len(tasks)}):"]
    lines.extend(format_task(t) for t in tasks)
    return "\n".join(lines)


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <id>"
    task = state.api.get_task(args[0])
    return (
        f"{format_task(task)}\n"
        f"  created: {_fmt_ts(task.created_at)}\n"
        f"  updated: {_fmt_ts(task.updated_at)}"
    )


def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /edit <id> <title> [| description]"
    title, description = _split_title(args[1:])
    task = state.api.update_task(args[0], title, description)
    return f"Updated:\n{format_task(task)}"


def cmd_toggle(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /toggle <id>"
    task = state.api.toggle_status(args[0])
    return f"Task {task.id} is now {task.status.value}."


def cmd_prio(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /prio <id> <low|medium|high>"
    task = state.api.set_priority(args[0], args[1])
    return f"Task {task.id} priority is now {task.priority.value}."


def cmd_due(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /due <id> <YYYY-MM-DD[THH:MM]|none>"
    task = state.api.set_due_date(args[0], parse_due_date(args[1]))
    if task.due_date is None:
        return f"Task {task.id} has no due date."
    return f"Task {task.id} is due {_fmt_ts(task.due_date)}."


def cmd_del(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    if not args:
        return "Usage: /del <id>"
    state.api.delete_task(args[0])
    if emit:
        emit(f"Deleted {args[0]}.")
    return f"Tasks left: {state.repo.count()}"


def cmd_backend(state: AppState, args: list[str]) -> str:
    return f"Backend: {state.backend_name}\n  Tasks: {state.repo.count()}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Create a task: /add <title> [| description].")
registry.register(
    "list",
    cmd_list,
    help_text=(
        "List tasks: /list [status=all|active|completed] [priority=all|low|medium|high] "
        "[date=today|week|overdue] [sort=created|priority|due_date] [order=asc|desc]."
    ),
    aliases=["ls"],
)
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register("edit", cmd_edit, help_text="Edit title/description: /edit <id> <title> [| desc].")
registry.register("toggle", cmd_toggle, help_text="Toggle active/completed: /toggle <id>.")
registry.register("prio", cmd_prio, help_text="Set priority: /prio <id> <low|medium|high>.")
registry.register("due", cmd_due, help_text="Set or clear due date: /due <id> <date|none>.")
registry.register("del", cmd_del, help_text="Delete a task: /del <id>.", aliases=["rm"])
registry.register("backend", cmd_backend, help_text="Show storage backend and task count.")
