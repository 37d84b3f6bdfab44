# tests/test_task_api.py

from __future__ import annotations

from datetime import timedelta

import pytest

from todolist.tasks.errors import InvalidTaskInputError
from todolist.tasks.task_api import CreateTaskRequest, TaskApi
from todolist.tasks.task_models import TaskPriority, TaskStatus
from todolist.tasks.task_query import TaskFilter, TaskSort, intersect_tasks, sort_tasks
from todolist.tasks.task_service import TaskService

from .fakes import FakeClock, RecordingRepo


def _add(api: TaskApi, clock: FakeClock, title: str, **kwargs):
    clock.advance(minutes=1)
    return api.create_task(CreateTaskRequest(title=title, **kwargs))


@pytest.fixture()
def seeded(api: TaskApi, clock: FakeClock) -> TaskApi:
    """
    Creation order (oldest -> newest):
      low-overdue, high-week, medium-nodue, high-done-overdue, high-overdue
    """
    now = clock.now
    _add(api, clock, "low-overdue", priority="low", due_date=now - timedelta(days=2))
    _add(api, clock, "high-week", priority="high", due_date=now + timedelta(days=3))
    _add(api, clock, "medium-nodue")
    done = _add(
        api, clock, "high-done-overdue", priority="high", due_date=now - timedelta(days=1)
    )
    api.toggle_status(done.id)
    _add(api, clock, "high-overdue", priority="high", due_date=now - timedelta(hours=5))
    return api


def _titles(tasks) -> list[str]:
    return [t.title for t in tasks]


def test_default_listing_is_newest_first(seeded: TaskApi) -> None:
    assert _titles(seeded.get_all_tasks()) == [
        "high-overdue",
        "high-done-overdue",
        "medium-nodue",
        "high-week",
        "low-overdue",
    ]


def test_status_filter(seeded: TaskApi) -> None:
    completed = seeded.get_filtered_and_sorted(TaskFilter(status="completed"), TaskSort())
    assert _titles(completed) == ["high-done-overdue"]

    active = seeded.get_filtered_and_sorted(TaskFilter(status="active"), TaskSort())
    assert "high-done-overdue" not in _titles(active)
    assert len(active) == 4


def test_priority_filter_keeps_base_order(seeded: TaskApi) -> None:
    high = seeded.get_filtered_and_sorted(
        TaskFilter(priority="high"), TaskSort(field="created", order="desc")
    )
    assert _titles(high) == ["high-overdue", "high-done-overdue", "high-week"]
    assert all(t.priority == TaskPriority.HIGH for t in high)

    everything = seeded.get_filtered_and_sorted(TaskFilter(priority=""), TaskSort())
    assert len(everything) == 5


def test_active_and_overdue_intersection(seeded: TaskApi) -> None:
    result = seeded.get_filtered_and_sorted(
        TaskFilter(status="active", date="overdue"), TaskSort(field="created", order="asc")
    )
    # Active + overdue only; the completed overdue task and non-overdue active tasks are out.
    assert _titles(result) == ["low-overdue", "high-overdue"]


def test_week_window(seeded: TaskApi) -> None:
    result = seeded.get_filtered_and_sorted(TaskFilter(date="week"), TaskSort())
    assert _titles(result) == ["high-week"]


def test_sort_by_priority(seeded: TaskApi) -> None:
    desc = seeded.get_filtered_and_sorted(TaskFilter(), TaskSort(field="priority", order="desc"))
    assert [t.priority.rank for t in desc] == [3, 3, 3, 2, 1]

    asc = seeded.get_filtered_and_sorted(TaskFilter(), TaskSort(field="priority", order="asc"))
    assert [t.priority.rank for t in asc] == [1, 2, 3, 3, 3]


@pytest.mark.parametrize("order", ["asc", "desc"])
def test_sort_by_due_date_puts_undated_last(seeded: TaskApi, order: str) -> None:
    result = seeded.get_filtered_and_sorted(TaskFilter(), TaskSort(field="due_date", order=order))
    assert result[-1].title == "medium-nodue"

    dated = _titles(result[:-1])
    expected = ["low-overdue", "high-done-overdue", "high-overdue", "high-week"]
    assert dated == (expected if order == "asc" else list(reversed(expected)))


def test_unknown_sort_field_falls_back_to_created(seeded: TaskApi) -> None:
    result = seeded.get_filtered_and_sorted(TaskFilter(), TaskSort(field="title", order="asc"))
    assert _titles(result)[0] == "low-overdue"
    assert _titles(result)[-1] == "high-overdue"


def test_unknown_status_and_date_values_do_not_filter(seeded: TaskApi) -> None:
    everything = _titles(seeded.get_all_tasks())

    by_status = seeded.get_filtered_and_sorted(TaskFilter(status="archived"), TaskSort())
    assert _titles(by_status) == everything

    by_date = seeded.get_filtered_and_sorted(TaskFilter(date="someday"), TaskSort())
    assert _titles(by_date) == everything


def test_unknown_priority_matches_nothing(seeded: TaskApi) -> None:
    assert seeded.get_filtered_and_sorted(TaskFilter(priority="urgent"), TaskSort()) == []


def test_unknown_status_lists_without_writing(clock: FakeClock) -> None:
    repo = RecordingRepo()
    api = TaskApi(TaskService(repo, clock=clock))
    api.create_task(CreateTaskRequest(title="x"))

    result = api.get_filtered_and_sorted(TaskFilter(status="bogus"), TaskSort())

    assert _titles(result) == ["x"]
    assert repo.writes == [("create", result[0].id)]


def test_create_ignores_unknown_priority(api: TaskApi) -> None:
    task = api.create_task(CreateTaskRequest(title="x", priority="urgent"))
    assert api.get_task(task.id).priority == TaskPriority.MEDIUM


def test_create_rejects_blank_title(api: TaskApi) -> None:
    with pytest.raises(InvalidTaskInputError):
        api.create_task(CreateTaskRequest(title="", description="x"))
    assert api.get_all_tasks() == []


def test_toggle_status_round_trip(api: TaskApi, clock: FakeClock) -> None:
    task = _add(api, clock, "flip")
    clock.advance(seconds=1)
    assert api.toggle_status(task.id).status == TaskStatus.COMPLETED
    clock.advance(seconds=1)
    assert api.toggle_status(task.id).status == TaskStatus.ACTIVE


def test_set_priority_parses_strings(api: TaskApi, clock: FakeClock) -> None:
    task = _add(api, clock, "p")
    assert api.set_priority(task.id, "HIGH").priority == TaskPriority.HIGH
    with pytest.raises(InvalidTaskInputError):
        api.set_priority(task.id, "urgent")


def test_intersection_follows_window_order(api: TaskApi, clock: FakeClock) -> None:
    a = _add(api, clock, "a")
    b = _add(api, clock, "b")
    c = _add(api, clock, "c")

    result = intersect_tasks([a, b, c], [c, a])
    assert _titles(result) == ["c", "a"]

    # Sorting afterwards overrides the window order.
    assert _titles(sort_tasks(result, TaskSort(field="created", order="asc"))) == ["a", "c"]
