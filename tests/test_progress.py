"""Tests for progress helpers."""

import pytest

from stubsmith.models import Module, ModuleStatus, Task, TaskStatus
from stubsmith.tracker.progress import (
    compute_progress,
    count_by_status,
    derive_module_status,
    find_module,
    find_task,
    tasks_for_module,
)


@pytest.mark.parametrize(
    "implemented, total, expected",
    [(0, 0, 0), (0, 4, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (1, 2, 50), (5, 5, 100)],
)
def test_compute_progress(implemented, total, expected):
    assert compute_progress(implemented, total) == expected


@pytest.mark.parametrize(
    "implemented, total, expected",
    [
        (0, 3, ModuleStatus.STUBBED),
        (1, 3, ModuleStatus.IMPLEMENTING),
        (3, 3, ModuleStatus.COMPLETE),
        (0, 0, ModuleStatus.STUBBED),
    ],
)
def test_derive_module_status(implemented, total, expected):
    assert derive_module_status(implemented, total) == expected


def test_find_task():
    tasks = [Task(id="a"), Task(id="b")]
    assert find_task(tasks, "b") is tasks[1]
    assert find_task(tasks, "c") is None


def test_find_module_prefers_id_then_latest_name():
    modules = [
        Module(id="m1", name="auth"),
        Module(id="m2", name="auth"),
        Module(id="auth", name="other"),
    ]
    assert find_module(modules, "m1") is modules[0]
    assert find_module(modules, "auth") is modules[2]
    assert find_module(modules[:2], "auth") is modules[1]
    assert find_module(modules, "missing") is None


def test_tasks_for_module_and_counts():
    tasks = [
        Task(id="a", module_id="m1", status=TaskStatus.DONE),
        Task(id="b", module_id="m1"),
        Task(id="c", module_id="m2", status=TaskStatus.IN_PROGRESS),
    ]
    assert [t.id for t in tasks_for_module(tasks, "m1")] == ["a", "b"]
    assert count_by_status(tasks) == {"todo": 1, "in_progress": 1, "done": 1}
    assert count_by_status([]) == {"todo": 0, "in_progress": 0, "done": 0}
