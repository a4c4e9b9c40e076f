"""Persistent module/task tracking for generated stubs."""

from stubsmith.tracker.exceptions import (
    CorruptTaskStoreError,
    InvalidTaskTransitionError,
    TaskAlreadyDoneError,
    TaskNotFoundError,
    TrackedModuleNotFoundError,
    TrackerError,
)
from stubsmith.tracker.module_tracker import ModuleTaskTracker
from stubsmith.tracker.task_store import DEFAULT_TASKS_FILENAME, TaskStore

__all__ = [
    "CorruptTaskStoreError",
    "DEFAULT_TASKS_FILENAME",
    "InvalidTaskTransitionError",
    "ModuleTaskTracker",
    "TaskAlreadyDoneError",
    "TaskNotFoundError",
    "TaskStore",
    "TrackedModuleNotFoundError",
    "TrackerError",
]
