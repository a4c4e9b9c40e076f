"""Exceptions for module/task tracking.

Note: ModuleNotFoundError is a builtin, so the module lookup failure is
TrackedModuleNotFoundError.
"""


class TrackerError(Exception):
    """Base exception for all tracking operations."""


class TaskNotFoundError(TrackerError):
    """Raised when no task has the requested id."""


class TrackedModuleNotFoundError(TrackerError):
    """Raised when no tracked module matches the requested id or name."""


class TaskAlreadyDoneError(TrackerError):
    """Raised when completing a task whose status is already done."""


class InvalidTaskTransitionError(TrackerError):
    """Raised when a status change is not allowed from the current status."""


class CorruptTaskStoreError(TrackerError):
    """Raised when the persisted document cannot be parsed."""
