# src/zap_tasks/errors.py

"""
Error taxonomy.

- SetupError: fatal, raised before any list is touched.
- ListNotFoundError: the list is skipped, the run continues.
- Everything else aborts the current list only.
"""

from __future__ import annotations


class ZapError(RuntimeError):
    """Base class for all errors raised by zap_tasks."""


class SetupError(ZapError):
    """Missing or invalid credentials, API key or client handle."""


class ListNotFoundError(ZapError):
    def __init__(self, title: str) -> None:
        super().__init__(f"task list not found: {title!r}")
        self.title = title


class TaskStoreError(ZapError):
    """A Google Tasks API call failed."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class MoveError(TaskStoreError):
    def __init__(self, *, task_id: str, task_title: str, list_title: str, previous: str | None, cause: str) -> None:
        where = "to top" if previous is None else f"after {previous}"
        super().__init__(
            "move_task",
            f"could not move task {task_title!r} ({task_id}) {where} in list {list_title!r}: {cause}",
        )
        self.task_id = task_id
        self.task_title = task_title
        self.list_title = list_title
        self.previous = previous


class SubtaskCreationError(TaskStoreError):
    def __init__(self, *, parent_id: str, title: str, cause: str) -> None:
        super().__init__(
            "insert_task",
            f"could not create subtask {title!r} under parent {parent_id}: {cause}",
        )
        self.parent_id = parent_id
        self.title = title


class InferenceError(ZapError):
    """The inference call failed or produced no text."""


class ResponseFormatError(ZapError):
    """The model output could not be used (bad JSON, wrong count, unknown ids)."""
