# src/zap_tasks/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the workflow.

The workflow depends on Protocols instead of concrete clients.
This keeps the Google Tasks / Gemini clients swappable and makes testing easier.
"""

from typing import Protocol

from ..tasks.task_models import Task, TaskList


class InferenceClient(Protocol):
    """Text generation: one prompt in, generated text out."""

    def generate(self, prompt: str) -> str: ...


class TaskStoreClient(Protocol):
    """
    Task-list service.

    move_task(previous=None) moves the task to the front of the list;
    otherwise the task is placed immediately after `previous`.
    """

    def list_task_lists(self) -> list[TaskList]: ...
    def get_task_list(self, list_id: str) -> TaskList: ...
    def list_tasks(self, list_id: str) -> list[Task]: ...
    def get_task(self, list_id: str, task_id: str) -> Task: ...
    def update_task(self, list_id: str, task: Task) -> Task: ...
    def move_task(self, list_id: str, task_id: str, previous: str | None = None) -> Task: ...
    def insert_task(self, list_id: str, task: Task, parent: str | None = None) -> Task: ...
