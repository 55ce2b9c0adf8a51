# src/zap_tasks/tasks/google_tasks.py

"""
Google Tasks API client (tasks v1 via googleapiclient discovery).

Every call goes through _execute(), which turns library/transport errors
into TaskStoreError naming the operation.
"""

from __future__ import annotations

import logging
from typing import Any

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..errors import SetupError, TaskStoreError
from .task_models import Task, TaskList, TaskStatus

logger = logging.getLogger(__name__)

_PAGE_SIZE = 100


def _describe(exc: Exception) -> str:
    if isinstance(exc, HttpError):
        status = getattr(exc.resp, "status", "?")
        reason = exc.reason if hasattr(exc, "reason") else str(exc)
        return f"HTTP {status}: {reason}"
    return f"{exc.__class__.__name__}: {exc}"


class GoogleTasksClient:
    """Thin wrapper over the discovery `tasks` service resource."""

    def __init__(self, service: Any) -> None:
        if service is None:
            raise SetupError("tasks service handle is missing")
        self._service = service

    @classmethod
    def from_credentials(cls, credentials: Any) -> GoogleTasksClient:
        try:
            service = build("tasks", "v1", credentials=credentials, cache_discovery=False)
        except (HttpError, GoogleAuthError, OSError) as e:
            raise SetupError(f"unable to create tasks service: {_describe(e)}") from e
        return cls(service)

    @staticmethod
    def _execute(operation: str, request: Any) -> dict[str, Any]:
        try:
            response = request.execute()
        except (HttpError, GoogleAuthError, httplib2.HttpLib2Error, OSError) as e:
            raise TaskStoreError(operation, _describe(e)) from e
        return response or {}

    def _paged(self, operation: str, make_request) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        page_token: str | None = None
        while True:
            response = self._execute(operation, make_request(page_token))
            items.extend(response.get("items", []) or [])
            page_token = response.get("nextPageToken")
            if not page_token:
                return items

    # ---- task lists ----

    def list_task_lists(self) -> list[TaskList]:
        items = self._paged(
            "list_task_lists",
            lambda token: self._service.tasklists().list(maxResults=_PAGE_SIZE, pageToken=token),
        )
        return [TaskList.from_api(item) for item in items]

    def get_task_list(self, list_id: str) -> TaskList:
        item = self._execute("get_task_list", self._service.tasklists().get(tasklist=list_id))
        return TaskList.from_api(item)

    # ---- tasks ----

    def list_tasks(self, list_id: str) -> list[Task]:
        items = self._paged(
            "list_tasks",
            lambda token: self._service.tasks().list(tasklist=list_id, maxResults=_PAGE_SIZE, pageToken=token),
        )
        logger.debug("list_tasks list=%s count=%d", list_id, len(items))
        return [Task.from_api(item) for item in items]

    def get_task(self, list_id: str, task_id: str) -> Task:
        item = self._execute("get_task", self._service.tasks().get(tasklist=list_id, task=task_id))
        return Task.from_api(item)

    def update_task(self, list_id: str, task: Task) -> Task:
        item = self._execute(
            "update_task",
            self._service.tasks().update(tasklist=list_id, task=task.id, body=task.to_api()),
        )
        return Task.from_api(item)

    def move_task(self, list_id: str, task_id: str, previous: str | None = None) -> Task:
        kwargs: dict[str, Any] = {"tasklist": list_id, "task": task_id}
        if previous:
            kwargs["previous"] = previous
        item = self._execute("move_task", self._service.tasks().move(**kwargs))
        return Task.from_api(item)

    def insert_task(self, list_id: str, task: Task, parent: str | None = None) -> Task:
        kwargs: dict[str, Any] = {"tasklist": list_id, "body": task.to_api()}
        if parent:
            kwargs["parent"] = parent
        item = self._execute("insert_task", self._service.tasks().insert(**kwargs))
        return Task.from_api(item)

    def mark_complete(self, list_id: str, task_id: str) -> Task:
        task = self.get_task(list_id, task_id)
        task.status = TaskStatus.COMPLETED
        return self.update_task(list_id, task)

    def mark_incomplete(self, list_id: str, task_id: str) -> Task:
        task = self.get_task(list_id, task_id)
        task.status = TaskStatus.NEEDS_ACTION
        task.completed = None
        return self.update_task(list_id, task)
