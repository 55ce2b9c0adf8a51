# src/zap_tasks/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """Google Tasks status values."""

    NEEDS_ACTION = "needsAction"
    COMPLETED = "completed"

    @classmethod
    def from_api(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.NEEDS_ACTION
        try:
            return cls(raw)
        except ValueError:
            return cls.NEEDS_ACTION


@dataclass(slots=True)
class TaskList:
    id: str
    title: str

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> TaskList:
        return cls(id=str(item.get("id") or ""), title=str(item.get("title") or ""))


@dataclass(slots=True)
class Task:
    """
    A task as stored by the task-list service.

    parent == "" means top-level. position is the store's own opaque
    ordering key and is never compared with ranking positions.
    """

    id: str
    title: str
    status: TaskStatus = TaskStatus.NEEDS_ACTION
    due: str | None = None
    notes: str | None = None
    parent: str = ""
    position: str = ""
    completed: str | None = None

    @property
    def is_top_level(self) -> bool:
        return not self.parent

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> Task:
        return cls(
            id=str(item.get("id") or ""),
            title=str(item.get("title") or ""),
            status=TaskStatus.from_api(item.get("status")),
            due=item.get("due") or None,
            notes=item.get("notes") or None,
            parent=str(item.get("parent") or ""),
            position=str(item.get("position") or ""),
            completed=item.get("completed") or None,
        )

    def to_api(self) -> dict[str, Any]:
        """Request body for insert/update. Empty optional fields are omitted."""
        body: dict[str, Any] = {"title": self.title, "status": self.status.value}
        if self.id:
            body["id"] = self.id
        if self.due:
            body["due"] = self.due
        if self.notes:
            body["notes"] = self.notes
        if self.parent:
            body["parent"] = self.parent
        if self.completed:
            body["completed"] = self.completed
        return body


def new_task(title: str) -> Task:
    """A fresh task that has not been stored yet."""
    return Task(id="", title=title, status=TaskStatus.NEEDS_ACTION)


def top_level_tasks(tasks: list[Task]) -> list[Task]:
    return [t for t in tasks if t.is_top_level]


@dataclass(slots=True, frozen=True)
class PriorityRecord:
    """
    One ranking entry returned by the model.

    position is a 5-character zero-padded string ("00001" = highest), so
    plain string comparison gives rank order.
    """

    task_id: str
    priority: float
    explanation: str
    position: str


@dataclass(slots=True, frozen=True)
class SubtaskSuggestion:
    parent_task_id: str
    subtasks: list[str] = field(default_factory=list)
    rationale: str = ""
