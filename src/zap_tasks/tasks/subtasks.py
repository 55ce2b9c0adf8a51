# src/zap_tasks/tasks/subtasks.py

from __future__ import annotations

"""
Subtask materializer.

Per list: Fetched -> Filtered (top-level vs child) -> Suggested ->
PerSuggestionExpanded -> Created | Aborted.

Any fetch, validation or insert failure aborts the whole call (fail-fast).
Nothing is rolled back; instead a title that already exists under the same
parent is skipped, so re-running after a partial failure does not create
duplicates.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from ..core.ports import InferenceClient, TaskStoreClient
from ..errors import SubtaskCreationError, TaskStoreError
from .prompts import build_decomposition_prompt
from .response_parser import parse_subtask_suggestions
from .task_models import SubtaskSuggestion, Task, TaskList, new_task, top_level_tasks

logger = logging.getLogger(__name__)

AUTO_NOTE_PREFIX = "Auto-generated subtask."


def subtask_note(rationale: str) -> str:
    rationale = (rationale or "").strip()
    if not rationale:
        return AUTO_NOTE_PREFIX
    return f"{AUTO_NOTE_PREFIX} Rationale: {rationale}"


def build_subtask(title: str, parent: Task, rationale: str) -> Task:
    """New child task of `parent`; the due date is copied verbatim when the parent has one."""
    task = new_task(title)
    task.parent = parent.id
    task.notes = subtask_note(rationale)
    if parent.due:
        task.due = parent.due
    return task


def _norm_title(title: str) -> str:
    return " ".join(title.lower().split())


@dataclass(slots=True)
class SubtaskResult:
    task_list: TaskList
    suggestions: list[SubtaskSuggestion] = field(default_factory=list)
    created: list[Task] = field(default_factory=list)
    skipped_titles: list[str] = field(default_factory=list)


class SubtaskMaterializer:
    def __init__(self, store: TaskStoreClient, llm: InferenceClient) -> None:
        self._store = store
        self._llm = llm

    def suggest(self, tasks: list[Task]) -> list[SubtaskSuggestion]:
        # The whole batch goes to the model; the count check uses the local top-level count.
        prompt = build_decomposition_prompt(tasks)
        logger.debug("Decomposition prompt for %d tasks:\n%s", len(tasks), prompt)
        raw = self._llm.generate(prompt)
        logger.debug("Decomposition response:\n%s", raw)
        return parse_subtask_suggestions(raw, tasks)

    def materialize(self, task_list: TaskList, tasks: list[Task]) -> SubtaskResult:
        result = SubtaskResult(task_list=task_list)

        if not top_level_tasks(tasks):
            logger.info("List %r has no top-level tasks, no subtasks to suggest", task_list.title)
            return result

        result.suggestions = self.suggest(tasks)

        existing: dict[str, set[str]] = defaultdict(set)
        for t in tasks:
            if t.parent:
                existing[t.parent].add(_norm_title(t.title))

        for suggestion in result.suggestions:
            parent = self._store.get_task(task_list.id, suggestion.parent_task_id)

            for title in suggestion.subtasks:
                key = _norm_title(title)
                if key in existing[parent.id]:
                    logger.info("Subtask %r already exists under %r, skipping", title, parent.title)
                    result.skipped_titles.append(title)
                    continue

                subtask = build_subtask(title, parent, suggestion.rationale)
                try:
                    created = self._store.insert_task(task_list.id, subtask, parent=parent.id)
                except TaskStoreError as e:
                    raise SubtaskCreationError(parent_id=parent.id, title=title, cause=str(e)) from e

                existing[parent.id].add(key)
                result.created.append(created)
                logger.info("Created subtask %r under %r", title, parent.title)

        return result
