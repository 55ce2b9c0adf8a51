# src/zap_tasks/tasks/prioritizer.py

from __future__ import annotations

"""
Reordering engine.

For one target list:
- resolve the list title (exact, case-sensitive),
- fetch tasks and keep top-level ones (subtasks move with their parent),
- ask the model for a ranking and validate it,
- sort by the 5-digit position string,
- replay the order with relative moves: first task to the front, every
  following task right after the previous one (N tasks -> N moves).

Moves are issued one at a time; each depends on the previous one having landed.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from ..core.ports import InferenceClient, TaskStoreClient
from ..errors import ListNotFoundError, MoveError, TaskStoreError
from .prompts import build_ranking_prompt
from .response_parser import parse_priorities
from .task_models import PriorityRecord, Task, TaskList, top_level_tasks

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ReorderResult:
    task_list: TaskList
    ranking: list[PriorityRecord] = field(default_factory=list)
    moves: int = 0

    @property
    def skipped(self) -> bool:
        return not self.ranking


def resolve_task_list(store: TaskStoreClient, title: str) -> TaskList:
    """Exact (case-sensitive) title match against the store's list catalog."""
    for task_list in store.list_task_lists():
        if task_list.title == title:
            return task_list
    raise ListNotFoundError(title)


def sort_by_position(records: list[PriorityRecord]) -> list[PriorityRecord]:
    # Stable: equal positions keep the order the model returned them in.
    return sorted(records, key=lambda r: r.position)


class Prioritizer:
    def __init__(
        self,
        store: TaskStoreClient,
        llm: InferenceClient,
        *,
        move_delay_seconds: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._store = store
        self._llm = llm
        self._move_delay = max(0.0, float(move_delay_seconds))
        self._sleep = sleep

    def rank(self, tasks: list[Task]) -> list[PriorityRecord]:
        """Ask the model for priorities of `tasks`; returns records sorted by position."""
        prompt = build_ranking_prompt(tasks)
        logger.debug("Ranking prompt for %d tasks:\n%s", len(tasks), prompt)
        raw = self._llm.generate(prompt)
        logger.debug("Ranking response:\n%s", raw)
        return sort_by_position(parse_priorities(raw, tasks))

    def replay_moves(self, task_list: TaskList, ordered: list[Task]) -> int:
        """Move tasks so the list order equals `ordered`. Returns the number of moves."""
        previous: Task | None = None
        moves = 0
        for task in ordered:
            if previous is not None and self._move_delay > 0:
                self._sleep(self._move_delay)

            previous_id = previous.id if previous is not None else None
            try:
                self._store.move_task(task_list.id, task.id, previous_id)
            except TaskStoreError as e:
                raise MoveError(
                    task_id=task.id,
                    task_title=task.title,
                    list_title=task_list.title,
                    previous=previous.title if previous is not None else None,
                    cause=str(e),
                ) from e

            moves += 1
            logger.debug(
                "Moved %r %s in %r",
                task.title,
                "to top" if previous is None else f"after {previous.title!r}",
                task_list.title,
            )
            previous = task
        return moves

    def reorder_list(self, title: str) -> ReorderResult:
        task_list = resolve_task_list(self._store, title)

        tasks = top_level_tasks(self._store.list_tasks(task_list.id))
        if not tasks:
            logger.info("List %r has no top-level tasks, nothing to reorder", title)
            return ReorderResult(task_list=task_list)

        logger.info("Ranking %d tasks in %r", len(tasks), title)
        ranking = self.rank(tasks)

        by_id = {t.id: t for t in tasks}
        ordered = [by_id[r.task_id] for r in ranking]

        moves = self.replay_moves(task_list, ordered)
        logger.info("Reordered %r with %d moves", title, moves)
        return ReorderResult(task_list=task_list, ranking=ranking, moves=moves)
