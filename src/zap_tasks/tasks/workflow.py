# src/zap_tasks/tasks/workflow.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from ..core.ports import InferenceClient, TaskStoreClient
from ..errors import ListNotFoundError, ZapError
from .prioritizer import Prioritizer, ReorderResult
from .subtasks import SubtaskMaterializer, SubtaskResult

logger = logging.getLogger(__name__)


class ListStatus(StrEnum):
    PROCESSED = "processed"
    EMPTY = "empty"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(slots=True)
class ListOutcome:
    title: str
    status: ListStatus
    reorder: ReorderResult | None = None
    subtasks: SubtaskResult | None = None
    error: str | None = None

    @property
    def moves(self) -> int:
        return self.reorder.moves if self.reorder is not None else 0

    @property
    def created_subtasks(self) -> int:
        return len(self.subtasks.created) if self.subtasks is not None else 0


@dataclass(slots=True)
class WorkflowReport:
    outcomes: list[ListOutcome] = field(default_factory=list)

    @property
    def failed(self) -> list[ListOutcome]:
        return [o for o in self.outcomes if o.status == ListStatus.FAILED]

    def outcome(self, title: str) -> ListOutcome | None:
        for o in self.outcomes:
            if o.title == title:
                return o
        return None


def process_list(
    title: str,
    prioritizer: Prioritizer,
    materializer: SubtaskMaterializer | None,
    store: TaskStoreClient,
) -> ListOutcome:
    """Reorder one list, then (optionally) materialize subtasks. Errors propagate."""
    reorder = prioritizer.reorder_list(title)
    outcome = ListOutcome(
        title=title,
        status=ListStatus.EMPTY if reorder.skipped else ListStatus.PROCESSED,
        reorder=reorder,
    )

    if materializer is not None and not reorder.skipped:
        # Re-fetch: the moves changed positions, and children are needed for the duplicate check.
        tasks = store.list_tasks(reorder.task_list.id)
        outcome.subtasks = materializer.materialize(reorder.task_list, tasks)

    return outcome


def run_workflow(
    store: TaskStoreClient,
    llm: InferenceClient,
    target_lists: Iterable[str],
    *,
    decompose: bool = False,
    move_delay_seconds: float = 0.0,
    sleep: Callable[[float], None] = time.sleep,
) -> WorkflowReport:
    """
    Process every target list sequentially.

    One list's failure never stops the others; only the caller decides what
    is fatal (setup errors happen before this point).
    """
    prioritizer = Prioritizer(store, llm, move_delay_seconds=move_delay_seconds, sleep=sleep)
    materializer = SubtaskMaterializer(store, llm) if decompose else None

    report = WorkflowReport()
    for title in target_lists:
        try:
            outcome = process_list(title, prioritizer, materializer, store)
        except ListNotFoundError as e:
            logger.warning("Skipping list: %s", e)
            outcome = ListOutcome(title=title, status=ListStatus.SKIPPED, error=str(e))
        except ZapError as e:
            logger.error("List %r failed: %s", title, e)
            outcome = ListOutcome(title=title, status=ListStatus.FAILED, error=str(e))
        except Exception as e:
            logger.exception("List %r failed with an unexpected error", title)
            outcome = ListOutcome(title=title, status=ListStatus.FAILED, error=f"{e.__class__.__name__}: {e}")
        report.outcomes.append(outcome)

    return report
