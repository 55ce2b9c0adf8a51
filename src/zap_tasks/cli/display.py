# src/zap_tasks/cli/display.py

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from ..core.ports import TaskStoreClient
from ..errors import TaskStoreError
from ..tasks.task_models import Task
from ..tasks.workflow import ListStatus, WorkflowReport

Printer = Callable[[str], None]

_RULE = "-" * 40


def _fmt_ts(raw: str | None) -> str | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return raw


def format_task(task: Task) -> str:
    lines = [
        _RULE,
        f"Title: {task.title}",
        f"ID: {task.id}",
        f"Status: {task.status}",
    ]
    due = _fmt_ts(task.due)
    if due:
        lines.append(f"Due: {due}")
    if task.notes:
        lines.append(f"Notes: {task.notes}")
    completed = _fmt_ts(task.completed)
    if completed:
        lines.append(f"Completed: {completed}")
    if task.parent:
        lines.append(f"Parent Task ID: {task.parent}")
    lines.append(f"Position: {task.position}")
    lines.append(_RULE)
    return "\n".join(lines)


def format_report(report: WorkflowReport) -> str:
    lines = ["Summary:"]
    for o in report.outcomes:
        if o.status == ListStatus.PROCESSED:
            detail = f"{o.moves} moves"
            if o.subtasks is not None:
                detail += f", {o.created_subtasks} subtasks created"
        elif o.status == ListStatus.EMPTY:
            detail = "no top-level tasks"
        else:
            detail = o.error or ""
        lines.append(f"  {o.title}: {o.status} ({detail})")

        if o.reorder is not None and o.reorder.ranking:
            for r in o.reorder.ranking:
                lines.append(f"    {r.position} [{r.priority:5.1f}] {r.task_id}: {r.explanation}")
    return "\n".join(lines)


def print_updated_lists(store: TaskStoreClient, report: WorkflowReport, out: Printer = print) -> None:
    """Print every processed target list as it is now in the store."""
    for o in report.outcomes:
        if o.reorder is None:
            continue
        task_list = o.reorder.task_list
        try:
            tasks = store.list_tasks(task_list.id)
        except TaskStoreError as e:
            out(f"Error fetching tasks for list {task_list.title}: {e}")
            continue

        out(f"\n=== Updated Task List: {task_list.title} ===")
        if not tasks:
            out("No tasks in this list")
            continue
        for task in tasks:
            out(format_task(task))
