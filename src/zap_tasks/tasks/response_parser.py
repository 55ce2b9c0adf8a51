# src/zap_tasks/tasks/response_parser.py

"""
Parsing and validation of model output.

Model output is untrusted:
- structural problems (undecodable JSON, not an array, wrong count,
  unknown or duplicated ids) raise ResponseFormatError;
- field-level problems (score out of range, bad position) are repaired.

Both response paths share parse_json_array().
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Callable
from typing import Any, TypeVar

from ..errors import ResponseFormatError
from .task_models import PriorityRecord, SubtaskSuggestion, Task, top_level_tasks

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PRIORITY = 50.0
POSITION_WIDTH = 5

_FENCE_OPEN = re.compile(r"^```[\w+-]*")
_FENCE_CLOSE = re.compile(r"```$")


def clean_response(raw: str) -> str:
    """Strip whitespace and surrounding ``` fences (with or without a language tag)."""
    text = (raw or "").strip()
    text = _FENCE_OPEN.sub("", text, count=1)
    text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()


def synthesize_position(index: int) -> str:
    """0-based array index -> 1-indexed zero-padded rank ("00001")."""
    return f"{index + 1:0{POSITION_WIDTH}d}"


def parse_json_array(
    raw: str,
    *,
    expected_count: int,
    repair: Callable[[Any, int], T],
    label: str,
) -> list[T]:
    """
    Clean + decode `raw` as a JSON array of exactly `expected_count` items,
    then turn every item into a record via repair(item, index).
    """
    cleaned = clean_response(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ResponseFormatError(f"failed to parse {label} response: {e}\nResponse was: {cleaned}") from e

    if not isinstance(data, list):
        raise ResponseFormatError(
            f"failed to parse {label} response: expected a JSON array, got {type(data).__name__}\n"
            f"Response was: {cleaned}"
        )

    if len(data) != expected_count:
        raise ResponseFormatError(
            f"received incorrect number of {label}: got {len(data)}, want {expected_count}"
        )

    return [repair(item, i) for i, item in enumerate(data)]


def _as_dict(item: Any, index: int, label: str) -> dict[str, Any]:
    if not isinstance(item, dict):
        raise ResponseFormatError(f"{label} entry #{index + 1} is not an object: {item!r}")
    return item


def _repair_priority(value: Any) -> float:
    if isinstance(value, bool):
        return DEFAULT_PRIORITY
    try:
        p = float(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_PRIORITY
    if math.isnan(p) or p < 0 or p > 100:
        return DEFAULT_PRIORITY
    return p


def _repair_position(value: Any, index: int) -> str:
    if isinstance(value, str) and len(value) == POSITION_WIDTH:
        return value
    return synthesize_position(index)


def _priority_record(item: Any, index: int) -> PriorityRecord:
    data = _as_dict(item, index, "priority")

    priority = _repair_priority(data.get("priority"))
    if priority != data.get("priority"):
        logger.debug("priority entry #%d: score %r -> %s", index + 1, data.get("priority"), priority)

    position = _repair_position(data.get("newPosition"), index)
    if position != data.get("newPosition"):
        logger.debug("priority entry #%d: position %r -> %s", index + 1, data.get("newPosition"), position)

    return PriorityRecord(
        task_id=str(data.get("taskId") or ""),
        priority=priority,
        explanation=str(data.get("explanation") or ""),
        position=position,
    )


def _subtask_suggestion(item: Any, index: int) -> SubtaskSuggestion:
    data = _as_dict(item, index, "subtask suggestion")

    raw_subtasks = data.get("subtasks") or []
    if isinstance(raw_subtasks, str):
        raw_subtasks = [raw_subtasks]
    if not isinstance(raw_subtasks, list):
        raise ResponseFormatError(f"subtask suggestion #{index + 1}: 'subtasks' is not a list: {raw_subtasks!r}")

    titles = [str(s).strip() for s in raw_subtasks if s is not None and str(s).strip()]
    return SubtaskSuggestion(
        parent_task_id=str(data.get("parentTaskId") or ""),
        subtasks=titles,
        rationale=str(data.get("rationale") or ""),
    )


def _check_ids(ids: list[str], allowed: set[str], label: str) -> None:
    seen: set[str] = set()
    for task_id in ids:
        if task_id not in allowed:
            raise ResponseFormatError(f"{label} response references unknown task id {task_id!r}")
        if task_id in seen:
            raise ResponseFormatError(f"{label} response lists task id {task_id!r} more than once")
        seen.add(task_id)


def parse_priorities(raw: str, tasks: list[Task]) -> list[PriorityRecord]:
    records = parse_json_array(raw, expected_count=len(tasks), repair=_priority_record, label="priorities")
    _check_ids([r.task_id for r in records], {t.id for t in tasks}, "priority")
    return records


def parse_subtask_suggestions(raw: str, tasks: list[Task]) -> list[SubtaskSuggestion]:
    parents = top_level_tasks(tasks)
    suggestions = parse_json_array(
        raw,
        expected_count=len(parents),
        repair=_subtask_suggestion,
        label="subtask suggestions",
    )
    _check_ids([s.parent_task_id for s in suggestions], {t.id for t in parents}, "subtask suggestion")
    return suggestions
