# src/zap_tasks/tasks/prompts.py

from __future__ import annotations

import json

from .task_models import Task

RANKING_PROMPT = """
You are a task prioritization assistant. Your job is to analyze the following tasks and return a JSON array of prioritized tasks.

Rules:
1. Analyze due dates - tasks with closer due dates get higher priority
2. Look for priority markers in titles like [HIGH], [URGENT], [P1]
3. Consider task complexity and dependencies from notes
4. Return ONLY a valid JSON array with no additional text or markdown formatting

Input tasks:
{tasks_json}

Response format (strict JSON array):
[
  {{
    "taskId": "task-id-1",
    "priority": 95.5,
    "explanation": "High priority due to urgent marker and close deadline",
    "newPosition": "00001"
  }},
  ...
]

The priority should be a number between 0-100, with higher numbers indicating higher priority.
The newPosition should be a string of 5 digits, ordered from highest to lowest priority (00001 being highest).
Respond with ONLY the JSON array, no other text.
""".strip()

DECOMPOSITION_PROMPT = """
You are a task planning assistant. Your job is to break down tasks into smaller, actionable subtasks.

Rules:
1. Only propose subtasks for tasks whose "parent" field is empty (top-level tasks)
2. Propose 1 to 3 concrete, actionable subtask titles per top-level task
3. Use the notes to understand the scope of each task
4. Return exactly one entry per top-level task
5. Return ONLY a valid JSON array with no additional text or markdown formatting

Input tasks:
{tasks_json}

Response format (strict JSON array):
[
  {{
    "parentTaskId": "task-id-1",
    "subtasks": ["First step", "Second step"],
    "rationale": "Why these steps complete the task"
  }},
  ...
]

Respond with ONLY the JSON array, no other text.
""".strip()


def _dumps(rows: list[dict[str, str]]) -> str:
    return json.dumps(rows, ensure_ascii=False, indent=2)


def build_ranking_prompt(tasks: list[Task]) -> str:
    rows = [
        {
            "id": t.id,
            "title": t.title,
            "due": t.due or "",
            "notes": t.notes or "",
            "position": t.position,
        }
        for t in tasks
    ]
    return RANKING_PROMPT.format(tasks_json=_dumps(rows))


def build_decomposition_prompt(tasks: list[Task]) -> str:
    rows = [
        {
            "id": t.id,
            "title": t.title,
            "notes": t.notes or "",
            "parent": t.parent,
        }
        for t in tasks
    ]
    return DECOMPOSITION_PROMPT.format(tasks_json=_dumps(rows))
