# tests/conftest.py

from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace

import pytest

from .fakes import FakeTaskStore, make_task


def ranking_json(*entries: tuple[str, float, str]) -> str:
    """[(task_id, priority, position), ...] -> model-style JSON array."""
    return json.dumps(
        [
            {"taskId": tid, "priority": prio, "explanation": f"why {tid}", "newPosition": pos}
            for tid, prio, pos in entries
        ]
    )


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap and CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the process environment.
    """
    return SimpleNamespace(
        app_name="zap-test",
        log_level="INFO",
        data_dir=tmp_path / "data",
        credentials_path=tmp_path / "credentials.json",
        tasks_scopes=["https://www.googleapis.com/auth/tasks"],
        gemini_api_key="test-key",
        gemini_base_url="https://example.invalid/v1beta/openai/",
        llm_models=["gemini-test"],
        llm_temperature=0.1,
        llm_connect_timeout=1.0,
        llm_read_timeout=1.0,
        target_lists=["Backlog", "In Progress"],
        move_delay_seconds=0.0,
        generate_subtasks=False,
    )


@pytest.fixture()
def store() -> FakeTaskStore:
    """
    Two target lists:
    - Backlog: A, B, C top-level; A has one child.
    - In Progress: X top-level.
    """
    s = FakeTaskStore()
    s.add_list(
        "Backlog",
        [
            make_task("A", "Write report", due="2024-06-01T00:00:00Z"),
            make_task("A1", "Outline", parent="A"),
            make_task("B", "[URGENT] Fix login"),
            make_task("C", "Plan offsite", notes="needs budget"),
        ],
    )
    s.add_list("In Progress", [make_task("X", "Ship release")])
    return s
