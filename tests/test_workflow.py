# tests/test_workflow.py

from __future__ import annotations

import json

from zap_tasks.tasks.workflow import ListStatus, run_workflow

from .conftest import ranking_json
from .fakes import FakeInferenceClient, FakeTaskStore, make_task


def test_processes_every_target_list_in_order(store: FakeTaskStore) -> None:
    llm = FakeInferenceClient(
        ranking_json(("C", 1, "00001"), ("B", 1, "00002"), ("A", 1, "00003")),
        ranking_json(("X", 1, "00001")),
    )

    report = run_workflow(store, llm, ["Backlog", "In Progress"])

    assert [o.status for o in report.outcomes] == [ListStatus.PROCESSED, ListStatus.PROCESSED]
    assert store.order("list-1") == ["C", "B", "A"]
    assert report.outcome("Backlog").moves == 3
    assert report.outcome("In Progress").moves == 1
    assert report.failed == []


def test_missing_list_is_skipped_and_others_still_run(store: FakeTaskStore) -> None:
    llm = FakeInferenceClient(ranking_json(("X", 1, "00001")))

    report = run_workflow(store, llm, ["Someday", "In Progress"])

    assert report.outcome("Someday").status == ListStatus.SKIPPED
    assert "Someday" in (report.outcome("Someday").error or "")
    assert report.outcome("In Progress").status == ListStatus.PROCESSED


def test_failed_list_does_not_stop_the_next_one(store: FakeTaskStore) -> None:
    llm = FakeInferenceClient("not json at all", ranking_json(("X", 1, "00001")))

    report = run_workflow(store, llm, ["Backlog", "In Progress"])

    backlog = report.outcome("Backlog")
    assert backlog.status == ListStatus.FAILED
    assert "not json at all" in (backlog.error or "")
    assert report.outcome("In Progress").status == ListStatus.PROCESSED
    assert store.move_calls == [("list-2", "X", None)]


def test_store_failure_is_contained_to_its_list(store: FakeTaskStore) -> None:
    store.fail_list_tasks_for.add("list-1")
    llm = FakeInferenceClient(ranking_json(("X", 1, "00001")))

    report = run_workflow(store, llm, ["Backlog", "In Progress"])

    assert report.outcome("Backlog").status == ListStatus.FAILED
    assert "list_tasks failed" in (report.outcome("Backlog").error or "")
    assert report.outcome("In Progress").status == ListStatus.PROCESSED


def test_lists_already_reordered_are_not_rolled_back(store: FakeTaskStore) -> None:
    store.fail_move_on = 5  # second move of "In Progress"
    store.tasks["list-2"].append(make_task("Y"))
    llm = FakeInferenceClient(
        ranking_json(("C", 1, "00001"), ("B", 1, "00002"), ("A", 1, "00003")),
        ranking_json(("Y", 1, "00001"), ("X", 1, "00002")),
    )

    report = run_workflow(store, llm, ["Backlog", "In Progress"])

    assert report.outcome("Backlog").status == ListStatus.PROCESSED
    assert store.order("list-1") == ["C", "B", "A"]
    failed = report.outcome("In Progress")
    assert failed.status == ListStatus.FAILED
    assert "'X'" in (failed.error or "") and "'In Progress'" in (failed.error or "")


def test_empty_list_is_reported_as_empty() -> None:
    store = FakeTaskStore()
    store.add_list("Backlog", [])
    llm = FakeInferenceClient()

    report = run_workflow(store, llm, ["Backlog"])

    assert report.outcome("Backlog").status == ListStatus.EMPTY
    assert llm.prompts == []


def test_decompose_runs_after_reordering(store: FakeTaskStore) -> None:
    ranking = ranking_json(("A", 1, "00001"), ("B", 1, "00002"), ("C", 1, "00003"))
    suggestions = json.dumps(
        [
            {"parentTaskId": "A", "subtasks": ["Outline", "Draft"], "rationale": "write in passes"},
            {"parentTaskId": "B", "subtasks": ["Reproduce"], "rationale": "find the bug"},
            {"parentTaskId": "C", "subtasks": ["Pick venue"], "rationale": "first step"},
        ]
    )
    llm = FakeInferenceClient(ranking, suggestions)

    report = run_workflow(store, llm, ["Backlog"], decompose=True)

    outcome = report.outcome("Backlog")
    assert outcome.status == ListStatus.PROCESSED
    # "Outline" already exists under A
    assert outcome.subtasks is not None
    assert outcome.subtasks.skipped_titles == ["Outline"]
    assert outcome.created_subtasks == 3
    created_under_a = [b for _, b, p in store.insert_calls if p == "A"]
    assert [b.title for b in created_under_a] == ["Draft"]
    assert created_under_a[0].due == "2024-06-01T00:00:00Z"


def test_subtask_insert_failure_fails_only_that_list(store: FakeTaskStore) -> None:
    store.fail_insert_on = 1
    llm = FakeInferenceClient(
        ranking_json(("A", 1, "00001"), ("B", 1, "00002"), ("C", 1, "00003")),
        json.dumps(
            [
                {"parentTaskId": "A", "subtasks": ["Draft", "Review"], "rationale": "r"},
                {"parentTaskId": "B", "subtasks": ["Reproduce"], "rationale": "r"},
                {"parentTaskId": "C", "subtasks": ["Pick venue"], "rationale": "r"},
            ]
        ),
        ranking_json(("X", 1, "00001")),
        json.dumps([{"parentTaskId": "X", "subtasks": ["Plan"], "rationale": "r"}]),
    )

    report = run_workflow(store, llm, ["Backlog", "In Progress"], decompose=True)

    backlog = report.outcome("Backlog")
    assert backlog.status == ListStatus.FAILED
    assert "could not create subtask 'Draft' under parent A" in (backlog.error or "")
    # fail-fast: nothing else was attempted in Backlog
    assert [b.title for list_id, b, _ in store.insert_calls if list_id == "list-1"] == ["Draft"]

    in_progress = report.outcome("In Progress")
    assert in_progress.status == ListStatus.PROCESSED
    assert in_progress.created_subtasks == 1
    assert [t.title for t in store.tasks["list-2"] if t.parent == "X"] == ["Plan"]


def test_oversized_priority_is_repaired_not_fatal(store: FakeTaskStore) -> None:
    raw = '[{"taskId": "X", "priority": 1' + "0" * 400 + ', "explanation": "", "newPosition": "00001"}]'
    llm = FakeInferenceClient(raw)

    report = run_workflow(store, llm, ["In Progress"])

    outcome = report.outcome("In Progress")
    assert outcome.status == ListStatus.PROCESSED
    assert outcome.reorder is not None
    assert outcome.reorder.ranking[0].priority == 50
