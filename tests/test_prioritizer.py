# tests/test_prioritizer.py

from __future__ import annotations

import pytest

from zap_tasks.errors import ListNotFoundError, MoveError, ResponseFormatError
from zap_tasks.tasks.prioritizer import Prioritizer, resolve_task_list, sort_by_position
from zap_tasks.tasks.task_models import PriorityRecord

from .conftest import ranking_json
from .fakes import FakeInferenceClient, FakeTaskStore, make_task


def _three_task_store() -> FakeTaskStore:
    store = FakeTaskStore()
    store.add_list("Backlog", [make_task("A"), make_task("B"), make_task("C")])
    return store


def test_replay_produces_ranked_order_with_exactly_n_moves() -> None:
    store = _three_task_store()
    llm = FakeInferenceClient(ranking_json(("C", 90, "00001"), ("A", 60, "00002"), ("B", 10, "00003")))

    result = Prioritizer(store, llm).reorder_list("Backlog")

    assert store.order("list-1") == ["C", "A", "B"]
    assert store.move_calls == [
        ("list-1", "C", None),
        ("list-1", "A", "C"),
        ("list-1", "B", "A"),
    ]
    assert result.moves == 3
    assert [r.task_id for r in result.ranking] == ["C", "A", "B"]


def test_records_are_sorted_by_position_not_by_response_order() -> None:
    store = _three_task_store()
    llm = FakeInferenceClient(ranking_json(("A", 10, "00003"), ("B", 50, "00010"), ("C", 90, "00001")))

    Prioritizer(store, llm).reorder_list("Backlog")

    assert store.order("list-1") == ["C", "A", "B"]


def test_sort_by_position_is_stable_for_ties() -> None:
    records = [
        PriorityRecord("x", 50, "", "00002"),
        PriorityRecord("y", 50, "", "00001"),
        PriorityRecord("z", 50, "", "00002"),
    ]
    assert [r.task_id for r in sort_by_position(records)] == ["y", "x", "z"]


def test_only_top_level_tasks_are_ranked(store) -> None:
    llm = FakeInferenceClient(ranking_json(("B", 90, "00001"), ("C", 50, "00002"), ("A", 10, "00003")))

    Prioritizer(store, llm).reorder_list("Backlog")

    prompt = llm.prompts[0]
    assert '"id": "A1"' not in prompt
    assert [m[1] for m in store.move_calls] == ["B", "C", "A"]
    assert store.order("list-1") == ["B", "C", "A"]


def test_ranking_prompt_carries_task_fields_and_rules(store) -> None:
    llm = FakeInferenceClient(ranking_json(("A", 1, "00001"), ("B", 1, "00002"), ("C", 1, "00003")))

    Prioritizer(store, llm).reorder_list("Backlog")

    prompt = llm.prompts[0]
    assert '"due": "2024-06-01T00:00:00Z"' in prompt
    assert '"notes": "needs budget"' in prompt
    assert "[URGENT]" in prompt
    assert '"newPosition": "00001"' in prompt


def test_move_failure_names_task_and_list_and_stops() -> None:
    store = _three_task_store()
    store.fail_move_on = 2
    llm = FakeInferenceClient(ranking_json(("C", 90, "00001"), ("A", 60, "00002"), ("B", 10, "00003")))

    with pytest.raises(MoveError) as exc:
        Prioritizer(store, llm).reorder_list("Backlog")

    assert exc.value.task_id == "A"
    assert exc.value.list_title == "Backlog"
    assert "'A'" in str(exc.value) and "'Backlog'" in str(exc.value)
    # third move never attempted
    assert len(store.move_calls) == 2


def test_missing_list_raises_list_not_found(store) -> None:
    with pytest.raises(ListNotFoundError):
        resolve_task_list(store, "backlog")  # exact, case-sensitive match


def test_empty_list_is_a_no_op() -> None:
    store = FakeTaskStore()
    store.add_list("Backlog", [make_task("c1", parent="gone")])
    llm = FakeInferenceClient()

    result = Prioritizer(store, llm).reorder_list("Backlog")

    assert result.skipped
    assert llm.prompts == []
    assert store.move_calls == []


def test_bad_response_aborts_before_any_move() -> None:
    store = _three_task_store()
    llm = FakeInferenceClient(ranking_json(("C", 90, "00001")))

    with pytest.raises(ResponseFormatError):
        Prioritizer(store, llm).reorder_list("Backlog")

    assert store.move_calls == []


def test_delay_is_applied_between_moves_only() -> None:
    store = _three_task_store()
    llm = FakeInferenceClient(ranking_json(("A", 1, "00001"), ("B", 1, "00002"), ("C", 1, "00003")))
    pauses: list[float] = []

    Prioritizer(store, llm, move_delay_seconds=0.25, sleep=pauses.append).reorder_list("Backlog")

    assert pauses == [0.25, 0.25]


def test_replaying_the_same_order_twice_is_stable() -> None:
    store = _three_task_store()
    response = ranking_json(("B", 1, "00001"), ("C", 1, "00002"), ("A", 1, "00003"))
    prioritizer = Prioritizer(store, FakeInferenceClient(response))

    prioritizer.reorder_list("Backlog")
    prioritizer.reorder_list("Backlog")

    assert store.order("list-1") == ["B", "C", "A"]
