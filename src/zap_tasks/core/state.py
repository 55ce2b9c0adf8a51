# src/zap_tasks/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from .ports import InferenceClient, TaskStoreClient


@dataclass
class AppState:
    # Settings are stored on the state so the workflow does not read globals.
    settings: object

    user_email: str
    task_store: TaskStoreClient
    llm: InferenceClient
