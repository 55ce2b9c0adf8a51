# src/zap_tasks/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the concrete Google Tasks and Gemini clients into AppState.

Every problem found here is a SetupError: the run stops before any list
is touched.
"""

from __future__ import annotations

import logging

from ..auth import load_user_credentials
from ..config import get_settings
from ..core.state import AppState
from ..errors import SetupError
from ..llm.client import GeminiClient
from ..tasks.google_tasks import GoogleTasksClient

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(user_email: str, *, settings=None) -> AppState:
    """
    Create AppState for one end-user account.

    Keeping settings injectable makes the bootstrap testable without touching
    real environment variables. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    # Check the API key first: it is the cheapest thing to get wrong.
    if not settings.gemini_api_key:
        raise SetupError("GEMINI_API_KEY environment variable is not set")

    credentials = load_user_credentials(settings.credentials_path, user_email, settings.tasks_scopes)
    task_store = GoogleTasksClient.from_credentials(credentials)
    llm = GeminiClient.from_settings(settings)

    logger.info("Clients ready (models: %s)", ", ".join(settings.llm_models))
    return AppState(settings=settings, user_email=user_email, task_store=task_store, llm=llm)
