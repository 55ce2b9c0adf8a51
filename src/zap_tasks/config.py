# src/zap_tasks/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole run.
- No secrets required at import time (the bootstrap reports missing ones).
- Target lists are configuration, not a compiled-in constant.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

ENV_PREFIX = "ZAP"

DEFAULT_TARGET_LISTS = ["Backlog", "In Progress"]
DEFAULT_TASKS_SCOPES = ["https://www.googleapis.com/auth/tasks"]
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except ImportError:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str], *, sep: str | None = None) -> List[str]:
    """
    Parse a list from env.

    sep=None splits on commas and whitespace (model names); an explicit
    separator keeps inner spaces (list titles like "In Progress").
    """
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    if sep is None:
        return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]
    return [p.strip() for p in raw.split(sep) if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Google Tasks ----
    credentials_path: Path
    tasks_scopes: List[str]

    # ---- Inference (Gemini, OpenAI-compatible endpoint) ----
    gemini_api_key: Optional[str]
    gemini_base_url: str
    llm_models: List[str]
    llm_temperature: float
    llm_connect_timeout: float
    llm_read_timeout: float

    # ---- Workflow ----
    target_lists: List[str]
    move_delay_seconds: float
    generate_subtasks: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "zap") or "zap"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/zap"))

        credentials_path = _env_path(_k("CREDENTIALS_PATH"), Path("credentials.json"))
        tasks_scopes = _env_list(_k("TASKS_SCOPES"), DEFAULT_TASKS_SCOPES)

        gemini_api_key = _first_env(_k("GEMINI_API_KEY"), "GEMINI_API_KEY", default=None)
        gemini_base_url = _env(_k("GEMINI_BASE_URL"), DEFAULT_GEMINI_BASE_URL)
        llm_models = _env_list(_k("LLM_MODELS"), ["gemini-2.0-flash", "gemini-1.5-flash"])
        llm_temperature = _env_float(_k("LLM_TEMPERATURE"), 0.1)
        llm_connect_timeout = _env_float(_k("LLM_CONNECT_TIMEOUT_SECONDS"), 5.0)
        llm_read_timeout = _env_float(_k("LLM_READ_TIMEOUT_SECONDS"), 60.0)

        target_lists = _env_list(_k("TARGET_LISTS"), DEFAULT_TARGET_LISTS, sep=",")
        move_delay_seconds = max(0.0, _env_float(_k("MOVE_DELAY_SECONDS"), 0.1))
        generate_subtasks = _env_bool(_k("GENERATE_SUBTASKS"), False)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            credentials_path=credentials_path,
            tasks_scopes=tasks_scopes,
            gemini_api_key=gemini_api_key,
            gemini_base_url=gemini_base_url,
            llm_models=llm_models,
            llm_temperature=llm_temperature,
            llm_connect_timeout=llm_connect_timeout,
            llm_read_timeout=llm_read_timeout,
            target_lists=target_lists,
            move_delay_seconds=move_delay_seconds,
            generate_subtasks=generate_subtasks,
        )


SETTINGS = Settings.from_env()

# ---- Optional local overrides (never committed) ----
# Prefer .env for secrets; use config_local.py only for safe overrides.
try:
    import config_local as _config_local  # type: ignore
except ImportError:
    _config_local = None

if _config_local is not None:
    # Keep it explicit: only a few safe names are honored.
    if hasattr(_config_local, "TARGET_LISTS"):
        object.__setattr__(SETTINGS, "target_lists", [str(t) for t in _config_local.TARGET_LISTS])  # type: ignore[misc]
    if hasattr(_config_local, "GENERATE_SUBTASKS"):
        object.__setattr__(SETTINGS, "generate_subtasks", bool(_config_local.GENERATE_SUBTASKS))  # type: ignore[misc]
    if hasattr(_config_local, "LLM_MODELS"):
        object.__setattr__(SETTINGS, "llm_models", [str(m) for m in _config_local.LLM_MODELS])  # type: ignore[misc]


def get_settings() -> Settings:
    return SETTINGS
