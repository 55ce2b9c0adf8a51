# src/zap_tasks/llm/client.py

from __future__ import annotations

import logging
import time
from typing import Any, List

import httpx
import openai
from openai import OpenAI

from ..errors import InferenceError, SetupError

logger = logging.getLogger(__name__)


def _is_auth_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return True
    return exc.__class__.__name__ in {"UnauthorizedError"}


def _is_rate_limit_error(exc: Exception) -> bool:
    if isinstance(exc, openai.RateLimitError):
        return True
    return exc.__class__.__name__ in {"TooManyRequestsError"}


def _is_connection_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.APIConnectionError, httpx.TimeoutException)):
        return True
    return exc.__class__.__name__ in {"Timeout", "ConnectTimeout", "ReadTimeout", "WriteTimeout"}


def _is_not_found_error(exc: Exception) -> bool:
    # The OpenAI-compatible endpoint answers 404 for unknown model names.
    return isinstance(exc, openai.NotFoundError)


def _close_stream(stream: Any) -> None:
    close = getattr(stream, "close", None)
    if callable(close):
        close()


def _chunk_text(chunk: Any) -> str | None:
    choices = getattr(chunk, "choices", None) or []
    if not choices:
        return None
    delta = getattr(choices[0], "delta", None)
    return getattr(delta, "content", None) if delta is not None else None


class GeminiClient:
    """
    Gemini text generation through the OpenAI-compatible endpoint.

    Behavior:
    - Tries models in the configured order (ZAP_LLM_MODELS).
    - 404 (model not available) -> try the next model, remembered per client.
    - Rate limit, network, auth or empty output -> InferenceError right away.
    - Automatic SDK retries are disabled: a failed call surfaces immediately.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str,
        models: List[str],
        temperature: float = 0.1,
        connect_timeout: float = 5.0,
        read_timeout: float = 60.0,
        client: Any = None,
    ) -> None:
        if not api_key or not str(api_key).strip():
            raise SetupError("GEMINI_API_KEY environment variable is not set")
        self._models = [m.strip() for m in models if m and m.strip()]
        if not self._models:
            raise SetupError("LLM model list is empty. Set ZAP_LLM_MODELS in your .env.")

        self._temperature = float(temperature)
        self._timeout = httpx.Timeout(connect=connect_timeout, read=read_timeout, write=10.0, pool=connect_timeout)
        self._unavailable: set[str] = set()

        if client is None:
            client = OpenAI(
                base_url=str(base_url),
                api_key=str(api_key),
                timeout=self._timeout,
                max_retries=0,
            )
        self._client = client

    @classmethod
    def from_settings(cls, settings: Any) -> GeminiClient:
        return cls(
            settings.gemini_api_key,
            base_url=settings.gemini_base_url,
            models=list(settings.llm_models),
            temperature=settings.llm_temperature,
            connect_timeout=settings.llm_connect_timeout,
            read_timeout=settings.llm_read_timeout,
        )

    def close(self) -> None:
        close = getattr(self._client, "close", None)
        if callable(close):
            close()

    def _generate_with(self, model: str, prompt: str) -> str:
        stream = self._client.chat.completions.create(
            model=model,
            stream=True,
            temperature=self._temperature,
            messages=[{"role": "user", "content": prompt}],
            timeout=self._timeout,
        )
        parts: list[str] = []
        try:
            for chunk in stream:
                content = _chunk_text(chunk)
                if content:
                    parts.append(content)
        finally:
            _close_stream(stream)
        return "".join(parts)

    def generate(self, prompt: str) -> str:
        # Only a 404 (model not available) moves on to the next model; any other
        # failure is raised for this call.
        for model in self._models:
            if model in self._unavailable:
                continue

            logger.info("LLM: trying model=%s", model)
            t0 = time.monotonic()
            try:
                text = self._generate_with(model, prompt)
            except Exception as e:
                if _is_not_found_error(e):
                    self._unavailable.add(model)
                    logger.info("LLM: model not available (404): %s", model)
                    continue
                if _is_auth_error(e):
                    raise InferenceError(
                        "LLM authentication failed. Check your API key (GEMINI_API_KEY)."
                    ) from e
                if _is_rate_limit_error(e):
                    raise InferenceError(f"LLM is rate-limited (model={model}). Try again later.") from e
                if _is_connection_error(e):
                    raise InferenceError(f"LLM network/timeout error (model={model}).") from e
                raise InferenceError(f"LLM call failed (model={model}): {e}") from e

            if not text.strip():
                raise InferenceError(f"Model returned no content: {model}")

            logger.debug("LLM: completed with model=%s in %.2fs (%d chars)", model, time.monotonic() - t0, len(text))
            return text

        raise InferenceError(f"No LLM model available (tried: {', '.join(self._models)}).")
