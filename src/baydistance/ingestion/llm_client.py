"""
LLM ingestion client (OpenAI-compatible chat completions).

Sends a single prompt and returns the raw assistant text. Turning that free text into
typed points of interest is the parser's job (`baydistance.recommender.parsing`).
"""

from __future__ import annotations

import logging
from typing import Any

from baydistance.config.settings import Settings
from baydistance.core.http import post_json

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a local Bay Area travel guide. Answer only with JSON, no prose and no Markdown."
)


class LlmClient:
    """Thin wrapper over a chat-completions endpoint."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def complete(self, prompt: str) -> str:
        """Return the assistant message content for `prompt`.

        Raises:
            RuntimeError: If no API key is configured or the response has no content.
            httpx.HTTPError: On transport errors or non-2xx status codes.
        """
        cfg = self._settings.ingestion.llm
        if not cfg.api_key:
            raise RuntimeError("LLM API key is not configured (set OPENAI_API_KEY).")

        payload: dict[str, Any] = {
            "model": cfg.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": cfg.temperature,
            "max_tokens": cfg.max_tokens,
        }
        logger.info("Requesting completion from model=%s", cfg.model)
        data = post_json(
            cfg.base_url,
            payload=payload,
            headers={"Authorization": f"Bearer {cfg.api_key}"},
            timeout_seconds=cfg.timeout_seconds,
        )

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise RuntimeError("LLM response did not contain a message") from exc
        if not isinstance(content, str) or not content.strip():
            raise RuntimeError("LLM response message was empty")
        return content
