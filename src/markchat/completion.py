"""Async client for OpenAI-compatible chat-completion endpoints."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import Any

import httpx

from .exceptions import CompletionError

LOGGER = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."
DEFAULT_MAX_TOKENS = 300


@dataclass(frozen=True)
class CompletionSettings:
    """Request shape for a single completion round-trip."""

    endpoint: str = DEFAULT_ENDPOINT
    model: str = DEFAULT_MODEL
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: float = 60.0

    @classmethod
    def from_config(cls, completion_config: dict[str, Any]) -> CompletionSettings:
        defaults = cls()
        return cls(
            endpoint=str(completion_config.get("endpoint", defaults.endpoint)),
            model=str(completion_config.get("model", defaults.model)),
            system_prompt=str(
                completion_config.get("system_prompt", defaults.system_prompt)
            ),
            max_tokens=int(completion_config.get("max_tokens", defaults.max_tokens)),
            timeout=float(completion_config.get("timeout", defaults.timeout)),
        )


class CompletionClient:
    """Send one user turn to the completion service and return the reply text."""

    def __init__(
        self,
        api_key: str,
        settings: CompletionSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or CompletionSettings()
        self._api_key = api_key.strip()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.settings.timeout)

    def build_payload(self, user_text: str) -> dict[str, Any]:
        """Return the JSON request body for ``user_text``."""
        return {
            "model": self.settings.model,
            "messages": [
                {"role": "system", "content": self.settings.system_prompt},
                {"role": "user", "content": user_text},
            ],
            "max_tokens": self.settings.max_tokens,
        }

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def _scrub(self, text: str) -> str:
        """Remove the credential from text destined for logs or errors."""
        if self._api_key:
            return text.replace(self._api_key, "***")
        return text

    @staticmethod
    def extract_reply(data: Any) -> str:
        """Pull ``choices[0].message.content`` out of a response body."""
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise CompletionError(
                "Completion response did not contain a reply."
            ) from exc
        if not isinstance(content, str):
            raise CompletionError("Completion reply content was not text.")
        return content.strip()

    async def complete(self, user_text: str) -> str:
        """Request a reply for ``user_text``.

        Raises :class:`CompletionError` for every failure mode so callers only
        need to handle one exception type.
        """
        if not self._api_key:
            LOGGER.warning(
                "completion.request.no_api_key",
                extra={"event": "completion.request.no_api_key"},
            )
            raise CompletionError("No API key configured for the completion service.")

        started = time.perf_counter()
        LOGGER.info(
            "completion.request.start",
            extra={
                "event": "completion.request.start",
                "model": self.settings.model,
                "max_tokens": self.settings.max_tokens,
            },
        )
        try:
            response = await self._client.post(
                self.settings.endpoint,
                json=self.build_payload(user_text),
                headers=self._headers(),
                timeout=self.settings.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as exc:
            self._log_failure("timeout", exc)
            raise CompletionError("Completion request timed out.") from None
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            self._log_failure("status", exc, status_code=status)
            raise CompletionError(
                f"Completion service returned HTTP {status}.", status_code=status
            ) from None
        except httpx.HTTPError as exc:
            self._log_failure("transport", exc)
            raise CompletionError("Unable to reach the completion service.") from None
        except ValueError as exc:
            self._log_failure("decode", exc)
            raise CompletionError("Completion response was not valid JSON.") from None

        reply = self.extract_reply(data)
        LOGGER.info(
            "completion.request.done",
            extra={
                "event": "completion.request.done",
                "elapsed_ms": round((time.perf_counter() - started) * 1000),
                "reply_chars": len(reply),
            },
        )
        return reply

    def _log_failure(
        self, kind: str, exc: Exception, status_code: int | None = None
    ) -> None:
        LOGGER.warning(
            "completion.request.failed",
            extra={
                "event": "completion.request.failed",
                "kind": kind,
                "status_code": status_code,
                "error_type": type(exc).__name__,
                "error": self._scrub(str(exc)),
            },
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client when this instance created it."""
        if self._owns_client:
            await self._client.aclose()
