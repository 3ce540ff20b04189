"""
GPT Client for structured completions.

Thin async HTTP client for an OpenAI-compatible chat completions API.
Retries are opt-in through ``GPT_MAX_RETRIES``; by default a single
attempt is made and failures are reported to the caller.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Protocol

import httpx
import structlog
from compass.core.config import get_settings

logger = structlog.get_logger()


class GPTClientError(Exception):
    """Base exception for GPT client errors."""


class GPTRateLimitError(GPTClientError):
    """Raised when rate limited by the provider."""


class GPTTimeoutError(GPTClientError):
    """Raised when request times out."""


class GPTAPIError(GPTClientError):
    """Raised for other API errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True)
class GPTResponse:
    """Parsed GPT response."""

    content: str
    model: str
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    latency_ms: int
    finish_reason: str


class GPTClientProtocol(Protocol):
    """Protocol for GPT client (allows mocking)."""

    async def chat_completion(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = 0.7,
        max_tokens: int = 1000,
        model: str | None = None,
        response_format: dict[str, Any] | None = None,
    ) -> GPTResponse:
        """Send chat completion request."""
        ...


class OpenAIClient:
    """Async OpenAI API client."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        max_retries: int | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        settings = get_settings()
        self.api_key = api_key or settings.openai_api_key
        self.base_url = base_url or settings.openai_base_url
        self.model = model or settings.openai_model
        self.max_retries = max_retries if max_retries is not None else settings.gpt_max_retries
        self.timeout = (
            timeout_seconds if timeout_seconds is not None else settings.gpt_timeout_seconds
        )

        if not self.api_key:
            logger.warning("openai_api_key_missing", msg="OPENAI_API_KEY not configured")

    async def chat_completion(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = 0.7,
        max_tokens: int = 1000,
        model: str | None = None,
        response_format: dict[str, Any] | None = None,
    ) -> GPTResponse:
        """
        Send chat completion request.

        When ``max_retries`` is above one, rate limits, server errors and
        transport failures are retried with exponential backoff (1s, 2s, 4s).
        Client errors are never retried.
        """
        if not self.api_key:
            raise GPTClientError("OPENAI_API_KEY not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        payload: dict[str, Any] = {
            "model": model or self.model,
            "messages": messages,
            "max_tokens": max_tokens,
        }
        # Search-enabled models reject sampling parameters
        if temperature is not None:
            payload["temperature"] = temperature
        if response_format is not None:
            payload["response_format"] = response_format

        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            start_time = datetime.now(UTC)

            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(
                        f"{self.base_url}/chat/completions",
                        headers=headers,
                        json=payload,
                    )

                latency_ms = int((datetime.now(UTC) - start_time).total_seconds() * 1000)

                if response.status_code == 200:
                    data = response.json()
                    return self._parse_response(data, latency_ms)

                if response.status_code == 429:
                    last_error = GPTRateLimitError(f"Rate limited (attempt {attempt + 1})")
                    await logger.awarning(
                        "gpt_rate_limited",
                        attempt=attempt + 1,
                        max_retries=self.max_retries,
                    )
                elif response.status_code >= 500:
                    last_error = GPTAPIError(
                        f"Server error: {response.status_code}",
                        status_code=response.status_code,
                    )
                    await logger.awarning(
                        "gpt_server_error",
                        status_code=response.status_code,
                        attempt=attempt + 1,
                    )
                else:
                    raise GPTAPIError(
                        f"API error {response.status_code}: {response.text}",
                        status_code=response.status_code,
                    )

            except httpx.TimeoutException:
                last_error = GPTTimeoutError(f"Request timed out (attempt {attempt + 1})")
                await logger.awarning(
                    "gpt_timeout",
                    attempt=attempt + 1,
                    timeout_seconds=self.timeout,
                )

            except httpx.RequestError as e:
                last_error = GPTClientError(f"Request failed: {e}")
                await logger.awarning(
                    "gpt_request_error",
                    error=str(e),
                    attempt=attempt + 1,
                )

            if attempt < self.max_retries - 1:
                await asyncio.sleep(2**attempt)

        raise last_error or GPTClientError("All retries exhausted")

    def _parse_response(self, data: dict[str, Any], latency_ms: int) -> GPTResponse:
        """Parse OpenAI API response."""
        try:
            choice = data["choices"][0]
            content = choice["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as exc:
            raise GPTAPIError(f"Malformed completion payload: {exc}") from exc
        usage = data.get("usage") or {}

        return GPTResponse(
            content=content,
            model=data.get("model", self.model),
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
            total_tokens=usage.get("total_tokens", 0),
            latency_ms=latency_ms,
            finish_reason=choice.get("finish_reason", "unknown"),
        )
