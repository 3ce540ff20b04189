"""
LLM invocation boundary.

Every generated artifact in the service (assessment questions, scores and
insights, recommendations, search results) goes through
``LLMService.invoke``: a prompt plus a pydantic response model in, a
validated instance of that model out. The JSON schema shown to the model is
derived from the same pydantic model that validates the answer.
"""

from __future__ import annotations

import json
from typing import Any, Protocol, TypeVar

import structlog
from compass.core.config import get_settings
from compass.libs.gpt_client import GPTClientError, GPTClientProtocol, OpenAIClient
from pydantic import BaseModel, ValidationError

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)

SYSTEM_PROMPT = """You are the analysis engine of a career guidance platform \
for students and early-career professionals.
Answer with a single JSON object only, no prose and no markdown.
The JSON object must validate against this JSON Schema:
{schema}
"""


class GenerationFailure(Exception):
    """Raised when the LLM call rejects, times out, or returns invalid data."""


class LLMProtocol(Protocol):
    """Protocol for the LLM boundary (allows scripted fakes in tests)."""

    async def invoke(
        self,
        prompt: str,
        response_model: type[ModelT],
        *,
        add_context_from_internet: bool = False,
    ) -> ModelT:
        """Return ``response_model`` parsed from the LLM answer to ``prompt``."""
        ...


class LLMService:
    """Schema-constrained LLM calls on top of the chat completions client."""

    def __init__(
        self,
        gpt_client: GPTClientProtocol | None = None,
        *,
        search_model: str | None = None,
        max_tokens: int | None = None,
    ) -> None:
        settings = get_settings()
        self.gpt_client = gpt_client or OpenAIClient()
        self.search_model = search_model or settings.openai_search_model
        self.max_tokens = max_tokens or settings.gpt_max_tokens

    async def invoke(
        self,
        prompt: str,
        response_model: type[ModelT],
        *,
        add_context_from_internet: bool = False,
    ) -> ModelT:
        schema = response_model.model_json_schema()
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT.format(schema=json.dumps(schema))},
            {"role": "user", "content": prompt.strip()},
        ]

        if add_context_from_internet:
            request: dict[str, Any] = {
                "model": self.search_model,
                "temperature": None,
                "response_format": None,
            }
        else:
            request = {
                "model": None,
                "temperature": 0.7,
                "response_format": {"type": "json_object"},
            }

        try:
            response = await self.gpt_client.chat_completion(
                messages=messages,
                max_tokens=self.max_tokens,
                **request,
            )
        except GPTClientError as exc:
            await logger.awarning(
                "llm_invoke_failed",
                response_model=response_model.__name__,
                internet_context=add_context_from_internet,
                error=str(exc),
            )
            raise GenerationFailure(f"LLM call failed: {exc}") from exc

        parsed = parse_structured(response.content, response_model)
        await logger.ainfo(
            "llm_invoke_completed",
            response_model=response_model.__name__,
            model=response.model,
            latency_ms=response.latency_ms,
            total_tokens=response.total_tokens,
        )
        return parsed


def parse_structured(content: str, response_model: type[ModelT]) -> ModelT:
    """Decode and validate a model answer, raising ``GenerationFailure`` on any mismatch."""
    text = _strip_code_fence(content.strip())

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        # Search-enabled models sometimes wrap the object in prose
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise GenerationFailure("LLM answer contains no JSON object") from None
        try:
            data = json.loads(text[start : end + 1])
        except json.JSONDecodeError as exc:
            raise GenerationFailure(f"Invalid JSON in LLM answer: {exc}") from exc

    if not isinstance(data, dict):
        raise GenerationFailure("LLM answer is not a JSON object")

    try:
        return response_model.model_validate(data)
    except ValidationError as exc:
        raise GenerationFailure(
            f"LLM answer does not match {response_model.__name__}: {exc.error_count()} error(s)"
        ) from exc


def _strip_code_fence(content: str) -> str:
    if not content.startswith("```"):
        return content
    lines = content.split("\n")
    if lines[-1].strip() == "```":
        lines = lines[:-1]
    return "\n".join(lines[1:])
