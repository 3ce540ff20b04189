"""
Internet-backed lookups: mentors, jobs, universities, market trends and
currency conversion.

These features are best effort. When the LLM call fails the caller gets an
empty result flagged ``degraded`` instead of an error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeVar

import structlog
from compass.domain.llm_schemas import (
    CurrencyConversion,
    JobResults,
    MarketTrends,
    MentorResults,
    UniversityResults,
)
from compass.domain.services.prompts import (
    build_currency_conversion_prompt,
    build_job_search_prompt,
    build_market_trends_prompt,
    build_mentor_search_prompt,
    build_university_search_prompt,
)
from compass.libs.llm import GenerationFailure, LLMProtocol
from pydantic import BaseModel

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_MAX_TUITION = 50000


@dataclass(slots=True)
class SearchOutcome:
    items: list[dict[str, Any]] = field(default_factory=list)
    degraded: bool = False


async def invoke_or_degrade(
    llm: LLMProtocol,
    prompt: str,
    response_model: type[ModelT],
    *,
    feature: str,
    add_context_from_internet: bool = True,
) -> ModelT | None:
    """Run one LLM call, returning ``None`` (and logging) when it fails."""
    try:
        return await llm.invoke(
            prompt, response_model, add_context_from_internet=add_context_from_internet
        )
    except GenerationFailure as exc:
        await logger.awarning("search_degraded", feature=feature, error=str(exc))
        return None


class DiscoveryService:
    def __init__(self, llm: LLMProtocol) -> None:
        self.llm = llm

    async def search_mentors(
        self,
        *,
        field: str | None = None,
        experience: str | None = None,
        location: str | None = None,
    ) -> SearchOutcome:
        prompt = build_mentor_search_prompt(field, experience, location)
        result = await invoke_or_degrade(self.llm, prompt, MentorResults, feature="mentors")
        if result is None:
            return SearchOutcome(degraded=True)
        return SearchOutcome(items=[mentor.model_dump() for mentor in result.mentors])

    async def search_jobs(
        self,
        *,
        field: str | None = None,
        location: str | None = None,
        experience: str | None = None,
        salary: str | None = None,
    ) -> SearchOutcome:
        prompt = build_job_search_prompt(field, location, experience, salary)
        result = await invoke_or_degrade(self.llm, prompt, JobResults, feature="jobs")
        if result is None:
            return SearchOutcome(degraded=True)
        return SearchOutcome(items=[job.model_dump() for job in result.jobs])

    async def search_universities(
        self,
        *,
        major: str | None = None,
        career_field: str | None = None,
        location: str | None = None,
        max_tuition: int = DEFAULT_MAX_TUITION,
        part_time_jobs: bool = False,
        boarding: bool = False,
    ) -> SearchOutcome:
        prompt = build_university_search_prompt(
            major or career_field, location, max_tuition, part_time_jobs, boarding
        )
        result = await invoke_or_degrade(
            self.llm, prompt, UniversityResults, feature="universities"
        )
        if result is None:
            return SearchOutcome(degraded=True)
        return SearchOutcome(items=[university.model_dump() for university in result.universities])

    async def market_trends(self) -> tuple[MarketTrends, bool]:
        result = await invoke_or_degrade(
            self.llm, build_market_trends_prompt(), MarketTrends, feature="market_trends"
        )
        if result is None:
            return MarketTrends(), True
        return result, False

    async def convert_currency(
        self, *, amount: float, from_currency: str, to_currency: str
    ) -> CurrencyConversion | None:
        """Return the conversion, or ``None`` when no rate could be obtained."""
        prompt = build_currency_conversion_prompt(amount, from_currency, to_currency)
        return await invoke_or_degrade(self.llm, prompt, CurrencyConversion, feature="currency")
