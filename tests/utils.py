from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from compass.api.deps import issue_smoke_token
from compass.core.auth import Role
from compass.domain.models import AssessmentDefinition, GeneratedQuestion, UserProfile
from compass.infrastructure.db.models import EntityType
from compass.infrastructure.repositories.entity_store import EntityStore, EntityStoreError
from compass.libs.llm import GenerationFailure
from pydantic import BaseModel

DEFAULT_EMAIL = "student@example.com"


def auth_headers(email: str = DEFAULT_EMAIL, role: Role = Role.USER) -> dict[str, str]:
    token = issue_smoke_token(f"user-{email}", email=email, role=role)
    return {"Authorization": f"Bearer {token}"}


@dataclass
class LLMCall:
    prompt: str
    response_model: str
    add_context_from_internet: bool


@dataclass
class FakeLLM:
    """Scripted stand-in for ``LLMService``.

    ``responses`` maps a response model to a dict (validated into the model),
    a model instance, or an exception to raise. Unscripted models fail the
    way a rejected LLM call does.
    """

    responses: dict[type[BaseModel], Any] = field(default_factory=dict)
    calls: list[LLMCall] = field(default_factory=list)

    def script(self, response_model: type[BaseModel], response: Any) -> None:
        self.responses[response_model] = response

    async def invoke(
        self,
        prompt: str,
        response_model: type[BaseModel],
        *,
        add_context_from_internet: bool = False,
    ) -> BaseModel:
        self.calls.append(LLMCall(prompt, response_model.__name__, add_context_from_internet))
        if response_model not in self.responses:
            raise GenerationFailure(f"No scripted answer for {response_model.__name__}")

        response = self.responses[response_model]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, BaseModel):
            return response
        return response_model.model_validate(response)

    def prompts_for(self, response_model: type[BaseModel]) -> list[str]:
        name = response_model.__name__
        return [call.prompt for call in self.calls if call.response_model == name]


def question_set(dimensions: list[str]) -> dict[str, Any]:
    """A ``QuestionSet`` payload with one four-option question per dimension."""
    return {
        "questions": [
            {
                "question": f"Scenario question about {dimension}?",
                "options": [f"{dimension} option {letter}" for letter in "ABCD"],
                "dimension": dimension,
            }
            for dimension in dimensions
        ]
    }


def make_questions(count: int) -> tuple[GeneratedQuestion, ...]:
    return tuple(
        GeneratedQuestion(
            question=f"Question {index + 1}?",
            options=("A", "B", "C", "D"),
            dimension=f"dimension_{index + 1}",
        )
        for index in range(count)
    )


def make_assessment(category: str = "values", title: str = "Core Values") -> AssessmentDefinition:
    return AssessmentDefinition(id=f"assessment-{category}", title=title, category=category)


def make_profile(
    *,
    age: int | None = 20,
    hobbies: list[str] | None = None,
    challenges: list[str] | None = None,
    education_status: str = "college_student",
) -> UserProfile:
    background: dict[str, Any] = {
        "hobbies": hobbies or [],
        "current_challenges": challenges or [],
    }
    if age is not None:
        background["age"] = age
    return UserProfile(
        id="profile-1",
        email=DEFAULT_EMAIL,
        version=1,
        academic_info={"education_status": education_status},
        personal_background=background,
    )


class FailingStore:
    """Store wrapper whose writes fail for the listed entity types."""

    def __init__(
        self,
        inner: EntityStore,
        *,
        create_fails_for: frozenset[EntityType] = frozenset(),
        update_fails_for: frozenset[EntityType] = frozenset(),
        delete_fails_for: frozenset[EntityType] = frozenset(),
    ) -> None:
        self.inner = inner
        self.create_fails_for = create_fails_for
        self.update_fails_for = update_fails_for
        self.delete_fails_for = delete_fails_for

    def __getattr__(self, name: str) -> Any:
        return getattr(self.inner, name)

    async def create(self, entity_type: EntityType, *args: Any, **kwargs: Any) -> Any:
        if entity_type in self.create_fails_for:
            raise EntityStoreError("database unavailable")
        return await self.inner.create(entity_type, *args, **kwargs)

    async def update(self, entity_type: EntityType, *args: Any, **kwargs: Any) -> Any:
        if entity_type in self.update_fails_for:
            raise EntityStoreError("database unavailable")
        return await self.inner.update(entity_type, *args, **kwargs)

    async def delete(self, entity_type: EntityType, *args: Any, **kwargs: Any) -> Any:
        if entity_type in self.delete_fails_for:
            raise EntityStoreError("database unavailable")
        return await self.inner.delete(entity_type, *args, **kwargs)
