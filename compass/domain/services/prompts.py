"""
Prompt builders.

Pure functions turning domain records into the text sent to the LLM. The
response shape is appended by ``LLMService`` from the pydantic response
model, so the prompts here only describe the shape in prose.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from compass.domain.models import (
    AssessmentDefinition,
    GeneratedQuestion,
    QuestionResponse,
    UserProfile,
)

NOT_ANSWERED = "Not answered"

HOBBY_SCENARIOS: dict[str, tuple[str, str]] = {
    "Gaming": ("online gaming communities", "competitive gaming"),
    "Sports": ("team sports", "athletic challenges"),
    "Music": ("musical performances", "creative expression"),
    "Art/Drawing": ("artistic projects", "creative showcases"),
    "Technology": ("tech projects", "digital innovation"),
    "Social Media": ("online interactions", "digital communication"),
    "Volunteering": ("community service", "helping others"),
}

MAX_SCENARIOS = 4


@dataclass(slots=True, frozen=True)
class CategoryBlueprint:
    question_count: int
    kind: str
    question_hint: str
    option_hint: str
    dimension_hint: str
    dimensions: tuple[str, ...]


CATEGORY_BLUEPRINTS: dict[str, CategoryBlueprint] = {
    "personality": CategoryBlueprint(
        question_count=8,
        kind="psychological personality assessment",
        question_hint="Age and interest-appropriate scenario question",
        option_hint="Response reflecting a personality trait",
        dimension_hint="personality_trait_being_measured",
        dimensions=(
            "extroversion",
            "conscientiousness",
            "openness",
            "agreeableness",
            "emotional_stability",
            "leadership",
            "decision_making",
            "stress_response",
        ),
    ),
    "strengths": CategoryBlueprint(
        question_count=6,
        kind="strengths discovery",
        question_hint="Question about their actual experiences and natural talents",
        option_hint="Strength indicator",
        dimension_hint="strength_area_being_measured",
        dimensions=(
            "analytical_thinking",
            "creativity",
            "leadership",
            "communication",
            "empathy",
            "organization",
            "problem_solving",
        ),
    ),
    "interests": CategoryBlueprint(
        question_count=6,
        kind="interest exploration",
        question_hint="Question about potential new interests and motivations",
        option_hint="Interest area",
        dimension_hint="interest_category",
        dimensions=(
            "stem_interests",
            "business_interests",
            "creative_interests",
            "social_interests",
            "hands_on_interests",
        ),
    ),
    "values": CategoryBlueprint(
        question_count=6,
        kind="values assessment",
        question_hint="Question about meaningful choices and priorities",
        option_hint="Value-driven choice",
        dimension_hint="core_value",
        dimensions=(
            "achievement",
            "security",
            "helping_others",
            "creativity",
            "independence",
            "stability",
            "adventure",
            "recognition",
        ),
    ),
    "cognitive_skills": CategoryBlueprint(
        question_count=5,
        kind="cognitive skills",
        question_hint="Question about their thinking and learning preferences",
        option_hint="Learning style",
        dimension_hint="cognitive_skill",
        dimensions=(
            "analytical_thinking",
            "creative_thinking",
            "spatial_reasoning",
            "verbal_reasoning",
            "memory_strategies",
        ),
    ),
}

GENERIC_QUESTION_COUNT = 5
GENERIC_DIMENSION = "general_development"


@dataclass(slots=True, frozen=True)
class QuestionPrompt:
    text: str
    question_count: int
    dimensions: tuple[str, ...]


def user_context(age: int) -> str:
    """Describe the user's life stage for prompt wording."""
    if age < 16:
        return "young high school student"
    if age < 18:
        return "high school student approaching graduation"
    if age < 22:
        return "college-age young adult"
    if age < 30:
        return "young professional"
    return "adult professional"


def personalized_scenarios(age: int, hobbies: Sequence[str]) -> str:
    if age < 18:
        scenarios = ["school projects", "friend groups", "family expectations", "college decisions"]
    elif age < 25:
        scenarios = ["college life", "internships", "first jobs", "independence"]
    else:
        scenarios = ["career decisions", "workplace dynamics", "life goals", "relationships"]

    for hobby, phrases in HOBBY_SCENARIOS.items():
        if hobby in hobbies:
            scenarios.extend(phrases)

    return ", ".join(scenarios[:MAX_SCENARIOS]) or "everyday life situations"


def build_question_prompt(assessment: AssessmentDefinition, profile: UserProfile) -> QuestionPrompt:
    """Prompt for the questions of one quiz attempt, personalised to ``profile``."""
    age = profile.age
    hobbies = profile.hobbies
    challenges = profile.challenges
    context = user_context(age)
    scenarios = personalized_scenarios(age, hobbies)

    blueprint = CATEGORY_BLUEPRINTS.get(assessment.category)
    if blueprint is None:
        text = f"""
Generate {GENERIC_QUESTION_COUNT} general assessment questions for the category \
"{assessment.title or assessment.category}".
Focus on broad areas relevant to personal and career development.

Answer with an object holding "questions": a list where every item has
"question" (general question text), "options" (4 distinct options) and
"dimension" ("{GENERIC_DIMENSION}").

Guidelines:
- Options should be distinct and reflect different approaches.
- Ensure questions are neutral and applicable to a {context}.
"""
        return QuestionPrompt(
            text=text, question_count=GENERIC_QUESTION_COUNT, dimensions=(GENERIC_DIMENSION,)
        )

    hobby_text = ", ".join(hobbies) or "general activities"
    challenge_text = ", ".join(challenges) or "typical life challenges"
    top_hobbies = ", ".join(hobbies[:3]) or "none listed"

    text = f"""
Generate {blueprint.question_count} {blueprint.kind} questions for a {age}-year-old {context}.
Education status: {profile.education_status}
Their hobbies include: {hobby_text}
Their challenges include: {challenge_text}

Create relatable scenarios based on their actual interests and age-appropriate situations.

Answer with an object holding "questions": a list where every item has
"question" ({blueprint.question_hint}), "options" (4 options, each a \
{blueprint.option_hint}) and "dimension" ({blueprint.dimension_hint}).

Guidelines:
- Use scenarios from their actual hobbies: {top_hobbies}
- Reference age-appropriate situations for {age}-year-olds
- Include scenarios about {scenarios}
- NO generic "agree/disagree" questions
- Make options reflect different approaches, not right/wrong answers
- Measure: {", ".join(blueprint.dimensions)}
"""
    return QuestionPrompt(
        text=text, question_count=blueprint.question_count, dimensions=blueprint.dimensions
    )


def build_scoring_prompt(
    assessment: AssessmentDefinition,
    questions: Sequence[GeneratedQuestion],
    responses: Sequence[QuestionResponse | None],
    profile: UserProfile,
) -> str:
    """Transcript prompt asking for per-dimension scores and insights."""
    context = user_context(profile.age)

    transcript = []
    for index, question in enumerate(questions):
        response = responses[index] if index < len(responses) else None
        answer = response.answer if response is not None and response.answer else NOT_ANSWERED
        transcript.append(
            f"Question {index + 1}: {question.question}\n"
            f"Answer: {answer}\n"
            f"Dimension: {question.dimension}"
        )
    joined = "\n\n".join(transcript)

    return f"""
Analyze these assessment responses for the "{assessment.title}" assessment:

User Context: {context}

Assessment Questions and Responses:
{joined}

Based on these responses provide:
- "scores": a score from 0 to 100 for each dimension above
- "insights": "primary_traits" (3 traits), "strengths" (3 strengths),
  "development_areas" (2 areas) and "summary" (a comprehensive 2-3 sentence
  summary of this person's profile based on their responses)

Make the insights specific, actionable, and encouraging for a {context}.
"""


def build_career_recommendation_prompt(
    profile: UserProfile,
    insights: Sequence[dict[str, Any]],
    career_fields: Sequence[dict[str, Any]],
) -> str:
    field_lines = []
    for field in career_fields:
        strengths = ", ".join(field.get("required_strengths") or []) or "None specified"
        personality = ", ".join(field.get("personality_match") or []) or "None specified"
        field_lines.append(
            f"- {field.get('title')}: {field.get('description', '')}\n"
            f"  Category: {field.get('category', '')}\n"
            f"  Required Strengths: {strengths}\n"
            f"  Personality Match: {personality}\n"
            f"  Academic Requirements: {json.dumps(field.get('academic_requirements') or {})}"
        )

    return f"""
Based on the following personality assessment results, recommend the most suitable career fields:

User Profile:
- Academic Info: {json.dumps(profile.academic_info)}
- Assessment Results: {json.dumps(list(insights))}

Available Career Fields:
{chr(10).join(field_lines) or "- Any field you consider a strong match"}

For every recommendation give the field name, a match percentage (0-100), a
detailed reasoning, the key alignments, the growth potential (High/Medium/Low)
and specific actionable next steps.

Consider:
1. Personality traits and how they align with career requirements
2. Identified strengths and how they apply to different fields
3. Academic performance and requirements
4. Interest areas and values
5. Growth potential and market demand

Provide 5-8 recommendations, ranked by match percentage.
"""


def build_skill_roadmap_prompt(career_field: str) -> str:
    return (
        f'Create a skill roadmap for someone pursuing a career in "{career_field}". '
        "Include technical skills, soft skills, and key experiences to gain."
    )


def build_goal_suggestion_prompt(profile: UserProfile) -> str:
    career_path = profile.career_path or "their chosen career"
    education_status = profile.academic_info.get("education_status") or "a student"
    age = profile.personal_background.get("age") or "unknown age"
    return f"""
Based on a user's goal of pursuing a career in "{career_path}", their current status \
as {education_status}, and their age of {age}, generate 3-4 specific and actionable goals.
Categorize each goal as 'academic', 'skill_development', 'personal_growth' or 'career'.
Each goal needs a title and a brief description of the goal and why it is important \
for {career_path}.
"""


def build_portfolio_checklist_prompt(career_field: str) -> str:
    return f"""
A user wants to build a portfolio for a career in "{career_field}". What are 5-6 \
essential components of a strong portfolio for this specific field?
For each give the essential portfolio item (e.g. 'Project Case Studies') and a brief \
explanation of what it is and why it is important for a {career_field} role.
"""


def build_mentor_search_prompt(
    field: str | None, experience: str | None, location: str | None
) -> str:
    return f"""
Find real, verified mentors and professionals who are publicly available for mentoring \
in these areas:

Search Criteria:
- Field/Industry: {field or "any field"}
- Experience Level: {experience or "any level"}
- Location: {location or "any location"}

Search specifically on these verified platforms for mentoring:
1. LinkedIn (professionals who mention mentoring in their profiles)
2. MentorCruise (verified mentoring platform)
3. ADPList (free mentoring platform)
4. Ten Thousand Coffees (professional mentoring)
5. MentorCode (tech mentoring)
6. Clarity.fm (business mentoring)

IMPORTANT: Only include mentors who:
- Have publicly available profiles
- Actively offer mentoring services
- Have verified professional experience
- Include their real platform links

Focus on quality over quantity: provide 4-6 highly relevant, verified mentors.
Ensure all profile URLs are real and accessible.
"""


def build_job_search_prompt(
    field: str | None, location: str | None, experience: str | None, salary: str | None
) -> str:
    return f"""
Find current job opportunities based on these criteria. Use accurate, real-time data \
from major job boards like Indeed, LinkedIn, Glassdoor:

- Job Field: "{field or "any field"}"
- Location: "{location or "any location"}"
- Experience Level: "{experience or "entry-level"}"
- Salary Range: "{salary or "any salary"}"

Return a list of 5-6 actual job listings.

Important: Provide links to real, current job postings that users can actually apply to. \
Focus on accuracy and current market availability.
"""


def build_university_search_prompt(
    major: str | None,
    location: str | None,
    max_tuition: int,
    part_time_jobs: bool,
    boarding: bool,
) -> str:
    return f"""
Find universities or colleges based on these specific criteria. Use accurate, real-time \
data from official university websites and educational databases:

- Major/Field of study: "{major or "any"}"
- Location: "{location or "any location"}"
- Maximum annual tuition cost: ${max_tuition}
- Must have nearby part-time job opportunities: {"Yes" if part_time_jobs else "No"}
- Must offer on-campus boarding/housing: {"Yes" if boarding else "No"}

Return a list of 5-6 matching institutions with accurate information.

Important: Provide accurate, verifiable information only. Include direct links to \
official university websites.
"""


def build_market_trends_prompt() -> str:
    return (
        "Identify current job market trends: the growing fields and the declining fields, "
        "each with a brief reason."
    )


def build_currency_conversion_prompt(amount: float, from_currency: str, to_currency: str) -> str:
    return f"""
Convert {amount} {from_currency} to {to_currency} using current exchange rates.
Report the converted amount, the exchange rate, both currency codes and the original amount.
Use accurate, real-time exchange rates from financial sources.
"""
