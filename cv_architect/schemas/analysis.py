"""Pydantic schemas for CV analysis results.

These models are the single definition of a valid analysis. Their JSON
schema (camelCase, by alias) is sent to the model as the generation
constraint, and the same models validate whatever comes back.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _round_score(value: object) -> object:
    # Models occasionally answer 78.0 or 78.4 for an integer score.
    if isinstance(value, float):
        return round(value)
    return value


Score = Annotated[int, BeforeValidator(_round_score), Field(ge=0, le=100)]

SectionStatus = Literal["good", "warning", "critical", "missing"]
ResourceType = Literal["Course", "Article", "Project"]
Difficulty = Literal["Beginner", "Intermediate", "Advanced"]


class CamelModel(BaseModel):
    """Base model serialized with the camelCase names used on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class AnalysisScores(CamelModel):
    ats_score: Score = Field(..., description="Score 0-100 based on parseability and keyword density")
    keyword_match: Score = Field(..., description="Score 0-100 based on JD keyword presence")
    skills_score: Score = Field(..., description="Score 0-100 on hard/soft skills coverage vs JD")
    experience_score: Score = Field(..., description="Score 0-100 on relevance and depth of experience")
    format_score: Score = Field(..., description="Score 0-100 on layout, bullet points, and readability")
    overall_score: Score = Field(..., description="Aggregate employability rating 0-100")


class KeywordAnalysis(CamelModel):
    present: list[str] = Field(..., description="JD keywords found in the CV")
    missing: list[str] = Field(..., description="JD keywords absent from the CV")
    score: Score = Field(..., description="Keyword optimization score 0-100")


class SectionFeedback(CamelModel):
    section_name: str
    status: SectionStatus
    feedback: str
    suggestion: str


class SalaryEstimation(CamelModel):
    min: str = Field(..., description="Minimum estimated salary (e.g., '50,000 BDT', '$50k')")
    max: str = Field(..., description="Maximum estimated salary")
    currency: str = Field(..., description="Currency code (e.g. USD, BDT)")
    explanation: str = Field(..., description="Reasoning based on experience and market")


class LinkedinAudit(CamelModel):
    headline: str = Field(..., description="Optimized LinkedIn Headline with keywords")
    about_summary: str = Field(..., description="An 'About' section for LinkedIn (1st person)")
    missing_sections: list[str] = Field(
        ..., description="What is missing compared to a rockstar profile"
    )
    banner_suggestion: str = Field(..., description="Idea for a background banner image")


class LearningResource(CamelModel):
    skill: str
    recommendation: str = Field(..., description="Specific topic or course name to search")
    type: ResourceType


class ProjectIdea(CamelModel):
    title: str
    description: str = Field(..., description="What to build and why it helps this CV")
    tech_stack: list[str] = Field(..., description="Tools/Languages to use")
    difficulty: Difficulty


class AnalysisPayload(CamelModel):
    """Exactly the fields the model is asked to generate."""

    scores: AnalysisScores
    summary: str = Field(..., description="Executive summary of the CV quality")
    job_title_detected: str = Field(..., description="The candidate's primary role detected from CV")
    strengths: list[str] = Field(..., description="List of top 3-5 strengths")
    weaknesses: list[str] = Field(..., description="List of top 3-5 critical gaps or weaknesses")
    keywords: KeywordAnalysis
    section_analysis: list[SectionFeedback]
    rewritten_summary: str | None = Field(
        None, description="An optimized professional summary suggestion"
    )
    market_fit: str = Field(..., description="The analyzed market context")
    interview_questions: list[str] = Field(
        ..., description="5 likely interview questions based on the gaps or specific JD requirements"
    )
    cover_letter: str = Field(
        ..., description="A draft cover letter connecting the candidate's experience to the specific JD"
    )
    salary_estimation: SalaryEstimation
    linkedin_audit: LinkedinAudit
    learning_path: list[LearningResource] = Field(
        ..., description="Resources to learn missing skills"
    )
    project_ideas: list[ProjectIdea] = Field(
        ..., description="3 Project ideas to fill experience gaps"
    )


class AnalysisResult(AnalysisPayload):
    """A validated analysis stamped with its creation time (epoch millis)."""

    timestamp: int | None = Field(
        None, description="Creation time in epoch milliseconds, set after parsing"
    )
