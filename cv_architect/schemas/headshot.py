"""Pydantic schema for professional headshot feedback."""

from pydantic import Field

from cv_architect.schemas.analysis import CamelModel, Score


class HeadshotAnalysis(CamelModel):
    score: Score = Field(..., description="0-100 score on professionalism")
    professionalism: str = Field(..., description="Assessment of overall look")
    lighting: str = Field(..., description="Feedback on lighting quality")
    background: str = Field(..., description="Feedback on background distraction/color")
    attire: str = Field(..., description="Feedback on clothing choice")
    expression: str = Field(..., description="Feedback on facial expression")
    tips: list[str] = Field(..., description="3 actionable tips to improve")
