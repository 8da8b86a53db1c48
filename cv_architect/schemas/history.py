"""Pydantic schemas for persisted analysis history."""

from __future__ import annotations

from pydantic import BaseModel, Field

from cv_architect.schemas.analysis import AnalysisResult


class HistoryItem(BaseModel):
    """An immutable snapshot of one successful analysis."""

    id: str = Field(..., description="Time-derived unique identifier")
    date: int = Field(..., description="Creation time in epoch milliseconds")
    title: str = Field(..., description="Detected role, used as the entry title")
    score: int = Field(..., ge=0, le=100, description="Overall score of the analysis")
    result: AnalysisResult


class HistorySummary(BaseModel):
    """History entry without the full result, for list views."""

    id: str
    date: int
    title: str
    score: int

    @classmethod
    def from_item(cls, item: HistoryItem) -> "HistorySummary":
        return cls(id=item.id, date=item.date, title=item.title, score=item.score)
