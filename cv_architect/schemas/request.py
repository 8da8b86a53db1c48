"""Schemas describing what is sent for analysis."""

from __future__ import annotations

from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

Market = Literal[
    "Bangladesh",
    "Asia/South Asia",
    "Global",
    "Tech",
    "Academic",
    "Government",
]

MARKETS: tuple[str, ...] = get_args(Market)


class TextPayload(BaseModel):
    """CV content available as plain text (pasted or extracted from DOCX)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    extracted_text: str


class BinaryPayload(BaseModel):
    """CV content the model ingests natively (PDF, PNG, JPEG, WEBP)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["binary"] = "binary"
    mime_type: str
    data_base64: str
    file_name: str | None = None


CVPayload = TextPayload | BinaryPayload


class AnalysisRequest(BaseModel):
    """Immutable input of a single analysis."""

    model_config = ConfigDict(frozen=True)

    cv_payload: CVPayload = Field(..., discriminator="kind")
    job_description: str | None = None
    target_market: Market = "Bangladesh"
