"""Composes the single outbound model request for a CV analysis."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from cv_architect.adapters.llm.base import InlineData, Part
from cv_architect.core.config import settings
from cv_architect.core.errors import ValidationAppError
from cv_architect.schemas.analysis import AnalysisPayload
from cv_architect.schemas.request import AnalysisRequest, BinaryPayload

SYSTEM_INSTRUCTION = (
    "You are an expert CV & Career Architect. Provide critical, actionable, "
    "HR-grade feedback. Always estimate salary based on the specific market requested."
)

NO_JOB_DESCRIPTION_MARKER = (
    "JOB DESCRIPTION: None provided (Analyze for general employability)"
)

CV_TEXT_HEADER = "CV TEXT CONTENT:\n"

LOCAL_CURRENCY_MARKET = "Bangladesh"


@dataclass(frozen=True)
class OutboundRequest:
    """Everything sent to the model for one analysis."""

    parts: tuple[Part, ...]
    schema: dict[str, Any]
    system_instruction: str
    temperature: float


@lru_cache(maxsize=1)
def analysis_response_schema() -> dict[str, Any]:
    """JSON schema of the fields the model must generate, camelCase by alias."""
    return AnalysisPayload.model_json_schema(by_alias=True)


def salary_instruction(target_market: str) -> str:
    if target_market == LOCAL_CURRENCY_MARKET:
        return (
            f'Estimate a **Monthly** salary range for this profile in the "{target_market}" market.\n'
            "   - **CRITICAL:** Use **BDT** currency and monthly figures typical for Dhaka."
        )
    return (
        f'Estimate an **Annual** salary range for this profile in the "{target_market}" market.\n'
        "   - **CRITICAL:** Use **USD** currency and annual figures."
    )


def job_description_block(job_description: str | None) -> str:
    if job_description and job_description.strip():
        return f'JOB DESCRIPTION:\n"{job_description}"'
    return NO_JOB_DESCRIPTION_MARKER


def build_prompt(target_market: str, job_description: str | None) -> str:
    """Build the instruction block for a market and optional job description.

    Args:
        target_market: Market label; selects the salary currency and period.
        job_description: Job description text, or None for a general review.

    Returns:
        Prompt text preceding the CV payload.
    """
    return f"""
Act as a Senior HR Consultant, Compensation Analyst, and Career Coach.
Analyze the provided CV/Resume against the Job Description (JD) for the "{target_market}" market.

**Core Analysis Strategy:**
1. **Automated Content Analysis:** Benchmark role suitability, experience depth vs JD, and skills matrix.
2. **Gap Identification:** Identify missing mandatory sections, weak action verbs, and generic statements.
3. **ATS Optimization:** Check for keyword matches, formatting issues, and compliance.
4. **Language Quality:** Evaluate grammar, tone, and clarity.

**Career Ecosystem Outputs:**
5. **Salary Benchmarking:** {salary_instruction(target_market)}
6. **LinkedIn Audit:** Create an optimized Headline and About section for LinkedIn based on the CV.
7. **Upskilling:** For every missing keyword/skill, suggest a specific learning resource/topic.
8. **Project Portfolio Generator:** Based on the MISSING skills or experience gaps, suggest 3 practical, impressive projects the candidate can build and add to their CV.

**Scoring Rubric (Strict, integers 0-100):**
- **ATS Score:** Parsing success, standard headers.
- **Keyword Match:** % of hard/soft skills from JD found in CV.
- **Skills Score:** Technical/Functional proficiency match.
- **Experience Score:** Relevance of past roles to target JD.
- **Format Score:** Readability, bullet point structure.
- **Overall Score:** Weighted average.

**Additional Outputs Required:**
- **Interview Questions:** 5 tough, role-specific questions.
- **Cover Letter:** Professional cover letter (max 250 words).

**Input Data:**
{job_description_block(job_description)}

CV Content is provided below.
""".strip()


def build_cv_part(request: AnalysisRequest) -> Part:
    """Return the CV as an inline binary part or a text block.

    Raises:
        ValidationAppError: If the payload carries no content at all.
    """
    payload = request.cv_payload
    if isinstance(payload, BinaryPayload):
        if payload.data_base64:
            return InlineData(mime_type=payload.mime_type, data_base64=payload.data_base64)
    elif payload.extracted_text.strip():
        return f"{CV_TEXT_HEADER}{payload.extracted_text}"

    raise ValidationAppError(
        code="empty_cv",
        message="No CV content provided",
        details={"hint": "Upload a CV file or paste the CV text."},
    )


def build_analysis_request(request: AnalysisRequest) -> OutboundRequest:
    """Compose prompt, CV part, schema and generation settings.

    Pure: performs no I/O, so an empty CV fails before any network call.
    """
    cv_part = build_cv_part(request)
    return OutboundRequest(
        parts=(build_prompt(request.target_market, request.job_description), cv_part),
        schema=analysis_response_schema(),
        system_instruction=SYSTEM_INSTRUCTION,
        temperature=settings.llm.temperature,
    )
