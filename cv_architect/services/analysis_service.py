"""CV analysis orchestrator.

Turns an AnalysisRequest into a validated, timestamped AnalysisResult:
- Builds the outbound request (prompt, CV part, response schema)
- Resolves the LLM client, which reports a missing credential up front
- Issues exactly one model call, with no retry
- Validates the JSON against the result schema, failing closed
- Classifies failures into user-facing categories
"""

from __future__ import annotations

import logging
import re
import time
from typing import Callable

from pydantic import ValidationError

from cv_architect.adapters.llm.base import AbstractLLMClient
from cv_architect.adapters.llm.factory import MISSING_CREDENTIAL_MESSAGE, create_llm_client
from cv_architect.core.errors import (
    LLMAppError,
    MalformedResponseError,
    MissingCredentialError,
    PayloadRejectedError,
    QuotaExceededError,
    ServiceUnavailableError,
    UnknownLLMError,
)
from cv_architect.schemas.analysis import AnalysisResult
from cv_architect.schemas.request import AnalysisRequest
from cv_architect.services.request_builder import build_analysis_request

logger = logging.getLogger(__name__)

PAYLOAD_REJECTED_MESSAGE = (
    "The file or content was rejected by the AI. It might be too large or corrupted. "
    "Try a smaller PDF."
)
QUOTA_EXCEEDED_MESSAGE = (
    "Traffic limit exceeded (Quota). Please wait a minute and try again."
)
SERVICE_UNAVAILABLE_MESSAGE = (
    "AI Service is temporarily unavailable. Please try again later."
)
MALFORMED_RESPONSE_MESSAGE = "The AI returned an unexpected response. Please try again."
UNKNOWN_ERROR_MESSAGE = "An unexpected error occurred."

_STATUS_400 = re.compile(r"\b400\b")
_STATUS_429 = re.compile(r"\b429\b")
_STATUS_5XX = re.compile(r"\b50[03]\b")


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def _error_chain_text(exc: BaseException) -> str:
    """Join the messages of an exception and its causes."""
    texts: list[str] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        texts.append(str(current))
        current = current.__cause__ or current.__context__
    return " | ".join(t for t in texts if t)


def classify_failure(exc: BaseException) -> LLMAppError:
    """Map a failed model call onto one user-facing error category.

    The provider SDKs do not share an exception hierarchy, so the
    classification looks at the text of the error chain for known markers.
    """
    if isinstance(exc, (MalformedResponseError, ValidationError)):
        return MalformedResponseError(
            code="malformed_response",
            message=MALFORMED_RESPONSE_MESSAGE,
            details={"hint": getattr(exc, "code", None) or type(exc).__name__},
        )
    if isinstance(exc, MissingCredentialError):
        return exc

    text = _error_chain_text(exc)

    if "API Key" in text:
        return MissingCredentialError(code="missing_credential", message=MISSING_CREDENTIAL_MESSAGE)
    if _STATUS_400.search(text):
        return PayloadRejectedError(code="payload_rejected", message=PAYLOAD_REJECTED_MESSAGE)
    if _STATUS_429.search(text):
        return QuotaExceededError(code="quota_exceeded", message=QUOTA_EXCEEDED_MESSAGE)
    if _STATUS_5XX.search(text):
        return ServiceUnavailableError(
            code="service_unavailable", message=SERVICE_UNAVAILABLE_MESSAGE
        )
    if isinstance(exc, LLMAppError):
        return exc
    return UnknownLLMError(code="llm_unknown_error", message=str(exc) or UNKNOWN_ERROR_MESSAGE)


class AnalysisService:
    """Runs one CV analysis against the configured model.

    Attributes:
        llm_factory: Returns the LLM client; called per analysis so a missing
            credential surfaces at request time.
        clock: Epoch-milliseconds clock used for the result timestamp.
    """

    def __init__(
        self,
        llm_factory: Callable[[], AbstractLLMClient] = create_llm_client,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.llm_factory = llm_factory
        self.clock = clock

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """Analyze a CV and return the validated, timestamped result.

        Args:
            request: Normalized CV payload, optional job description, market.

        Returns:
            AnalysisResult stamped with the current time.

        Raises:
            ValidationAppError: If the CV payload is empty (no network call).
            MissingCredentialError: If no API key is configured (no network call).
            LLMAppError: A classified failure of the model call or its response.
        """
        outbound = build_analysis_request(request)
        llm = self.llm_factory()

        logger.info(
            "analysis.start",
            extra={
                "model": llm.model,
                "target_market": request.target_market,
                "payload_kind": request.cv_payload.kind,
                "has_job_description": bool(request.job_description),
            },
        )
        started = time.perf_counter()

        try:
            raw = await llm.generate_json(
                outbound.parts,
                schema=outbound.schema,
                system_instruction=outbound.system_instruction,
                temperature=outbound.temperature,
            )
            result = AnalysisResult.model_validate({**raw, "timestamp": self.clock()})
        except Exception as exc:
            error = classify_failure(exc)
            logger.warning(
                "analysis.failed",
                extra={
                    "code": error.code,
                    "error_type": type(exc).__name__,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
            raise error from exc

        logger.info(
            "analysis.success",
            extra={
                "overall_score": result.scores.overall_score,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return result
