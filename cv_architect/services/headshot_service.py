"""Professional headshot feedback pipeline, independent of CV analysis."""

from __future__ import annotations

import logging
from typing import Any, Callable

from cv_architect.adapters.llm.base import AbstractLLMClient, InlineData
from cv_architect.adapters.llm.factory import create_llm_client
from cv_architect.core.errors import HeadshotAnalysisError
from cv_architect.schemas.headshot import HeadshotAnalysis
from cv_architect.schemas.request import BinaryPayload

logger = logging.getLogger(__name__)

HEADSHOT_FAILURE_MESSAGE = "Failed to analyze photo"

HEADSHOT_PROMPT = """
Analyze this professional headshot/profile picture for LinkedIn or a CV.
Evaluate based on:
1. Professionalism (Is it suitable for corporate/professional use?)
2. Lighting (Is the face clear, any shadows?)
3. Background (Is it distracting?)
4. Attire (Is it appropriate?)
5. Expression (Is it approachable and confident?)

Provide a score out of 100 and 3 specific tips to improve.
""".strip()


def headshot_response_schema() -> dict[str, Any]:
    return HeadshotAnalysis.model_json_schema(by_alias=True)


class HeadshotService:
    """Sends one photo to the model and validates the feedback.

    Every failure, including a missing credential, is reported as the same
    generic error.
    """

    def __init__(self, llm_factory: Callable[[], AbstractLLMClient] = create_llm_client) -> None:
        self.llm_factory = llm_factory

    async def analyze(self, image: BinaryPayload) -> HeadshotAnalysis:
        try:
            llm = self.llm_factory()
            raw = await llm.generate_json(
                [HEADSHOT_PROMPT, InlineData(mime_type=image.mime_type, data_base64=image.data_base64)],
                schema=headshot_response_schema(),
            )
            analysis = HeadshotAnalysis.model_validate(raw)
        except Exception as exc:
            logger.warning(
                "headshot.failed",
                extra={"error_type": type(exc).__name__, "error": str(exc)},
            )
            raise HeadshotAnalysisError(
                code="headshot_failed",
                message=HEADSHOT_FAILURE_MESSAGE,
            ) from exc

        logger.info("headshot.success", extra={"score": analysis.score})
        return analysis
