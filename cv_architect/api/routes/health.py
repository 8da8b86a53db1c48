from __future__ import annotations

from fastapi import APIRouter

from cv_architect.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness check.

    Reports whether an LLM credential is configured without failing when it
    is not: a missing key only matters once an analysis is requested.

    Returns:
        dict: ``status`` plus the provider and credential flag.
    """

    return {
        "status": "ok",
        "llm_provider": settings.llm.provider,
        "llm_configured": bool(settings.llm.api_key),
    }
