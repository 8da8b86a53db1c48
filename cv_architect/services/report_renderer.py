"""Printable HTML audit report for an analysis result.

Rendering is pure: the same result always yields the same document. Dates
come from the result's own timestamp, never from the wall clock.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from jinja2 import TemplateError

from cv_architect.core.config import settings
from cv_architect.core.errors import PresentationBlockedError
from cv_architect.core.templating import get_template_environment
from cv_architect.schemas.analysis import AnalysisResult

logger = logging.getLogger(__name__)

REPORT_TEMPLATE = "report.html"

STATUS_CLASSES = {
    "good": "bg-green-100 text-green-700 border-green-200",
    "warning": "bg-amber-100 text-amber-700 border-amber-200",
    "critical": "bg-red-100 text-red-700 border-red-200",
    "missing": "bg-red-100 text-red-700 border-red-200",
}


def _score_cards(result: AnalysisResult) -> list[dict[str, object]]:
    scores = result.scores
    return [
        {"label": "ATS Score", "value": scores.ats_score, "color": "blue"},
        {"label": "Keywords", "value": scores.keyword_match, "color": "purple"},
        {"label": "Skills", "value": scores.skills_score, "color": "pink"},
        {"label": "Experience", "value": scores.experience_score, "color": "amber"},
        {"label": "Format", "value": scores.format_score, "color": "indigo"},
    ]


def _format_timestamp(timestamp_ms: int | None, fmt: str) -> str:
    if timestamp_ms is None:
        return "N/A"
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).strftime(fmt)


def render_report(result: AnalysisResult, *, print_delay_ms: int | None = None) -> str:
    """Render the standalone printable report.

    Args:
        result: A validated analysis.
        print_delay_ms: Delay before the print dialog opens; defaults to
            ``APP_REPORT_PRINT_DELAY_MS``.

    Returns:
        Complete HTML document.

    Raises:
        PresentationBlockedError: If the template cannot be rendered.
    """
    delay = settings.app.report_print_delay_ms if print_delay_ms is None else print_delay_ms
    try:
        template = get_template_environment().get_template(REPORT_TEMPLATE)
        html = template.render(
            result=result,
            score_cards=_score_cards(result),
            status_classes=STATUS_CLASSES,
            analysis_date=_format_timestamp(result.timestamp, "%Y-%m-%d"),
            generated_at=_format_timestamp(result.timestamp, "%Y-%m-%d %H:%M UTC"),
            print_delay_ms=int(delay),
        )
    except TemplateError as exc:
        logger.exception("report.render_failed", extra={"template": REPORT_TEMPLATE})
        raise PresentationBlockedError(
            code="report_render_failed",
            message="The report could not be generated. Your analysis is still available.",
        ) from exc

    logger.info("report.rendered", extra={"size_bytes": len(html)})
    return html
