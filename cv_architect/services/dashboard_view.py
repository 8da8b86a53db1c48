"""Per-tab projections of the current dashboard state."""

from __future__ import annotations

from typing import Any

from cv_architect.core.errors import NotFoundAppError
from cv_architect.services.document_export import TEMPLATE_FILENAMES, TEMPLATE_KINDS
from cv_architect.state.store import TAB_LABELS, TABS, DashboardState

# Result fields shown on each tab (python attribute names)
_TAB_FIELDS: dict[str, set[str]] = {
    "overview": {
        "scores",
        "summary",
        "job_title_detected",
        "market_fit",
        "strengths",
        "weaknesses",
        "rewritten_summary",
        "salary_estimation",
        "timestamp",
    },
    "sections": {"section_analysis"},
    "keywords": {"keywords", "learning_path"},
    "projects": {"project_ideas"},
    "linkedin": {"linkedin_audit"},
    "interview": {"interview_questions"},
    "coverLetter": {"cover_letter"},
}

_TEMPLATE_DESCRIPTIONS = {
    "ats": "Single column, standard headings, no graphics. Safe for every ATS.",
    "executive": "Leadership profile with career highlights for senior roles.",
    "fresher": "Education and projects first, for graduates and early careers.",
}


def list_tabs(state: DashboardState) -> list[dict[str, Any]]:
    return [
        {"id": tab, "label": TAB_LABELS[tab], "active": tab == state.active_tab}
        for tab in TABS
    ]


def _templates_view() -> dict[str, Any]:
    return {
        "templates": [
            {
                "kind": kind,
                "fileName": TEMPLATE_FILENAMES[kind],
                "description": _TEMPLATE_DESCRIPTIONS[kind],
                "downloadUrl": f"/v1/documents/templates/{kind}",
            }
            for kind in TEMPLATE_KINDS
        ]
    }


def project_tab(state: DashboardState, tab: str) -> dict[str, Any]:
    """Return the fields a tab displays, in wire (camelCase) form.

    The photo and templates tabs do not depend on the analysis result.

    Raises:
        NotFoundAppError: If the tab is unknown, or it needs a result and
            none is displayed.
    """
    if tab not in TABS:
        raise NotFoundAppError(
            code="tab_not_found",
            message=f"Unknown tab '{tab}'.",
            details={"tab": tab},
        )

    if tab == "photo":
        return {"headshot": state.headshot.model_dump(mode="json", by_alias=True)}
    if tab == "templates":
        return _templates_view()

    if state.result is None:
        raise NotFoundAppError(
            code="no_result",
            message="No analysis is currently displayed.",
            details={"tab": tab},
        )

    view = state.result.model_dump(mode="json", by_alias=True, include=_TAB_FIELDS[tab])
    if tab == "coverLetter":
        view["downloadUrl"] = "/v1/documents/cover-letter"
    return view
