"""Dashboard state snapshots, the actions that change them, and the reducer.

``reduce`` is pure: it never mutates the snapshot it receives and performs no
I/O. Everything with side effects lives in the controller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union, get_args

from cv_architect.schemas.analysis import AnalysisResult, CamelModel
from cv_architect.schemas.headshot import HeadshotAnalysis
from cv_architect.schemas.history import HistorySummary
from cv_architect.schemas.request import Market

Status = Literal["IDLE", "ANALYZING", "RESULTS", "ERROR"]

Tab = Literal[
    "overview",
    "sections",
    "keywords",
    "projects",
    "photo",
    "linkedin",
    "templates",
    "interview",
    "coverLetter",
]
TABS: tuple[str, ...] = get_args(Tab)

TAB_LABELS: dict[str, str] = {
    "overview": "Overview",
    "sections": "Gap Analysis",
    "keywords": "Keywords & Learning",
    "projects": "Project Ideas",
    "photo": "Photo AI",
    "linkedin": "LinkedIn Audit",
    "templates": "HR Templates",
    "interview": "Interview Prep",
    "coverLetter": "Cover Letter",
}


class FormState(CamelModel):
    """What the user has entered so far. A file and pasted text never coexist."""

    cv_text: str = ""
    file_name: str | None = None
    job_description: str = ""
    target_market: Market = "Bangladesh"


class ErrorInfo(CamelModel):
    code: str
    message: str


class HeadshotState(CamelModel):
    status: Status = "IDLE"
    result: HeadshotAnalysis | None = None
    error: str | None = None


class DashboardState(CamelModel):
    status: Status = "IDLE"
    form: FormState = FormState()
    result: AnalysisResult | None = None
    error: ErrorInfo | None = None
    active_tab: Tab = "overview"
    history: tuple[HistorySummary, ...] = ()
    headshot: HeadshotState = HeadshotState()


def initial_state(default_market: Market = "Bangladesh") -> DashboardState:
    return DashboardState(form=FormState(target_market=default_market))


# Form edits


@dataclass(frozen=True)
class FileSelected:
    file_name: str


@dataclass(frozen=True)
class FileCleared:
    pass


@dataclass(frozen=True)
class CvTextEdited:
    text: str


@dataclass(frozen=True)
class JobDescriptionEdited:
    text: str


@dataclass(frozen=True)
class MarketSelected:
    market: Market


# Analysis lifecycle


@dataclass(frozen=True)
class AnalysisStarted:
    pass


@dataclass(frozen=True)
class AnalysisSucceeded:
    result: AnalysisResult


@dataclass(frozen=True)
class AnalysisFailed:
    code: str
    message: str


@dataclass(frozen=True)
class Reset:
    default_market: Market = "Bangladesh"


@dataclass(frozen=True)
class TabSelected:
    tab: Tab


# History


@dataclass(frozen=True)
class HistoryLoaded:
    items: tuple[HistorySummary, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class HistoryItemSelected:
    result: AnalysisResult


# Headshot pipeline


@dataclass(frozen=True)
class HeadshotStarted:
    pass


@dataclass(frozen=True)
class HeadshotSucceeded:
    result: HeadshotAnalysis


@dataclass(frozen=True)
class HeadshotFailed:
    message: str


Action = Union[
    FileSelected,
    FileCleared,
    CvTextEdited,
    JobDescriptionEdited,
    MarketSelected,
    AnalysisStarted,
    AnalysisSucceeded,
    AnalysisFailed,
    Reset,
    TabSelected,
    HistoryLoaded,
    HistoryItemSelected,
    HeadshotStarted,
    HeadshotSucceeded,
    HeadshotFailed,
]


def _reduce_form(form: FormState, action: Action) -> FormState:
    if isinstance(action, FileSelected):
        return form.model_copy(update={"file_name": action.file_name, "cv_text": ""})
    if isinstance(action, FileCleared):
        return form.model_copy(update={"file_name": None})
    if isinstance(action, CvTextEdited):
        update: dict[str, object] = {"cv_text": action.text}
        if action.text:
            update["file_name"] = None
        return form.model_copy(update=update)
    if isinstance(action, JobDescriptionEdited):
        return form.model_copy(update={"job_description": action.text})
    if isinstance(action, MarketSelected):
        return form.model_copy(update={"target_market": action.market})
    return form


def _reduce_headshot(headshot: HeadshotState, action: Action) -> HeadshotState:
    if isinstance(action, HeadshotStarted):
        return HeadshotState(status="ANALYZING", result=headshot.result)
    if isinstance(action, HeadshotSucceeded):
        return HeadshotState(status="RESULTS", result=action.result)
    if isinstance(action, HeadshotFailed):
        return HeadshotState(status="ERROR", error=action.message)
    return headshot


def _fresh_headshot(headshot: HeadshotState) -> HeadshotState:
    # A new result clears the photo feedback, but an in-flight request keeps its gate
    return headshot if headshot.status == "ANALYZING" else HeadshotState()


def reduce(state: DashboardState, action: Action) -> DashboardState:
    """Return the snapshot that follows ``state`` after ``action``."""
    if isinstance(action, (FileSelected, FileCleared, CvTextEdited, JobDescriptionEdited, MarketSelected)):
        return state.model_copy(update={"form": _reduce_form(state.form, action)})

    if isinstance(action, (HeadshotStarted, HeadshotSucceeded, HeadshotFailed)):
        return state.model_copy(update={"headshot": _reduce_headshot(state.headshot, action)})

    if isinstance(action, AnalysisStarted):
        return state.model_copy(update={"status": "ANALYZING", "error": None})

    if isinstance(action, AnalysisSucceeded):
        return state.model_copy(
            update={
                "status": "RESULTS",
                "result": action.result,
                "error": None,
                "active_tab": "overview",
                "headshot": _fresh_headshot(state.headshot),
            }
        )

    if isinstance(action, AnalysisFailed):
        return state.model_copy(
            update={
                "status": "ERROR",
                "result": None,
                "error": ErrorInfo(code=action.code, message=action.message),
            }
        )

    if isinstance(action, Reset):
        return DashboardState(
            form=FormState(target_market=action.default_market),
            history=state.history,
            headshot=_fresh_headshot(state.headshot),
        )

    if isinstance(action, TabSelected):
        return state.model_copy(update={"active_tab": action.tab})

    if isinstance(action, HistoryLoaded):
        return state.model_copy(update={"history": tuple(action.items)})

    if isinstance(action, HistoryItemSelected):
        return state.model_copy(
            update={
                "status": "RESULTS",
                "result": action.result,
                "error": None,
                "active_tab": "overview",
                "headshot": _fresh_headshot(state.headshot),
            }
        )

    raise TypeError(f"Unknown action: {type(action).__name__}")
