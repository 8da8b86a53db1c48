"""Single owner of the dashboard state.

Every change goes through ``dispatch``. The two pipelines (CV analysis and
headshot) are each gated by their own in-progress status; the check and the
transition to ANALYZING happen without an ``await`` in between, so on one
event loop a second request can never slip through.
"""

from __future__ import annotations

import logging

from cv_architect.core.errors import AppError, ConflictAppError
from cv_architect.schemas.analysis import AnalysisResult
from cv_architect.schemas.headshot import HeadshotAnalysis
from cv_architect.schemas.history import HistoryItem, HistorySummary
from cv_architect.schemas.request import AnalysisRequest, BinaryPayload, Market
from cv_architect.services.analysis_service import AnalysisService
from cv_architect.services.headshot_service import HeadshotService
from cv_architect.services.history_service import HistoryStore
from cv_architect.services.request_builder import build_cv_part
from cv_architect.state.store import (
    Action,
    AnalysisFailed,
    AnalysisStarted,
    AnalysisSucceeded,
    CvTextEdited,
    DashboardState,
    FileCleared,
    FileSelected,
    HeadshotFailed,
    HeadshotStarted,
    HeadshotSucceeded,
    HistoryItemSelected,
    HistoryLoaded,
    JobDescriptionEdited,
    MarketSelected,
    Reset,
    Tab,
    TabSelected,
    initial_state,
    reduce,
)

logger = logging.getLogger(__name__)


class DashboardController:
    def __init__(
        self,
        *,
        analysis_service: AnalysisService,
        headshot_service: HeadshotService,
        history: HistoryStore,
        default_market: Market = "Bangladesh",
    ) -> None:
        self.analysis_service = analysis_service
        self.headshot_service = headshot_service
        self.history = history
        self.default_market = default_market
        self._state = initial_state(default_market)

    @property
    def state(self) -> DashboardState:
        return self._state

    def dispatch(self, action: Action) -> DashboardState:
        self._state = reduce(self._state, action)
        logger.debug(
            "dashboard.dispatch",
            extra={"action": type(action).__name__, "status": self._state.status},
        )
        return self._state

    def _refresh_history(self, items: list[HistoryItem]) -> None:
        self.dispatch(HistoryLoaded(tuple(HistorySummary.from_item(i) for i in items)))

    def load_history(self) -> list[HistoryItem]:
        items = self.history.load_all()
        self._refresh_history(items)
        return items

    def _ensure_not_analyzing(self) -> None:
        if self._state.status == "ANALYZING":
            raise ConflictAppError(
                code="analysis_in_progress",
                message="An analysis is already in progress. Please wait for it to finish.",
            )

    # Form edits

    def select_file(self, file_name: str) -> DashboardState:
        return self.dispatch(FileSelected(file_name))

    def clear_file(self) -> DashboardState:
        return self.dispatch(FileCleared())

    def edit_cv_text(self, text: str) -> DashboardState:
        return self.dispatch(CvTextEdited(text))

    def edit_job_description(self, text: str) -> DashboardState:
        return self.dispatch(JobDescriptionEdited(text))

    def select_market(self, market: Market) -> DashboardState:
        return self.dispatch(MarketSelected(market))

    # Analysis

    async def submit_analysis(
        self,
        request: AnalysisRequest,
        *,
        file_name: str | None = None,
    ) -> AnalysisResult:
        """Run one analysis and record it in history.

        Input errors are raised before any state transition; model failures
        move the dashboard to ERROR and are re-raised.

        Raises:
            ConflictAppError: If an analysis is already in flight.
            ValidationAppError: If the CV payload is empty.
            LLMAppError: A classified model failure.
        """
        self._ensure_not_analyzing()
        build_cv_part(request)

        if file_name is not None:
            self.dispatch(FileSelected(file_name))
        elif request.cv_payload.kind == "text":
            self.dispatch(CvTextEdited(request.cv_payload.extracted_text))
        self.dispatch(JobDescriptionEdited(request.job_description or ""))
        self.dispatch(MarketSelected(request.target_market))
        self.dispatch(AnalysisStarted())

        try:
            result = await self.analysis_service.analyze(request)
        except AppError as exc:
            self.dispatch(AnalysisFailed(code=exc.code, message=exc.message))
            raise
        except Exception:
            self.dispatch(AnalysisFailed(code="internal_error", message="An unexpected error occurred."))
            raise

        try:
            self.history.append(result)
            self.load_history()
        except Exception:
            # The analysis is still shown; only its history entry is lost
            logger.exception("history.persist_failed")

        self.dispatch(AnalysisSucceeded(result))
        return result

    def reset(self) -> DashboardState:
        self._ensure_not_analyzing()
        return self.dispatch(Reset(default_market=self.default_market))

    def select_tab(self, tab: Tab) -> DashboardState:
        return self.dispatch(TabSelected(tab))

    # History

    def select_history_item(self, item_id: str) -> HistoryItem:
        """Display a stored analysis as-is; the model is not contacted."""
        self._ensure_not_analyzing()
        item = self.history.get(item_id)
        self.dispatch(HistoryItemSelected(item.result))
        return item

    def delete_history_item(self, item_id: str) -> list[HistoryItem]:
        items = self.history.remove(item_id)
        self._refresh_history(items)
        return items

    # Headshot

    async def analyze_headshot(self, image: BinaryPayload) -> HeadshotAnalysis:
        """Run the headshot pipeline; independent of the CV analysis gate.

        Raises:
            ConflictAppError: If a headshot analysis is already in flight.
            HeadshotAnalysisError: On any failure of the pipeline.
        """
        if self._state.headshot.status == "ANALYZING":
            raise ConflictAppError(
                code="headshot_in_progress",
                message="A photo analysis is already in progress.",
            )
        self.dispatch(HeadshotStarted())

        try:
            analysis = await self.headshot_service.analyze(image)
        except AppError as exc:
            self.dispatch(HeadshotFailed(exc.message))
            raise

        self.dispatch(HeadshotSucceeded(analysis))
        return analysis
