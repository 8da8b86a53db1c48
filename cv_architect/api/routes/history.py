from fastapi import APIRouter, Depends

from cv_architect.api.dependencies import get_controller
from cv_architect.schemas.history import HistoryItem, HistorySummary
from cv_architect.state.controller import DashboardController
from cv_architect.state.store import DashboardState

router = APIRouter(prefix="/history", tags=["History"])


@router.get("", response_model=list[HistorySummary])
def list_history(
    controller: DashboardController = Depends(get_controller),
) -> list[HistorySummary]:
    """Past analyses, newest first (at most 20)."""
    return [HistorySummary.from_item(item) for item in controller.load_history()]


@router.get("/{item_id}", response_model=HistoryItem)
def get_history_item(
    item_id: str,
    controller: DashboardController = Depends(get_controller),
) -> HistoryItem:
    return controller.history.get(item_id)


@router.delete("/{item_id}", response_model=list[HistorySummary])
def delete_history_item(
    item_id: str,
    controller: DashboardController = Depends(get_controller),
) -> list[HistorySummary]:
    """Remove an entry. Deleting an unknown id is a no-op."""
    return [HistorySummary.from_item(item) for item in controller.delete_history_item(item_id)]


@router.post("/{item_id}/select", response_model=DashboardState)
def select_history_item(
    item_id: str,
    controller: DashboardController = Depends(get_controller),
) -> DashboardState:
    """Show a stored analysis on the dashboard without contacting the model."""
    controller.select_history_item(item_id)
    return controller.state
