from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from cv_architect.api.dependencies import get_controller
from cv_architect.schemas.analysis import CamelModel
from cv_architect.schemas.request import Market
from cv_architect.services.dashboard_view import list_tabs, project_tab
from cv_architect.state.controller import DashboardController
from cv_architect.state.store import DashboardState, Tab

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


class TabSelection(CamelModel):
    tab: Tab


class TextEdit(CamelModel):
    text: str


class FileSelection(CamelModel):
    file_name: str


class MarketSelection(CamelModel):
    market: Market


@router.get("", response_model=DashboardState)
def get_dashboard(controller: DashboardController = Depends(get_controller)) -> DashboardState:
    """Current dashboard snapshot: status, form, result, error, tab, history, headshot."""
    return controller.state


@router.get("/tabs")
def get_tabs(controller: DashboardController = Depends(get_controller)) -> list[dict[str, Any]]:
    return list_tabs(controller.state)


@router.put("/tab", response_model=DashboardState)
def select_tab(
    body: TabSelection,
    controller: DashboardController = Depends(get_controller),
) -> DashboardState:
    return controller.select_tab(body.tab)


@router.get("/tabs/{tab}")
def get_tab_view(
    tab: str,
    controller: DashboardController = Depends(get_controller),
) -> dict[str, Any]:
    """Fields of the current result shown on ``tab``."""
    return project_tab(controller.state, tab)


@router.post("/reset", response_model=DashboardState)
def reset_dashboard(controller: DashboardController = Depends(get_controller)) -> DashboardState:
    """Back to a fresh form; history is kept."""
    return controller.reset()


@router.put("/form/file", response_model=DashboardState)
def select_file(
    body: FileSelection,
    controller: DashboardController = Depends(get_controller),
) -> DashboardState:
    """Record the chosen file name; clears any pasted text."""
    return controller.select_file(body.file_name)


@router.delete("/form/file", response_model=DashboardState)
def clear_file(controller: DashboardController = Depends(get_controller)) -> DashboardState:
    return controller.clear_file()


@router.put("/form/cv-text", response_model=DashboardState)
def edit_cv_text(
    body: TextEdit,
    controller: DashboardController = Depends(get_controller),
) -> DashboardState:
    """Update pasted CV text; non-empty text clears the chosen file."""
    return controller.edit_cv_text(body.text)


@router.put("/form/job-description", response_model=DashboardState)
def edit_job_description(
    body: TextEdit,
    controller: DashboardController = Depends(get_controller),
) -> DashboardState:
    return controller.edit_job_description(body.text)


@router.put("/form/market", response_model=DashboardState)
def select_market(
    body: MarketSelection,
    controller: DashboardController = Depends(get_controller),
) -> DashboardState:
    return controller.select_market(body.market)
