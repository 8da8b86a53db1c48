from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from cv_architect.api.dependencies import get_controller
from cv_architect.core.errors import NotFoundAppError
from cv_architect.services.report_renderer import render_report
from cv_architect.state.controller import DashboardController

router = APIRouter(tags=["Report"])


@router.get("/report", response_class=HTMLResponse)
def get_current_report(controller: DashboardController = Depends(get_controller)) -> HTMLResponse:
    """Printable report of the analysis currently on the dashboard.

    The page opens the browser's print dialog once its assets have loaded.
    """
    result = controller.state.result
    if result is None:
        raise NotFoundAppError(
            code="no_result",
            message="No analysis is currently displayed.",
        )
    return HTMLResponse(render_report(result))


@router.get("/history/{item_id}/report", response_class=HTMLResponse)
def get_history_report(
    item_id: str,
    controller: DashboardController = Depends(get_controller),
) -> HTMLResponse:
    """Printable report of a stored analysis."""
    item = controller.history.get(item_id)
    return HTMLResponse(render_report(item.result))
