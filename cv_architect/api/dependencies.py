"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from fastapi import Request

from cv_architect.state.controller import DashboardController


def get_controller(request: Request) -> DashboardController:
    """Return the process-wide dashboard controller built by the app factory."""

    return request.app.state.controller
