"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers and
the dashboard controller) so tests can build isolated instances.
"""

from __future__ import annotations

from fastapi import FastAPI

from cv_architect.adapters.storage.json_file import JsonFileKeyValueStore
from cv_architect.api.routes import (
    cv_router,
    dashboard_router,
    documents_router,
    headshot_router,
    health_router,
    history_router,
    report_router,
)
from cv_architect.core.config import settings
from cv_architect.core.exception_handlers import setup_exception_handlers
from cv_architect.core.logging import configure_logging
from cv_architect.core.middleware import request_id_middleware
from cv_architect.core.openapi import apply_openapi_customizations
from cv_architect.services.analysis_service import AnalysisService
from cv_architect.services.headshot_service import HeadshotService
from cv_architect.services.history_service import HistoryStore
from cv_architect.state.controller import DashboardController


def build_controller() -> DashboardController:
    """Wire services, history persistence and state from settings."""
    history = HistoryStore(
        JsonFileKeyValueStore(settings.app.history_path),
        key=settings.app.history_key,
        limit=settings.app.history_limit,
    )
    controller = DashboardController(
        analysis_service=AnalysisService(),
        headshot_service=HeadshotService(),
        history=history,
        default_market=settings.app.default_market,
    )
    controller.load_history()
    return controller


def create_app(controller: DashboardController | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        controller: Pre-built dashboard controller (tests); built from
            settings when omitted.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="CV Architect API",
        description=(
            "AI résumé analysis: upload a CV (PDF, DOCX or image) or paste its text, "
            "optionally add a job description and target market, and receive ATS and "
            "keyword scores, gap analysis, salary estimate, LinkedIn audit, learning "
            "path, project ideas, interview questions and a cover letter. Keeps a "
            "history of the last 20 analyses."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    app.state.controller = controller or build_controller()

    app.middleware("http")(request_id_middleware)
    setup_exception_handlers(app)

    for router in (
        cv_router,
        headshot_router,
        history_router,
        report_router,
        dashboard_router,
        documents_router,
    ):
        app.include_router(router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
