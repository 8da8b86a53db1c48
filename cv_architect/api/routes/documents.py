from fastapi import APIRouter, Depends
from fastapi.responses import Response

from cv_architect.api.dependencies import get_controller
from cv_architect.core.errors import NotFoundAppError
from cv_architect.services.document_export import (
    ExportedDocument,
    export_cover_letter,
    export_template,
)
from cv_architect.state.controller import DashboardController

router = APIRouter(prefix="/documents", tags=["Documents"])


def _download(document: ExportedDocument) -> Response:
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )


@router.get("/templates/{kind}")
def download_template(kind: str) -> Response:
    """HR CV template (ats, executive or fresher) as a Word-compatible .doc."""
    return _download(export_template(kind))


@router.get("/cover-letter")
def download_cover_letter(controller: DashboardController = Depends(get_controller)) -> Response:
    """Cover letter of the displayed analysis as a Word-compatible .doc."""
    result = controller.state.result
    if result is None:
        raise NotFoundAppError(
            code="no_result",
            message="No analysis is currently displayed.",
        )
    return _download(export_cover_letter(result.cover_letter))
