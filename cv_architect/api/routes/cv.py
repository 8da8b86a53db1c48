from fastapi import APIRouter, Depends, File, Form, UploadFile

from cv_architect.api.dependencies import get_controller
from cv_architect.core.errors import ValidationAppError
from cv_architect.core.file_validation import read_upload_file_limited
from cv_architect.schemas.analysis import AnalysisResult
from cv_architect.schemas.request import AnalysisRequest, Market
from cv_architect.services.input_normalizer import (
    check_file_type,
    normalize_pasted_text,
    normalize_upload,
)
from cv_architect.state.controller import DashboardController

router = APIRouter(tags=["CV"])


@router.post("/cv/analyze", response_model=AnalysisResult)
async def analyze_cv(
    cv_file: UploadFile | None = File(
        None,
        description="CV file: PDF, DOCX, PNG, JPEG or WEBP (max 20MB)",
    ),
    cv_text: str | None = Form(
        None,
        description="Pasted CV text, used when no file is uploaded",
    ),
    job_description: str | None = Form(
        None,
        description="Optional job description. Without it the CV is analyzed for general employability.",
    ),
    target_market: Market | None = Form(
        None,
        description="Market used for salary conventions (defaults to Bangladesh)",
    ),
    controller: DashboardController = Depends(get_controller),
) -> AnalysisResult:
    """Analyze a CV (file or pasted text) against an optional job description.

    The file type is checked before the body is read, so a legacy ``.doc`` is
    refused with its own guidance whatever its size. Oversized uploads stop
    reading as soon as the limit is crossed. None of these checks contact the
    model.

    Returns:
        AnalysisResult: Validated analysis, also prepended to history.

    Raises:
        UnsupportedFormatError: 415 for ``.doc`` and disallowed types.
        FileTooLargeError: 413 above 20MB.
        ValidationAppError: 400 for ambiguous, empty or unreadable input.
        ConflictAppError: 409 while another analysis is running.
        LLMAppError: Classified model failure.
    """
    if cv_file is not None and not cv_file.filename:
        # Browsers send an empty part when no file is chosen
        cv_file = None

    if cv_file is not None and cv_text and cv_text.strip():
        raise ValidationAppError(
            code="ambiguous_cv_source",
            message="Provide either a CV file or pasted CV text, not both.",
        )

    if cv_file is not None:
        check_file_type(cv_file.filename, cv_file.content_type)
        data = await read_upload_file_limited(cv_file)
        payload = await normalize_upload(cv_file.filename, cv_file.content_type, data)
    else:
        payload = normalize_pasted_text(cv_text or "")

    request = AnalysisRequest(
        cv_payload=payload,
        job_description=job_description or None,
        target_market=target_market or controller.default_market,
    )
    return await controller.submit_analysis(
        request,
        file_name=cv_file.filename if cv_file is not None else None,
    )
