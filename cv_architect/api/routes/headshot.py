from fastapi import APIRouter, Depends, File, UploadFile

from cv_architect.api.dependencies import get_controller
from cv_architect.core.file_validation import read_upload_file_limited
from cv_architect.schemas.headshot import HeadshotAnalysis
from cv_architect.services.input_normalizer import check_image_type, normalize_image
from cv_architect.state.controller import DashboardController

router = APIRouter(tags=["Headshot"])


@router.post("/headshot/analyze", response_model=HeadshotAnalysis)
async def analyze_headshot(
    photo: UploadFile = File(..., description="Headshot image: JPEG, PNG or WEBP"),
    controller: DashboardController = Depends(get_controller),
) -> HeadshotAnalysis:
    """Professional feedback on a profile photo. Not stored in history."""
    check_image_type(photo.filename, photo.content_type)
    data = await read_upload_file_limited(photo)
    image = await normalize_image(photo.filename, photo.content_type, data)
    return await controller.analyze_headshot(image)
