"""Wine API 라우트

업로드 이미지에서 와인 라벨을 탐지/크롭하고, 저장된 크롭을 다운로드하는 엔드포인트.
"""

from fastapi import APIRouter, HTTPException, Response, status

from src.schemas.pipeline import ProcessingResult
from src.services import crops as crops_service
from src.services import pipeline as pipeline_service

router = APIRouter(prefix="/wine", tags=["wine"])


@router.post(
    "/process",
    response_model=ProcessingResult,
    status_code=status.HTTP_200_OK,
)
def process_image(request: pipeline_service.ProcessImageRequest) -> ProcessingResult:
    """라벨 탐지 + 크롭 + 저장

    동기 엔드포인트 - FastAPI가 threadpool에서 실행.
    탐지 결과가 없으면 빈 crops/bboxes로 200 응답.
    """
    try:
        return pipeline_service.process_wine_image(request.image_data)
    except pipeline_service.PipelineError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail={"code": e.code, "message": e.message},
        ) from None


@router.get("/crops/{crop_id}")
def download_crop(crop_id: str) -> Response:
    """크롭 PNG 다운로드 (wine-label-<id>.png)"""
    try:
        data = crops_service.get_crop_png(crop_id)
    except crops_service.CropError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail={"code": e.code, "message": e.message},
        ) from None

    filename = crops_service.download_filename(crop_id)
    return Response(
        content=data,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
