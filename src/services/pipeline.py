"""와인 라벨 크롭 파이프라인

Decode → Detection → (박스별: 좌표 변환 → 크롭 → 저장) 순서로 실행.
박스 단위 처리는 서로 독립적이며, 실패한 박스는 로그만 남기고 건너뜀.
"""

import logging
import uuid

from PIL import Image

from src.config import get_settings
from src.constants import CropId, OriginalId, StoragePrefix
from src.infra.storage import StorageBackend, get_storage
from src.schemas.base import BaseSchema
from src.schemas.pipeline import CropResult, DecodedImage, NormalizedBox, ProcessingResult
from src.services.cropping import crop_image, map_to_pixel_rect, open_image
from src.services.data_uri import InvalidImageDataError, decode_data_uri, extension_for
from src.services.detection import get_detection

logger = logging.getLogger(__name__)


class PipelineError(Exception):
    """요청 전체를 실패시키는 파이프라인 에러

    code로 구체적인 원인 구분:
    - INVALID_IMAGE_DATA: data URI 형식 오류 (400)
    - IMAGE_DECODE_FAILED: 이미지 디코딩/크기 확인 실패 (400)
    - DETECTION_FAILED: 탐지 모델 호출 실패 (502)
    - STORAGE_FAILED: 원본 저장 실패 (500)
    """

    STATUS_MAP: dict[str, int] = {
        "INVALID_IMAGE_DATA": 400,
        "IMAGE_DECODE_FAILED": 400,
        "DETECTION_FAILED": 502,
        "STORAGE_FAILED": 500,
    }

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

    @property
    def status_code(self) -> int:
        return self.STATUS_MAP.get(self.code, 500)


class ProcessImageRequest(BaseSchema):
    """와인 이미지 처리 요청"""

    image_data: str  # data:image/<type>;base64,...


def crop_key(crop_id: str) -> str:
    return f"{StoragePrefix.CROPS}/{crop_id}.png"


def _generate_crop_id() -> str:
    return f"{CropId.PREFIX}{uuid.uuid4().hex[:12]}"


def _detect(image_data: str) -> list[NormalizedBox]:
    try:
        return get_detection().detect(image_data)
    except Exception as e:
        raise PipelineError("DETECTION_FAILED", f"라벨 탐지 실패: {e}") from e


def _store_original(storage: StorageBackend, image: DecodedImage) -> str:
    key = f"{StoragePrefix.ORIGINALS}/{OriginalId.PREFIX}{uuid.uuid4().hex[:12]}"
    key += extension_for(image.mime_type)
    try:
        return storage.put(key, image.data, image.mime_type)
    except Exception as e:
        raise PipelineError("STORAGE_FAILED", f"원본 저장 실패: {e}") from e


def _process_box(storage: StorageBackend, source: Image.Image, box: NormalizedBox) -> CropResult:
    rect = map_to_pixel_rect(box, source.width, source.height)
    png = crop_image(source, rect)

    crop_id = _generate_crop_id()
    url = storage.put(crop_key(crop_id), png, "image/png")

    return CropResult(id=crop_id, url=url, bbox=box.to_list())


def _run(image_data: str, image: DecodedImage) -> ProcessingResult:
    boxes = _detect(image_data)
    logger.info(f"Detection 완료: {len(boxes)}개 라벨")

    if not boxes:
        return ProcessingResult(crops=[], bboxes=[])

    try:
        source = open_image(image.data)
    except Exception as e:
        raise PipelineError("IMAGE_DECODE_FAILED", str(e)) from e

    crops: list[CropResult] = []
    bboxes: list[list[float]] = []

    with source:
        storage = get_storage()
        original_url = _store_original(storage, image) if get_settings().store_original else None

        for index, box in enumerate(boxes):
            try:
                crop = _process_box(storage, source, box)
            except Exception as e:
                logger.warning(f"라벨 처리 실패, 건너뜀 [{index}] {box.to_list()}: {e}")
                continue

            crops.append(crop)
            bboxes.append(box.to_list())

    logger.info(f"크롭 완료: {len(crops)}/{len(boxes)}개")

    return ProcessingResult(crops=crops, bboxes=bboxes, original_url=original_url)


def process_wine_image(image_data: str) -> ProcessingResult:
    """와인 이미지에서 라벨을 탐지해 크롭 후 저장

    동기 함수 - FastAPI가 threadpool에서 실행.

    Args:
        image_data: data URI (data:image/<type>;base64,<payload>)

    Returns:
        ProcessingResult: 성공한 박스 기준으로 인덱스가 맞춰진 crops/bboxes

    Raises:
        PipelineError: 입력 오류, 탐지 실패, 디코딩/원본 저장 실패 (code로 구분)
    """
    try:
        image = decode_data_uri(image_data)
    except InvalidImageDataError as e:
        raise PipelineError("INVALID_IMAGE_DATA", str(e)) from e

    try:
        return _run(image_data, image)
    except PipelineError as e:
        logger.error(f"와인 이미지 처리 실패: {e}")
        raise
    except Exception:
        logger.exception("와인 이미지 처리 실패")
        raise
