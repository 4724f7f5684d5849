"""Crop 조회 서비스: 저장된 라벨 크롭 다운로드"""

from src.constants import CropId
from src.infra.storage import StorageError, get_storage
from src.services.pipeline import crop_key


class CropError(Exception):
    """Crop 조회 관련 에러

    code로 구체적인 원인 구분:
    - INVALID_CROP_ID: ID 형식 오류 (400)
    - CROP_NOT_FOUND: 저장된 크롭 없음 (404)
    - STORAGE_FAILED: 저장소 조회 실패 (500)
    """

    STATUS_MAP: dict[str, int] = {
        "INVALID_CROP_ID": 400,
        "CROP_NOT_FOUND": 404,
        "STORAGE_FAILED": 500,
    }

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

    @property
    def status_code(self) -> int:
        return self.STATUS_MAP.get(self.code, 500)


def download_filename(crop_id: str) -> str:
    return f"wine-label-{crop_id}.png"


def get_crop_png(crop_id: str) -> bytes:
    """crop_id → PNG 바이트

    Raises:
        CropError: 형식 오류 (Path Traversal 방지) / 크롭 없음 / 저장소 오류
    """
    if not CropId.PATTERN.match(crop_id):
        raise CropError("INVALID_CROP_ID", f"올바르지 않은 크롭 ID 형식: {crop_id}")

    try:
        data = get_storage().get(crop_key(crop_id))
    except StorageError as e:
        raise CropError("STORAGE_FAILED", f"크롭 조회 실패: {e}") from e

    if data is None:
        raise CropError("CROP_NOT_FOUND", f"크롭을 찾을 수 없습니다: {crop_id}")

    return data
