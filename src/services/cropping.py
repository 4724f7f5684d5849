"""라벨 크롭 유틸리티

정규화 좌표 [0, 1000] → 픽셀 좌표 변환 (5% 여백 + 경계 클램핑),
Pillow로 영역 추출 후 PNG 재인코딩. 리샘플링 없음.
"""

import io
import math

from PIL import Image, UnidentifiedImageError

from src.constants import CropDefaults
from src.schemas.pipeline import CropRect, NormalizedBox

PNG_MODES = {"1", "L", "LA", "I", "P", "RGB", "RGBA"}


class InvalidBoxError(ValueError):
    """여백/클램핑 후에도 면적이 없는 박스 (역전, 0 크기, 이미지 밖)"""


class ImageDecodeError(Exception):
    pass


def map_to_pixel_rect(box: NormalizedBox, image_width: int, image_height: int) -> CropRect:
    """정규화 박스 → 픽셀 크롭 영역

    원점을 먼저 클램핑한 뒤, 클램핑된 원점 기준 남은 공간으로 크기를 제한.

    Raises:
        InvalidBoxError: 최종 너비/높이가 1px 미만
    """
    scale_x = image_width / CropDefaults.NORMALIZED_SCALE
    scale_y = image_height / CropDefaults.NORMALIZED_SCALE

    x = math.floor(box.xmin * scale_x)
    y = math.floor(box.ymin * scale_y)
    w = math.ceil((box.xmax - box.xmin) * scale_x)
    h = math.ceil((box.ymax - box.ymin) * scale_y)

    pad_w = max(CropDefaults.MIN_PADDING, math.floor(w * CropDefaults.PADDING_RATIO))
    pad_h = max(CropDefaults.MIN_PADDING, math.floor(h * CropDefaults.PADDING_RATIO))

    crop_x = max(0, x - pad_w)
    crop_y = max(0, y - pad_h)
    crop_w = min(image_width - crop_x, w + pad_w * 2)
    crop_h = min(image_height - crop_y, h + pad_h * 2)

    if crop_w < 1 or crop_h < 1:
        raise InvalidBoxError(
            f"유효하지 않은 박스: {box.to_list()} → {crop_w}x{crop_h} "
            f"(이미지 {image_width}x{image_height})"
        )

    return CropRect(x=crop_x, y=crop_y, width=crop_w, height=crop_h)


def open_image(data: bytes) -> Image.Image:
    """원본 바이트를 한 번만 디코딩 (박스마다 재디코딩하지 않음)

    호출자가 close 책임 (with 문 사용).

    Raises:
        ImageDecodeError: 디코딩 불가 또는 크기 정보 없음
    """
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"이미지 디코딩 실패: {e}") from e

    width, height = img.size
    if width <= 0 or height <= 0:
        img.close()
        raise ImageDecodeError(f"이미지 크기를 확인할 수 없음: {width}x{height}")

    return img


def crop_image(image: Image.Image, rect: CropRect) -> bytes:
    """디코딩된 원본에서 rect 영역을 잘라 PNG 바이트로 반환

    Raises:
        ImageDecodeError: rect가 이미지 범위를 벗어나거나 인코딩 실패 시
    """
    width, height = image.size
    left, top, right, bottom = rect.to_pil_box()
    if left < 0 or top < 0 or right > width or bottom > height:
        raise ImageDecodeError(
            f"크롭 영역이 이미지 범위를 벗어남: {rect.to_pil_box()} (이미지 {width}x{height})"
        )

    cropped = image.crop((left, top, right, bottom))
    if cropped.mode not in PNG_MODES:
        cropped = cropped.convert("RGB")

    buffer = io.BytesIO()
    try:
        cropped.save(buffer, format="PNG")
    except OSError as e:
        raise ImageDecodeError(f"PNG 인코딩 실패: {e}") from e

    return buffer.getvalue()
