"""data URI 디코딩

브라우저가 FileReader.readAsDataURL()로 보낸 문자열을 원본 바이트로 변환.
"""

import base64
import binascii
import re

from src.constants import Limits
from src.schemas.pipeline import DecodedImage

DATA_URI_PATTERN = re.compile(r"^data:image/(\w+);base64,(.*)$", re.DOTALL)
WHITESPACE_PATTERN = re.compile(r"\s+")

EXTENSION_OVERRIDES = {
    "image/jpeg": ".jpg",
}


class InvalidImageDataError(Exception):
    pass


def decode_data_uri(image_data: str) -> DecodedImage:
    """data:image/<subtype>;base64,<payload> → DecodedImage

    Raises:
        InvalidImageDataError: 형식 불일치, base64 오류, 빈 페이로드, 크기 초과
    """
    matches = DATA_URI_PATTERN.match(image_data)
    if not matches:
        raise InvalidImageDataError("data:image/<type>;base64,<payload> 형식이 아닙니다")

    subtype, payload = matches.groups()
    # 줄바꿈된 base64 (MIME 76자 래핑 등) 허용
    payload = WHITESPACE_PATTERN.sub("", payload)

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageDataError(f"base64 디코딩 실패: {e}") from e

    if not data:
        raise InvalidImageDataError("이미지 데이터가 비어 있습니다")

    if len(data) > Limits.MAX_IMAGE_BYTES:
        raise InvalidImageDataError(
            f"이미지 크기 초과: {len(data)} bytes (최대 {Limits.MAX_IMAGE_BYTES} bytes)"
        )

    return DecodedImage(mime_type=f"image/{subtype.lower()}", data=data)


def extension_for(mime_type: str) -> str:
    """MIME 타입 → 파일 확장자 (image/jpeg → .jpg)"""
    if mime_type in EXTENSION_OVERRIDES:
        return EXTENSION_OVERRIDES[mime_type]
    return "." + mime_type.split("/", 1)[-1]
