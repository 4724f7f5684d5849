"""파이프라인 데이터 모델

Decode → Detection → Cropping → Storage 전체에서 사용하는 공통 스키마
"""

import math

from pydantic import BaseModel, ConfigDict

from src.schemas.base import BaseSchema


class DecodedImage(BaseModel):
    """data URI에서 디코딩한 원본 이미지"""

    mime_type: str  # e.g. "image/png"
    data: bytes


class NormalizedBox(BaseModel):
    """정규화 바운딩 박스 [ymin, xmin, ymax, xmax]

    좌표계는 해상도와 무관한 [0, 1000] 그리드.
    모델 응답을 그대로 보존하므로 정렬/클램핑하지 않음 (검증은 CropRect 변환 시).
    """

    model_config = ConfigDict(frozen=True)

    ymin: float
    xmin: float
    ymax: float
    xmax: float

    @classmethod
    def from_list(cls, coords: list[float]) -> "NormalizedBox":
        """[ymin, xmin, ymax, xmax] 리스트에서 생성

        Raises:
            ValueError: 좌표 개수가 4개가 아니거나 NaN/Inf가 포함된 경우
        """
        if len(coords) != 4:
            raise ValueError(f"NormalizedBox requires 4 coordinates, got {len(coords)}")

        for i, c in enumerate(coords):
            if math.isnan(c) or math.isinf(c):
                raise ValueError(f"Coordinate {i} is NaN or Inf")

        return cls(ymin=coords[0], xmin=coords[1], ymax=coords[2], xmax=coords[3])

    def to_list(self) -> list[float]:
        return [self.ymin, self.xmin, self.ymax, self.xmax]


class CropRect(BaseModel):
    """픽셀 좌표 크롭 영역 (여백 + 경계 클램핑 적용 후)"""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    width: int
    height: int

    def to_pil_box(self) -> tuple[int, int, int, int]:
        """PIL crop용 (left, top, right, bottom)"""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


class CropResult(BaseSchema):
    """저장된 크롭 1건"""

    id: str
    url: str
    bbox: list[float]  # [ymin, xmin, ymax, xmax]


class ProcessingResult(BaseSchema):
    """이미지 1장 처리 결과

    crops와 bboxes는 성공한 박스 기준으로 인덱스가 일치함.
    """

    crops: list[CropResult] = []
    bboxes: list[list[float]] = []
    original_url: str | None = None
