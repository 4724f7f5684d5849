"""Detection Protocol

교체 가능한 와인 라벨 탐지 구현을 위한 인터페이스 정의.
모든 좌표는 해상도와 무관한 [0, 1000] 정규화 좌표.
"""

from typing import Protocol

from src.schemas.pipeline import NormalizedBox


class DetectionError(Exception):
    pass


class Detector(Protocol):
    """와인 라벨 탐지 인터페이스

    구현체:
    - GeminiDetection: Google Gemini API (JSON 스키마 강제 응답)
    """

    def detect(self, image_data: str) -> list[NormalizedBox]:
        """이미지에서 와인 라벨 영역 탐지

        Args:
            image_data: 원본 data URI (data:image/<type>;base64,...)

        Returns:
            list[NormalizedBox]: 탐지된 라벨 (없거나 응답 파싱 실패 시 빈 리스트)

        Raises:
            DetectionError: 설정 오류 (API 키 누락 등)
            Exception: 전송 계층 오류는 그대로 전파
        """
        ...
