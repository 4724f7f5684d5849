"""Detection 모듈

사용법:
    from src.services.detection import get_detection

    detector = get_detection()
    boxes = detector.detect(image_data)

백엔드 선택 (.env DETECTION_PROVIDER):
    - "gemini": Google Gemini API (기본값)
"""

from src.config import get_settings
from src.services.detection.base import DetectionError, Detector
from src.services.detection.gemini import GeminiDetection

__all__ = ["Detector", "DetectionError", "get_detection", "set_detection"]

_detector: Detector | None = None


def get_detection() -> Detector:
    """설정에 따라 detection 백엔드 반환"""
    global _detector
    if _detector is None:
        settings = get_settings()
        if settings.detection_provider == "gemini":
            _detector = GeminiDetection(
                api_key=settings.gemini_api_key,
                model=settings.gemini_model,
                timeout=settings.gemini_timeout,
            )
        else:
            raise ValueError(f"Unknown detection provider: {settings.detection_provider!r}")
    return _detector


def set_detection(detector: Detector | None) -> None:
    """detection 백엔드 설정 (테스트용)"""
    global _detector
    _detector = detector
