"""Gemini 기반 와인 라벨 탐지 구현체"""

# pyright: reportMissingTypeStubs=false

import json
import logging
from typing import Any

from google import genai
from google.genai import types
from pydantic import ValidationError

from src.schemas.pipeline import NormalizedBox
from src.services.data_uri import decode_data_uri
from src.services.detection.base import DetectionError

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = """You are a wine bottle and label detection expert.
Detect all wine bottles and their labels in the image.
Return a JSON array of bounding boxes for each detected label.
Use a coordinate system from 0 to 1000, where:
- 0 is the top/left edge
- 1000 is the bottom/right edge
Return ONLY valid JSON in this format:
[
  {"ymin": number, "xmin": number, "ymax": number, "xmax": number},
  ...
]
If no labels are detected, return an empty array: []"""

DETECT_PROMPT = (
    "Detect all wine bottle labels in this image. "
    "Return bounding boxes in [0-1000] normalized coordinates."
)

LABEL_BOXES_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "ymin": {"type": "number"},
            "xmin": {"type": "number"},
            "ymax": {"type": "number"},
            "xmax": {"type": "number"},
        },
        "required": ["ymin", "xmin", "ymax", "xmax"],
        "additionalProperties": False,
    },
}


class GeminiDetection:
    """Google Gemini API를 사용한 와인 라벨 탐지

    응답은 JSON 스키마로 강제. 파싱 실패는 "탐지 없음"으로 처리하고,
    네트워크/서비스 오류는 호출자에게 그대로 전파 (재시도 없음).
    """

    def __init__(self, api_key: str, model: str, timeout: int = 60) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout = timeout

    def detect(self, image_data: str) -> list[NormalizedBox]:
        """이미지에서 와인 라벨 탐지

        Raises:
            DetectionError: API 키 누락
        """
        if not self._api_key:
            raise DetectionError("GEMINI_API_KEY가 설정되지 않았습니다")

        image = decode_data_uri(image_data)
        client = genai.Client(
            api_key=self._api_key,
            http_options=types.HttpOptions(timeout=self._timeout * 1000),
        )

        response = client.models.generate_content(
            model=self._model,
            contents=[
                DETECT_PROMPT,
                types.Part.from_bytes(data=image.data, mime_type=image.mime_type),
            ],
            config=types.GenerateContentConfig(
                system_instruction=SYSTEM_INSTRUCTION,
                response_mime_type="application/json",
                response_json_schema=LABEL_BOXES_SCHEMA,
            ),
        )

        return self._parse_boxes(response.text)

    def _parse_boxes(self, text: str | None) -> list[NormalizedBox]:
        if not text:
            logger.warning("Gemini 응답이 비어 있음")
            return []

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Gemini 응답 JSON 파싱 실패: {e}")
            return []

        if not isinstance(raw, list):
            logger.warning(f"Gemini 응답이 리스트가 아님: {type(raw).__name__}")
            return []

        boxes: list[NormalizedBox] = []
        for item in raw:
            try:
                boxes.append(NormalizedBox.model_validate(item))
            except ValidationError as e:
                logger.warning(f"바운딩 박스 파싱 실패: {item} - {e}")

        return boxes
