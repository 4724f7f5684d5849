import base64
import tempfile
from collections.abc import Generator
from io import BytesIO
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from src.infra.storage import set_storage
from src.infra.storage.local import LocalStorage
from src.main import app
from src.schemas.pipeline import NormalizedBox
from src.services.detection import set_detection


def make_test_image(width: int = 800, height: int = 600, fmt: str = "PNG") -> bytes:
    """테스트용 실제 이미지 바이트 생성 (좌/우 절반 색이 다름)"""
    img = Image.new("RGB", (width, height), color="red")
    img.paste((0, 0, 255), (width // 2, 0, width, height))
    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def make_data_uri(data: bytes, subtype: str = "png") -> str:
    return f"data:image/{subtype};base64,{base64.b64encode(data).decode()}"


class FakeDetector:
    def __init__(self, boxes: list[NormalizedBox]) -> None:
        self._boxes = boxes
        self.calls: list[str] = []

    def detect(self, image_data: str) -> list[NormalizedBox]:
        self.calls.append(image_data)
        return self._boxes


class FailingDetector:
    def detect(self, image_data: str) -> list[NormalizedBox]:
        raise ConnectionError("Gemini 연결 실패")


class FlakyStorage(LocalStorage):
    """특정 호출 순번(1부터)의 put만 실패시키는 저장소"""

    def __init__(self, base_dir: Path, fail_on: set[int]) -> None:
        super().__init__(base_dir=base_dir, base_url="http://localhost:8000/static")
        self._fail_on = fail_on
        self.put_count = 0

    def put(self, key: str, data: bytes, content_type: str) -> str:
        self.put_count += 1
        if self.put_count in self._fail_on:
            raise OSError("저장소 장애")
        return super().put(key, data, content_type)


@pytest.fixture
def temp_upload_dir() -> Generator[Path, None, None]:
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def local_storage(temp_upload_dir: Path) -> Generator[LocalStorage, None, None]:
    storage = LocalStorage(base_dir=temp_upload_dir, base_url="http://localhost:8000/static")
    set_storage(storage)
    yield storage
    set_storage(None)


@pytest.fixture
def image_bytes() -> bytes:
    return make_test_image()


@pytest.fixture
def image_data(image_bytes: bytes) -> str:
    return make_data_uri(image_bytes)


@pytest.fixture
def reset_detection() -> Generator[None, None, None]:
    set_detection(None)
    yield
    set_detection(None)


@pytest.fixture
def client(
    local_storage: LocalStorage, reset_detection: None
) -> Generator[TestClient, None, None]:
    yield TestClient(app)
