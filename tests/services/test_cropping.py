"""좌표 변환 + 크롭 테스트"""

import io
import itertools

import pytest
from PIL import Image

from src.schemas.pipeline import CropRect, NormalizedBox
from src.services.cropping import (
    ImageDecodeError,
    InvalidBoxError,
    crop_image,
    map_to_pixel_rect,
    open_image,
)
from tests.conftest import make_test_image


def _box(ymin: float, xmin: float, ymax: float, xmax: float) -> NormalizedBox:
    return NormalizedBox(ymin=ymin, xmin=xmin, ymax=ymax, xmax=xmax)


class TestMapToPixelRect:
    def test_reference_example(self) -> None:
        rect = map_to_pixel_rect(_box(100, 200, 500, 700), 1000, 1000)

        assert rect == CropRect(x=175, y=80, width=550, height=440)

    def test_scales_to_image_size(self) -> None:
        # 2000x500: scale_x=2, scale_y=0.5
        rect = map_to_pixel_rect(_box(100, 200, 500, 700), 2000, 500)

        # base x=400 y=50 w=1000 h=200 → pad 50/10
        assert rect == CropRect(x=350, y=40, width=1100, height=220)

    def test_clamps_origin_at_zero(self) -> None:
        rect = map_to_pixel_rect(_box(0, 0, 400, 520), 1000, 1000)

        assert rect.x == 0
        assert rect.y == 0
        # 원점 클램핑 후 크기는 패딩된 값 그대로 (w=520+26*2, h=400+20*2)
        assert rect.width == 572
        assert rect.height == 440

    def test_extent_bounded_by_clamped_origin(self) -> None:
        rect = map_to_pixel_rect(_box(0, 0, 1000, 1000), 1000, 1000)

        assert rect == CropRect(x=0, y=0, width=1000, height=1000)

    def test_clamps_far_edge(self) -> None:
        rect = map_to_pixel_rect(_box(900, 900, 1000, 1000), 1000, 1000)

        # base 900/900/100/100, pad 5 → x=895, 크기는 남은 공간 105로 제한
        assert rect == CropRect(x=895, y=895, width=105, height=105)

    def test_minimum_padding_for_zero_width_box(self) -> None:
        rect = map_to_pixel_rect(_box(500, 500, 500, 500), 1000, 1000)

        assert rect == CropRect(x=499, y=499, width=2, height=2)

    def test_minimum_padding_for_tiny_box(self) -> None:
        rect = map_to_pixel_rect(_box(100, 100, 110, 110), 1000, 1000)

        # w=10 → floor(0.5)=0 → pad 1
        assert rect == CropRect(x=99, y=99, width=12, height=12)

    def test_inverted_box_raises(self) -> None:
        with pytest.raises(InvalidBoxError):
            map_to_pixel_rect(_box(500, 700, 100, 200), 1000, 1000)

    def test_box_outside_grid_raises(self) -> None:
        with pytest.raises(InvalidBoxError):
            map_to_pixel_rect(_box(1200, 1200, 1300, 1300), 1000, 1000)

    def test_result_always_within_bounds(self) -> None:
        coords = [-50, 0, 1, 250, 499.5, 999, 1000, 1050]
        sizes = [(1, 1), (7, 13), (640, 480), (1000, 1000), (4032, 3024)]

        for (ymin, xmin, ymax, xmax), (width, height) in itertools.product(
            itertools.product(coords, repeat=4), sizes
        ):
            try:
                rect = map_to_pixel_rect(_box(ymin, xmin, ymax, xmax), width, height)
            except InvalidBoxError:
                continue

            assert rect.x >= 0
            assert rect.y >= 0
            assert rect.width >= 1
            assert rect.height >= 1
            assert rect.x + rect.width <= width
            assert rect.y + rect.height <= height


class TestOpenImage:
    def test_png(self) -> None:
        with open_image(make_test_image(320, 240)) as img:
            assert img.size == (320, 240)

    def test_jpeg(self) -> None:
        with open_image(make_test_image(123, 45, fmt="JPEG")) as img:
            assert img.size == (123, 45)

    def test_undecodable_raises(self) -> None:
        with pytest.raises(ImageDecodeError, match="이미지 디코딩 실패"):
            open_image(b"not an image")

    def test_truncated_raises(self) -> None:
        data = make_test_image(200, 200, fmt="JPEG")

        with pytest.raises(ImageDecodeError):
            open_image(data[: len(data) // 2])

    def test_corrupt_png_raises(self) -> None:
        with pytest.raises(ImageDecodeError):
            open_image(b"\x89PNG broken")


class TestCropImage:
    def test_extracts_exact_region_as_png(self) -> None:
        with open_image(make_test_image(800, 600)) as source:
            result = crop_image(source, CropRect(x=350, y=100, width=100, height=50))

        with Image.open(io.BytesIO(result)) as img:
            assert img.format == "PNG"
            assert img.size == (100, 50)
            # 왼쪽 절반은 빨강, 오른쪽 절반은 파랑
            assert img.getpixel((0, 0)) == (255, 0, 0)
            assert img.getpixel((99, 49)) == (0, 0, 255)

    def test_full_image(self) -> None:
        with open_image(make_test_image(64, 32)) as source:
            result = crop_image(source, CropRect(x=0, y=0, width=64, height=32))

        with Image.open(io.BytesIO(result)) as img:
            assert img.size == (64, 32)

    def test_multiple_crops_from_one_decode(self) -> None:
        with open_image(make_test_image(800, 600)) as source:
            left = crop_image(source, CropRect(x=0, y=0, width=10, height=10))
            right = crop_image(source, CropRect(x=790, y=590, width=10, height=10))

        with Image.open(io.BytesIO(left)) as img:
            assert img.getpixel((5, 5)) == (255, 0, 0)
        with Image.open(io.BytesIO(right)) as img:
            assert img.getpixel((5, 5)) == (0, 0, 255)

    def test_cmyk_source_converted(self) -> None:
        buf = io.BytesIO()
        Image.new("CMYK", (40, 40), color=(0, 0, 0, 0)).save(buf, format="JPEG")

        with open_image(buf.getvalue()) as source:
            result = crop_image(source, CropRect(x=10, y=10, width=20, height=20))

        with Image.open(io.BytesIO(result)) as img:
            assert img.mode == "RGB"
            assert img.size == (20, 20)

    def test_rect_outside_image_raises(self) -> None:
        with open_image(make_test_image(100, 100)) as source:
            with pytest.raises(ImageDecodeError, match="범위를 벗어남"):
                crop_image(source, CropRect(x=90, y=0, width=20, height=10))
