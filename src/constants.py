import re


class CropId:
    PREFIX = "crop_"
    PATTERN = re.compile(r"^crop_[a-f0-9]{12}$")


class OriginalId:
    PREFIX = "orig_"


class StoragePrefix:
    CROPS = "wine-crops"
    ORIGINALS = "wine-originals"


class CropDefaults:
    NORMALIZED_SCALE = 1000  # 모델 좌표계 [0, 1000]
    PADDING_RATIO = 0.05  # 5% 안전 여백
    MIN_PADDING = 1  # 축마다 최소 1px


class Limits:
    MAX_IMAGE_BYTES = 10 * 1024 * 1024  # 10MB (디코딩 후)
