from pathlib import Path

from src.config import get_settings

from .base import StorageBackend, StorageError
from .local import LocalStorage
from .s3 import S3Storage

__all__ = [
    "StorageBackend",
    "StorageError",
    "LocalStorage",
    "S3Storage",
    "get_storage",
    "set_storage",
]


def _find_project_root() -> Path:
    """pyproject.toml 위치를 프로젝트 루트로 탐색"""
    current = Path(__file__).resolve().parent
    while current != current.parent:
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent
    raise RuntimeError("프로젝트 루트를 찾을 수 없음")


class _StorageHolder:
    instance: StorageBackend | None = None


def get_storage() -> StorageBackend:
    """설정에 따라 storage 백엔드 반환"""
    if _StorageHolder.instance is None:
        settings = get_settings()
        if settings.storage_provider == "local":
            base_dir = (
                Path(settings.local_storage_dir)
                if settings.local_storage_dir
                else _find_project_root() / "uploads"
            )
            _StorageHolder.instance = LocalStorage(
                base_dir=base_dir, base_url=f"{settings.base_url}/static"
            )
        elif settings.storage_provider == "s3":
            _StorageHolder.instance = S3Storage(
                bucket=settings.s3_bucket,
                region=settings.s3_region,
                endpoint_url=settings.s3_endpoint_url,
                public_base_url=settings.s3_public_base_url,
                access_key_id=settings.aws_access_key_id,
                secret_access_key=settings.aws_secret_access_key,
                connect_timeout=settings.s3_connect_timeout,
                read_timeout=settings.s3_read_timeout,
            )
        else:
            raise ValueError(f"Unknown storage provider: {settings.storage_provider!r}")
    return _StorageHolder.instance


def set_storage(storage: StorageBackend | None) -> None:
    """storage 백엔드 설정 (테스트용)"""
    _StorageHolder.instance = storage
