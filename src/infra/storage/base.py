from typing import Protocol


class StorageError(Exception):
    pass


class StorageBackend(Protocol):
    """오브젝트 저장소 인터페이스. LocalStorage, S3Storage 구현체로 교체 가능."""

    def put(self, key: str, data: bytes, content_type: str) -> str:
        """key에 저장하고 공개 URL 반환"""
        ...

    def get(self, key: str) -> bytes | None:
        """key의 바이트 반환. 없으면 None, 조회 실패는 StorageError"""
        ...
