from pathlib import Path

from src.infra.storage.base import StorageError


class LocalStorage:
    """로컬 파일 시스템 저장소 구현체. FastAPI StaticFiles로 서빙."""

    def __init__(self, base_dir: Path, base_url: str = "/static"):
        self.base_dir = base_dir
        self.base_url = base_url.rstrip("/")

    def put(self, key: str, data: bytes, content_type: str) -> str:
        """
        Raises:
            StorageError: key가 base_dir 밖을 가리키거나 쓰기 실패 시
        """
        save_path = self._resolve(key)
        try:
            save_path.parent.mkdir(parents=True, exist_ok=True)
            save_path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"파일 저장 실패: {key} - {e}") from e
        return self.get_url(key)

    def get(self, key: str) -> bytes | None:
        file_path = self._resolve(key)
        if not file_path.is_file():
            return None
        try:
            return file_path.read_bytes()
        except OSError as e:
            raise StorageError(f"파일 조회 실패: {key} - {e}") from e

    def get_url(self, key: str) -> str:
        return f"{self.base_url}/{key}"

    def _resolve(self, key: str) -> Path:
        """key → 절대 경로 (Path Traversal 방지)"""
        base = self.base_dir.resolve()
        path = (base / key).resolve()
        if not path.is_relative_to(base) or path == base:
            raise StorageError(f"유효하지 않은 저장 경로: {key}")
        return path
