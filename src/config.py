from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # App
    base_url: str = "http://localhost:8000"
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]

    # Detection
    detection_provider: str = "gemini"  # "gemini"

    # Gemini API
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_timeout: int = 60  # 초

    # Storage
    storage_provider: str = "local"  # "local" | "s3"
    local_storage_dir: str = ""  # 비어 있으면 <프로젝트 루트>/uploads

    # S3 (호환 스토리지 포함)
    s3_bucket: str = ""
    s3_region: str = "ap-northeast-2"
    s3_endpoint_url: str = ""
    s3_public_base_url: str = ""
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    s3_connect_timeout: int = 5
    s3_read_timeout: int = 30

    # Pipeline
    store_original: bool = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
