"""S3(및 S3 호환) 저장소 구현체"""

# pyright: reportMissingTypeStubs=false

from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from src.infra.storage.base import StorageError

NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


class S3Storage:
    """boto3 기반 오브젝트 저장소

    public_base_url이 있으면 그 아래 URL을, 없으면 virtual-hosted 스타일 S3 URL을 반환.
    """

    def __init__(
        self,
        bucket: str,
        region: str,
        endpoint_url: str = "",
        public_base_url: str = "",
        access_key_id: str = "",
        secret_access_key: str = "",
        connect_timeout: int = 5,
        read_timeout: int = 30,
    ) -> None:
        if not bucket:
            raise StorageError("S3_BUCKET이 설정되지 않았습니다")

        self.bucket = bucket
        self.region = region
        self.public_base_url = public_base_url.rstrip("/")

        client_kwargs: dict[str, Any] = {
            "region_name": region,
            "config": Config(connect_timeout=connect_timeout, read_timeout=read_timeout),
        }
        if endpoint_url:
            client_kwargs["endpoint_url"] = endpoint_url
        # 키가 없으면 boto3 기본 자격 증명 체인 사용 (IAM role 등)
        if access_key_id and secret_access_key:
            client_kwargs["aws_access_key_id"] = access_key_id
            client_kwargs["aws_secret_access_key"] = secret_access_key

        self._client = boto3.client("s3", **client_kwargs)

    def put(self, key: str, data: bytes, content_type: str) -> str:
        """
        Raises:
            StorageError: 업로드 실패 시
        """
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"S3 업로드 실패: {key} - {e}") from e
        return self.get_url(key)

    def get(self, key: str) -> bytes | None:
        try:
            response = self._client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                return None
            raise StorageError(f"S3 조회 실패: {key} - {e}") from e
        except BotoCoreError as e:
            raise StorageError(f"S3 조회 실패: {key} - {e}") from e
        return response["Body"].read()

    def get_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))
