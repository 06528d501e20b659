"""S3 compatible object storage for uploaded resources and event images."""

import logging
import re
from typing import Optional
from uuid import uuid4

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .. import config
from ..exceptions import StorageError

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(filename: str) -> str:
    name = _UNSAFE.sub("-", filename.rsplit("/", 1)[-1]).strip("-.")
    return name or "file"


class StorageService:
    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        public_url: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        client=None,
    ):
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        self.public_url = public_url.rstrip("/") if public_url else None
        self._access_key = access_key
        self._secret_key = secret_key
        self._client = client

    @classmethod
    def from_config(cls) -> "StorageService":
        return cls(
            bucket=config.S3_BUCKET,
            region=config.S3_REGION,
            endpoint_url=config.S3_ENDPOINT_URL,
            public_url=config.S3_PUBLIC_URL,
            access_key=config.AWS_ACCESS_KEY_ID,
            secret_key=config.AWS_SECRET_ACCESS_KEY,
        )

    def _get_client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                region_name=self.region,
                endpoint_url=self.endpoint_url,
                aws_access_key_id=self._access_key,
                aws_secret_access_key=self._secret_key,
            )
        return self._client

    @staticmethod
    def build_key(filename: str, folder: str) -> str:
        return f"{folder}/{uuid4().hex}-{safe_filename(filename)}"

    def url_for(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def upload(self, content: bytes, filename: str, content_type: str, folder: str = "resources") -> str:
        """Store ``content`` and return its public URL."""
        key = self.build_key(filename, folder)
        try:
            self._get_client().put_object(
                Bucket=self.bucket,
                Key=key,
                Body=content,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Upload of %s to bucket %s failed: %s", key, self.bucket, exc, exc_info=True)
            raise StorageError("File upload failed") from exc
        logger.info("Uploaded %s (%d bytes)", key, len(content))
        return self.url_for(key)

    def key_for(self, url: str) -> Optional[str]:
        prefix = self.url_for("")
        if url.startswith(prefix) and len(url) > len(prefix):
            return url[len(prefix):]
        return None

    def discard(self, url: str) -> None:
        """Remove an object this service uploaded.

        Called after a failed database write. Errors are logged, not raised.
        """
        key = self.key_for(url)
        if key is None:
            logger.warning("Not discarding %s: not in bucket %s", url, self.bucket)
            return
        try:
            self._get_client().delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.error("Could not discard %s from bucket %s: %s", key, self.bucket, exc)
            return
        logger.info("Discarded %s", key)
