"""
Document Storage (S3)

Thin wrapper around a boto3 S3 client for parent-uploaded documents.

Storage is optional: when credentials, region or bucket are missing the
client is never created and uploads are rejected by the caller.
"""

import asyncio
import logging
from dataclasses import dataclass

import boto3
from botocore.client import BaseClient

from brightnest.core.config import Settings, settings

logger = logging.getLogger(__name__)

STORAGE_PROVIDER = "s3"


@dataclass(frozen=True)
class StoredObject:
    """Location of an object written to the documents bucket."""

    key: str
    url: str


class DocumentStorage:
    """Writes objects to the configured documents bucket."""

    def __init__(self, config: Settings):
        self.bucket = config.documents_bucket
        self.region = config.aws_region
        self._client: BaseClient | None = None

        if config.storage_configured:
            self._client = boto3.client(
                "s3",
                region_name=config.aws_region,
                aws_access_key_id=config.aws_access_key_id,
                aws_secret_access_key=config.aws_secret_access_key,
            )
            logger.info(f"S3 client initialized for bucket {self.bucket}")
        else:
            logger.warning("S3 not fully configured; document uploads will be disabled.")

    @property
    def is_configured(self) -> bool:
        return self._client is not None and bool(self.bucket) and bool(self.region)

    def object_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    async def put_object(self, key: str, body: bytes, content_type: str) -> StoredObject:
        """
        Upload bytes under ``key``.

        Raises:
            RuntimeError: If storage is not configured
            botocore.exceptions.ClientError: If S3 rejects the request
        """
        if not self.is_configured:
            raise RuntimeError("Document storage is not configured")

        # boto3 is synchronous; keep it off the event loop
        await asyncio.to_thread(
            self._client.put_object,
            Bucket=self.bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
        )
        logger.info(f"Stored object {key} in bucket {self.bucket}")
        return StoredObject(key=key, url=self.object_url(key))


_storage: DocumentStorage | None = None


def get_storage() -> DocumentStorage:
    """Return the process-wide DocumentStorage, creating it on first use."""
    global _storage
    if _storage is None:
        _storage = DocumentStorage(settings)
    return _storage
