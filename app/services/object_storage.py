from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
import logging
from typing import Iterator
from urllib.parse import quote

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    pass


class StorageObjectNotFound(StorageError):
    pass


@dataclass
class StoredObject:
    key: str
    body: Iterator[bytes]
    content_type: str | None = None
    content_length: int | None = None


@dataclass
class ObjectListing:
    prefix: str
    folders: list[str] = field(default_factory=list)
    files: list[dict] = field(default_factory=list)


def _endpoint_url() -> str:
    if settings.R2_ENDPOINT_URL:
        return settings.R2_ENDPOINT_URL
    return f"https://{settings.R2_ACCOUNT_ID}.r2.cloudflarestorage.com"


class ObjectStorage:
    """Thin wrapper around an S3 client pointed at the R2 bucket."""

    def __init__(self, client=None, bucket: str | None = None) -> None:
        self._client = client
        self.bucket = bucket or settings.R2_BUCKET_NAME

    @property
    def client(self):
        if self._client is None:
            if not (settings.R2_ACCESS_KEY_ID and settings.R2_SECRET_ACCESS_KEY and self.bucket):
                raise StorageError("Object storage is not configured (R2 credentials/bucket missing).")
            self._client = boto3.client(
                "s3",
                region_name="auto",
                endpoint_url=_endpoint_url(),
                aws_access_key_id=settings.R2_ACCESS_KEY_ID,
                aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
            )
        return self._client

    def put_object(self, key: str, data: bytes, content_type: str | None = None) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type or "application/octet-stream",
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to upload {key}: {exc}") from exc

    def get_object(self, key: str) -> StoredObject:
        try:
            resp = self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            if code in {"NoSuchKey", "404"}:
                raise StorageObjectNotFound(key) from exc
            raise StorageError(f"Failed to read {key}: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"Failed to read {key}: {exc}") from exc

        return StoredObject(
            key=key,
            body=resp["Body"].iter_chunks(),
            content_type=resp.get("ContentType"),
            content_length=resp.get("ContentLength"),
        )

    def delete_object(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to delete {key}: {exc}") from exc

    def list_prefix(self, prefix: str = "") -> ObjectListing:
        listing = ObjectListing(prefix=prefix)
        paginator = self.client.get_paginator("list_objects_v2")
        try:
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix, Delimiter="/"):
                for common in page.get("CommonPrefixes", []):
                    listing.folders.append(common["Prefix"])
                for item in page.get("Contents", []):
                    if item["Key"] == prefix:
                        # the folder marker itself
                        continue
                    listing.files.append(
                        {
                            "key": item["Key"],
                            "size": item.get("Size"),
                            "last_modified": item.get("LastModified"),
                        }
                    )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to list {prefix or '/'}: {exc}") from exc
        return listing

    def presigned_get_url(self, key: str, expires_in: int | None = None) -> str:
        try:
            return self.client.generate_presigned_url(
                ClientMethod="get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in or settings.PRESIGNED_URL_TTL_SECONDS,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to sign URL for {key}: {exc}") from exc

    def public_url(self, key: str) -> str:
        base = settings.R2_PUBLIC_BASE_URL.rstrip("/")
        if not base:
            raise StorageError("R2_PUBLIC_BASE_URL is not configured.")
        return f"{base}/{quote(key)}"


@lru_cache(maxsize=1)
def get_object_storage() -> ObjectStorage:
    return ObjectStorage()
