"""Storage for uploaded character-sheet files (local directory or S3/MinIO)."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_MISSING_KEY_CODES = ("404", "NoSuchKey", "NotFound")


class BlobNotFoundError(KeyError):
    """Raised when a stored sheet key does not exist."""


def build_character_sheet_key(character_id: str, level: int, filename: Optional[str]) -> str:
    """characters/<id>/level-<n>/<timestamp>-<filename>"""
    safe_name = _UNSAFE_FILENAME_CHARS.sub("_", (filename or "").strip()).strip("._") or "sheet.pdf"
    stamp = datetime.utcnow().strftime("%Y%m%dT%H%M%S%f")
    return f"characters/{character_id}/level-{level}/{stamp}-{safe_name}"


class LocalBlobStore:
    """Blobs as files under a root directory; keys are relative paths."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).expanduser().resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents:
            raise ValueError(f"Blob key escapes the store root: {key}")
        return path

    def put(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.debug("Stored %d bytes at %s", len(data), path)
        return key

    def get(self, key: str) -> bytes:
        path = self._path_for(key)
        if not path.is_file():
            raise BlobNotFoundError(key)
        return path.read_bytes()

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        if not path.is_file():
            raise BlobNotFoundError(key)
        path.unlink()


class S3BlobStore:
    """Blobs in an S3 bucket. Point ``endpoint_url`` at MinIO for self-hosted setups."""

    def __init__(
        self,
        bucket: str,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        client: Any = None,
    ) -> None:
        if not bucket:
            raise ValueError("S3_BUCKET must be set for the s3 blob store backend.")
        self.bucket = bucket
        self.client = client or boto3.client("s3", region_name=region, endpoint_url=endpoint_url)

    def put(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        extra: Dict[str, Any] = {}
        if content_type:
            extra["ContentType"] = content_type
        self.client.put_object(Bucket=self.bucket, Key=key, Body=data, **extra)
        logger.debug("Uploaded %d bytes to s3://%s/%s", len(data), self.bucket, key)
        return key

    def get(self, key: str) -> bytes:
        try:
            resp = self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code in _MISSING_KEY_CODES:
                raise BlobNotFoundError(key) from exc
            raise
        return resp["Body"].read()

    def delete(self, key: str) -> None:
        # S3 deletes are idempotent, so probe first to report missing keys like the local store.
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code in _MISSING_KEY_CODES:
                raise BlobNotFoundError(key) from exc
            raise
        self.client.delete_object(Bucket=self.bucket, Key=key)


def build_blob_store(settings: Dict[str, Any]):
    backend = settings.get("blob_store_backend", "local")
    if backend == "s3":
        return S3BlobStore(
            bucket=settings.get("s3_bucket") or "",
            region=settings.get("aws_region"),
            endpoint_url=settings.get("s3_endpoint_url"),
        )
    if backend == "local":
        return LocalBlobStore(settings.get("blob_store_dir") or "./sheet_store")
    raise ValueError(f"Unknown BLOB_STORE_BACKEND: {backend}")
