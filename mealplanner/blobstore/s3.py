# -*- coding: utf-8 -*-
"""Blob store — S3 API backend (AWS S3 or the GCS interoperability endpoint)."""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import boto3
from botocore.exceptions import ClientError

from ..errors import BlobNotFound, PreconditionFailed
from .base import BlobStore

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound", "NoSuchBucket"}
_PRECONDITION_CODES = {"412", "PreconditionFailed", "ConditionalRequestConflict"}


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code") or "")


def build_s3_client(*, region: str | None, endpoint_url: str | None):
    """Create an S3 client using the ambient AWS credential chain."""
    kwargs: Dict[str, Any] = {"service_name": "s3", "region_name": region}
    if endpoint_url:
        kwargs["endpoint_url"] = endpoint_url
    return boto3.client(**kwargs)


class S3BlobStore(BlobStore):
    def __init__(self, client: Any, bucket_name: str, *, region: str | None = None) -> None:
        super().__init__(bucket_name)
        self.client = client
        self.region = region

    def _bucket_exists(self) -> bool:
        try:
            self.client.head_bucket(Bucket=self.bucket_name)
            return True
        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                return False
            raise

    def _create_bucket(self) -> None:
        kwargs: Dict[str, Any] = {"Bucket": self.bucket_name}
        if self.region and self.region != "us-east-1":
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
        self.client.create_bucket(**kwargs)

    def _exists(self, path: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket_name, Key=path)
            return True
        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                return False
            raise

    def _get(self, path: str) -> Tuple[bytes, str]:
        try:
            resp = self.client.get_object(Bucket=self.bucket_name, Key=path)
        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                raise BlobNotFound(path) from exc
            raise
        body = resp["Body"].read()
        return body, str(resp.get("ETag") or "")

    def _put(
        self,
        path: str,
        data: bytes,
        *,
        content_type: str,
        if_version: Optional[str],
        if_absent: bool,
    ) -> str:
        kwargs: Dict[str, Any] = {
            "Bucket": self.bucket_name,
            "Key": path,
            "Body": data,
            "ContentType": content_type,
            "CacheControl": "no-cache",
        }
        if if_version is not None:
            kwargs["IfMatch"] = if_version
        elif if_absent:
            kwargs["IfNoneMatch"] = "*"
        try:
            resp = self.client.put_object(**kwargs)
        except ClientError as exc:
            if _error_code(exc) in _PRECONDITION_CODES:
                raise PreconditionFailed(f"{path}: {exc}") from exc
            raise
        return str(resp.get("ETag") or "")
