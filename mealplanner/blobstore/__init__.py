# -*- coding: utf-8 -*-
"""Blob store backends and the process-wide store instance."""

from __future__ import annotations

from ..config import settings
from .base import JSON_CONTENT_TYPE, BlobStore
from .local import LocalBlobStore

_store: BlobStore | None = None


def build_blob_store() -> BlobStore:
    if settings.storage_backend == "s3":
        from .s3 import S3BlobStore, build_s3_client

        client = build_s3_client(region=settings.s3_region, endpoint_url=settings.s3_endpoint_url)
        return S3BlobStore(client, settings.bucket_name, region=settings.s3_region)
    return LocalBlobStore(settings.data_root, settings.bucket_name)


def get_blob_store() -> BlobStore:
    global _store
    if _store is None:
        _store = build_blob_store()
    return _store


__all__ = ["BlobStore", "JSON_CONTENT_TYPE", "LocalBlobStore", "build_blob_store", "get_blob_store"]
