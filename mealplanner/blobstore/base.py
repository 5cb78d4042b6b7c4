# -*- coding: utf-8 -*-
"""Blob store — backend-neutral contract for named blobs inside one bucket."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional, Tuple

log = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


class BlobStore(ABC):
    """Keyed blob storage with lazy bucket creation.

    ``put`` is an unconditional overwrite unless ``if_version`` or
    ``if_absent`` is given, in which case it becomes a conditional write and
    raises ``PreconditionFailed`` when the stored blob no longer matches.
    """

    def __init__(self, bucket_name: str) -> None:
        self.bucket_name = bucket_name
        self._bucket_ready = False

    def _ready(self) -> None:
        if not self._bucket_ready:
            self.ensure_bucket()
            self._bucket_ready = True

    def ensure_bucket(self) -> None:
        if self._bucket_exists():
            return
        try:
            self._create_bucket()
            log.info("created bucket %s", self.bucket_name)
        except Exception as exc:
            # A concurrent first caller may have created it; any other failure surfaces on the next read/write.
            log.warning("bucket creation for %s failed, continuing: %s", self.bucket_name, exc)

    def exists(self, path: str) -> bool:
        self._ready()
        return self._exists(path)

    def get(self, path: str) -> bytes:
        data, _ = self.get_versioned(path)
        return data

    def get_versioned(self, path: str) -> Tuple[bytes, str]:
        self._ready()
        return self._get(path)

    def put(
        self,
        path: str,
        data: bytes,
        *,
        content_type: str = JSON_CONTENT_TYPE,
        if_version: Optional[str] = None,
        if_absent: bool = False,
    ) -> str:
        self._ready()
        return self._put(path, data, content_type=content_type, if_version=if_version, if_absent=if_absent)

    @abstractmethod
    def _bucket_exists(self) -> bool: ...

    @abstractmethod
    def _create_bucket(self) -> None: ...

    @abstractmethod
    def _exists(self, path: str) -> bool: ...

    @abstractmethod
    def _get(self, path: str) -> Tuple[bytes, str]: ...

    @abstractmethod
    def _put(
        self,
        path: str,
        data: bytes,
        *,
        content_type: str,
        if_version: Optional[str],
        if_absent: bool,
    ) -> str: ...
