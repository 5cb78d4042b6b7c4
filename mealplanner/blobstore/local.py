# -*- coding: utf-8 -*-
"""Blob store — local filesystem backend (development and tests)."""

from __future__ import annotations

import hashlib
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Tuple

from ..errors import BlobNotFound, PreconditionFailed
from .base import BlobStore


def content_version(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class LocalBlobStore(BlobStore):
    """Stores each blob as a file under ``<root>/<bucket>/<path>``.

    Versions are content hashes. Conditional writes are serialized with a
    process-wide lock; unconditional writes go through a temp file and
    ``os.replace`` so readers never observe a partial document.
    """

    _lock = threading.Lock()

    def __init__(self, root: Path, bucket_name: str) -> None:
        super().__init__(bucket_name)
        self.root = Path(root)

    @property
    def bucket_dir(self) -> Path:
        return self.root / self.bucket_name

    def _resolve(self, path: str) -> Path:
        rel = Path(path.lstrip("/"))
        if any(part == ".." for part in rel.parts):
            raise ValueError(f"invalid blob path: {path!r}")
        return self.bucket_dir / rel

    def _bucket_exists(self) -> bool:
        return self.bucket_dir.is_dir()

    def _create_bucket(self) -> None:
        self.bucket_dir.mkdir(parents=True, exist_ok=True)

    def _exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def _get(self, path: str) -> Tuple[bytes, str]:
        fp = self._resolve(path)
        try:
            data = fp.read_bytes()
        except FileNotFoundError as exc:
            raise BlobNotFound(path) from exc
        return data, content_version(data)

    def _write_atomic(self, fp: Path, data: bytes) -> None:
        fp.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".tmp-", dir=str(fp.parent))
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp, fp)
        except Exception:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def _put(
        self,
        path: str,
        data: bytes,
        *,
        content_type: str,
        if_version: Optional[str],
        if_absent: bool,
    ) -> str:
        fp = self._resolve(path)
        if if_version is None and not if_absent:
            self._write_atomic(fp, data)
            return content_version(data)

        with self._lock:
            if fp.is_file():
                if if_absent:
                    raise PreconditionFailed(f"{path} already exists")
                current = content_version(fp.read_bytes())
                if current != if_version:
                    raise PreconditionFailed(f"{path} changed since it was read")
            elif if_version is not None:
                raise PreconditionFailed(f"{path} disappeared since it was read")
            self._write_atomic(fp, data)
        return content_version(data)
