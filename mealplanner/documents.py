# -*- coding: utf-8 -*-
"""Partitioned JSON document store.

Every household (partition) owns a small set of named JSON documents stored at
``{partition_id}/{name}.json`` in the blob store. Reads come in two flavours:

* ``load`` never fails: an absent blob *and* a failed read both yield the
  caller's default (the failure is logged).
* ``read`` / ``load_for_update`` keep the two outcomes apart, so a
  read-modify-write never saves an edited default over data it failed to read.

Writes are unconditional (last writer wins) and raise ``SaveFailed``.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .blobstore import JSON_CONTENT_TYPE, BlobStore, get_blob_store
from .errors import BlobNotFound, DocumentUnavailable, SaveFailed

log = logging.getLogger(__name__)

INVENTORY = "inventory"
RECIPES = "recipes"
REJECTED = "rejected"
SCHEDULE = "schedule"
SHOPPING_LIST = "shopping-list"
HISTORY = "history"
SETTINGS = "settings"
PROFILES = "profiles"
FEEDBACK = "feedback"


class LoadStatus(str, Enum):
    present = "present"
    absent = "absent"
    failed = "failed"


@dataclass
class LoadResult:
    status: LoadStatus
    value: Any = None
    error: Optional[str] = None

    @property
    def present(self) -> bool:
        return self.status is LoadStatus.present


def document_path(partition_id: str, name: str) -> str:
    if not partition_id or "/" in partition_id:
        raise ValueError(f"invalid partition id: {partition_id!r}")
    base = name[:-5] if name.endswith(".json") else name
    if not base or "/" in base:
        raise ValueError(f"invalid document name: {name!r}")
    return f"{partition_id}/{base}.json"


def dump_document(value: Any) -> bytes:
    return json.dumps(value, ensure_ascii=False, indent=2).encode("utf-8")


class DocumentStore:
    def __init__(self, blobs: BlobStore) -> None:
        self.blobs = blobs

    def read(self, partition_id: str, name: str) -> LoadResult:
        path = document_path(partition_id, name)
        try:
            raw = self.blobs.get(path)
        except BlobNotFound:
            return LoadResult(LoadStatus.absent)
        except Exception as exc:
            log.warning("error loading %s: %s", path, exc, exc_info=True)
            return LoadResult(LoadStatus.failed, error=str(exc))
        try:
            return LoadResult(LoadStatus.present, value=json.loads(raw.decode("utf-8")))
        except Exception as exc:
            log.warning("error parsing %s: %s", path, exc, exc_info=True)
            return LoadResult(LoadStatus.failed, error=str(exc))

    def load(self, partition_id: str, name: str, default: Any) -> Any:
        result = self.read(partition_id, name)
        if result.present:
            return result.value
        return copy.deepcopy(default)

    def load_for_update(self, partition_id: str, name: str, default: Any) -> Any:
        result = self.read(partition_id, name)
        if result.status is LoadStatus.failed:
            raise DocumentUnavailable(f"Could not read {name}; try again")
        if result.present:
            return result.value
        return copy.deepcopy(default)

    def save(self, partition_id: str, name: str, value: Any) -> None:
        path = document_path(partition_id, name)
        try:
            self.blobs.put(path, dump_document(value), content_type=JSON_CONTENT_TYPE)
        except Exception as exc:
            log.error("error saving %s: %s", path, exc)
            raise SaveFailed(f"Failed to save {name}") from exc


_documents: DocumentStore | None = None


def get_document_store() -> DocumentStore:
    global _documents
    if _documents is None:
        _documents = DocumentStore(get_blob_store())
    return _documents


def parse_items(raw: Any, model: Any, *, name: str = "document") -> list:
    """Validate a stored JSON array element-wise, skipping malformed entries."""
    if not isinstance(raw, list):
        if raw is not None:
            log.warning("%s is not a JSON array; treating as empty", name)
        return []
    out = []
    for entry in raw:
        try:
            out.append(model.model_validate(entry))
        except Exception as exc:
            log.warning("skipping malformed %s entry: %s", name, exc)
    return out


def dump_items(items: list) -> list:
    return [item.model_dump(mode="json") for item in items]
