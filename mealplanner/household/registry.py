# -*- coding: utf-8 -*-
"""Household registry — maps identities (e-mail) to household partition ids.

The registry is one JSON object stored at ``admin/users.json``. Writes are
compare-and-swap on the version token that was read, and the whole
read-modify-write is retried from scratch when another writer got in first.
"""

from __future__ import annotations

import json
import logging
from typing import Callable, Dict, List, Optional, Tuple
from uuid import uuid4

from ..blobstore import JSON_CONTENT_TYPE, BlobStore, get_blob_store
from ..config import settings
from ..documents import dump_document
from ..errors import (
    BlobNotFound,
    NoPartition,
    PreconditionFailed,
    RegistryConflict,
    RegistryMissing,
    RegistryUnreadable,
    Unauthenticated,
)

log = logging.getLogger(__name__)

REGISTRY_PATH = "admin/users.json"


def normalize_identity(identity: Optional[str]) -> str:
    return (identity or "").strip().lower()


class HouseholdRegistry:
    def __init__(
        self,
        blobs: BlobStore,
        *,
        max_attempts: int = 5,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.blobs = blobs
        self.max_attempts = max(1, int(max_attempts))
        self._new_id = id_factory or (lambda: uuid4().hex)

    def _read(self) -> Tuple[Optional[Dict[str, str]], Optional[str]]:
        """Return (mapping, version); (None, None) when the registry does not exist yet."""
        try:
            raw, version = self.blobs.get_versioned(REGISTRY_PATH)
        except BlobNotFound:
            return None, None
        try:
            registry = json.loads(raw.decode("utf-8"))
        except ValueError as exc:
            log.error("cannot parse %s: %s", REGISTRY_PATH, exc)
            raise RegistryUnreadable("Failed to resolve household") from exc
        if not isinstance(registry, dict):
            log.error("%s is not a JSON object", REGISTRY_PATH)
            raise RegistryUnreadable("Failed to resolve household")
        return {str(k): str(v) for k, v in registry.items()}, version

    def _write(self, registry: Dict[str, str], version: Optional[str]) -> None:
        self.blobs.put(
            REGISTRY_PATH,
            dump_document(registry),
            content_type=JSON_CONTENT_TYPE,
            if_version=version,
            if_absent=version is None,
        )

    def lookup(self, identity: str) -> Optional[str]:
        registry, _ = self._read()
        return (registry or {}).get(normalize_identity(identity))

    def members(self, partition_id: str) -> List[str]:
        registry, _ = self._read()
        return sorted(email for email, pid in (registry or {}).items() if pid == partition_id)

    def _fresh_id(self, registry: Dict[str, str]) -> str:
        taken = set(registry.values())
        new_id = self._new_id()
        while new_id in taken:
            new_id = self._new_id()
        return new_id

    def resolve_partition(self, identity: Optional[str]) -> str:
        email = normalize_identity(identity)
        if not email:
            raise Unauthenticated("Not authenticated")

        for attempt in range(1, self.max_attempts + 1):
            registry, version = self._read()
            registry = registry or {}
            existing = registry.get(email)
            if existing:
                return existing

            new_id = self._fresh_id(registry)
            registry[email] = new_id
            try:
                self._write(registry, version)
            except PreconditionFailed:
                log.info("registry changed while creating household for %s (attempt %d)", email, attempt)
                continue
            log.info("created household %s for %s", new_id, email)
            return new_id

        raise RegistryConflict("Could not resolve household; registry busy")

    def invite(self, current_identity: Optional[str], target_identity: Optional[str]) -> str:
        current = normalize_identity(current_identity)
        target = normalize_identity(target_identity)
        if not current:
            raise Unauthenticated("Not authenticated")
        if not target:
            raise ValueError("target identity is required")

        for attempt in range(1, self.max_attempts + 1):
            registry, version = self._read()
            if registry is None:
                raise RegistryMissing("System registry missing")
            household_id = registry.get(current)
            if not household_id:
                raise NoPartition("Current user has no household")
            if registry.get(target) == household_id:
                return household_id

            previous = registry.get(target)
            registry[target] = household_id
            try:
                self._write(registry, version)
            except PreconditionFailed:
                log.info("registry changed while inviting %s (attempt %d)", target, attempt)
                continue
            if previous:
                log.warning("%s moved from household %s to %s; old data is orphaned", target, previous, household_id)
            log.info("%s invited %s into household %s", current, target, household_id)
            return household_id

        raise RegistryConflict("Could not update household; registry busy")


_registry: HouseholdRegistry | None = None


def get_registry() -> HouseholdRegistry:
    global _registry
    if _registry is None:
        _registry = HouseholdRegistry(get_blob_store(), max_attempts=settings.registry_max_attempts)
    return _registry
