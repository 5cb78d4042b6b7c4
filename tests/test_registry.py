# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import shutil
import tempfile
import unittest
from itertools import count
from pathlib import Path

from mealplanner.blobstore.local import LocalBlobStore
from mealplanner.errors import (
    NoPartition,
    PreconditionFailed,
    RegistryConflict,
    RegistryMissing,
    RegistryUnreadable,
    Unauthenticated,
)
from mealplanner.household.registry import REGISTRY_PATH, HouseholdRegistry


class _RacingStore(LocalBlobStore):
    """Lets another writer update the registry just before each of our conditional writes."""

    def __init__(self, root: Path, bucket_name: str, *, races: int, intruder: dict) -> None:
        super().__init__(root, bucket_name)
        self.races = races
        self.intruder = intruder
        self.conditional_writes = 0

    def _put(self, path, data, *, content_type, if_version, if_absent):
        if if_version is not None or if_absent:
            self.conditional_writes += 1
            if self.races > 0:
                self.races -= 1
                current = {}
                if self._exists(path):
                    current = json.loads(self._get(path)[0])
                current.update(self.intruder)
                super()._put(path, json.dumps(current).encode(), content_type=content_type,
                             if_version=None, if_absent=False)
        return super()._put(path, data, content_type=content_type, if_version=if_version, if_absent=if_absent)


class _AlwaysConflicting(LocalBlobStore):
    def __init__(self, root: Path, bucket_name: str) -> None:
        super().__init__(root, bucket_name)
        self.attempts = 0

    def _put(self, path, data, *, content_type, if_version, if_absent):
        self.attempts += 1
        raise PreconditionFailed(path)


class TestHouseholdRegistry(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="mealplanner-registry-"))
        self.store = LocalBlobStore(self._tmp, "bucket")
        ids = count(1)
        self.registry = HouseholdRegistry(self.store, id_factory=lambda: f"p{next(ids)}")

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp, ignore_errors=True)

    def _stored(self) -> dict:
        return json.loads(self.store.get(REGISTRY_PATH))

    def test_first_resolve_creates_registry_and_partition(self) -> None:
        self.assertEqual(self.registry.resolve_partition("alice@example.com"), "p1")
        self.assertEqual(self._stored(), {"alice@example.com": "p1"})

    def test_resolve_is_stable(self) -> None:
        first = self.registry.resolve_partition("alice@example.com")
        second = self.registry.resolve_partition("alice@example.com")
        self.assertEqual(first, second)
        self.assertEqual(len(self._stored()), 1)

    def test_identity_is_normalized(self) -> None:
        first = self.registry.resolve_partition("  Alice@Example.COM ")
        self.assertEqual(self.registry.resolve_partition("alice@example.com"), first)
        self.assertIn("alice@example.com", self._stored())

    def test_distinct_identities_get_distinct_partitions(self) -> None:
        a = self.registry.resolve_partition("a@example.com")
        b = self.registry.resolve_partition("b@example.com")
        self.assertNotEqual(a, b)

    def test_fresh_id_skips_ids_already_in_use(self) -> None:
        self.store.put(REGISTRY_PATH, json.dumps({"old@example.com": "p1"}).encode())
        self.assertEqual(self.registry.resolve_partition("new@example.com"), "p2")

    def test_empty_identity_is_unauthenticated(self) -> None:
        with self.assertRaises(Unauthenticated):
            self.registry.resolve_partition("   ")
        with self.assertRaises(Unauthenticated):
            self.registry.resolve_partition(None)
        self.assertFalse(self.store.exists(REGISTRY_PATH))

    def test_invite_moves_target_into_inviter_household(self) -> None:
        home = self.registry.resolve_partition("alice@example.com")
        self.registry.resolve_partition("bob@example.com")
        self.assertEqual(self.registry.invite("alice@example.com", "Bob@Example.com"), home)
        self.assertEqual(self.registry.lookup("bob@example.com"), home)
        self.assertEqual(self.registry.members(home), ["alice@example.com", "bob@example.com"])

    def test_invite_new_identity(self) -> None:
        home = self.registry.resolve_partition("alice@example.com")
        self.registry.invite("alice@example.com", "carol@example.com")
        self.assertEqual(self.registry.resolve_partition("carol@example.com"), home)

    def test_invite_same_household_is_noop(self) -> None:
        home = self.registry.resolve_partition("alice@example.com")
        self.registry.invite("alice@example.com", "bob@example.com")
        before = self.store.get_versioned(REGISTRY_PATH)[1]
        self.assertEqual(self.registry.invite("alice@example.com", "bob@example.com"), home)
        self.assertEqual(self.store.get_versioned(REGISTRY_PATH)[1], before)

    def test_invite_without_registry(self) -> None:
        with self.assertRaises(RegistryMissing):
            self.registry.invite("alice@example.com", "bob@example.com")
        self.assertFalse(self.store.exists(REGISTRY_PATH))

    def test_invite_without_own_partition_writes_nothing(self) -> None:
        self.registry.resolve_partition("bob@example.com")
        before = self._stored()
        with self.assertRaises(NoPartition):
            self.registry.invite("stranger@example.com", "bob@example.com")
        self.assertEqual(self._stored(), before)

    def test_corrupt_registry_is_not_overwritten(self) -> None:
        for stored in (b'{"alice@example.com": "p1"', b'["alice@example.com"]', b"\xff\xfe"):
            self.store.put(REGISTRY_PATH, stored)
            with self.assertRaises(RegistryUnreadable) as ctx:
                self.registry.resolve_partition("alice@example.com")
            self.assertEqual(ctx.exception.message, "Failed to resolve household")
            with self.assertRaises(RegistryUnreadable):
                self.registry.invite("alice@example.com", "bob@example.com")
            self.assertEqual(self.store.get(REGISTRY_PATH), stored)

    def test_invite_requires_both_identities(self) -> None:
        self.registry.resolve_partition("alice@example.com")
        with self.assertRaises(Unauthenticated):
            self.registry.invite("", "bob@example.com")
        with self.assertRaises(ValueError):
            self.registry.invite("alice@example.com", " ")

    def test_concurrent_first_sign_ins_keep_both_entries(self) -> None:
        store = _RacingStore(self._tmp, "race", races=1, intruder={"other@example.com": "p-other"})
        registry = HouseholdRegistry(store, id_factory=lambda: "p-mine")
        self.assertEqual(registry.resolve_partition("me@example.com"), "p-mine")
        stored = json.loads(store.get(REGISTRY_PATH))
        self.assertEqual(stored, {"other@example.com": "p-other", "me@example.com": "p-mine"})
        self.assertEqual(store.conditional_writes, 2)

    def test_concurrent_invite_is_retried(self) -> None:
        store = _RacingStore(self._tmp, "race-invite", races=0, intruder={"zed@example.com": "p9"})
        ids = count(1)
        registry = HouseholdRegistry(store, id_factory=lambda: f"p{next(ids)}")
        home = registry.resolve_partition("alice@example.com")
        store.races = 1
        registry.invite("alice@example.com", "bob@example.com")
        stored = json.loads(store.get(REGISTRY_PATH))
        self.assertEqual(stored["bob@example.com"], home)
        self.assertEqual(stored["zed@example.com"], "p9")

    def test_persistent_conflict_gives_up(self) -> None:
        store = _AlwaysConflicting(self._tmp, "busy")
        registry = HouseholdRegistry(store, max_attempts=3)
        with self.assertRaises(RegistryConflict):
            registry.resolve_partition("alice@example.com")
        self.assertEqual(store.attempts, 3)


if __name__ == "__main__":
    unittest.main()
