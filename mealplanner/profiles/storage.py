# -*- coding: utf-8 -*-
"""Profiles — document storage."""

from __future__ import annotations

import logging
from typing import List, Tuple

from pydantic import ValidationError

from ..documents import PROFILES, SETTINGS, dump_items, get_document_store, parse_items
from ..errors import DocumentUnavailable
from .models import DEFAULT_PROFILES, HouseholdSettings, UserProfile

log = logging.getLogger(__name__)


def get_profiles(household_id: str) -> Tuple[List[UserProfile], bool]:
    """Return (profiles, is_default); the built-in family applies until one is saved."""
    raw = get_document_store().load(household_id, PROFILES, [])
    profiles = parse_items(raw, UserProfile, name=PROFILES)
    if profiles:
        return profiles, False
    return [p.model_copy() for p in DEFAULT_PROFILES], True


def save_profiles(household_id: str, profiles: List[UserProfile]) -> None:
    get_document_store().save(household_id, PROFILES, dump_items(profiles))


def get_settings(household_id: str) -> HouseholdSettings:
    raw = get_document_store().load(household_id, SETTINGS, {})
    try:
        return HouseholdSettings.model_validate(raw if isinstance(raw, dict) else {})
    except Exception as exc:
        log.warning("invalid %s for household %s, using defaults: %s", SETTINGS, household_id, exc)
        return HouseholdSettings()


def save_settings(household_id: str, value: HouseholdSettings) -> None:
    get_document_store().save(household_id, SETTINGS, value.model_dump(mode="json"))


def get_settings_for_update(household_id: str) -> HouseholdSettings:
    """Like ``get_settings`` but refuses to hand back defaults for a document it could not read."""
    raw = get_document_store().load_for_update(household_id, SETTINGS, {})
    try:
        return HouseholdSettings.model_validate(raw if isinstance(raw, dict) else {})
    except ValidationError as exc:
        raise DocumentUnavailable(f"Stored {SETTINGS} document is invalid; fix it before updating") from exc
