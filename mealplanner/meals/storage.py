# -*- coding: utf-8 -*-
"""Meals — history document storage (newest first)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from ..documents import HISTORY, dump_items, get_document_store, parse_items
from .models import MealAnalysis, MealLog, MealType


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def create_log_record(
    *,
    date: str,
    slot: Optional[MealType] = None,
    recipe_title: Optional[str] = None,
    description: Optional[str] = None,
    attendees: Optional[List[str]] = None,
    analysis: Optional[MealAnalysis] = None,
    rating: Optional[int] = None,
    notes: Optional[str] = None,
) -> MealLog:
    return MealLog(
        id=uuid4().hex,
        date=date,
        slot=slot,
        recipe_title=recipe_title,
        description=description,
        attendees=list(attendees or []),
        analysis=analysis,
        rating=rating,
        notes=notes,
        logged_at=_utc_now(),
    )


def get_history(household_id: str, *, start: Optional[str] = None, end: Optional[str] = None) -> List[MealLog]:
    raw = get_document_store().load(household_id, HISTORY, [])
    entries = parse_items(raw, MealLog, name=HISTORY)
    if not start and not end:
        return entries
    start_date = start or "0000-01-01"
    end_date = end or "9999-12-31"
    return [e for e in entries if start_date <= e.date <= end_date]


def add_log(household_id: str, entry: MealLog) -> List[MealLog]:
    store = get_document_store()
    raw = store.load_for_update(household_id, HISTORY, [])
    entries = [entry] + parse_items(raw, MealLog, name=HISTORY)
    store.save(household_id, HISTORY, dump_items(entries))
    return entries
