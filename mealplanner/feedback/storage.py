# -*- coding: utf-8 -*-
"""Feedback — document storage (newest first)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List
from uuid import uuid4

from ..documents import FEEDBACK, dump_items, get_document_store, parse_items
from .models import FeedbackEntry, FeedbackType


def get_feedback(household_id: str) -> List[FeedbackEntry]:
    raw = get_document_store().load(household_id, FEEDBACK, [])
    return parse_items(raw, FeedbackEntry, name=FEEDBACK)


def add_feedback(household_id: str, *, user: str, type: FeedbackType, message: str) -> FeedbackEntry:
    entry = FeedbackEntry(
        id=uuid4().hex,
        user=user,
        type=type,
        message=message.strip(),
        date=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )
    store = get_document_store()
    raw = store.load_for_update(household_id, FEEDBACK, [])
    entries = [entry] + parse_items(raw, FeedbackEntry, name=FEEDBACK)
    store.save(household_id, FEEDBACK, dump_items(entries))
    return entry
