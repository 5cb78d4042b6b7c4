# -*- coding: utf-8 -*-
"""Feedback — API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import get_current_household, get_current_identity
from .models import FeedbackEntry, FeedbackRequest, FeedbackResponse
from .storage import add_feedback, get_feedback

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/feedback", tags=["Feedback"])


@router.get("", response_model=FeedbackResponse, summary="Feedback submitted by this household")
def list_feedback(household_id: str = Depends(get_current_household)):
    entries = get_feedback(household_id)
    return FeedbackResponse(count=len(entries), entries=entries)


@router.post("", response_model=FeedbackEntry, summary="Submit feedback")
def submit(
    request: FeedbackRequest,
    identity: str = Depends(get_current_identity),
    household_id: str = Depends(get_current_household),
):
    if not request.message.strip():
        raise HTTPException(status_code=400, detail="Feedback message is empty")
    entry = add_feedback(household_id, user=identity, type=request.type, message=request.message)
    log.info("feedback %s (%s) from %s", entry.id, entry.type.value, identity)
    return entry
