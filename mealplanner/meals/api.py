# -*- coding: utf-8 -*-
"""Meals — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ..auth.security import get_current_household
from ..images import decode_images
from ..profiles.storage import get_settings
from .analysis import analyze_meal
from .models import DATE_PATTERN, HistoryResponse, MealAnalyzeRequest, MealAnalyzeResponse, MealLog, MealLogRequest
from .storage import add_log, create_log_record, get_history

router = APIRouter(prefix="/api/meals", tags=["Meals"])


@router.post("/analyze", response_model=MealAnalyzeResponse, summary="Estimate net carbs of a meal photo (no storage)")
def analyze(request: MealAnalyzeRequest, household_id: str = Depends(get_current_household)):
    image = decode_images([request])[0]
    household = get_settings(household_id)
    result = analyze_meal(image, household, request.description)
    return MealAnalyzeResponse(
        analysis=result.unwrap(),
        net_carb_limit=household.net_carb_limit,
        model=result.model,
    )


@router.post("/log", response_model=MealLog, summary="Log a meal")
def log_meal(request: MealLogRequest, household_id: str = Depends(get_current_household)):
    entry = create_log_record(**request.model_dump())
    add_log(household_id, entry)
    return entry


@router.get("/history", response_model=HistoryResponse, summary="Meal history, newest first")
def history(
    start: str | None = Query(default=None, pattern=DATE_PATTERN, description="YYYY-MM-DD"),
    end: str | None = Query(default=None, pattern=DATE_PATTERN, description="YYYY-MM-DD"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    household_id: str = Depends(get_current_household),
):
    entries = get_history(household_id, start=start, end=end)
    return HistoryResponse(count=len(entries), entries=entries[offset : offset + limit])
