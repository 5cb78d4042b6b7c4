# -*- coding: utf-8 -*-
"""Schedule — API endpoints."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from ..auth.security import get_current_household
from ..meals.models import DATE_PATTERN, MealType
from .models import ScheduledMeal, ScheduleResponse, WeekResponse
from .storage import clear_meal, get_schedule, set_meal, week_view

router = APIRouter(prefix="/api/schedule", tags=["Schedule"])


def _parse_date_or_400(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Dates must be YYYY-MM-DD")


@router.get("", response_model=ScheduleResponse, summary="Scheduled meals")
def list_schedule(
    days: Optional[int] = Query(default=None, ge=1, le=366, description="Only the next N days, starting today"),
    household_id: str = Depends(get_current_household),
):
    meals = get_schedule(household_id)
    if days is not None:
        today = date.today()
        first, last = today.isoformat(), (today + timedelta(days=days - 1)).isoformat()
        meals = [m for m in meals if first <= m.date <= last]
    return ScheduleResponse(count=len(meals), meals=meals)


@router.get("/week", response_model=WeekResponse, summary="Plan laid out one entry per day")
def week(
    start: Optional[str] = Query(default=None, description="YYYY-MM-DD, defaults to today"),
    days: int = Query(default=7, ge=1, le=31),
    household_id: str = Depends(get_current_household),
):
    start_date = _parse_date_or_400(start) if start else date.today()
    return WeekResponse(start=start_date.isoformat(), days=week_view(get_schedule(household_id), start_date, days))


@router.put("", response_model=ScheduleResponse, summary="Plan a meal for a date and slot")
def put_meal(meal: ScheduledMeal, household_id: str = Depends(get_current_household)):
    _parse_date_or_400(meal.date)
    meals = set_meal(household_id, meal)
    return ScheduleResponse(count=len(meals), meals=meals)


@router.delete("/{day}", response_model=ScheduleResponse, summary="Clear a date (or one slot of it)")
def clear(
    day: str = Path(..., pattern=DATE_PATTERN),
    slot: Optional[MealType] = Query(default=None),
    household_id: str = Depends(get_current_household),
):
    meals = clear_meal(household_id, day, slot)
    return ScheduleResponse(count=len(meals), meals=meals)
