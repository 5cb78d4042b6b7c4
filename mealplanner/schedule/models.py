# -*- coding: utf-8 -*-
"""Schedule — Pydantic models."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from ..meals.models import DATE_PATTERN, MealType


class ScheduledMeal(BaseModel):
    date: str = Field(..., pattern=DATE_PATTERN)
    slot: MealType = MealType.dinner
    recipe_id: str = Field(..., min_length=1)
    recipe_title: str = Field(..., min_length=1, max_length=200)
    attendees: List[str] = Field(default_factory=list)


class ScheduleResponse(BaseModel):
    count: int
    meals: List[ScheduledMeal]


class ScheduleDay(BaseModel):
    date: str
    weekday: str
    meals: List[ScheduledMeal]


class WeekResponse(BaseModel):
    start: str
    days: List[ScheduleDay]
