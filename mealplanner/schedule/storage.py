# -*- coding: utf-8 -*-
"""Schedule — document storage."""

from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional

from ..documents import SCHEDULE, dump_items, get_document_store, parse_items
from ..meals.models import MealType
from .models import ScheduleDay, ScheduledMeal

_SLOT_ORDER = {slot: i for i, slot in enumerate(MealType)}


def _sorted(meals: List[ScheduledMeal]) -> List[ScheduledMeal]:
    return sorted(meals, key=lambda m: (m.date, _SLOT_ORDER[m.slot]))


def get_schedule(household_id: str) -> List[ScheduledMeal]:
    raw = get_document_store().load(household_id, SCHEDULE, [])
    return _sorted(parse_items(raw, ScheduledMeal, name=SCHEDULE))


def _load_for_update(household_id: str) -> List[ScheduledMeal]:
    raw = get_document_store().load_for_update(household_id, SCHEDULE, [])
    return parse_items(raw, ScheduledMeal, name=SCHEDULE)


def _save(household_id: str, meals: List[ScheduledMeal]) -> List[ScheduledMeal]:
    meals = _sorted(meals)
    get_document_store().save(household_id, SCHEDULE, dump_items(meals))
    return meals


def set_meal(household_id: str, meal: ScheduledMeal) -> List[ScheduledMeal]:
    """Schedule a meal, replacing whatever was planned for the same date and slot."""
    meals = [m for m in _load_for_update(household_id) if not (m.date == meal.date and m.slot == meal.slot)]
    meals.append(meal)
    return _save(household_id, meals)


def clear_meal(household_id: str, day: str, slot: Optional[MealType] = None) -> List[ScheduledMeal]:
    meals = [
        m for m in _load_for_update(household_id)
        if not (m.date == day and (slot is None or m.slot == slot))
    ]
    return _save(household_id, meals)


def week_view(meals: List[ScheduledMeal], start: date, days: int = 7) -> List[ScheduleDay]:
    out: List[ScheduleDay] = []
    for offset in range(days):
        d = start + timedelta(days=offset)
        iso = d.isoformat()
        out.append(ScheduleDay(date=iso, weekday=d.strftime("%A"), meals=[m for m in meals if m.date == iso]))
    return out
