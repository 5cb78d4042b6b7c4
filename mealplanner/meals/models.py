# -*- coding: utf-8 -*-
"""Meals — Pydantic models."""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ..images import ImageUpload

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

_NUM_RE = re.compile(r"\d+(?:\.\d+)?")


class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"


class MealAnalysis(BaseModel):
    net_carbs: float = Field(..., ge=0, validation_alias=AliasChoices("net_carbs", "netCarbs", "net_carbs_g"))
    compliant: bool = False
    notes: str = ""

    @field_validator("net_carbs", mode="before")
    @classmethod
    def _coerce_net_carbs(cls, value: object) -> object:
        # Answers like "10-12g" or "about 12g": the first number wins.
        if isinstance(value, str):
            match = _NUM_RE.search(value.replace(",", ""))
            return match.group(0) if match else value
        return value

    @field_validator("notes", mode="before")
    @classmethod
    def _coerce_notes(cls, value: object) -> str:
        if value is None:
            return ""
        if isinstance(value, list):
            return " ".join(str(v).strip() for v in value if v is not None)
        return str(value)


class MealAnalyzeRequest(ImageUpload):
    description: Optional[str] = Field(None, max_length=500, description="Optional hint, e.g. 'leftover steak'")


class MealAnalyzeResponse(BaseModel):
    analysis: MealAnalysis
    net_carb_limit: float
    model: str


class MealLog(BaseModel):
    id: str
    date: str = Field(..., pattern=DATE_PATTERN)
    slot: Optional[MealType] = None
    recipe_title: Optional[str] = None
    description: Optional[str] = None
    attendees: List[str] = []
    analysis: Optional[MealAnalysis] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = None
    logged_at: str


class MealLogRequest(BaseModel):
    date: str = Field(..., pattern=DATE_PATTERN)
    slot: Optional[MealType] = None
    recipe_title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=500)
    attendees: List[str] = Field(default_factory=list)
    analysis: Optional[MealAnalysis] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = Field(None, max_length=2000)


class HistoryResponse(BaseModel):
    count: int
    entries: List[MealLog]
