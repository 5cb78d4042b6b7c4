# -*- coding: utf-8 -*-
"""Recipes — Pydantic models."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..meals.models import DATE_PATTERN, MealType


def as_text_list(value: object) -> object:
    if isinstance(value, str):
        return [line.strip() for line in value.splitlines() if line.strip()]
    if isinstance(value, list):
        return [str(v).strip() for v in value if v is not None and str(v).strip()]
    return value


class Recipe(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    suitability: Dict[str, bool] = Field(default_factory=dict)
    calories: Optional[Dict[str, float]] = None
    net_carbs: Optional[float] = Field(
        default=None, ge=0, validation_alias=AliasChoices("net_carbs", "netCarbs")
    )
    protocol_benefit: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("protocol_benefit", "superGutBenefit", "super_gut_benefit")
    )
    reheat_friendly: bool = Field(
        default=False, validation_alias=AliasChoices("reheat_friendly", "reheatFriendly")
    )

    @field_validator("ingredients", "instructions", "tags", mode="before")
    @classmethod
    def _coerce_lists(cls, value: object) -> object:
        return as_text_list(value)

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_description(cls, value: object) -> str:
        return "" if value is None else str(value)

    @field_validator("calories", mode="before")
    @classmethod
    def _drop_non_numeric_calories(cls, value: object) -> object:
        if not isinstance(value, dict):
            return None if value in (None, "") else value
        out: Dict[str, float] = {}
        for key, kcal in value.items():
            try:
                out[str(key)] = float(kcal)
            except (TypeError, ValueError):
                continue
        return out or None


class RejectedRecipe(Recipe):
    rejected_at: str = ""


class RecipesResponse(BaseModel):
    count: int
    recipes: List[Recipe]


class RejectedResponse(BaseModel):
    count: int
    recipes: List[RejectedRecipe]


class RecipeGenerateRequest(BaseModel):
    count: int = Field(3, ge=1, le=8)
    meal: MealType = MealType.dinner
    notes: Optional[str] = Field(default=None, max_length=500, description="Extra wishes, e.g. 'something with fish'")


class RecipeGenerateResponse(BaseModel):
    recipes: List[Recipe]
    model: str
    warnings: List[str] = Field(default_factory=list)


class RecipeCookedRequest(BaseModel):
    date: Optional[str] = Field(default=None, pattern=DATE_PATTERN, description="Defaults to today")
    slot: MealType = MealType.dinner
    attendees: List[str] = Field(default_factory=list)
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    notes: Optional[str] = Field(default=None, max_length=1000)
