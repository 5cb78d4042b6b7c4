# -*- coding: utf-8 -*-
"""Protocol — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..recipes.models import as_text_list


class ProtocolRecipe(BaseModel):
    title: str = Field(..., min_length=1)
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    notes: Optional[str] = None

    @field_validator("ingredients", "instructions", mode="before")
    @classmethod
    def _coerce_lists(cls, value: object) -> object:
        return as_text_list(value)


class ProtocolGuide(BaseModel):
    rules: List[str] = Field(default_factory=list)
    banned_ingredients: List[str] = Field(default_factory=list)
    allowed_ingredients: List[str] = Field(default_factory=list)
    recipes: List[ProtocolRecipe] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)

    @field_validator("rules", "banned_ingredients", "allowed_ingredients", "tips", mode="before")
    @classmethod
    def _coerce_lists(cls, value: object) -> object:
        return as_text_list(value)

    @property
    def empty(self) -> bool:
        return not (self.rules or self.banned_ingredients or self.allowed_ingredients or self.recipes or self.tips)
