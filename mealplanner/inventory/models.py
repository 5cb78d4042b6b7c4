# -*- coding: utf-8 -*-
"""Inventory — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ..images import ImageUpload


class Ingredient(BaseModel):
    name: str = Field(..., min_length=1, validation_alias=AliasChoices("name", "item", "ingredient", "food"))
    quantity: Optional[str] = Field(None, validation_alias=AliasChoices("quantity", "amount", "qty"))
    category: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value: object) -> Optional[str]:
        # Models answer "2", 2 or "2 cartons" interchangeably.
        if value is None:
            return None
        s = str(value).strip()
        return s or None


class InventoryResponse(BaseModel):
    count: int
    items: List[Ingredient]


class InventoryScanRequest(BaseModel):
    images: List[ImageUpload] = Field(..., min_length=1, max_length=8)
    replace: bool = Field(False, description="Replace the inventory instead of appending")


class InventoryScanResponse(BaseModel):
    identified: List[Ingredient]
    items: List[Ingredient]
    model: str
    warnings: List[str] = []


class InventoryReplaceRequest(BaseModel):
    items: List[Ingredient] = Field(default_factory=list)
