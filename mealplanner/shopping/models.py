# -*- coding: utf-8 -*-
"""Shopping list — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ShoppingItem(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    checked: bool = False
    category: Optional[str] = Field(None, max_length=80)


class ShoppingListResponse(BaseModel):
    count: int
    items: List[ShoppingItem]


class ShoppingAddRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    category: Optional[str] = Field(None, max_length=80)


class AisleAssignment(BaseModel):
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
