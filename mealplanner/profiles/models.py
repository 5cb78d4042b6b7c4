# -*- coding: utf-8 -*-
"""Profiles — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field


class UserProfile(BaseModel):
    id: str = Field(..., min_length=1, max_length=40, pattern=r"^[A-Za-z0-9_-]+$")
    name: str = Field(..., min_length=1, max_length=80)
    dietary_needs: str = Field("", max_length=500, validation_alias=AliasChoices("dietary_needs", "dietaryNeeds"))


DEFAULT_PROFILES: List[UserProfile] = [
    UserProfile(id="wife", name="Vera (Wife)", dietary_needs="Low carb, Low sugar (Neuropathy/Pre-diabetes)"),
    UserProfile(id="son", name="Hiro (Son)", dietary_needs="High calorie, filling (Teenager)"),
    UserProfile(id="dad", name="Noel (Me)", dietary_needs="Weight loss focused"),
]


class ProfilesResponse(BaseModel):
    profiles: List[UserProfile]
    is_default: bool = False


class ProfilesUpdateRequest(BaseModel):
    profiles: List[UserProfile] = Field(..., min_length=1, max_length=12)


class HouseholdSettings(BaseModel):
    diet_protocol: str = Field("Super Gut", max_length=120)
    net_carb_limit: float = Field(15.0, ge=0, le=500, description="Per-meal net carb ceiling in grams")
    kitchen_notes: Optional[str] = Field(
        "No microwave available. Reheating must be oven/stove friendly or quick execution.",
        max_length=1000,
    )
    staples: List[str] = Field(default_factory=lambda: ["oil", "spices", "flour"])
    protocol_rules: List[str] = Field(default_factory=list)
