# -*- coding: utf-8 -*-
"""Household — Pydantic models."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, computed_field


class OnboardingChecklist(BaseModel):
    has_inventory: bool = False
    has_schedule: bool = False
    has_members: bool = False

    @computed_field
    @property
    def complete(self) -> bool:
        return self.has_inventory and self.has_schedule and self.has_members


class HouseholdResponse(BaseModel):
    household_id: str
    members: List[str]
    onboarding: OnboardingChecklist


class InviteRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254, pattern=r"^\s*[^@\s]+@[^@\s]+\s*$")


class InviteResponse(BaseModel):
    household_id: str
    invited: str
    members: List[str]
