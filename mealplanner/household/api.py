# -*- coding: utf-8 -*-
"""Household — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..auth.security import get_current_household, get_current_identity
from ..inventory.storage import get_inventory
from ..schedule.storage import get_schedule
from .models import HouseholdResponse, InviteRequest, InviteResponse, OnboardingChecklist
from .registry import get_registry, normalize_identity

router = APIRouter(prefix="/api/household", tags=["Household"])


@router.get("", response_model=HouseholdResponse, summary="Household members and onboarding progress")
def household(household_id: str = Depends(get_current_household)):
    members = get_registry().members(household_id)
    checklist = OnboardingChecklist(
        has_inventory=bool(get_inventory(household_id)),
        has_schedule=bool(get_schedule(household_id)),
        has_members=len(members) > 1,
    )
    return HouseholdResponse(household_id=household_id, members=members, onboarding=checklist)


@router.post("/invite", response_model=InviteResponse, summary="Add someone to your household")
def invite(request: InviteRequest, identity: str = Depends(get_current_identity)):
    registry = get_registry()
    household_id = registry.invite(identity, request.email)
    return InviteResponse(
        household_id=household_id,
        invited=normalize_identity(request.email),
        members=registry.members(household_id),
    )
