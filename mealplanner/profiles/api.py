# -*- coding: utf-8 -*-
"""Profiles — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import get_current_household
from .models import HouseholdSettings, ProfilesResponse, ProfilesUpdateRequest
from .storage import get_profiles, get_settings, save_profiles, save_settings

router = APIRouter(prefix="/api", tags=["Profiles"])


@router.get("/profiles", response_model=ProfilesResponse, summary="Household member profiles")
def list_profiles(household_id: str = Depends(get_current_household)):
    profiles, is_default = get_profiles(household_id)
    return ProfilesResponse(profiles=profiles, is_default=is_default)


@router.put("/profiles", response_model=ProfilesResponse, summary="Replace member profiles")
def update_profiles(request: ProfilesUpdateRequest, household_id: str = Depends(get_current_household)):
    ids = [p.id for p in request.profiles]
    if len(set(ids)) != len(ids):
        raise HTTPException(status_code=400, detail="Profile ids must be unique")
    save_profiles(household_id, request.profiles)
    return ProfilesResponse(profiles=request.profiles, is_default=False)


@router.get("/settings", response_model=HouseholdSettings, summary="Household diet settings")
def read_settings(household_id: str = Depends(get_current_household)):
    return get_settings(household_id)


@router.put("/settings", response_model=HouseholdSettings, summary="Replace household diet settings")
def update_settings(request: HouseholdSettings, household_id: str = Depends(get_current_household)):
    save_settings(household_id, request)
    return request
