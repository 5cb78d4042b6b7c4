# -*- coding: utf-8 -*-
"""Inventory — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import get_current_household
from ..images import decode_images
from .models import (
    Ingredient,
    InventoryReplaceRequest,
    InventoryResponse,
    InventoryScanRequest,
    InventoryScanResponse,
)
from .storage import add_ingredients, get_inventory, remove_ingredient, save_inventory
from .vision import identify_ingredients

router = APIRouter(prefix="/api/inventory", tags=["Inventory"])


@router.get("", response_model=InventoryResponse, summary="List inventory")
def list_inventory(household_id: str = Depends(get_current_household)):
    items = get_inventory(household_id)
    return InventoryResponse(count=len(items), items=items)


@router.post("/scan", response_model=InventoryScanResponse, summary="Identify ingredients from photos")
def scan(request: InventoryScanRequest, household_id: str = Depends(get_current_household)):
    images = decode_images(request.images)
    result = identify_ingredients(images)
    identified = result.unwrap()
    items = add_ingredients(household_id, identified, replace=request.replace)
    warnings = [f"Ignored malformed item: {d}" for d in result.dropped]
    return InventoryScanResponse(identified=identified, items=items, model=result.model, warnings=warnings)


@router.post("/items", response_model=InventoryResponse, summary="Add one ingredient")
def add_item(item: Ingredient, household_id: str = Depends(get_current_household)):
    items = add_ingredients(household_id, [item])
    return InventoryResponse(count=len(items), items=items)


@router.put("", response_model=InventoryResponse, summary="Replace the inventory")
def replace_inventory(request: InventoryReplaceRequest, household_id: str = Depends(get_current_household)):
    save_inventory(household_id, request.items)
    return InventoryResponse(count=len(request.items), items=request.items)


@router.delete("/items/{index}", response_model=InventoryResponse, summary="Remove one ingredient")
def delete_item(index: int, household_id: str = Depends(get_current_household)):
    try:
        items = remove_ingredient(household_id, index)
    except IndexError:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return InventoryResponse(count=len(items), items=items)
