# -*- coding: utf-8 -*-
"""Shopping list — API endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import get_current_household
from .categorizer import apply_categories, request_categories
from .models import ShoppingAddRequest, ShoppingItem, ShoppingListResponse
from .storage import get_shopping_list, update_shopping_list

router = APIRouter(prefix="/api/shopping-list", tags=["Shopping"])


def _response(items: List[ShoppingItem]) -> ShoppingListResponse:
    return ShoppingListResponse(count=len(items), items=items)


def _check_index(items: List[ShoppingItem], index: int) -> None:
    if index < 0 or index >= len(items):
        raise HTTPException(status_code=404, detail="Shopping list item not found")


@router.get("", response_model=ShoppingListResponse, summary="Shopping list")
def list_items(household_id: str = Depends(get_current_household)):
    return _response(get_shopping_list(household_id))


@router.post("/items", response_model=ShoppingListResponse, summary="Add an item")
def add_item(request: ShoppingAddRequest, household_id: str = Depends(get_current_household)):
    item = ShoppingItem(name=request.name.strip(), category=request.category)
    return _response(update_shopping_list(household_id, lambda items: items + [item]))


@router.post("/items/{index}/toggle", response_model=ShoppingListResponse, summary="Toggle checked")
def toggle_item(index: int, household_id: str = Depends(get_current_household)):
    def mutate(items: List[ShoppingItem]) -> List[ShoppingItem]:
        _check_index(items, index)
        items[index] = items[index].model_copy(update={"checked": not items[index].checked})
        return items

    return _response(update_shopping_list(household_id, mutate))


@router.delete("/items/{index}", response_model=ShoppingListResponse, summary="Remove an item")
def remove_item(index: int, household_id: str = Depends(get_current_household)):
    def mutate(items: List[ShoppingItem]) -> List[ShoppingItem]:
        _check_index(items, index)
        del items[index]
        return items

    return _response(update_shopping_list(household_id, mutate))


@router.post("/clear-checked", response_model=ShoppingListResponse, summary="Drop checked items")
def clear_checked(household_id: str = Depends(get_current_household)):
    return _response(update_shopping_list(household_id, lambda items: [i for i in items if not i.checked]))


@router.post("/categorize", response_model=ShoppingListResponse, summary="Sort items into aisles")
def categorize(household_id: str = Depends(get_current_household)):
    items = get_shopping_list(household_id)
    if not items:
        return _response(items)
    assignments = request_categories(items).unwrap()
    # Re-read so edits made while the model was thinking are not lost.
    categorized = update_shopping_list(household_id, lambda current: apply_categories(current, assignments))
    return _response(categorized)
