# -*- coding: utf-8 -*-
"""Recipes — API endpoints."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import get_current_household
from ..inventory.storage import get_inventory
from ..meals.models import MealLog
from ..meals.storage import add_log, create_log_record
from ..profiles.storage import get_profiles, get_settings
from ..shopping.models import ShoppingListResponse
from ..shopping.storage import append_items
from .generator import drop_rejected, generate_recipes
from .models import (
    RecipeCookedRequest,
    RecipeGenerateRequest,
    RecipeGenerateResponse,
    RecipesResponse,
    RejectedResponse,
)
from .storage import assign_ids, find_recipe, get_recipes, get_rejected, reject_recipe, save_recipes

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipes", tags=["Recipes"])


@router.get("", response_model=RecipesResponse, summary="Current recipe suggestions")
def list_recipes(household_id: str = Depends(get_current_household)):
    recipes = get_recipes(household_id)
    return RecipesResponse(count=len(recipes), recipes=recipes)


@router.post("/generate", response_model=RecipeGenerateResponse, summary="Suggest recipes from the inventory")
def generate(request: RecipeGenerateRequest | None = None, household_id: str = Depends(get_current_household)):
    request = request or RecipeGenerateRequest()
    inventory = get_inventory(household_id)
    if not inventory:
        raise HTTPException(status_code=400, detail="Inventory is empty; scan or add ingredients first")

    profiles, _ = get_profiles(household_id)
    household = get_settings(household_id)
    rejected = [r.title for r in get_rejected(household_id)]

    result = generate_recipes(
        inventory,
        profiles,
        household,
        rejected,
        count=request.count,
        meal=request.meal.value,
        notes=request.notes,
    )
    suggested = result.unwrap()
    warnings = [f"Ignored malformed recipe: {d}" for d in result.dropped]

    recipes = drop_rejected(suggested, rejected)
    if len(recipes) < len(suggested):
        warnings.append(f"Skipped {len(suggested) - len(recipes)} previously rejected recipe(s)")
    recipes = assign_ids(recipes)
    save_recipes(household_id, recipes)
    log.info("generated %d recipes for household %s", len(recipes), household_id)
    return RecipeGenerateResponse(recipes=recipes, model=result.model, warnings=warnings)


@router.get("/rejected", response_model=RejectedResponse, summary="Rejected recipes, newest first")
def list_rejected(household_id: str = Depends(get_current_household)):
    rejected = get_rejected(household_id)
    return RejectedResponse(count=len(rejected), recipes=rejected)


@router.post("/{recipe_id}/reject", response_model=RecipesResponse, summary="Reject a recipe")
def reject(recipe_id: str, household_id: str = Depends(get_current_household)):
    moved = reject_recipe(household_id, recipe_id)
    if moved is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    remaining, _ = moved
    return RecipesResponse(count=len(remaining), recipes=remaining)


@router.post("/{recipe_id}/shopping-list", response_model=ShoppingListResponse, summary="Add a recipe's ingredients to the shopping list")
def add_to_shopping_list(recipe_id: str, household_id: str = Depends(get_current_household)):
    recipe = find_recipe(household_id, recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    items = append_items(household_id, recipe.ingredients)
    return ShoppingListResponse(count=len(items), items=items)


@router.post("/{recipe_id}/cooked", response_model=MealLog, summary="Record that a recipe was cooked")
def cooked(
    recipe_id: str,
    request: RecipeCookedRequest | None = None,
    household_id: str = Depends(get_current_household),
):
    request = request or RecipeCookedRequest()
    recipe = find_recipe(household_id, recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    entry = create_log_record(
        date=request.date or date.today().isoformat(),
        slot=request.slot,
        recipe_title=recipe.title,
        description=recipe.description or None,
        attendees=request.attendees,
        rating=request.rating,
        notes=request.notes,
    )
    add_log(household_id, entry)
    return entry
