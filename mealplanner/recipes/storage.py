# -*- coding: utf-8 -*-
"""Recipes — current suggestions and the rejected list."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import uuid4

from ..documents import RECIPES, REJECTED, dump_items, get_document_store, parse_items
from .models import Recipe, RejectedRecipe


def assign_ids(recipes: List[Recipe]) -> List[Recipe]:
    """Give every recipe a fresh id; model-supplied ids are not trusted to be unique."""
    return [r.model_copy(update={"id": uuid4().hex}) for r in recipes]


def get_recipes(household_id: str) -> List[Recipe]:
    raw = get_document_store().load(household_id, RECIPES, [])
    return parse_items(raw, Recipe, name=RECIPES)


def find_recipe(household_id: str, recipe_id: str) -> Optional[Recipe]:
    return next((r for r in get_recipes(household_id) if r.id == recipe_id), None)


def save_recipes(household_id: str, recipes: List[Recipe]) -> None:
    get_document_store().save(household_id, RECIPES, dump_items(recipes))


def get_rejected(household_id: str) -> List[RejectedRecipe]:
    raw = get_document_store().load(household_id, REJECTED, [])
    return parse_items(raw, RejectedRecipe, name=REJECTED)


def reject_recipe(household_id: str, recipe_id: str) -> Optional[Tuple[List[Recipe], RejectedRecipe]]:
    """Move a recipe from the current suggestions to the rejected list.

    Returns ``None`` when the recipe is unknown. The rejected list is written
    first, so a failure in between leaves the recipe in both documents rather
    than in neither.
    """
    store = get_document_store()
    current = parse_items(store.load_for_update(household_id, RECIPES, []), Recipe, name=RECIPES)
    target = next((r for r in current if r.id == recipe_id), None)
    if target is None:
        return None

    rejected = parse_items(store.load_for_update(household_id, REJECTED, []), RejectedRecipe, name=REJECTED)
    stamped = RejectedRecipe(
        **target.model_dump(),
        rejected_at=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )
    store.save(household_id, REJECTED, dump_items([stamped] + rejected))

    remaining = [r for r in current if r.id != recipe_id]
    save_recipes(household_id, remaining)
    return remaining, stamped
