# -*- coding: utf-8 -*-
"""Inventory — document storage."""

from __future__ import annotations

from typing import List

from ..documents import INVENTORY, dump_items, get_document_store, parse_items
from .models import Ingredient


def get_inventory(household_id: str) -> List[Ingredient]:
    raw = get_document_store().load(household_id, INVENTORY, [])
    return parse_items(raw, Ingredient, name=INVENTORY)


def load_inventory_for_update(household_id: str) -> List[Ingredient]:
    raw = get_document_store().load_for_update(household_id, INVENTORY, [])
    return parse_items(raw, Ingredient, name=INVENTORY)


def save_inventory(household_id: str, items: List[Ingredient]) -> None:
    get_document_store().save(household_id, INVENTORY, dump_items(items))


def add_ingredients(household_id: str, new_items: List[Ingredient], *, replace: bool = False) -> List[Ingredient]:
    items = [] if replace else load_inventory_for_update(household_id)
    items.extend(new_items)
    save_inventory(household_id, items)
    return items


def remove_ingredient(household_id: str, index: int) -> List[Ingredient]:
    items = load_inventory_for_update(household_id)
    if index < 0 or index >= len(items):
        raise IndexError(index)
    del items[index]
    save_inventory(household_id, items)
    return items
