# -*- coding: utf-8 -*-
"""Shopping list — document storage."""

from __future__ import annotations

from typing import Callable, List

from ..documents import SHOPPING_LIST, dump_items, get_document_store, parse_items
from .models import ShoppingItem


def get_shopping_list(household_id: str) -> List[ShoppingItem]:
    raw = get_document_store().load(household_id, SHOPPING_LIST, [])
    return parse_items(raw, ShoppingItem, name=SHOPPING_LIST)


def save_shopping_list(household_id: str, items: List[ShoppingItem]) -> None:
    get_document_store().save(household_id, SHOPPING_LIST, dump_items(items))


def update_shopping_list(
    household_id: str,
    mutate: Callable[[List[ShoppingItem]], List[ShoppingItem]],
) -> List[ShoppingItem]:
    raw = get_document_store().load_for_update(household_id, SHOPPING_LIST, [])
    items = mutate(parse_items(raw, ShoppingItem, name=SHOPPING_LIST))
    save_shopping_list(household_id, items)
    return items


def append_items(household_id: str, names: List[str]) -> List[ShoppingItem]:
    new_items = [ShoppingItem(name=n.strip()) for n in names if n and n.strip()]
    return update_shopping_list(household_id, lambda items: items + new_items)
