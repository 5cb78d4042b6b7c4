# -*- coding: utf-8 -*-
"""Shopping list — aisle categorization via the model."""

from __future__ import annotations

import json
from typing import Dict, List

from pydantic import TypeAdapter

from ..gateway import GatewayResult, get_gateway
from .models import AisleAssignment, ShoppingItem

_ASSIGNMENT = TypeAdapter(AisleAssignment)

UNCATEGORIZED = "Other"


def categorize_prompt(names: List[str]) -> str:
    return (
        "Sort these grocery items into supermarket aisles "
        "(e.g. Produce, Meat & Seafood, Dairy & Eggs, Bakery, Pantry, Frozen, Beverages, Household, Other).\n"
        f"Items: {json.dumps(names, ensure_ascii=False)}\n"
        "Return ONLY a JSON array with one object per item, keeping the item names exactly as given:\n"
        '[{ "name": "item name", "category": "aisle" }]\n'
        "Do not add markdown formatting."
    )


def request_categories(items: List[ShoppingItem]) -> GatewayResult:
    names = [item.name for item in items]
    return get_gateway().generate_validated(categorize_prompt(names), _ASSIGNMENT, many=True)


def apply_categories(items: List[ShoppingItem], assignments: List[AisleAssignment]) -> List[ShoppingItem]:
    """Set each item's category from the assignments and sort by aisle.

    Items the model skipped keep their previous category. The sort is stable,
    so items keep their relative order within an aisle.
    """
    by_name: Dict[str, str] = {a.name.strip().lower(): a.category.strip() for a in assignments}
    out: List[ShoppingItem] = []
    for item in items:
        category = by_name.get(item.name.strip().lower()) or item.category
        out.append(item.model_copy(update={"category": category}))
    out.sort(key=lambda i: (i.category or UNCATEGORIZED).lower())
    return out
