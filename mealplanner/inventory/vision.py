# -*- coding: utf-8 -*-
"""Inventory — ingredient recognition from pantry/fridge photos."""

from __future__ import annotations

from typing import Sequence

from pydantic import TypeAdapter

from ..gateway import GatewayResult, ImagePart, get_gateway
from .models import Ingredient

_INGREDIENT = TypeAdapter(Ingredient)


def identify_prompt(image_count: int) -> str:
    scope = "this image" if image_count == 1 else f"these {image_count} images"
    return (
        f"Analyze {scope} of a fridge or pantry.\n"
        "List all visible food ingredients. "
        "If several photos show the same item, list it once with the combined quantity.\n"
        "Return ONLY a JSON array of objects with the following structure:\n"
        '[{ "name": "item name", "quantity": "estimated quantity", "category": "category name" }]\n'
        "Use categories such as Dairy, Produce, Meat, Seafood, Bakery, Pantry, Frozen, Beverages, Condiments.\n"
        "Do not add any markdown formatting like ```json."
    )


def identify_ingredients(images: Sequence[ImagePart]) -> GatewayResult:
    return get_gateway().generate_validated(identify_prompt(len(images)), _INGREDIENT, images, many=True)
