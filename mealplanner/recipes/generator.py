# -*- coding: utf-8 -*-
"""Recipes — meal plan generation from inventory, profiles and settings."""

from __future__ import annotations

from typing import List, Optional, Sequence

from pydantic import TypeAdapter

from ..gateway import GatewayResult, get_gateway
from ..inventory.models import Ingredient
from ..profiles.models import HouseholdSettings, UserProfile
from .models import Recipe

_RECIPE = TypeAdapter(Recipe)

# Titles of rejected recipes quoted back to the model.
MAX_REJECTED_TITLES = 30


def _inventory_line(item: Ingredient) -> str:
    return f"{item.name} ({item.quantity})" if item.quantity else item.name


def recipe_prompt(
    inventory: Sequence[Ingredient],
    profiles: Sequence[UserProfile],
    household: HouseholdSettings,
    rejected_titles: Sequence[str] = (),
    *,
    count: int = 3,
    meal: str = "dinner",
    notes: Optional[str] = None,
) -> str:
    profile_lines = "\n".join(
        f"{i}. {p.name} [id: {p.id}]: {p.dietary_needs or 'no special needs'}."
        for i, p in enumerate(profiles, start=1)
    )
    ids = ", ".join(f'"{p.id}": true/false' for p in profiles)
    kcal = ", ".join(f'"{p.id}": number' for p in profiles)
    staples = ", ".join(household.staples) or "nothing"

    lines = [
        "You are a meal planner for a family with specific dietary needs.",
        f"Inventory: {', '.join(_inventory_line(i) for i in inventory)}",
        "",
        "Profiles:",
        profile_lines,
        "",
        f"Diet protocol: {household.diet_protocol}. Keep net carbs per serving at or below "
        f"{household.net_carb_limit:g} g.",
    ]
    if household.protocol_rules:
        lines.append("Protocol rules:")
        lines.extend(f"- {rule}" for rule in household.protocol_rules)
    if household.kitchen_notes:
        lines.append(f"Kitchen: {household.kitchen_notes}")
    if rejected_titles:
        recent = list(rejected_titles)[:MAX_REJECTED_TITLES]
        lines.append(f"The family rejected these before; do not suggest them again: {'; '.join(recent)}")
    if notes:
        lines.append(f"Request: {notes}")
    lines += [
        "",
        "Task:",
        f"Suggest {count} distinct {meal} recipes that can be made primarily from the inventory "
        f"(assume basic staples like {staples} are available).",
        "Each recipe must accommodate every profile (e.g. by having modular carbs or a naturally low carb base).",
        "For each recipe, explicitly verify whether it meets each profile's needs.",
        "",
        "Return ONLY a JSON array of objects:",
        "[{",
        '  "title": "Recipe Title",',
        '  "description": "Short description",',
        '  "ingredients": ["list", "of", "ingredients"],',
        '  "instructions": ["step 1", "step 2"],',
        '  "tags": ["Low Carb", "Hearty"],',
        f'  "suitability": {{ {ids} }},',
        f'  "calories": {{ {kcal} }},',
        '  "netCarbs": number,',
        '  "superGutBenefit": "why this supports the protocol",',
        '  "reheatFriendly": true/false',
        "}]",
        "Do not add markdown formatting.",
    ]
    return "\n".join(lines)


def generate_recipes(
    inventory: Sequence[Ingredient],
    profiles: Sequence[UserProfile],
    household: HouseholdSettings,
    rejected_titles: Sequence[str] = (),
    *,
    count: int = 3,
    meal: str = "dinner",
    notes: Optional[str] = None,
) -> GatewayResult:
    prompt = recipe_prompt(
        inventory, profiles, household, rejected_titles, count=count, meal=meal, notes=notes
    )
    return get_gateway().generate_validated(prompt, _RECIPE, many=True)


def drop_rejected(recipes: List[Recipe], rejected_titles: Sequence[str]) -> List[Recipe]:
    banned = {t.strip().lower() for t in rejected_titles}
    return [r for r in recipes if r.title.strip().lower() not in banned]
