# -*- coding: utf-8 -*-
"""Meals — net-carb compliance check of a meal photo."""

from __future__ import annotations

from typing import Optional

from pydantic import TypeAdapter

from ..gateway import GatewayResult, ImagePart, get_gateway
from ..profiles.models import HouseholdSettings
from .models import MealAnalysis

_ANALYSIS = TypeAdapter(MealAnalysis)


def analysis_prompt(household: HouseholdSettings, description: Optional[str]) -> str:
    rules = ""
    if household.protocol_rules:
        rules = "Protocol rules:\n" + "\n".join(f"- {r}" for r in household.protocol_rules) + "\n"
    hint = f"The user describes the meal as: {description}\n" if description else ""
    return (
        f"You are an expert nutritionist following the {household.diet_protocol} diet.\n"
        f"{rules}{hint}"
        "Estimate the net carbohydrates (total carbs minus fiber) of the meal in this photo, per serving.\n"
        f"A meal is compliant when it has at most {household.net_carb_limit:g}g net carbs.\n"
        "Return ONLY a JSON object:\n"
        '{ "netCarbs": number, "compliant": true/false, "notes": "short explanation" }\n'
        "Do not add markdown formatting."
    )


def analyze_meal(image: ImagePart, household: HouseholdSettings, description: Optional[str] = None) -> GatewayResult:
    result = get_gateway().generate_validated(analysis_prompt(household, description), _ANALYSIS, [image])
    if result.ok:
        analysis: MealAnalysis = result.value
        # The household limit decides compliance, not the model's own verdict.
        result.value = analysis.model_copy(update={"compliant": analysis.net_carbs <= household.net_carb_limit})
    return result
