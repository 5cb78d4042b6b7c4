# -*- coding: utf-8 -*-
"""Gateway to the hosted generative model."""

from __future__ import annotations

from .client import GatewayResult, GeminiGateway, GatewaySettings, ImagePart, get_gateway, set_gateway
from .parsing import parse_model_json, strip_code_fences

__all__ = [
    "GatewayResult",
    "GatewaySettings",
    "GeminiGateway",
    "ImagePart",
    "get_gateway",
    "parse_model_json",
    "set_gateway",
    "strip_code_fences",
]
