# -*- coding: utf-8 -*-
"""Protocol — turn a diet book's text into a structured guide."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from pydantic import TypeAdapter

from ..gateway import GatewayResult, get_gateway
from .models import ProtocolGuide

log = logging.getLogger(__name__)

_GUIDE = TypeAdapter(ProtocolGuide)

# Characters of book text sent to the model.
DEFAULT_TEXT_BUDGET = 900_000


def _read_pdf(path: Path) -> str:
    from pypdf import PdfReader  # Lazy import; only the CLI reads PDFs.

    reader = PdfReader(str(path))
    parts: list[str] = []
    for page in reader.pages:
        parts.append(page.extract_text() or "")
    return "\n".join(parts).strip()


def read_text(path: Path, budget: int = DEFAULT_TEXT_BUDGET) -> str:
    """Read a book as text (UTF-8 text file or PDF), cut to ``budget`` characters."""
    if path.suffix.lower() == ".pdf":
        text = _read_pdf(path)
    else:
        text = path.read_text(encoding="utf-8", errors="replace")
    if len(text) > budget:
        log.info("truncating %s from %d to %d characters", path, len(text), budget)
        text = text[:budget]
    return text


def extraction_prompt(text: str, protocol: str = "Super Gut") -> str:
    return (
        f"You are an expert nutritionist analyzing the text of a diet book describing the {protocol} protocol.\n\n"
        f"Text content (excerpt):\n{text}\n\n"
        "Task:\n"
        "1. Core dietary rules: extract specific rules (e.g. net carb limits, allowed and banned foods).\n"
        "2. Recipes: find and structure 5-10 key recipes.\n"
        "3. Tips: extract practical tips for implementation.\n\n"
        "Output strictly valid JSON:\n"
        "{\n"
        '  "rules": ["rule 1"],\n'
        '  "banned_ingredients": ["item 1"],\n'
        '  "allowed_ingredients": ["item 1"],\n'
        '  "recipes": [{ "title": "Name", "ingredients": [], "instructions": [], "notes": "Why it fits the protocol" }],\n'
        '  "tips": ["tip 1"]\n'
        "}"
    )


def extract_guide(text: str, protocol: str = "Super Gut") -> GatewayResult:
    result = get_gateway().generate_validated(extraction_prompt(text, protocol), _GUIDE)
    if result.ok and result.value.empty:
        return GatewayResult(error="Model returned an empty guide", raw_text=result.raw_text, model=result.model)
    return result


def guide_rules(guide: ProtocolGuide) -> List[str]:
    """Flatten a guide into the one-line rules stored in household settings."""
    rules = list(guide.rules)
    if guide.banned_ingredients:
        rules.append("Avoid: " + ", ".join(guide.banned_ingredients))
    if guide.allowed_ingredients:
        rules.append("Prefer: " + ", ".join(guide.allowed_ingredients))
    return rules
