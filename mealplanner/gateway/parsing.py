# -*- coding: utf-8 -*-
"""Gateway — turn free model text into one JSON value."""

from __future__ import annotations

import json
import re
from typing import Any, List

_FENCE_OPEN_RE = re.compile(r"^```[a-zA-Z]*\s*")
_FENCE_CLOSE_RE = re.compile(r"\s*```$")


def strip_code_fences(text: str) -> str:
    cleaned = (text or "").strip()
    cleaned = _FENCE_OPEN_RE.sub("", cleaned)
    cleaned = _FENCE_CLOSE_RE.sub("", cleaned)
    return cleaned.strip()


def _drop_inner_fences(text: str) -> str:
    # Some replies carry a fence mid-text ("Here you go: ```json ... ```").
    return text.replace("```json", "").replace("```", "").strip()


def _remove_trailing_commas(text: str) -> str:
    """Remove trailing commas before } or ] while preserving string literals."""
    out: list[str] = []
    in_str = False
    escaped = False
    i = 0
    while i < len(text):
        ch = text[i]
        if in_str:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == "\"":
                in_str = False
            i += 1
            continue

        if ch == "\"":
            in_str = True
            out.append(ch)
            i += 1
            continue

        if ch == ",":
            j = i + 1
            while j < len(text) and text[j] in " \t\r\n":
                j += 1
            if j < len(text) and text[j] in "}]":
                i += 1
                continue

        out.append(ch)
        i += 1
    return "".join(out)


def _sanitize_json_like(text: str) -> str:
    cleaned = text
    cleaned = cleaned.replace("“", "\"").replace("”", "\"")
    cleaned = cleaned.replace("‘", "'").replace("’", "'")
    cleaned = _remove_trailing_commas(cleaned)
    cleaned = re.sub(r"\bNaN\b", "null", cleaned)
    cleaned = re.sub(r"-?\bInfinity\b", "null", cleaned)
    return cleaned


def iter_json_candidates(text: str) -> List[str]:
    """Extract balanced top-level {...} / [...] spans from arbitrary text.

    Models sometimes wrap JSON with prose. Brackets inside string literals are
    ignored.
    """
    candidates: list[str] = []
    in_str = False
    escaped = False
    stack: list[str] = []
    start_idx: int | None = None
    pairs = {"{": "}", "[": "]"}

    for i, ch in enumerate(text):
        if in_str:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == "\"":
                in_str = False
            continue

        if ch == "\"":
            if stack:
                in_str = True
            continue

        if ch in pairs:
            if not stack:
                start_idx = i
            stack.append(pairs[ch])
            continue

        if stack and ch == stack[-1]:
            stack.pop()
            if not stack and start_idx is not None:
                candidates.append(text[start_idx : i + 1])
                start_idx = None
        elif stack and ch in "}]":
            # Unbalanced closer; abandon this span.
            stack = []
            start_idx = None

    return candidates


def parse_model_json(text: str) -> Any:
    """Parse the single JSON value a model reply is expected to contain.

    Backticks are only stripped from inside the reply when it does not parse
    as it stands. Raises ``ValueError`` when the reply is empty or holds no
    parseable JSON.
    """
    cleaned = strip_code_fences(text)
    if not cleaned:
        raise ValueError("Model returned an empty response")

    bodies = [cleaned]
    unfenced = _drop_inner_fences(cleaned)
    if unfenced and unfenced != cleaned:
        bodies.append(unfenced)

    last_error: Exception | None = None
    for body in bodies:
        for candidate in [body, *iter_json_candidates(body)]:
            for attempt in (candidate, _sanitize_json_like(candidate)):
                try:
                    return json.loads(attempt)
                except ValueError as exc:
                    last_error = exc

    raise ValueError(f"Failed to parse model JSON: {last_error}")
