# -*- coding: utf-8 -*-
"""Feedback — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class FeedbackType(str, Enum):
    suggestion = "Suggestion"
    bug = "Bug Report"
    other = "Other"


class FeedbackEntry(BaseModel):
    id: str
    user: str
    type: FeedbackType = FeedbackType.suggestion
    message: str
    date: str


class FeedbackRequest(BaseModel):
    type: FeedbackType = FeedbackType.suggestion
    message: str = Field(..., min_length=1, max_length=4000)


class FeedbackResponse(BaseModel):
    count: int
    entries: List[FeedbackEntry]
