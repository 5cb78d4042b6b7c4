# -*- coding: utf-8 -*-
"""Auth — Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel


class IdentityPublic(BaseModel):
    email: str
    household_id: str
