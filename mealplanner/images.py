# -*- coding: utf-8 -*-
"""Inline image uploads (base64 JSON bodies) shared by the photo endpoints."""

from __future__ import annotations

import base64
from typing import List, Sequence

from fastapi import HTTPException
from pydantic import BaseModel, Field

from .config import settings
from .gateway import ImagePart


class ImageUpload(BaseModel):
    image_mime: str = Field(..., pattern=r"^image/(jpeg|jpg|png|webp|heic|heif)$")
    image_base64: str = Field(..., min_length=16, description="Raw base64 without data-url prefix")


def _decode_image_or_400(image_base64: str, max_bytes: int) -> bytes:
    try:
        data = base64.b64decode(image_base64, validate=True)
    except Exception as exc:
        raise HTTPException(status_code=400, detail=f"Invalid base64 image: {exc}") from exc
    if len(data) > max_bytes:
        raise HTTPException(status_code=400, detail=f"Image too large: {len(data)} bytes > {max_bytes}")
    return data


def decode_images(uploads: Sequence[ImageUpload]) -> List[ImagePart]:
    max_bytes = settings.max_image_bytes
    return [
        ImagePart(data=_decode_image_or_400(u.image_base64, max_bytes), mime=u.image_mime)
        for u in uploads
    ]
