# -*- coding: utf-8 -*-
"""Auth — session JWT + FastAPI helpers."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, Request

from ..config import settings
from ..errors import Unauthenticated
from ..household.registry import get_registry, normalize_identity

TOKEN_COOKIE_NAME = "mealplan_token"
STATE_COOKIE_NAME = "mealplan_oauth_state"
_STATE_TTL_SECONDS = 600


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(*, email: str) -> str:
    now = _utc_now()
    exp = now + timedelta(days=int(settings.token_ttl_days))
    payload = {
        "sub": normalize_identity(email),
        "typ": "session",
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return _jwt_encode(payload, settings.jwt_secret)


def create_state_token() -> str:
    now = _utc_now()
    payload = {
        "nonce": secrets.token_urlsafe(16),
        "typ": "oauth_state",
        "iat": int(now.timestamp()),
        "exp": int(now.timestamp()) + _STATE_TTL_SECONDS,
    }
    return _jwt_encode(payload, settings.jwt_secret)


def decode_token(token: str, *, expected_type: str = "session") -> Dict[str, Any]:
    try:
        payload = _jwt_decode(token, settings.jwt_secret)
    except Exception as exc:
        raise Unauthenticated("Invalid token") from exc
    exp = int(payload.get("exp") or 0)
    if exp and exp < int(_utc_now().timestamp()):
        raise Unauthenticated("Token expired")
    if payload.get("typ") != expected_type:
        raise Unauthenticated("Invalid token")
    return payload


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64url_decode(data: str) -> bytes:
    pad = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode((data + pad).encode("ascii"))


def _jwt_encode(payload: Dict[str, Any], secret: str) -> str:
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64url_encode(json.dumps(header, separators=(",", ":"), ensure_ascii=False).encode("utf-8"))
    payload_b64 = _b64url_encode(json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    sig = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    return f"{header_b64}.{payload_b64}.{_b64url_encode(sig)}"


def _jwt_decode(token: str, secret: str) -> Dict[str, Any]:
    parts = token.split(".")
    if len(parts) != 3:
        raise ValueError("invalid token")
    header_b64, payload_b64, sig_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    expected_sig = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    if not hmac.compare_digest(expected_sig, _b64url_decode(sig_b64)):
        raise ValueError("bad signature")
    payload = json.loads(_b64url_decode(payload_b64).decode("utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("bad payload")
    return payload


def get_token_from_request(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization") or ""
    if auth.lower().startswith("bearer "):
        token = auth.split(" ", 1)[1].strip()
        return token or None
    return request.cookies.get(TOKEN_COOKIE_NAME) or None


def get_identity_from_request(request: Request) -> str:
    # If the auth gate already authenticated this request, reuse it.
    identity = getattr(request.state, "identity", None)
    if identity:
        return identity

    token = get_token_from_request(request)
    if not token:
        raise Unauthenticated("Not authenticated")
    payload = decode_token(token)
    identity = normalize_identity(str(payload.get("sub") or ""))
    if not identity:
        raise Unauthenticated("Invalid token")

    request.state.identity = identity
    return identity


def get_current_identity(identity: str = Depends(get_identity_from_request)) -> str:
    return identity


def get_current_household(identity: str = Depends(get_current_identity)) -> str:
    """Resolve (creating on first sight) the caller's household partition id."""
    return get_registry().resolve_partition(identity)
