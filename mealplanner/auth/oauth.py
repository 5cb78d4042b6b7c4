# -*- coding: utf-8 -*-
"""Auth — Google OAuth 2.0 authorization-code flow (only the e-mail is used)."""

from __future__ import annotations

import logging
from urllib.parse import urlencode

import httpx

from ..config import settings
from ..errors import Unauthenticated

log = logging.getLogger(__name__)

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"


def build_authorization_url(state: str) -> str:
    if not settings.google_client_id:
        raise RuntimeError("GOOGLE_CLIENT_ID not set")
    query = {
        "client_id": settings.google_client_id,
        "redirect_uri": settings.oauth_redirect_url,
        "response_type": "code",
        "scope": "openid email",
        "state": state,
        "prompt": "select_account",
    }
    return f"{AUTHORIZE_URL}?{urlencode(query)}"


def exchange_code_for_email(code: str, *, transport: httpx.BaseTransport | None = None) -> str:
    """Trade an authorization code for the signed-in user's verified e-mail."""
    if not settings.google_client_id or not settings.google_client_secret:
        raise RuntimeError("GOOGLE_CLIENT_ID / GOOGLE_CLIENT_SECRET not set")

    with httpx.Client(timeout=15, transport=transport) as client:
        token_resp = client.post(
            TOKEN_URL,
            data={
                "code": code,
                "client_id": settings.google_client_id,
                "client_secret": settings.google_client_secret,
                "redirect_uri": settings.oauth_redirect_url,
                "grant_type": "authorization_code",
            },
        )
        if token_resp.status_code >= 400:
            log.warning("oauth token exchange failed: HTTP %s", token_resp.status_code)
            raise Unauthenticated("OAuth sign-in failed")
        access_token = token_resp.json().get("access_token")
        if not access_token:
            raise Unauthenticated("OAuth sign-in failed")

        info_resp = client.get(USERINFO_URL, headers={"Authorization": f"Bearer {access_token}"})
        if info_resp.status_code >= 400:
            log.warning("oauth userinfo failed: HTTP %s", info_resp.status_code)
            raise Unauthenticated("OAuth sign-in failed")
        info = info_resp.json()

    email = str(info.get("email") or "").strip()
    if not email or info.get("email_verified") is False:
        raise Unauthenticated("OAuth account has no verified e-mail")
    return email
