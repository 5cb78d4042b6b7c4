# -*- coding: utf-8 -*-
"""Auth — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import RedirectResponse

from ..config import settings
from ..errors import Unauthenticated
from ..household.registry import get_registry
from .models import IdentityPublic
from .oauth import build_authorization_url, exchange_code_for_email
from .security import (
    STATE_COOKIE_NAME,
    TOKEN_COOKIE_NAME,
    create_access_token,
    create_state_token,
    decode_token,
    get_current_household,
    get_current_identity,
)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _set_auth_cookie(resp: Response, token: str) -> None:
    max_age = int(settings.token_ttl_days) * 24 * 60 * 60
    resp.set_cookie(
        TOKEN_COOKIE_NAME,
        token,
        httponly=True,
        secure=bool(settings.cookie_secure),
        samesite="lax",
        max_age=max_age,
        path="/",
    )


@router.get("/login", summary="Start OAuth sign-in")
def login():
    state = create_state_token()
    resp = RedirectResponse(build_authorization_url(state), status_code=302)
    resp.set_cookie(
        STATE_COOKIE_NAME,
        state,
        httponly=True,
        secure=bool(settings.cookie_secure),
        samesite="lax",
        max_age=600,
        path="/api/auth",
    )
    return resp


@router.get("/callback", summary="OAuth redirect target")
def callback(
    request: Request,
    code: str = Query(..., min_length=1),
    state: str = Query(..., min_length=1),
):
    expected = request.cookies.get(STATE_COOKIE_NAME)
    if not expected or expected != state:
        raise Unauthenticated("OAuth state mismatch")
    decode_token(state, expected_type="oauth_state")

    email = exchange_code_for_email(code)
    # First sign-in creates the caller's household.
    get_registry().resolve_partition(email)

    resp = RedirectResponse("/", status_code=302)
    _set_auth_cookie(resp, create_access_token(email=email))
    resp.delete_cookie(STATE_COOKIE_NAME, path="/api/auth")
    return resp


@router.post("/logout", summary="Logout")
def logout(response: Response):
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
    return {"status": "ok"}


@router.get("/me", response_model=IdentityPublic, summary="Current identity and household")
def me(
    identity: str = Depends(get_current_identity),
    household_id: str = Depends(get_current_household),
):
    return IdentityPublic(email=identity, household_id=household_id)
