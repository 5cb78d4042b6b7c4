# -*- coding: utf-8 -*-
"""
Household meal planner API.

Pantry scanning, recipe suggestions, shopping list, schedule and meal log,
each stored per household in the blob store.
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .auth.api import router as auth_router
from .auth.security import get_identity_from_request
from .config import settings
from .errors import MealPlannerError, Unauthenticated
from .feedback.api import router as feedback_router
from .household.api import router as household_router
from .inventory.api import router as inventory_router
from .meals.api import router as meals_router
from .profiles.api import router as profiles_router
from .recipes.api import router as recipes_router
from .schedule.api import router as schedule_router
from .shopping.api import router as shopping_router

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

# Fail fast on a missing project id or unknown storage backend.
settings.validate()

app = FastAPI(
    title="Household Meal Planner",
    description="Pantry scanning, recipe suggestions, shopping list and meal log for one household",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


_AUTH_EXEMPT_PREFIXES = (
    "/api/auth/login",
    "/api/auth/callback",
    "/api/docs",
    "/api/redoc",
    "/api/openapi.json",
)


@app.middleware("http")
async def _auth_gate(request: Request, call_next):
    path = request.url.path
    if path.startswith("/api") and path != "/api/health" and not any(path.startswith(p) for p in _AUTH_EXEMPT_PREFIXES):
        try:
            request.state.identity = get_identity_from_request(request)
        except Unauthenticated as exc:
            return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
    return await call_next(request)


@app.exception_handler(MealPlannerError)
async def _meal_planner_error(request: Request, exc: MealPlannerError) -> JSONResponse:
    if exc.status_code >= 500:
        log.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": type(exc).__name__},
    )


app.include_router(auth_router)
app.include_router(household_router)
app.include_router(inventory_router)
app.include_router(recipes_router)
app.include_router(shopping_router)
app.include_router(schedule_router)
app.include_router(meals_router)
app.include_router(profiles_router)
app.include_router(feedback_router)


@app.get("/api/health")
def health() -> dict:
    return {"ok": True}


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    host = os.environ.get("MEALPLAN_HOST") or os.environ.get("HOST") or "127.0.0.1"
    port_raw = os.environ.get("MEALPLAN_PORT") or os.environ.get("PORT") or "8000"
    try:
        port = int(port_raw)
    except ValueError:
        port = 8000

    uvicorn.run("mealplanner.api:app", host=host, port=port, reload=False)
