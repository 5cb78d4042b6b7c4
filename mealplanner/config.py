from __future__ import annotations

import os
from pathlib import Path
from typing import List

from .errors import ConfigurationError


class Settings:
    """Centralized configuration for the meal planner service."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent

        self.project_id: str | None = (
            os.environ.get("MEALPLAN_PROJECT_ID") or os.environ.get("GOOGLE_CLOUD_PROJECT") or None
        )
        self.bucket_name: str = os.environ.get("MEALPLAN_BUCKET") or f"diet-app-data-{self.project_id or 'unset'}"

        # ---- Object storage ----
        self.storage_backend: str = (os.environ.get("MEALPLAN_STORAGE_BACKEND") or "local").strip().lower()
        self.data_root: Path = Path(
            os.environ.get("MEALPLAN_DATA_ROOT") or (repo_root / "data")
        ).expanduser()
        self.s3_endpoint_url: str | None = os.environ.get("MEALPLAN_S3_ENDPOINT_URL") or None
        self.s3_region: str = os.environ.get("MEALPLAN_S3_REGION") or "us-central1"
        self.registry_max_attempts: int = int(os.environ.get("MEALPLAN_REGISTRY_MAX_ATTEMPTS") or "5")

        # ---- Generative model ----
        self.gemini_api_key: str | None = os.environ.get("GEMINI_API_KEY") or None
        self.gemini_base_url: str = os.environ.get(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        )
        self.gemini_model: str = os.environ.get("GEMINI_MODEL", "gemini-1.5-flash")
        self.gemini_timeout: float = float(os.environ.get("GEMINI_TIMEOUT", "60"))
        self.gemini_temperature: float = float(os.environ.get("GEMINI_TEMPERATURE", "0.4"))
        self.max_image_bytes: int = int(os.environ.get("MEALPLAN_MAX_IMAGE_BYTES") or "4000000")

        # ---- OAuth / session ----
        self.google_client_id: str | None = os.environ.get("GOOGLE_CLIENT_ID") or None
        self.google_client_secret: str | None = os.environ.get("GOOGLE_CLIENT_SECRET") or None
        self.oauth_redirect_url: str = (
            os.environ.get("MEALPLAN_OAUTH_REDIRECT_URL") or "http://localhost:8000/api/auth/callback"
        )
        # In production you MUST set MEALPLAN_JWT_SECRET. The dev secret keeps local demos easy.
        self.jwt_secret: str = os.environ.get("MEALPLAN_JWT_SECRET") or "dev-secret-change-me"
        self.token_ttl_days: int = int(os.environ.get("MEALPLAN_TOKEN_TTL_DAYS") or "7")
        self.cookie_secure: bool = (os.environ.get("MEALPLAN_COOKIE_SECURE") or "").strip() in {"1", "true", "True"}

        self.log_level: str = (os.environ.get("MEALPLAN_LOG_LEVEL") or "INFO").upper()

        cors = os.environ.get("MEALPLAN_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]

    def validate(self) -> None:
        if not self.project_id:
            raise ConfigurationError("MEALPLAN_PROJECT_ID (or GOOGLE_CLOUD_PROJECT) missing")
        if self.storage_backend not in {"local", "s3"}:
            raise ConfigurationError(f"Unknown MEALPLAN_STORAGE_BACKEND: {self.storage_backend!r}")


settings = Settings()
