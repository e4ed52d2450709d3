from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-preview-09-2025"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


def _get_env(name: str, default: str | None = None) -> str | None:
    # Names from the old Vite front end (VITE_*) are accepted as a fallback.
    for key in (name, f"VITE_{name}"):
        value = os.getenv(key)
        if value is not None and value.strip() != "":
            return value.strip()
    return default


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float | None) -> float | None:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL
    analysis_timeout_s: float | None = None
    firebase_api_key: str | None = None
    firebase_auth_domain: str | None = None
    firebase_project_id: str | None = None
    firebase_storage_bucket: str | None = None
    firebase_messaging_sender_id: str | None = None
    firebase_app_id: str | None = None
    log_level: str = "INFO"
    sentry_dsn: str | None = None
    rate_limit: str = "20/minute"
    rate_limit_enabled: bool = True
    cors_allowed_origins: tuple[str, ...] = ("http://localhost:5173", "http://127.0.0.1:5173")
    max_upload_bytes: int = 10 * 1024 * 1024
    pdf_library_module: str = "pypdf"

    @property
    def analysis_configured(self) -> bool:
        return bool(self.gemini_api_key)

    @property
    def identity_configured(self) -> bool:
        return bool(self.firebase_api_key)

    def firebase_web_config(self) -> dict[str, str | None]:
        return {
            "apiKey": self.firebase_api_key,
            "authDomain": self.firebase_auth_domain,
            "projectId": self.firebase_project_id,
            "storageBucket": self.firebase_storage_bucket,
            "messagingSenderId": self.firebase_messaging_sender_id,
            "appId": self.firebase_app_id,
        }


def load_settings() -> Settings:
    return Settings(
        gemini_api_key=_get_env("GEMINI_API_KEY"),
        gemini_model=_get_env("GEMINI_MODEL", DEFAULT_GEMINI_MODEL) or DEFAULT_GEMINI_MODEL,
        gemini_base_url=(_get_env("GEMINI_BASE_URL", DEFAULT_GEMINI_BASE_URL) or DEFAULT_GEMINI_BASE_URL).rstrip("/"),
        analysis_timeout_s=_get_env_float("ANALYSIS_TIMEOUT_S", None),
        firebase_api_key=_get_env("FIREBASE_API_KEY"),
        firebase_auth_domain=_get_env("FIREBASE_AUTH_DOMAIN"),
        firebase_project_id=_get_env("FIREBASE_PROJECT_ID"),
        firebase_storage_bucket=_get_env("FIREBASE_STORAGE_BUCKET"),
        firebase_messaging_sender_id=_get_env("FIREBASE_MESSAGING_SENDER_ID"),
        firebase_app_id=_get_env("FIREBASE_APP_ID"),
        log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
        sentry_dsn=_get_env("SENTRY_DSN"),
        rate_limit=_get_env("RATE_LIMIT", "20/minute") or "20/minute",
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        cors_allowed_origins=_get_env_list(
            "CORS_ALLOWED_ORIGINS",
            ["http://localhost:5173", "http://127.0.0.1:5173"],
        ),
        max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
        pdf_library_module=_get_env("PDF_LIBRARY_MODULE", "pypdf") or "pypdf",
    )


settings = load_settings()
