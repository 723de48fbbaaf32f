import os
import logging
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_PROFILE_PATH = os.path.join(os.path.dirname(__file__), "data", "department.json")


def _get_float(name, default):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return float(value)


def _get_int(name, default):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


def _get_bool(name, default):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Everything the app needs from the environment, built once and passed around."""

    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL
    temperature: Optional[float] = 0.7
    max_output_tokens: Optional[int] = 1024
    gemini_timeout: Optional[float] = None

    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    supabase_service_key: Optional[str] = None

    relay_url: Optional[str] = None
    secret_key: str = "dev-secret-key"
    allow_anonymous_sessions: bool = True
    department_profile_path: str = DEFAULT_PROFILE_PATH
    chat_view_limit: int = 1000
    chat_view_ttl: int = 3600


def load_settings(dotenv_path=None):
    """Read settings from the environment (and a .env file if present)"""
    load_dotenv(dotenv_path)

    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        gemini_model=os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
        gemini_base_url=os.getenv("GEMINI_BASE_URL") or DEFAULT_GEMINI_BASE_URL,
        temperature=_get_float("GEMINI_TEMPERATURE", 0.7),
        max_output_tokens=_get_int("GEMINI_MAX_OUTPUT_TOKENS", 1024),
        gemini_timeout=_get_float("GEMINI_TIMEOUT", None),
        supabase_url=os.getenv("SUPABASE_URL") or None,
        supabase_anon_key=os.getenv("VITE_SUPABASE_ANON_KEY") or os.getenv("SUPABASE_ANON_KEY") or None,
        supabase_service_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY") or None,
        relay_url=os.getenv("RELAY_URL") or None,
        secret_key=os.getenv("FLASK_SECRET_KEY") or "dev-secret-key",
        allow_anonymous_sessions=_get_bool("ALLOW_ANONYMOUS_SESSIONS", True),
        department_profile_path=os.getenv("DEPARTMENT_PROFILE") or DEFAULT_PROFILE_PATH,
        chat_view_limit=_get_int("CHAT_VIEW_LIMIT", 1000),
        chat_view_ttl=_get_int("CHAT_VIEW_TTL", 3600),
    )


def log_configuration(settings):
    """Log which credentials are present. Values themselves are never logged."""
    logger.info("=" * 60)
    logger.info("🔍 CONFIGURATION CHECK")
    logger.info("=" * 60)
    if settings.supabase_url:
        logger.info("📍 Supabase URL: %s...", settings.supabase_url[:50])
    else:
        logger.warning("❌ MISSING SUPABASE_URL")
    logger.info("🔑 Anon Key: %s", "✅ Present" if settings.supabase_anon_key else "❌ MISSING")
    logger.info("🔑 Service Key: %s", "✅ Present" if settings.supabase_service_key else "❌ MISSING")
    logger.info("🤖 Gemini Key: %s (model: %s)",
                "✅ Present" if settings.gemini_api_key else "❌ MISSING",
                settings.gemini_model)
    if not settings.supabase_service_key:
        logger.warning("⚠️ SUPABASE_SERVICE_ROLE_KEY not set, the relay will read FAQs with the anon key")
    logger.info("=" * 60)
