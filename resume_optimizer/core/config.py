from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


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


def _get_env_float(name: str, default: float) -> float:
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
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    provider_order: tuple[str, ...]
    provider_timeout_s: float
    provider_max_tokens: int
    provider_max_retries: int
    openai_api_key: str | None
    openai_model: str
    openai_base_url: str | None
    openai_temperature: float
    gemini_api_key: str | None
    gemini_model: str
    gemini_temperature: float
    anthropic_api_key: str | None
    claude_model: str
    claude_temperature: float
    min_resume_chars: int
    persist_results: bool
    results_db_path: str
    max_sessions: int


settings = Settings(
    rate_limit=_get_env("RATE_LIMIT", "30/minute") or "30/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
        ],
    ),
    provider_order=_get_env_list("AI_PROVIDER_ORDER", ["openai", "gemini", "claude"]),
    provider_timeout_s=_get_env_float("PROVIDER_TIMEOUT_S", 30.0),
    provider_max_tokens=_get_env_int("PROVIDER_MAX_TOKENS", 4096),
    provider_max_retries=_get_env_int("PROVIDER_MAX_RETRIES", 2),
    openai_api_key=_get_env("OPENAI_API_KEY"),
    openai_model=_get_env("OPENAI_MODEL", "gpt-4o-mini") or "gpt-4o-mini",
    openai_base_url=_get_env("OPENAI_BASE_URL"),
    openai_temperature=_get_env_float("OPENAI_TEMPERATURE", 0.5),
    gemini_api_key=_get_env("GEMINI_API_KEY") or _get_env("GOOGLE_AI_API_KEY"),
    gemini_model=_get_env("GEMINI_MODEL", "gemini-2.0-flash") or "gemini-2.0-flash",
    gemini_temperature=_get_env_float("GEMINI_TEMPERATURE", 0.4),
    anthropic_api_key=_get_env("ANTHROPIC_API_KEY"),
    claude_model=_get_env("CLAUDE_MODEL", "claude-3-5-sonnet-latest") or "claude-3-5-sonnet-latest",
    claude_temperature=_get_env_float("CLAUDE_TEMPERATURE", 0.5),
    min_resume_chars=_get_env_int("MIN_RESUME_CHARS", 50),
    persist_results=_get_env_bool("PERSIST_RESULTS", True),
    results_db_path=_get_env("RESULTS_DB_PATH", "data/optimization_results.db") or "data/optimization_results.db",
    max_sessions=_get_env_int("MAX_SESSIONS", 1000),
)

if settings.min_resume_chars < 1:
    raise RuntimeError("MIN_RESUME_CHARS must be a positive integer.")

if settings.provider_timeout_s <= 0:
    raise RuntimeError("PROVIDER_TIMEOUT_S must be greater than zero.")
