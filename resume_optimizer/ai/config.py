from __future__ import annotations

from dataclasses import dataclass

from resume_optimizer.core.config import Settings, settings

KNOWN_PROVIDERS = ("openai", "gemini", "claude")


@dataclass(frozen=True)
class ProviderConfig:
    name: str
    api_key: str | None
    model: str
    temperature: float
    max_tokens: int
    timeout_s: float
    max_retries: int
    base_url: str | None = None


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def has_credentials(cfg: ProviderConfig) -> bool:
    key = (cfg.api_key or "").strip()
    return bool(key) and not _looks_like_placeholder(key)


def load_provider_configs(source: Settings | None = None) -> list[ProviderConfig]:
    """Provider configs in configured priority order; unknown names are ignored."""
    s = source or settings
    by_name = {
        "openai": ProviderConfig(
            name="openai",
            api_key=s.openai_api_key,
            model=s.openai_model,
            temperature=s.openai_temperature,
            max_tokens=s.provider_max_tokens,
            timeout_s=s.provider_timeout_s,
            max_retries=s.provider_max_retries,
            base_url=s.openai_base_url,
        ),
        "gemini": ProviderConfig(
            name="gemini",
            api_key=s.gemini_api_key,
            model=s.gemini_model,
            temperature=s.gemini_temperature,
            max_tokens=s.provider_max_tokens,
            timeout_s=s.provider_timeout_s,
            max_retries=s.provider_max_retries,
        ),
        "claude": ProviderConfig(
            name="claude",
            api_key=s.anthropic_api_key,
            model=s.claude_model,
            temperature=s.claude_temperature,
            max_tokens=s.provider_max_tokens,
            timeout_s=s.provider_timeout_s,
            max_retries=max(0, s.provider_max_retries - 1),
        ),
    }
    ordered: list[ProviderConfig] = []
    for name in s.provider_order:
        cfg = by_name.get(name.strip().lower())
        if cfg is not None and cfg not in ordered:
            ordered.append(cfg)
    return ordered
