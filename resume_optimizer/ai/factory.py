from __future__ import annotations

import logging

from resume_optimizer.ai.config import ProviderConfig, has_credentials, load_provider_configs
from resume_optimizer.ai.types import TextGenerationProvider
from resume_optimizer.core.config import Settings

from resume_optimizer.ai.providers.openai_provider import OpenAIProvider
from resume_optimizer.ai.providers.claude_provider import ClaudeProvider
from resume_optimizer.ai.providers.gemini_provider import GeminiProvider

logger = logging.getLogger(__name__)


def create_provider(cfg: ProviderConfig) -> TextGenerationProvider:
    if cfg.name == "openai":
        return OpenAIProvider(
            model=cfg.model,
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.max_retries,
            temperature=cfg.temperature,
            max_tokens=cfg.max_tokens,
        )

    if cfg.name == "claude":
        return ClaudeProvider(
            model=cfg.model,
            api_key=cfg.api_key,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.max_retries,
            temperature=cfg.temperature,
            max_tokens=cfg.max_tokens,
        )

    if cfg.name == "gemini":
        return GeminiProvider(
            model=cfg.model,
            api_key=cfg.api_key,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.max_retries,
            temperature=cfg.temperature,
            max_tokens=cfg.max_tokens,
        )

    raise ValueError(f"Unsupported provider '{cfg.name}'")


def build_providers(source: Settings | None = None) -> list[TextGenerationProvider]:
    """Instantiate every provider that has credentials, in priority order."""
    providers: list[TextGenerationProvider] = []
    for cfg in load_provider_configs(source):
        if not has_credentials(cfg):
            logger.warning("provider_skipped provider=%s reason=missing_api_key", cfg.name)
            continue
        providers.append(create_provider(cfg))
    return providers
