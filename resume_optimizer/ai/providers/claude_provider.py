from __future__ import annotations

import os
from typing import Optional

from anthropic import AsyncAnthropic

from resume_optimizer.core.errors import ProviderCallFailed


class ClaudeProvider:
    name = "claude"

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        timeout_s: float = 30.0,
        max_retries: int = 1,
        temperature: float = 0.5,
        max_tokens: int = 4096,
    ):
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self.timeout_s = timeout_s
        key = (api_key or os.getenv("ANTHROPIC_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("ANTHROPIC_API_KEY is missing")

        self._client = AsyncAnthropic(api_key=key, timeout=timeout_s, max_retries=max_retries)

    async def generate(self, system_prompt: str, user_prompt: str) -> str:
        response = await self._client.messages.create(
            model=self._model,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        text = "".join(
            getattr(block, "text", "") for block in (response.content or []) if getattr(block, "type", "") == "text"
        )
        if not text.strip():
            raise ProviderCallFailed(self.name, "empty response")
        return text
