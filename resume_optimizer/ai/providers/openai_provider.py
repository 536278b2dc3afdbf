from __future__ import annotations

import os
from typing import Optional

from openai import AsyncOpenAI

from resume_optimizer.core.errors import ProviderCallFailed


class OpenAIProvider:
    name = "openai"

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
        max_retries: int = 2,
        temperature: float = 0.5,
        max_tokens: int = 4096,
    ):
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._response_format = (os.getenv("OPENAI_RESPONSE_FORMAT") or "").strip().lower()
        self.timeout_s = timeout_s
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        self._client = AsyncOpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            timeout=timeout_s,
            max_retries=max_retries,
        )

    async def generate(self, system_prompt: str, user_prompt: str) -> str:
        create_kwargs = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
        }
        if self._response_format == "json":
            create_kwargs["response_format"] = {"type": "json_object"}

        response = await self._client.chat.completions.create(**create_kwargs)
        content = response.choices[0].message.content if response.choices else ""
        if not content or not content.strip():
            raise ProviderCallFailed(self.name, "empty response")
        return content
