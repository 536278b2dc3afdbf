from __future__ import annotations

import os
from typing import Optional

from google import genai
from google.genai import types

from resume_optimizer.core.errors import ProviderCallFailed


class GeminiProvider:
    name = "gemini"

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        timeout_s: float = 30.0,
        max_retries: int = 2,
        temperature: float = 0.4,
        max_tokens: int = 4096,
    ):
        self._model = model
        self.timeout_s = timeout_s
        key = (api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_AI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("GEMINI_API_KEY is missing")

        self._client = genai.Client(
            api_key=key,
            http_options=types.HttpOptions(
                timeout=int(timeout_s * 1000),
                retry_options=types.HttpRetryOptions(attempts=max_retries + 1),
            ),
        )
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def generate(self, system_prompt: str, user_prompt: str) -> str:
        response = await self._client.aio.models.generate_content(
            model=self._model,
            contents=user_prompt,
            config=types.GenerateContentConfig(
                system_instruction=system_prompt,
                temperature=self._temperature,
                top_k=40,
                top_p=0.95,
                max_output_tokens=self._max_tokens,
            ),
        )
        text = response.text or ""
        if not text.strip():
            raise ProviderCallFailed(self.name, "empty response")
        return text
