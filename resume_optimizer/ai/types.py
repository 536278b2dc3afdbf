from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class PromptPair:
    system_prompt: str
    user_prompt: str


class TextGenerationProvider(Protocol):
    name: str
    timeout_s: float | None

    async def generate(self, system_prompt: str, user_prompt: str) -> str: ...
