from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence, Union

from resume_optimizer.ai.types import PromptPair, TextGenerationProvider
from resume_optimizer.core.errors import AllProvidersFailed, ProviderCallFailed
from resume_optimizer.schemas.optimization import OptimizationResult, ProviderAttempt

from .response_normalizer import ResponseNormalizer

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 30.0


class OrchestratorState(str, Enum):
    PENDING = "pending"
    TRYING = "trying"
    SUCCESS = "success"
    ALL_FAILED = "all_failed"


@dataclass(frozen=True)
class AttemptSuccess:
    provider_name: str
    raw_text: str
    latency_ms: int


@dataclass(frozen=True)
class AttemptFailure:
    provider_name: str
    reason: str
    latency_ms: int


AttemptOutcome = Union[AttemptSuccess, AttemptFailure]


@dataclass(frozen=True)
class OrchestrationOutcome:
    result: OptimizationResult
    provider_name: str
    attempts: list[ProviderAttempt] = field(default_factory=list)


def _provider_name(provider: TextGenerationProvider, position: int) -> str:
    return str(getattr(provider, "name", "") or f"provider-{position}")


def _describe(exc: BaseException) -> str:
    if isinstance(exc, ProviderCallFailed):
        return exc.reason
    message = str(exc).strip()
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__


class ProviderOrchestrator:
    """Try providers one after another until one call succeeds.

    Providers are tried in the order given; the first successful call is
    normalized and returned, remaining providers are never called. Each call
    is bounded by the provider's own ``timeout_s`` (or the orchestrator
    default), so the whole chain waits at most the sum of those timeouts.
    """

    def __init__(
        self,
        providers: Sequence[TextGenerationProvider],
        *,
        normalizer: ResponseNormalizer | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ):
        self._providers = list(providers)
        self._normalizer = normalizer or ResponseNormalizer()
        self._timeout_s = timeout_s

    @property
    def provider_names(self) -> list[str]:
        return [_provider_name(provider, index) for index, provider in enumerate(self._providers, start=1)]

    def _timeout_for(self, provider: TextGenerationProvider) -> float:
        value = getattr(provider, "timeout_s", None)
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
            return float(value)
        return self._timeout_s

    async def _attempt(self, provider: TextGenerationProvider, name: str, prompts: PromptPair) -> AttemptOutcome:
        started = time.perf_counter()
        timeout = self._timeout_for(provider)
        try:
            raw_text = await asyncio.wait_for(
                provider.generate(prompts.system_prompt, prompts.user_prompt),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            return AttemptFailure(
                provider_name=name,
                reason=f"timed out after {timeout:g}s",
                latency_ms=int((time.perf_counter() - started) * 1000),
            )
        except Exception as exc:  # noqa: BLE001 - any call failure advances the chain
            return AttemptFailure(
                provider_name=name,
                reason=_describe(exc),
                latency_ms=int((time.perf_counter() - started) * 1000),
            )
        latency_ms = int((time.perf_counter() - started) * 1000)
        if not isinstance(raw_text, str) or not raw_text.strip():
            return AttemptFailure(provider_name=name, reason="empty response", latency_ms=latency_ms)
        return AttemptSuccess(provider_name=name, raw_text=raw_text, latency_ms=latency_ms)

    async def run(
        self,
        prompts: PromptPair,
        original_text: str,
        *,
        language: str | None = None,
    ) -> OrchestrationOutcome:
        attempts: list[ProviderAttempt] = []
        state = OrchestratorState.PENDING

        for position, provider in enumerate(self._providers, start=1):
            name = _provider_name(provider, position)
            state = OrchestratorState.TRYING
            logger.debug("orchestrator_state state=%s provider=%s", state.value, name)
            outcome = await self._attempt(provider, name, prompts)

            if isinstance(outcome, AttemptFailure):
                logger.warning(
                    "provider_attempt_failed provider=%s latency_ms=%s reason=%s",
                    name,
                    outcome.latency_ms,
                    outcome.reason,
                )
                attempts.append(
                    ProviderAttempt(
                        provider_name=name,
                        succeeded=False,
                        error_reason=outcome.reason,
                        latency_ms=outcome.latency_ms,
                    )
                )
                continue

            attempts.append(ProviderAttempt(provider_name=name, succeeded=True, latency_ms=outcome.latency_ms))
            result = self._normalizer.normalize(
                outcome.raw_text,
                original_text,
                provider=name,
                language=language,
            )
            state = OrchestratorState.SUCCESS
            logger.info(
                "provider_attempt_succeeded state=%s provider=%s latency_ms=%s attempts=%s",
                state.value,
                name,
                outcome.latency_ms,
                len(attempts),
            )
            return OrchestrationOutcome(result=result, provider_name=name, attempts=attempts)

        state = OrchestratorState.ALL_FAILED
        logger.error("orchestrator_state state=%s attempts=%s", state.value, len(attempts))
        raise AllProvidersFailed(attempts)
