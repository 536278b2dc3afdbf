from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Sequence

from resume_optimizer.ai.factory import build_providers
from resume_optimizer.ai.types import PromptPair
from resume_optimizer.core.config import Settings, settings
from resume_optimizer.core.errors import InputTooShort, PersistenceFailed
from resume_optimizer.core.result_store import ResultSink, SQLiteResultSink
from resume_optimizer.schemas.optimization import (
    OptimizationResult,
    ProviderAttempt,
    ScoreBreakdown,
    Suggestion,
)

from .orchestrator import ProviderOrchestrator
from .prompts import PromptBuilder
from .state_store import OptimizationStateStore

logger = logging.getLogger(__name__)


@dataclass
class OptimizationRun:
    result: OptimizationResult
    store: OptimizationStateStore
    attempts: list[ProviderAttempt] = field(default_factory=list)
    result_id: str | None = None

    @property
    def breakdown(self) -> ScoreBreakdown:
        return self.store.get_breakdown()


class OptimizationService:
    """Validate input, run the provider chain, build the session state and hand the result to the sink."""

    def __init__(
        self,
        orchestrator: ProviderOrchestrator,
        *,
        prompt_builder: PromptBuilder | None = None,
        sink: ResultSink | None = None,
        min_resume_chars: int | None = None,
    ):
        self._orchestrator = orchestrator
        self._prompts = prompt_builder or PromptBuilder()
        self._sink = sink
        self._min_chars = min_resume_chars or settings.min_resume_chars

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "OptimizationService":
        s = source or settings
        orchestrator = ProviderOrchestrator(build_providers(s), timeout_s=s.provider_timeout_s)
        sink = SQLiteResultSink(s.results_db_path) if s.persist_results else None
        return cls(orchestrator, sink=sink, min_resume_chars=s.min_resume_chars)

    @property
    def provider_names(self) -> list[str]:
        return self._orchestrator.provider_names

    def _validate(self, resume_text: str) -> str:
        text = resume_text if isinstance(resume_text, str) else ""
        length = len(text.strip())
        if length < self._min_chars:
            raise InputTooShort(length, self._min_chars)
        return text

    async def optimize(self, resume_text: str, language: str | None = None) -> OptimizationRun:
        text = self._validate(resume_text)
        return await self._run(self._prompts.build_optimization(text, language), text, language, kind="optimize")

    async def reoptimize(
        self,
        resume_text: str,
        applied_suggestions: Sequence[Suggestion | str] = (),
        applied_keywords: Sequence[str] = (),
        language: str | None = None,
    ) -> OptimizationRun:
        text = self._validate(resume_text)
        prompts = self._prompts.build_reoptimization(text, applied_suggestions, applied_keywords, language)
        return await self._run(prompts, text, language, kind="reoptimize")

    async def _run(self, prompts: PromptPair, text: str, language: str | None, *, kind: str) -> OptimizationRun:
        started = time.perf_counter()
        outcome = await self._orchestrator.run(prompts, text, language=language)
        run = OptimizationRun(
            result=outcome.result,
            store=OptimizationStateStore.from_result(outcome.result),
            attempts=outcome.attempts,
        )
        logger.info(
            "optimization_completed kind=%s provider=%s score=%s attempts=%s latency_ms=%s",
            kind,
            outcome.provider_name,
            run.store.get_score(),
            len(outcome.attempts),
            int((time.perf_counter() - started) * 1000),
        )
        if self._sink is not None:
            run.result_id = await self._persist(run)
        return run

    async def _persist(self, run: OptimizationRun) -> str:
        try:
            return await asyncio.to_thread(self._sink.save, run.result, run.breakdown)
        except Exception as exc:
            logger.warning("optimization_persist_failed provider=%s: %s", run.result.provider, exc)
            raise PersistenceFailed(str(exc), run=run) from exc

    def close(self) -> None:
        close = getattr(self._sink, "close", None)
        if callable(close):
            close()
