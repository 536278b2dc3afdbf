from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from resume_optimizer.core.errors import IndexOutOfRange
from resume_optimizer.schemas.optimization import (
    ImpactLevel,
    ImpactSimulation,
    Keyword,
    OptimizationResult,
    ScoreBreakdown,
    SessionState,
    Suggestion,
)
from resume_optimizer.scoring import ScoreResult, ScoreWeights, compute_score, item_points, load_score_weights

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToggleOutcome:
    score: int
    item_id: str | None = None
    is_applied: bool | None = None
    error: IndexOutOfRange | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SimulationOutcome:
    simulation: ImpactSimulation
    error: IndexOutOfRange | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def new_score(self) -> int:
        return self.simulation.new_score

    @property
    def point_impact(self) -> int:
        return self.simulation.point_impact

    @property
    def description(self) -> str:
        return self.simulation.description


def suggestion_level(points: int) -> ImpactLevel:
    if points >= 3:
        return ImpactLevel.HIGH
    if points >= 2:
        return ImpactLevel.MEDIUM
    return ImpactLevel.LOW


def keyword_level(relevance: float) -> ImpactLevel:
    if relevance >= 0.7:
        return ImpactLevel.HIGH
    if relevance >= 0.4:
        return ImpactLevel.MEDIUM
    return ImpactLevel.LOW


def _plural(points: int) -> str:
    return "point" if abs(points) == 1 else "points"


class OptimizationStateStore:
    """Applied flags, content and current score for one optimization session.

    Every change recomputes the whole score through ``compute_score``; nothing
    is patched incrementally. The store is not thread or task safe on its
    own: callers serialize access per session (see ``SessionRegistry``).
    """

    def __init__(
        self,
        content: str,
        suggestions: Iterable[Suggestion] = (),
        keywords: Iterable[Keyword] = (),
        *,
        base_score: Any = None,
        weights: ScoreWeights | None = None,
    ):
        self._weights = weights or load_score_weights()
        self._content = content or ""
        self._base_score = base_score
        self._suggestions: list[Suggestion] = [item.model_copy() for item in suggestions]
        self._keywords: list[Keyword] = [item.model_copy() for item in keywords]
        self._current = self._compute(self._suggestions, self._keywords)

    @classmethod
    def from_result(cls, result: OptimizationResult, *, weights: ScoreWeights | None = None) -> "OptimizationStateStore":
        return cls(
            result.optimized_text,
            result.suggestions,
            result.keywords,
            base_score=result.ats_score,
            weights=weights,
        )

    def _compute(self, suggestions: list[Suggestion], keywords: list[Keyword]) -> ScoreResult:
        return compute_score(self._base_score, suggestions, keywords, self._content, weights=self._weights)

    def _recompute(self) -> int:
        previous = self._current.score
        self._current = self._compute(self._suggestions, self._keywords)
        if previous != self._current.score:
            logger.debug("session_score_changed previous=%s current=%s", previous, self._current.score)
        return self._current.score

    @staticmethod
    def _in_range(index: Any, size: int) -> bool:
        return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < size

    # read side

    @property
    def content(self) -> str:
        return self._content

    @property
    def suggestions(self) -> list[Suggestion]:
        return [item.model_copy() for item in self._suggestions]

    @property
    def keywords(self) -> list[Keyword]:
        return [item.model_copy() for item in self._keywords]

    def get_score(self) -> int:
        return self._current.score

    def get_breakdown(self) -> ScoreBreakdown:
        return self._current.breakdown

    def potential_score(self) -> int:
        """Score with every suggestion and keyword applied."""
        return self._current.breakdown.potential

    def applied_suggestions(self) -> list[Suggestion]:
        return [item.model_copy() for item in self._suggestions if item.is_applied]

    def applied_keywords(self) -> list[Keyword]:
        return [item.model_copy() for item in self._keywords if item.is_applied]

    def snapshot(self) -> SessionState:
        return SessionState(
            content=self._content,
            suggestions=self.suggestions,
            keywords=self.keywords,
            score=self._current.score,
            breakdown=self._current.breakdown,
        )

    # toggles

    def toggle_suggestion(self, index: int) -> ToggleOutcome:
        if not self._in_range(index, len(self._suggestions)):
            return ToggleOutcome(
                score=self._current.score,
                error=IndexOutOfRange("suggestion", index, len(self._suggestions)),
            )
        item = self._suggestions[index]
        self._suggestions[index] = item.model_copy(update={"is_applied": not item.is_applied})
        score = self._recompute()
        return ToggleOutcome(score=score, item_id=item.id, is_applied=not item.is_applied)

    def toggle_keyword(self, index: int) -> ToggleOutcome:
        if not self._in_range(index, len(self._keywords)):
            return ToggleOutcome(
                score=self._current.score,
                error=IndexOutOfRange("keyword", index, len(self._keywords)),
            )
        item = self._keywords[index]
        self._keywords[index] = item.model_copy(update={"is_applied": not item.is_applied})
        score = self._recompute()
        return ToggleOutcome(score=score, item_id=item.id, is_applied=not item.is_applied)

    # simulation

    def _invalid_simulation(self, kind: str, index: Any, size: int) -> SimulationOutcome:
        return SimulationOutcome(
            simulation=ImpactSimulation(
                new_score=self._current.score,
                point_impact=0,
                description=f"Invalid {kind}",
            ),
            error=IndexOutOfRange(kind, index, size),
        )

    def _describe(self, label: str, applying: bool, points: int, new_score: int) -> str:
        if applying:
            text = f"Applying {label} adds {points} {_plural(points)}"
        else:
            text = f"Removing {label} subtracts {points} {_plural(points)}"
        if abs(new_score - self._current.score) < points:
            bound = "maximum" if applying else "minimum"
            text += f" (score is capped at the {bound})"
        return text

    def simulate_suggestion(self, index: int) -> SimulationOutcome:
        """Score the session would have after ``toggle_suggestion(index)``, without changing it."""
        if not self._in_range(index, len(self._suggestions)):
            return self._invalid_simulation("suggestion", index, len(self._suggestions))
        item = self._suggestions[index]
        applying = not item.is_applied
        trial = list(self._suggestions)
        trial[index] = item.model_copy(update={"is_applied": applying})
        new_score = self._compute(trial, self._keywords).score
        points = item_points(item, self._weights)
        label = f"this {item.type} suggestion"
        if item.impact:
            label = f"{label} ({item.impact.rstrip('.')})"
        return SimulationOutcome(
            simulation=ImpactSimulation(
                new_score=new_score,
                point_impact=points if applying else -points,
                description=self._describe(label, applying, points, new_score),
                level=suggestion_level(points),
            )
        )

    def simulate_keyword(self, index: int) -> SimulationOutcome:
        """Score the session would have after ``toggle_keyword(index)``, without changing it."""
        if not self._in_range(index, len(self._keywords)):
            return self._invalid_simulation("keyword", index, len(self._keywords))
        item = self._keywords[index]
        applying = not item.is_applied
        trial = list(self._keywords)
        trial[index] = item.model_copy(update={"is_applied": applying})
        new_score = self._compute(self._suggestions, trial).score
        points = item_points(item, self._weights)
        return SimulationOutcome(
            simulation=ImpactSimulation(
                new_score=new_score,
                point_impact=points if applying else -points,
                description=self._describe(f"the keyword '{item.text}'", applying, points, new_score),
                level=keyword_level(item.relevance),
            )
        )

    # bulk changes

    def _set_all(self, applied: bool) -> int:
        self._suggestions = [item.model_copy(update={"is_applied": applied}) for item in self._suggestions]
        self._keywords = [item.model_copy(update={"is_applied": applied}) for item in self._keywords]
        return self._recompute()

    def apply_all(self) -> int:
        return self._set_all(True)

    def reset_all(self) -> int:
        return self._set_all(False)

    def update_content(self, text: str) -> int:
        self._content = text or ""
        return self._recompute()
