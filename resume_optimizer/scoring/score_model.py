from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Sequence

from resume_optimizer.core.scoring_config import get_scoring_value
from resume_optimizer.schemas.optimization import Keyword, ScoreBreakdown, Suggestion

from . import heuristics


@dataclass(frozen=True)
class ScoreWeights:
    base_score: int = 65
    min_score: int = 0
    max_score: int = 100
    section_bonus: int = 5
    email_bonus: int = 2
    phone_bonus: int = 2
    network_bonus: int = 1
    bullet_divisor: float = 3.0
    bullet_cap: float = 5.0
    metric_cap: float = 5.0
    suggestion_point_impact: int = 2
    keyword_point_impact: int = 1
    section_base: int = 60
    section_words_per_point: float = 10.0
    section_words_cap: float = 20.0
    section_bullet_points: float = 2.0
    section_bullet_cap: float = 10.0
    section_metric_points: float = 3.0
    section_metric_cap: float = 10.0


@dataclass(frozen=True)
class ScoreResult:
    score: int
    breakdown: ScoreBreakdown


@lru_cache(maxsize=1)
def load_score_weights() -> ScoreWeights:
    defaults = ScoreWeights()
    return ScoreWeights(
        base_score=int(get_scoring_value("ats.base_score", defaults.base_score)),
        min_score=int(get_scoring_value("ats.min_score", defaults.min_score)),
        max_score=int(get_scoring_value("ats.max_score", defaults.max_score)),
        section_bonus=int(get_scoring_value("ats.section_bonus", defaults.section_bonus)),
        email_bonus=int(get_scoring_value("ats.contact.email", defaults.email_bonus)),
        phone_bonus=int(get_scoring_value("ats.contact.phone", defaults.phone_bonus)),
        network_bonus=int(get_scoring_value("ats.contact.network", defaults.network_bonus)),
        bullet_divisor=float(get_scoring_value("ats.bullets.divisor", defaults.bullet_divisor)),
        bullet_cap=float(get_scoring_value("ats.bullets.cap", defaults.bullet_cap)),
        metric_cap=float(get_scoring_value("ats.metrics.cap", defaults.metric_cap)),
        suggestion_point_impact=int(
            get_scoring_value("ats.default_point_impact.suggestion", defaults.suggestion_point_impact)
        ),
        keyword_point_impact=int(
            get_scoring_value("ats.default_point_impact.keyword", defaults.keyword_point_impact)
        ),
        section_base=int(get_scoring_value("sections.base", defaults.section_base)),
        section_words_per_point=float(
            get_scoring_value("sections.words_per_point", defaults.section_words_per_point)
        ),
        section_words_cap=float(get_scoring_value("sections.words_cap", defaults.section_words_cap)),
        section_bullet_points=float(get_scoring_value("sections.bullet_points", defaults.section_bullet_points)),
        section_bullet_cap=float(get_scoring_value("sections.bullet_cap", defaults.section_bullet_cap)),
        section_metric_points=float(get_scoring_value("sections.metric_points", defaults.section_metric_points)),
        section_metric_cap=float(get_scoring_value("sections.metric_cap", defaults.section_metric_cap)),
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_score(value: float, weights: ScoreWeights | None = None) -> int:
    w = weights or load_score_weights()
    return max(w.min_score, min(w.max_score, _round_half_up(value)))


def is_valid_score(value: Any, weights: ScoreWeights | None = None) -> bool:
    w = weights or load_score_weights()
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if not math.isfinite(value):
        return False
    return w.min_score <= value <= w.max_score


def heuristic_base_score(content: str, weights: ScoreWeights | None = None) -> int:
    """Score resume text from structure alone: sections, contact details, bullets, metrics."""
    w = weights or load_score_weights()
    text = content or ""
    score = float(w.base_score)

    for section_id in heuristics.CORE_SECTIONS:
        if heuristics.has_section(text, section_id):
            score += w.section_bonus

    if heuristics.has_email(text):
        score += w.email_bonus
    if heuristics.has_phone(text):
        score += w.phone_bonus
    if heuristics.has_network_link(text):
        score += w.network_bonus

    divisor = w.bullet_divisor if w.bullet_divisor > 0 else 1.0
    score += min(w.bullet_cap, heuristics.count_bullets(text) / divisor)
    score += min(w.metric_cap, float(heuristics.count_metrics(text)))

    return clamp_score(score, w)


def section_score(body: str, weights: ScoreWeights | None = None) -> int:
    w = weights or load_score_weights()
    per_point = w.section_words_per_point if w.section_words_per_point > 0 else 1.0
    score = float(w.section_base)
    score += min(w.section_words_cap, heuristics.count_words(body) / per_point)
    score += min(w.section_bullet_cap, heuristics.count_bullets(body) * w.section_bullet_points)
    score += min(w.section_metric_cap, heuristics.count_metrics(body) * w.section_metric_points)
    return clamp_score(score, w)


def section_scores(content: str, weights: ScoreWeights | None = None) -> dict[str, int]:
    w = weights or load_score_weights()
    text = content or ""
    bodies = heuristics.split_sections(text)
    found = heuristics.present_sections(text)
    for section_id in bodies:
        if section_id not in found:
            found.append(section_id)
    return {section_id: section_score(bodies.get(section_id, ""), w) for section_id in found}


def item_points(item: Suggestion | Keyword, weights: ScoreWeights | None = None) -> int:
    w = weights or load_score_weights()
    value = getattr(item, "point_impact", None)
    if value is None:
        return w.suggestion_point_impact if isinstance(item, Suggestion) else w.keyword_point_impact
    return int(value)


def _contribution(items: Sequence[Suggestion | Keyword], weights: ScoreWeights, *, force_applied: bool) -> int:
    return sum(item_points(item, weights) for item in items if force_applied or item.is_applied)


def resolve_base(base: Any, content: str, weights: ScoreWeights | None = None) -> int:
    w = weights or load_score_weights()
    if is_valid_score(base, w):
        return clamp_score(base, w)
    return heuristic_base_score(content, w)


def compute_score(
    base: Any,
    suggestions: Sequence[Suggestion],
    keywords: Sequence[Keyword],
    content: str,
    *,
    weights: ScoreWeights | None = None,
) -> ScoreResult:
    """Total = clamp(base + applied suggestion points + applied keyword points).

    Pure: the same arguments always produce the same result. When ``base`` is
    missing or not a score in range it is derived from ``content``.
    """
    w = weights or load_score_weights()
    resolved_base = resolve_base(base, content, w)
    suggestion_points = _contribution(suggestions, w, force_applied=False)
    keyword_points = _contribution(keywords, w, force_applied=False)
    total = clamp_score(resolved_base + suggestion_points + keyword_points, w)
    potential = clamp_score(
        resolved_base
        + _contribution(suggestions, w, force_applied=True)
        + _contribution(keywords, w, force_applied=True),
        w,
    )
    breakdown = ScoreBreakdown(
        base=resolved_base,
        suggestions=suggestion_points,
        keywords=keyword_points,
        total=total,
        potential=potential,
        section_scores=section_scores(content, w),
    )
    return ScoreResult(score=total, breakdown=breakdown)
