from __future__ import annotations

import json
import logging
import math
import re
from typing import Any

from pydantic import ValidationError

from resume_optimizer.core.errors import MalformedResponse
from resume_optimizer.core.scoring_config import get_scoring_value
from resume_optimizer.schemas.optimization import Keyword, OptimizationResult, Suggestion
from resume_optimizer.scoring import ScoreWeights, clamp_score, compute_score, load_score_weights

from .fallback_content import FallbackContentGenerator

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```[ \t]*(?:json|JSON)?[ \t]*\n?(.*?)```", re.DOTALL)
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

_TEXT_KEYS = ("optimizedText", "optimized_text", "optimizedResume", "optimized_resume", "content")
_SCORE_KEYS = ("atsScore", "ats_score", "score")
_KEYWORD_KEYS = ("keywords", "keywordSuggestions", "keyword_suggestions")
_APPLIED_KEYS = ("isApplied", "is_applied", "applied")
_POINT_KEYS = ("pointImpact", "point_impact", "points")
_TRUE_STRINGS = {"1", "true", "yes", "y", "on"}
MAX_ITEM_POINTS = 10


def _first_present(payload: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return None


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            parsed = float(value.strip().rstrip("%"))
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def _as_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def _as_points(value: Any, default: int) -> int:
    number = _as_number(value)
    if number is None:
        return default
    return max(0, min(MAX_ITEM_POINTS, int(round(number))))


def _as_id(value: Any) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (str, int)):
        text = str(value).strip()
        return text or None
    return None


def _free_id(prefix: str, position: int, used_ids: set[str]) -> str:
    number = position
    while f"{prefix}{number}" in used_ids:
        number += 1
    return f"{prefix}{number}"


class ResponseNormalizer:
    """Turn one provider's raw text into a validated ``OptimizationResult``.

    Parsing never raises: fenced JSON, bare JSON, JSON embedded in prose and
    plain text are all accepted. Whatever the provider omitted is filled in
    from the score model and the fallback content generator.
    """

    def __init__(
        self,
        fallback: FallbackContentGenerator | None = None,
        *,
        weights: ScoreWeights | None = None,
        min_text_chars: int | None = None,
        max_suggestions: int | None = None,
        max_keywords: int | None = None,
    ):
        self._fallback = fallback or FallbackContentGenerator()
        self._weights = weights or load_score_weights()
        self._min_text_chars = min_text_chars or int(get_scoring_value("normalization.min_optimized_chars", 200))
        self._max_suggestions = max_suggestions or int(get_scoring_value("normalization.max_suggestions", 5))
        self._max_keywords = max_keywords or int(get_scoring_value("normalization.max_keywords", 10))

    # parsing

    @staticmethod
    def strip_fence(raw_text: str) -> str:
        match = _FENCE_RE.search(raw_text)
        if match is None:
            return raw_text.strip()
        return match.group(1).strip()

    @staticmethod
    def _load_object(candidate: str) -> dict[str, Any]:
        try:
            parsed = json.loads(candidate)
        except (TypeError, ValueError) as exc:
            raise MalformedResponse(f"invalid JSON: {exc}") from exc
        if not isinstance(parsed, dict):
            raise MalformedResponse(f"expected a JSON object, got {type(parsed).__name__}")
        return parsed

    def parse(self, raw_text: str) -> tuple[dict[str, Any] | None, str]:
        """Return the parsed payload (or None) and the name of the strategy that produced it."""
        body = self.strip_fence(raw_text)
        try:
            return self._load_object(body), "direct"
        except MalformedResponse as exc:
            logger.debug("response_parse_direct_failed: %s", exc)

        match = _OBJECT_RE.search(body)
        if match is not None:
            try:
                return self._load_object(match.group(0)), "extracted"
            except MalformedResponse as exc:
                logger.debug("response_parse_extracted_failed: %s", exc)

        return None, "plain_text"

    # field mapping

    def _map_suggestions(self, raw: Any) -> list[Suggestion]:
        if not isinstance(raw, list):
            return []
        items: list[Suggestion] = []
        used_ids: set[str] = set()
        for entry in raw:
            if len(items) >= self._max_suggestions:
                break
            position = len(items) + 1
            if isinstance(entry, str):
                entry = {"text": entry}
            if not isinstance(entry, dict):
                continue
            item_id = _as_id(entry.get("id"))
            if item_id is None or item_id in used_ids:
                item_id = _free_id("s", position, used_ids)
            impact = entry.get("impact")
            try:
                suggestion = Suggestion(
                    id=item_id,
                    type=str(entry.get("type") or entry.get("category") or "general"),
                    text=str(entry.get("text") or entry.get("suggestion") or entry.get("description") or ""),
                    impact=impact if isinstance(impact, str) else "",
                    is_applied=_as_flag(_first_present(entry, _APPLIED_KEYS)),
                    point_impact=_as_points(
                        _first_present(entry, _POINT_KEYS), self._weights.suggestion_point_impact
                    ),
                )
            except ValidationError:
                continue
            used_ids.add(suggestion.id)
            items.append(suggestion)
        return items

    def _map_keywords(self, raw: Any) -> list[Keyword]:
        if not isinstance(raw, list):
            return []
        items: list[Keyword] = []
        used_ids: set[str] = set()
        seen_text: set[str] = set()
        for entry in raw:
            if len(items) >= self._max_keywords:
                break
            position = len(items) + 1
            if isinstance(entry, str):
                entry = {"text": entry}
            if not isinstance(entry, dict):
                continue
            text = str(entry.get("text") or entry.get("keyword") or entry.get("term") or "").strip()
            if not text or text.lower() in seen_text:
                continue
            item_id = _as_id(entry.get("id"))
            if item_id is None or item_id in used_ids:
                item_id = _free_id("k", position, used_ids)
            relevance = _as_number(entry.get("relevance", entry.get("impact")))
            try:
                keyword = Keyword(
                    id=item_id,
                    text=text,
                    is_applied=_as_flag(_first_present(entry, _APPLIED_KEYS)),
                    relevance=0.5 if relevance is None else max(0.0, min(1.0, relevance)),
                    point_impact=_as_points(_first_present(entry, _POINT_KEYS), self._weights.keyword_point_impact),
                )
            except ValidationError:
                continue
            used_ids.add(keyword.id)
            seen_text.add(text.lower())
            items.append(keyword)
        return items

    @staticmethod
    def _map_improvements(raw: Any) -> list[str]:
        if isinstance(raw, str):
            return [raw.strip()] if raw.strip() else []
        if not isinstance(raw, list):
            return []
        return [str(item).strip() for item in raw if isinstance(item, (str, int, float)) and str(item).strip()]

    # entry point

    def normalize(
        self,
        raw_text: str,
        original_text: str,
        *,
        provider: str | None = None,
        language: str | None = None,
    ) -> OptimizationResult:
        try:
            return self._normalize(raw_text, original_text, provider=provider, language=language)
        except Exception:  # noqa: BLE001 - the degraded result is always usable
            logger.exception("response_normalize_failed provider=%s", provider)
            return self._degraded(original_text or raw_text or "", provider=provider, language=language)

    def _normalize(
        self,
        raw_text: str,
        original_text: str,
        *,
        provider: str | None,
        language: str | None,
    ) -> OptimizationResult:
        raw = raw_text if isinstance(raw_text, str) else str(raw_text or "")
        payload, strategy = self.parse(raw)
        repairs: list[str] = []

        if payload is None:
            payload = {}
            candidate_text: Any = raw
        else:
            candidate_text = _first_present(payload, _TEXT_KEYS)

        if isinstance(candidate_text, str) and len(candidate_text.strip()) >= self._min_text_chars:
            optimized_text = candidate_text.strip()
        else:
            optimized_text = original_text
            repairs.append("optimized_text")

        suggestions = self._map_suggestions(payload.get("suggestions"))
        if not suggestions:
            suggestions = self._fallback.suggestions(optimized_text, language)[: self._max_suggestions]
            repairs.append("suggestions")

        keywords = self._map_keywords(_first_present(payload, _KEYWORD_KEYS))
        if not keywords:
            keywords = self._fallback.keywords(optimized_text, language)[: self._max_keywords]
            repairs.append("keywords")

        raw_score = _as_number(_first_present(payload, _SCORE_KEYS))
        if raw_score is None:
            ats_score = compute_score(None, [], [], optimized_text, weights=self._weights).score
            repairs.append("ats_score")
        else:
            ats_score = clamp_score(raw_score, self._weights)
            if ats_score != raw_score:
                repairs.append("ats_score_clamped")

        if repairs:
            logger.info(
                "response_normalized provider=%s strategy=%s repairs=%s",
                provider,
                strategy,
                ",".join(repairs),
            )

        return OptimizationResult(
            optimized_text=optimized_text,
            ats_score=ats_score,
            suggestions=suggestions,
            keywords=keywords,
            improvements=self._map_improvements(payload.get("improvements")),
            provider=provider,
            language=language,
        )

    def _degraded(self, text: str, *, provider: str | None, language: str | None) -> OptimizationResult:
        return OptimizationResult(
            optimized_text=text,
            ats_score=compute_score(None, [], [], text, weights=self._weights).score,
            suggestions=self._fallback.suggestions(text, language)[: self._max_suggestions],
            keywords=self._fallback.keywords(text, language)[: self._max_keywords],
            provider=provider,
            language=language,
        )
