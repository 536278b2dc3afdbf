from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_SUGGESTION_POINT_IMPACT = 2
DEFAULT_KEYWORD_POINT_IMPACT = 1


class ImpactLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Suggestion(BaseModel):
    id: str
    type: str = "general"
    text: str
    impact: str = ""
    is_applied: bool = False
    point_impact: int = Field(default=DEFAULT_SUGGESTION_POINT_IMPACT, ge=0, le=100)

    @field_validator("text")
    @classmethod
    def _validate_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("suggestion text must not be empty")
        return stripped


class Keyword(BaseModel):
    id: str
    text: str
    is_applied: bool = False
    relevance: float = Field(default=0.5, ge=0.0, le=1.0)
    point_impact: int = Field(default=DEFAULT_KEYWORD_POINT_IMPACT, ge=0, le=100)

    @field_validator("text")
    @classmethod
    def _validate_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("keyword text must not be empty")
        return stripped


class ScoreBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    base: int = Field(ge=0, le=100)
    suggestions: int = Field(ge=0)
    keywords: int = Field(ge=0)
    total: int = Field(ge=0, le=100)
    potential: int = Field(ge=0, le=100)
    section_scores: dict[str, int] = Field(default_factory=dict)


class OptimizationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    optimized_text: str
    ats_score: int = Field(ge=0, le=100)
    suggestions: list[Suggestion] = Field(default_factory=list, max_length=5)
    keywords: list[Keyword] = Field(default_factory=list, max_length=10)
    improvements: list[str] = Field(default_factory=list)
    provider: str | None = None
    language: str | None = None


class ProviderAttempt(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider_name: str
    succeeded: bool
    error_reason: str | None = None
    latency_ms: int | None = None


class ImpactSimulation(BaseModel):
    model_config = ConfigDict(frozen=True)

    new_score: int = Field(ge=0, le=100)
    point_impact: int
    description: str
    level: ImpactLevel = ImpactLevel.LOW


class SessionState(BaseModel):
    content: str
    suggestions: list[Suggestion]
    keywords: list[Keyword]
    score: int = Field(ge=0, le=100)
    breakdown: ScoreBreakdown
