from __future__ import annotations

from pydantic import BaseModel, Field

from resume_optimizer.schemas.optimization import (
    ImpactLevel,
    Keyword,
    OptimizationResult,
    ProviderAttempt,
    ScoreBreakdown,
    Suggestion,
)


class OptimizeRequest(BaseModel):
    resume_text: str = ""
    language: str | None = "en"


class ReoptimizeRequest(BaseModel):
    resume_text: str | None = None
    session_id: str | None = None
    applied_suggestions: list[Suggestion | str] = Field(default_factory=list)
    applied_keywords: list[str] = Field(default_factory=list)
    language: str | None = "en"


class OptimizeResponse(BaseModel):
    session_id: str
    result: OptimizationResult
    score: int
    potential_score: int
    breakdown: ScoreBreakdown
    attempts: list[ProviderAttempt] = Field(default_factory=list)
    result_id: str | None = None


class ProvidersResponse(BaseModel):
    providers: list[str]


class SessionResponse(BaseModel):
    session_id: str
    content: str
    suggestions: list[Suggestion]
    keywords: list[Keyword]
    score: int
    potential_score: int
    breakdown: ScoreBreakdown


class ToggleResponse(BaseModel):
    session_id: str
    item_id: str
    is_applied: bool
    score: int
    breakdown: ScoreBreakdown


class SimulationResponse(BaseModel):
    session_id: str
    current_score: int
    new_score: int
    point_impact: int
    description: str
    level: ImpactLevel


class ContentUpdateRequest(BaseModel):
    content: str


class ScoreResponse(BaseModel):
    session_id: str
    score: int
    potential_score: int
