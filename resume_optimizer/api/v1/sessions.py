from typing import Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from resume_optimizer.api.deps import get_session_registry
from resume_optimizer.api.errors import raise_http_error
from resume_optimizer.core.errors import OptimizationError
from resume_optimizer.schemas.api import (
    ContentUpdateRequest,
    ScoreResponse,
    SessionResponse,
    SimulationResponse,
    ToggleResponse,
)
from resume_optimizer.schemas.optimization import ScoreBreakdown
from resume_optimizer.services.report import MEDIA_TYPES, render_report
from resume_optimizer.services.session_registry import SessionRegistry
from resume_optimizer.services.state_store import OptimizationStateStore, SimulationOutcome, ToggleOutcome

router = APIRouter(prefix="/sessions")


def _session_response(session_id: str, store: OptimizationStateStore) -> SessionResponse:
    snapshot = store.snapshot()
    return SessionResponse(
        session_id=session_id,
        content=snapshot.content,
        suggestions=snapshot.suggestions,
        keywords=snapshot.keywords,
        score=snapshot.score,
        potential_score=store.potential_score(),
        breakdown=snapshot.breakdown,
    )


def _toggle_response(session_id: str, store: OptimizationStateStore, outcome: ToggleOutcome) -> ToggleResponse:
    if outcome.error is not None:
        raise_http_error(outcome.error)
    return ToggleResponse(
        session_id=session_id,
        item_id=outcome.item_id,
        is_applied=outcome.is_applied,
        score=outcome.score,
        breakdown=store.get_breakdown(),
    )


def _simulation_response(
    session_id: str, store: OptimizationStateStore, outcome: SimulationOutcome
) -> SimulationResponse:
    if outcome.error is not None:
        raise_http_error(outcome.error)
    return SimulationResponse(
        session_id=session_id,
        current_score=store.get_score(),
        new_score=outcome.new_score,
        point_impact=outcome.point_impact,
        description=outcome.description,
        level=outcome.simulation.level,
    )


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, sessions: SessionRegistry = Depends(get_session_registry)):
    try:
        async with sessions.session(session_id) as store:
            return _session_response(session_id, store)
    except OptimizationError as exc:
        raise_http_error(exc)


@router.post("/{session_id}/suggestions/{index}/toggle", response_model=ToggleResponse)
async def toggle_suggestion(session_id: str, index: int, sessions: SessionRegistry = Depends(get_session_registry)):
    try:
        async with sessions.session(session_id) as store:
            return _toggle_response(session_id, store, store.toggle_suggestion(index))
    except OptimizationError as exc:
        raise_http_error(exc)


@router.post("/{session_id}/keywords/{index}/toggle", response_model=ToggleResponse)
async def toggle_keyword(session_id: str, index: int, sessions: SessionRegistry = Depends(get_session_registry)):
    try:
        async with sessions.session(session_id) as store:
            return _toggle_response(session_id, store, store.toggle_keyword(index))
    except OptimizationError as exc:
        raise_http_error(exc)


@router.get("/{session_id}/suggestions/{index}/simulate", response_model=SimulationResponse)
async def simulate_suggestion(
    session_id: str, index: int, sessions: SessionRegistry = Depends(get_session_registry)
):
    try:
        async with sessions.session(session_id) as store:
            return _simulation_response(session_id, store, store.simulate_suggestion(index))
    except OptimizationError as exc:
        raise_http_error(exc)


@router.get("/{session_id}/keywords/{index}/simulate", response_model=SimulationResponse)
async def simulate_keyword(session_id: str, index: int, sessions: SessionRegistry = Depends(get_session_registry)):
    try:
        async with sessions.session(session_id) as store:
            return _simulation_response(session_id, store, store.simulate_keyword(index))
    except OptimizationError as exc:
        raise_http_error(exc)


@router.post("/{session_id}/apply-all", response_model=SessionResponse)
async def apply_all(session_id: str, sessions: SessionRegistry = Depends(get_session_registry)):
    try:
        async with sessions.session(session_id) as store:
            store.apply_all()
            return _session_response(session_id, store)
    except OptimizationError as exc:
        raise_http_error(exc)


@router.post("/{session_id}/reset", response_model=SessionResponse)
async def reset(session_id: str, sessions: SessionRegistry = Depends(get_session_registry)):
    try:
        async with sessions.session(session_id) as store:
            store.reset_all()
            return _session_response(session_id, store)
    except OptimizationError as exc:
        raise_http_error(exc)


@router.put("/{session_id}/content", response_model=SessionResponse)
async def update_content(
    session_id: str,
    payload: ContentUpdateRequest,
    sessions: SessionRegistry = Depends(get_session_registry),
):
    try:
        async with sessions.session(session_id) as store:
            store.update_content(payload.content)
            return _session_response(session_id, store)
    except OptimizationError as exc:
        raise_http_error(exc)


@router.get("/{session_id}/score", response_model=ScoreResponse)
async def score(session_id: str, sessions: SessionRegistry = Depends(get_session_registry)):
    try:
        async with sessions.session(session_id) as store:
            return ScoreResponse(session_id=session_id, score=store.get_score(), potential_score=store.potential_score())
    except OptimizationError as exc:
        raise_http_error(exc)


@router.get("/{session_id}/breakdown", response_model=ScoreBreakdown)
async def breakdown(session_id: str, sessions: SessionRegistry = Depends(get_session_registry)):
    try:
        async with sessions.session(session_id) as store:
            return store.get_breakdown()
    except OptimizationError as exc:
        raise_http_error(exc)


@router.get("/{session_id}/report")
async def report(
    session_id: str,
    format: Literal["json", "markdown", "csv"] = Query(default="json"),
    sessions: SessionRegistry = Depends(get_session_registry),
):
    try:
        async with sessions.session(session_id) as store:
            body = render_report(store.snapshot(), format)
    except OptimizationError as exc:
        raise_http_error(exc)
    return Response(content=body, media_type=MEDIA_TYPES[format])
