from fastapi import APIRouter, Depends, Request

from resume_optimizer.api.deps import get_optimization_service, get_session_registry
from resume_optimizer.api.errors import raise_http_error
from resume_optimizer.core.errors import OptimizationError, PersistenceFailed
from resume_optimizer.core.rate_limit import rate_limit
from resume_optimizer.schemas.api import OptimizeRequest, OptimizeResponse, ProvidersResponse, ReoptimizeRequest
from resume_optimizer.services.optimization_service import OptimizationRun, OptimizationService
from resume_optimizer.services.session_registry import SessionRegistry

router = APIRouter()


def _response(session_id: str, run: OptimizationRun) -> OptimizeResponse:
    return OptimizeResponse(
        session_id=session_id,
        result=run.result,
        score=run.store.get_score(),
        potential_score=run.store.potential_score(),
        breakdown=run.breakdown,
        attempts=run.attempts,
        result_id=run.result_id,
    )


def _handle_failure(exc: OptimizationError, sessions: SessionRegistry) -> None:
    if isinstance(exc, PersistenceFailed) and exc.run is not None:
        session_id = sessions.create(exc.run.store)
        raise_http_error(exc, session_id=session_id)
    raise_http_error(exc)


@router.get("/providers", response_model=ProvidersResponse)
async def providers(service: OptimizationService = Depends(get_optimization_service)):
    return ProvidersResponse(providers=service.provider_names)


@router.post("/optimize", response_model=OptimizeResponse)
@rate_limit()
async def optimize(
    request: Request,
    payload: OptimizeRequest,
    service: OptimizationService = Depends(get_optimization_service),
    sessions: SessionRegistry = Depends(get_session_registry),
):
    _ = request
    try:
        run = await service.optimize(payload.resume_text, payload.language)
    except OptimizationError as exc:
        _handle_failure(exc, sessions)
    return _response(sessions.create(run.store), run)


@router.post("/reoptimize", response_model=OptimizeResponse)
@rate_limit()
async def reoptimize(
    request: Request,
    payload: ReoptimizeRequest,
    service: OptimizationService = Depends(get_optimization_service),
    sessions: SessionRegistry = Depends(get_session_registry),
):
    _ = request
    resume_text = payload.resume_text
    applied_suggestions = list(payload.applied_suggestions)
    applied_keywords = list(payload.applied_keywords)
    try:
        if payload.session_id:
            async with sessions.session(payload.session_id) as store:
                resume_text = resume_text or store.content
                applied_suggestions = applied_suggestions or store.applied_suggestions()
                applied_keywords = applied_keywords or [item.text for item in store.applied_keywords()]
        run = await service.reoptimize(resume_text or "", applied_suggestions, applied_keywords, payload.language)
    except OptimizationError as exc:
        _handle_failure(exc, sessions)
    return _response(sessions.create(run.store), run)
