from typing import NoReturn

from fastapi import HTTPException

from resume_optimizer.core.errors import AllProvidersFailed, OptimizationError


def raise_http_error(exc: OptimizationError, **extra) -> NoReturn:
    detail = {"code": exc.code, "message": str(exc), **extra}
    if isinstance(exc, AllProvidersFailed):
        detail["attempts"] = [attempt.model_dump() for attempt in exc.attempts]
    raise HTTPException(status_code=exc.status_code, detail=detail) from exc
