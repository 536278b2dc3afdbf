from functools import lru_cache

from resume_optimizer.core.config import settings
from resume_optimizer.services.optimization_service import OptimizationService
from resume_optimizer.services.session_registry import SessionRegistry


@lru_cache(maxsize=1)
def get_optimization_service() -> OptimizationService:
    return OptimizationService.from_settings(settings)


@lru_cache(maxsize=1)
def get_session_registry() -> SessionRegistry:
    return SessionRegistry(settings.max_sessions)
