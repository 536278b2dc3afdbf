from contextlib import asynccontextmanager
import logging

from resume_optimizer.api.deps import get_optimization_service, get_session_registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    service = get_optimization_service()
    names = service.provider_names
    if names:
        logger.info("providers_configured order=%s", ",".join(names))
    else:
        logger.warning("providers_configured order=none")

    yield

    get_session_registry().clear()
    service.close()
