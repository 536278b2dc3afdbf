import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from resume_optimizer.api.v1.health import router as health_router
from resume_optimizer.api.v1.optimize import router as optimize_router
from resume_optimizer.api.v1.sessions import router as sessions_router
from resume_optimizer.core.cors import cors_allowed_origins
from resume_optimizer.core.rate_limit import limiter
from resume_optimizer.core.config import settings
from dotenv import load_dotenv
from resume_optimizer.core.lifespan import lifespan

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="Resume Optimizer API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(optimize_router, prefix="/v1", tags=["Optimize"])
app.include_router(sessions_router, prefix="/v1", tags=["Sessions"])
