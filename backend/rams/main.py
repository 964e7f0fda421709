"""RAMS generator FastAPI application."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rams.config import get_settings
from rams.routers import documents, gating, health, review, validation

_settings = get_settings()

logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logging.getLogger("rams").setLevel(_settings.log_level.upper())

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    if settings.ai_configured:
        logger.info("AI augmentation enabled (model %s)", settings.ai_model)
    else:
        logger.warning("AI augmentation disabled: rule-based validation only")
    yield


app = FastAPI(
    title="RAMS Generator API",
    description="UK construction RAMS drafting and compliance validation",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS: allow frontend origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        _settings.app_url,
        "http://localhost:5173",
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers, all prefixed with /api
app.include_router(health.router, prefix="/api")
app.include_router(validation.router, prefix="/api")
app.include_router(review.router, prefix="/api")
app.include_router(documents.router, prefix="/api")
app.include_router(gating.router, prefix="/api")
