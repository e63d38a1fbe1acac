"""FastAPI application for the settlement readiness engine."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from readiness.errors import ConfigurationError, WeightValidationError
from server.config import settings
from server.models.db import init_db
from server.schemas import HealthResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: configure logging + init DB."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    await init_db()
    yield


app = FastAPI(
    title="Settlement Readiness",
    description="Readiness, risk and priority scoring for defended settlements",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Scoring unavailable: %s", exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(WeightValidationError)
async def weight_validation_error_handler(request: Request, exc: WeightValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc), "field": exc.field})


# Routers
from server.routers import readiness  # noqa: E402

app.include_router(readiness.router, prefix="/api/v1")


@app.get("/", response_model=HealthResponse)
async def health():
    return HealthResponse()
