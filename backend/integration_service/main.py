"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from integration_service.api.v1 import batch, mapping, status
from integration_service.core.config import settings
from integration_service.core.constants import API_PREFIX, SERVICE_VERSION
from integration_service.core.logging import get_logger, setup_logging
from integration_service.core.tracing import setup_tracing


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging("DEBUG" if settings.APP_ENV == "development" else settings.LOG_LEVEL)
    setup_tracing()
    logger = get_logger("startup")
    logger.info(
        "Application starting",
        env=settings.APP_ENV,
        ollama_host=settings.OLLAMA_HOST,
        model=settings.OLLAMA_MODEL,
    )
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="AI Integration Mapping API",
    description="Maps source records to target schemas with a generative model",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(status.router, prefix=API_PREFIX)
app.include_router(mapping.router, prefix=API_PREFIX)
app.include_router(batch.router, prefix=API_PREFIX)


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Public health-check endpoint."""
    return {"status": "ok", "env": settings.APP_ENV}
