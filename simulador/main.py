"""FastAPI application entry point.

Usage:
    python -m simulador.main
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from simulador.api.routes import admin_router, router
from simulador.config import settings

# ── Logging setup ────────────────────────────────────────────────────


def configure_logging(level: str, *, json_logs: bool = False) -> None:
    """Route stdlib logging through structlog renderers.

    Modules keep using `logging.getLogger(__name__)`; records are rendered
    as console lines in development and as JSON in production.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level))


configure_logging(settings.log_level, json_logs=settings.is_production)
logger = logging.getLogger(__name__)

# ── FastAPI app ──────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup configuration; there is nothing to open or close."""
    logger.info(
        "Starting simulator (env=%s, rate=%s, terms=%s)",
        settings.environment,
        settings.rules.annual_rate,
        settings.rules.term_options,
    )
    if not settings.supabase.is_configured:
        logger.warning("SUPABASE_URL / SUPABASE_ANON_KEY not set, proposals cannot be stored or listed")
    if not settings.security.admin_web_password:
        logger.warning("ADMIN_WEB_PASSWORD not set, admin listing disabled")
    yield
    logger.info("Simulator shutdown complete")


app = FastAPI(
    title="Simulador de Financiamento API",
    description="Amortization, Brazilian document validation and signed proposals",
    version="0.1.0",
    lifespan=lifespan,
)
app.include_router(router)
app.include_router(admin_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "environment": settings.environment,
    }


# ── Entry point ──────────────────────────────────────────────────────

if __name__ == "__main__":
    uvicorn.run(
        "simulador.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
