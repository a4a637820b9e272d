"""Library API: FastAPI entry point.

Registers middleware, routers, and lifecycle hooks. The library vertical
is mounted under /api; interactive docs live at /api/swagger.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import RequestLoggingMiddleware
from core.database import close_db, configure_database, init_db
from core.observability.logging_setup import configure_logging
from core.observability.otel_setup import setup_otel
from verticals.library.config import config

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown hooks."""
    configure_logging(config.telemetry.log_level)
    setup_otel(config.telemetry.service_name, config.telemetry.otlp_endpoint)
    configure_database(config.database)
    await init_db()

    logger.info("Library API started")
    yield
    await close_db()
    logger.info("Library API shutting down")


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Library",
    description="Library catalog and member rental service",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/api/swagger",
    openapi_url="/api/docs/openapi.json",
    debug=config.api.debug,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(config.api.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request logging
app.add_middleware(RequestLoggingMiddleware)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

from verticals.library.router import router as library_router  # noqa: E402

app.include_router(library_router, prefix="/api")


# ---------------------------------------------------------------------------
# Health & root
# ---------------------------------------------------------------------------

@app.get("/health")
async def health():
    return {"status": "healthy", "version": VERSION}


@app.get("/")
async def root():
    return {
        "name": "Library",
        "version": VERSION,
        "docs": "/api/swagger",
        "resources": ["author", "book", "user"],
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host="0.0.0.0", port=8000)
