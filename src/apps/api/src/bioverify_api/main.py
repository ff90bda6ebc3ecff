"""FastAPI application entrypoint."""
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bioverify_api.routers import bulk_jobs, health
from bioverify_api.settings import get_settings
from bioverify_core.db import init_db
from bioverify_core.util.logging import configure_logging

configure_logging(get_settings().log_level)
logger = structlog.get_logger()

app = FastAPI(title="Bulk Verification API", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/api")
app.include_router(bulk_jobs.router, prefix="/api")


@app.on_event("startup")
def startup():
    """Initialize on startup."""
    logger.info("initializing_database")
    init_db()
