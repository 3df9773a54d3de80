"""
Main entry point for FastAPI application.
"""
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from hsc_api.routes import auth, content
from hsc_api.routes.admin import router as admin_router
from hsc_api.models.health import CorsInfo, DbHealth, HealthResponse
from hsc_api.services.schema_service import (
    NOT_BOOTSTRAPPED,
    bootstrap_schema,
    get_schema_status,
)
from hsc_api.utils.db_async import engine, dispose_engine, DATABASE_URL
from hsc_api.utils.db_url import describe_database_url
from hsc_api.utils.error_handlers import register_error_handlers

from hsc_api.logging_config import setup_logging
from hsc_api.config import settings

import logging
logger = logging.getLogger(__name__)

setup_logging(
    level=settings.log_level,
    access_log=settings.access_log,
    sql_echo=settings.sql_echo,
)

@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables = settings.is_dev and settings.auto_init_db
    if not create_tables:
        logger.info("Skipping table creation; auto_init_db disabled or not in dev")

    logger.info(f"DB target: {describe_database_url(DATABASE_URL)}")
    app.state.schema_status = await bootstrap_schema(engine, create_tables=create_tables)

    # Hand control to the application
    yield

    # Shutdown: dispose engine cleanly
    try:
        logger.info("Disposing DB engine…")
        await dispose_engine()
        logger.info("DB engine disposed.")
    except Exception:
        logger.exception("Failed to dispose DB engine")

# load in app details
app = FastAPI(title="HSC Auth API", lifespan=lifespan)
app.state.schema_status = NOT_BOOTSTRAPPED

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.allowed_origin],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Admin-Key"],
    max_age=86400,
)
register_error_handlers(app)

app.include_router(auth.router)
app.include_router(admin_router)
app.include_router(content.router)

@app.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health Check Endpoint"""
    status = get_schema_status(request)
    return HealthResponse(
        service=settings.service_name,
        ts=datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        cors=CorsInfo(allowed_origin=settings.allowed_origin),
        db=DbHealth(
            ready=status.ready,
            error=None if status.ready else "schema_bootstrap_failed",
        ),
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
