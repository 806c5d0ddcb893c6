"""
Main Application Entry Point.

Builds the FastAPI application: logging, CORS, exception handlers, request
monitoring and every API router. Run with ``smartcrm-server`` or
``uvicorn smartcrm.server.main:app``.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smartcrm.core.database import init_db
from smartcrm.core.logging_config import get_logger, setup_logging
from smartcrm.core.monitoring import initialize_logfire

from .api.v1 import companies, contacts, events, health, memory, notes, sync
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates missing tables on startup. A failing database is logged and the
    server still starts so that health checks can answer.
    """
    try:
        logger.info("Starting up SmartCRM Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info("Shutting down SmartCRM Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    SmartCRM Server API

    Backend for a personal CRM: contacts, companies, events, interactions and notes,
    AI-generated relationship memory, smart note linking, and a cross-tab sync channel.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)
setup_exception_handlers(app)
initialize_logfire(app)


app.include_router(health.router, tags=["health"])
app.include_router(companies.router, prefix=f"{constant.API_V1_STR}/companies", tags=["companies"])
app.include_router(contacts.router, prefix=f"{constant.API_V1_STR}/contacts", tags=["contacts"])
app.include_router(memory.router, prefix=f"{constant.API_V1_STR}/contacts", tags=["memory"])
app.include_router(events.router, prefix=f"{constant.API_V1_STR}/events", tags=["events"])
app.include_router(notes.router, prefix=f"{constant.API_V1_STR}/notes", tags=["notes"])
app.include_router(sync.router, prefix=f"{constant.API_V1_STR}/sync", tags=["sync"])


def run() -> None:
    """Run the server with uvicorn using the configured host and port."""
    uvicorn.run(app, host=settings.server_host, port=settings.server_port, log_level=settings.log_level.lower())
