"""
Helpdesk Mini - Main Application
================================

Ticket tracking helpdesk with SLA deadlines, optimistic locking and an
audit trail.

Modules:
- Accounts: Registration, login and the bearer-token request context
- Tickets: Ticket lifecycle, comments and the timeline
- SLA: Deadline calculation and breach detection

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities and value objects
- Infrastructure: Database
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

# Configuration and Core
from helpdesk.config import settings
from helpdesk.core import ApplicationException

# Infrastructure
from helpdesk.infrastructure.database import close_database, create_tables, init_database

# Module Routers
from helpdesk.accounts.interfaces import auth_router
from helpdesk.tickets.interfaces import tickets_router

# Shared API plumbing
from helpdesk.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    application_exception_handler,
    global_exception_handler,
    validation_exception_handler,
)

# Logging
from helpdesk.shared.infrastructure.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Initialize database
    3. Create database tables

    SHUTDOWN:
    1. Close database connections
    """
    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting Helpdesk Service", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    logger.info("Initializing database")
    init_database()

    # Create tables (for development - use Alembic in production)
    # Note: If database is not available, the server will start but
    # database-dependent endpoints will fail
    logger.info("Creating database tables")
    try:
        await create_tables()
    except Exception as e:
        logger.warning(f"Database not available - running in degraded mode: {e}")
        logger.warning("Please start PostgreSQL to enable full functionality")

    logger.info("Helpdesk Service started successfully")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down Helpdesk Service")
    await close_database()
    logger.info("Helpdesk Service shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Helpdesk Mini API",
    description="""
    ## Ticket Tracking Helpdesk

    Users open tickets; agents and admins move them through
    `OPEN → IN_PROGRESS → CLOSED` and assign them.

    ---

    ### 🎫 Tickets

    - `POST /api/tickets` - Open a ticket (any authenticated user)
    - `GET /api/tickets` - List tickets (`limit`, `offset`, `status`, `q`)
    - `GET /api/tickets/{id}` - Ticket detail with comments and timeline
    - `POST /api/tickets/{id}/comments` - Add a comment
    - `PATCH /api/tickets/{id}` - Change status / agent (AGENT or ADMIN)

    Every update must carry the `version` the client last read. A stale
    version is rejected with **409 Conflict**; refresh and try again.

    ---

    ### ⏱️ SLA

    | Priority | Resolve within |
    |----------|----------------|
    | HIGH     | 24 hours       |
    | MEDIUM   | 72 hours       |
    | LOW      | 120 hours      |

    `isBreached` is computed on every read; closed tickets are never breached.

    ---

    ### 🔐 Auth

    - `POST /api/auth/register` - Create a USER account
    - `POST /api/auth/login` - Exchange credentials for a bearer token

    ---
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# === CORS Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# === Custom Middleware (from shared) ===
# Added last runs first: the correlation id must exist before request logging
app.add_middleware(LoggingMiddleware)
app.add_middleware(CorrelationIDMiddleware)

app.add_exception_handler(ApplicationException, application_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# === Include Module Routers ===
app.include_router(auth_router)
app.include_router(tickets_router)


# === Health Check Endpoint ===

@app.get("/health", tags=["Health"], responses={
    200: {
        "description": "Service is healthy",
        "content": {
            "application/json": {
                "example": {
                    "status": "healthy",
                    "version": "1.0.0",
                    "environment": "development"
                }
            }
        }
    }
})
async def health_check():
    """Health check endpoint for load balancers and orchestrators."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "architecture": "Clean Architecture / Modular Monolith",
        "docs": "/docs",
        "health": "/health",
        "modules": {
            "auth": {
                "prefix": "/api/auth",
                "endpoints": [
                    "POST /api/auth/register - Register a user",
                    "POST /api/auth/login - Log in"
                ]
            },
            "tickets": {
                "prefix": "/api/tickets",
                "endpoints": [
                    "POST /api/tickets - Create ticket",
                    "GET /api/tickets - List tickets",
                    "GET /api/tickets/{id} - Ticket detail",
                    "POST /api/tickets/{id}/comments - Add comment",
                    "PATCH /api/tickets/{id} - Update status/agent"
                ]
            }
        }
    }


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "helpdesk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level="info"
    )
