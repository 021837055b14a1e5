"""
Main FastAPI application entry point.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from oficina.config import get_settings
from oficina.database import async_session_maker, init_db
from oficina.errors import setup_exception_handlers
from oficina.logging_config import get_logger, setup_logging
from oficina.auth import seed_admin
from oficina.routers import (
    appointments,
    auth,
    catalog,
    clients,
    dashboard,
    financial,
    parts,
    service_orders,
    settings as settings_router,
    vehicles,
)

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan events for the application.
    Handles startup and shutdown events.
    """
    # Startup
    setup_logging()
    logger.info(f"Starting {settings.app_name} {settings.app_version}")
    await init_db()
    logger.info("Database initialized")
    if settings.seed_admin:
        async with async_session_maker() as session:
            await seed_admin(session)
    logger.info(f"API available at {settings.api_v1_prefix}, docs at /docs")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    ## Oficina Manager API

    Back office for an auto-repair shop.

    ### Pages:
    * **Dashboard**: today's services, revenue and upcoming appointments
    * **Agenda**: appointment scheduling by day and week
    * **Service orders**: create, bill and track work orders (OS)
    * **History**: search past service orders
    * **Financial**: income and expense ledger
    * **Parts**: inventory with low-stock alerts
    * **Settings**: shop profile and users
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

# Include routers
app.include_router(auth.router, prefix=settings.api_v1_prefix)
app.include_router(dashboard.router, prefix=settings.api_v1_prefix)
app.include_router(clients.router, prefix=settings.api_v1_prefix)
app.include_router(vehicles.router, prefix=settings.api_v1_prefix)
app.include_router(appointments.router, prefix=settings.api_v1_prefix)
app.include_router(service_orders.router, prefix=settings.api_v1_prefix)
app.include_router(catalog.router, prefix=settings.api_v1_prefix)
app.include_router(parts.router, prefix=settings.api_v1_prefix)
app.include_router(financial.router, prefix=settings.api_v1_prefix)
app.include_router(settings_router.router, prefix=settings.api_v1_prefix)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.app_name} API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    try:
        async with async_session_maker() as session:
            await session.execute(text("SELECT 1"))
        database = "connected"
    except Exception as exc:
        logger.error(f"Health check database failure: {exc}")
        database = "disconnected"
    return {
        "status": "healthy" if database == "connected" else "unhealthy",
        "database": database,
        "version": settings.app_version,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "oficina.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
