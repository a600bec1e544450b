"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware

from .api import analytics, incidents, lines, stations
from .config import Settings
from .database import create_engine, init_db
from .errors import StoreError
from .logging_utils import configure_logging
from .repositories.sql import SqlIncidentRepository
from .services.seed import seed_reference_network
from .services.transit_service import TransitService


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application; the store is opened on startup and closed on shutdown."""
    settings = settings or Settings.from_env()
    configure_logging(settings, service_name="transit-analytics-api")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown events."""
        # Startup
        engine = create_engine(settings)
        try:
            await init_db(engine)
            repository = SqlIncidentRepository(engine)
            if settings.seed_reference_data:
                await seed_reference_network(repository)
            app.state.engine = engine
            app.state.service = TransitService(repository, settings)
            yield
        finally:
            # Shutdown
            await engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(lines.router, prefix="/api/lines", tags=["Lines"])
    app.include_router(stations.router, prefix="/api/stations", tags=["Stations"])
    app.include_router(incidents.router, prefix="/api/incidents", tags=["Incidents"])
    app.include_router(analytics.router, prefix="/api/analytics", tags=["Analytics"])

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "status": "operational",
            "docs": "/docs",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/ready")
    async def readiness_check(request: Request):
        """Readiness check: the store must answer a round trip."""
        try:
            await request.app.state.service.check_ready()
        except StoreError as exc:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=exc.message) from exc
        return {"status": "ready"}

    return app


if __name__ == "__main__":
    import uvicorn

    _settings = Settings.from_env()
    uvicorn.run(
        "transit_analytics.main:create_app",
        factory=True,
        host=_settings.host,
        port=_settings.port,
        reload=_settings.reload,
        log_level=_settings.log_level.lower(),
    )
