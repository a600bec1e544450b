"""FastAPI dependencies shared by the routers."""

from fastapi import Request

from ..services.transit_service import TransitService


def get_service(request: Request) -> TransitService:
    """Return the service instance created during application startup."""
    return request.app.state.service
