"""HTTP routers for lines, stations, incidents and analytics."""

from . import analytics, incidents, lines, stations

__all__ = ["analytics", "incidents", "lines", "stations"]
