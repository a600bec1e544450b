"""Validation, aggregation and the service facade."""

from .aggregation import AggregationEngine, BreakdownScope
from .seed import REFERENCE_NETWORK, seed_reference_network
from .transit_service import TransitService

__all__ = [
    "AggregationEngine",
    "BreakdownScope",
    "REFERENCE_NETWORK",
    "seed_reference_network",
    "TransitService",
]
