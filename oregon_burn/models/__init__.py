"""Data models for Oregon burn status data."""

from oregon_burn.models.district import ContactInfo, Coordinate, DistrictPolygon
from oregon_burn.models.resolution import (
    LocationMode,
    ResolutionResult,
    ResolutionState,
)
from oregon_burn.models.status import (
    BurnAdvisory,
    RestrictionLevel,
    UrgencyTier,
    urgency_tier,
)

__all__ = [
    "BurnAdvisory",
    "ContactInfo",
    "Coordinate",
    "DistrictPolygon",
    "LocationMode",
    "ResolutionResult",
    "ResolutionState",
    "RestrictionLevel",
    "UrgencyTier",
    "urgency_tier",
]
