"""Oregon Burn Status Library

A Python library for finding the structural fire district that governs a
location in Oregon and whether open burning is allowed there today.

This library provides:
- Geofencing of coordinates against fire district polygons
- Burn line contact lookup per district
- A client for the Willamette Valley smoke management burn advisory
- A client for the DFPA public use restriction level
- Address geocoding for manually entered locations
- A resolution service that routes each district to its status source
- Data models for validation and display
- Configuration management
"""

__version__ = "0.1.0"

# Configuration
from oregon_burn.config import BurnConfig

# Constants
from oregon_burn.constants.data_sources import DATA_SOURCE_URLS

# District index
from oregon_burn.districts import DistrictIndex, DistrictMatch

# Data models
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

# Base classes
from oregon_burn.sources.base import DataSourceError

# Status source clients
from oregon_burn.sources.advisory import BurnAdvisoryClient
from oregon_burn.sources.geocoding import Geocoder, GeocodingError, NominatimGeocoder
from oregon_burn.sources.restriction import RestrictionLevelClient

# Orchestration
from oregon_burn.service import LocationResolutionService
from oregon_burn.status_sources import StatusRouter, StatusSource

# Utilities
from oregon_burn.utils import (
    distance_point_to_polygon,
    haversine_m,
    point_in_polygon,
)

__all__ = [
    # Version
    "__version__",
    # Configuration
    "BurnConfig",
    # Constants
    "DATA_SOURCE_URLS",
    # District index
    "DistrictIndex",
    "DistrictMatch",
    # Base classes
    "DataSourceError",
    # Status source clients
    "BurnAdvisoryClient",
    "Geocoder",
    "GeocodingError",
    "NominatimGeocoder",
    "RestrictionLevelClient",
    # Orchestration
    "LocationResolutionService",
    "StatusRouter",
    "StatusSource",
    # Data models
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
    # Utilities
    "distance_point_to_polygon",
    "haversine_m",
    "point_in_polygon",
]
