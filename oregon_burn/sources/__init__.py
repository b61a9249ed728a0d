"""Web clients for Oregon burn status sources."""

from oregon_burn.sources.advisory import BurnAdvisoryClient, SmokeManagementExtractor
from oregon_burn.sources.base import (
    AdvisoryExtractor,
    BaseClient,
    DataSourceError,
    DecodeError,
    FormatDriftError,
    HTTPStatusError,
    NetworkError,
    ParseError,
    RestrictionExtractor,
)
from oregon_burn.sources.geocoding import Geocoder, GeocodingError, NominatimGeocoder
from oregon_burn.sources.restriction import (
    DFPARestrictionExtractor,
    RestrictionLevelClient,
)

__all__ = [
    "AdvisoryExtractor",
    "BaseClient",
    "BurnAdvisoryClient",
    "DataSourceError",
    "DecodeError",
    "DFPARestrictionExtractor",
    "FormatDriftError",
    "Geocoder",
    "GeocodingError",
    "HTTPStatusError",
    "NetworkError",
    "NominatimGeocoder",
    "ParseError",
    "RestrictionExtractor",
    "RestrictionLevelClient",
    "SmokeManagementExtractor",
]
