"""Configuration for Oregon burn status sources.

This module provides the configuration dataclass for the upstream web pages,
request headers, and reference-data conventions used by the library.
"""

from dataclasses import dataclass
from typing import Optional

from oregon_burn.constants.data_sources import (
    DATA_SOURCE_URLS,
    DEFAULT_REFERER,
    DEFAULT_USER_AGENT,
)


@dataclass
class BurnConfig:
    """Configuration for burn status lookups.

    Attributes:
        advisory_url: Regional smoke management burn advisory page
        restriction_url: Douglas Forest Protective Association home page
        user_agent: User-Agent header (the advisory site rejects default agents)
        referer: Referer header sent with advisory requests
        request_timeout: Total request timeout in seconds (default: 120)
        rate_limit: Maximum requests per minute per client (default: 60)
        district_name_property: GeoJSON property holding the district name
        timezone: Time zone used to decide what "today" is
        geocoder_url: Nominatim search endpoint for manual addresses
        geocoder_email: Optional contact email sent to Nominatim

    Examples:
        >>> config = BurnConfig()
        >>> config.request_timeout
        120.0

        >>> config = BurnConfig(timezone="America/Boise", rate_limit=10)
        >>> config.rate_limit
        10
    """

    advisory_url: str = DATA_SOURCE_URLS["smoke_management_burn"]
    restriction_url: str = DATA_SOURCE_URLS["dfpa_home"]
    user_agent: str = DEFAULT_USER_AGENT
    referer: str = DEFAULT_REFERER
    request_timeout: float = 120.0  # the advisory site is slow
    rate_limit: int = 60  # requests per minute
    district_name_property: str = "Agency_Name"
    timezone: str = "America/Los_Angeles"
    geocoder_url: str = DATA_SOURCE_URLS["nominatim_search"]
    geocoder_email: Optional[str] = None
