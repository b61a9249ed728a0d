"""Constants for Oregon burn status data."""

from oregon_burn.constants.data_sources import (
    DATA_SOURCE_URLS,
    DEFAULT_REFERER,
    DEFAULT_USER_AGENT,
)
from oregon_burn.constants.status import (
    ADDRESS_NOT_FOUND,
    ENTER_ADDRESS,
    ERROR,
    LOADING,
    NO_BURNING_TODAY,
    NO_DISTRICT_FOUND,
    NOT_AVAILABLE,
    SUTHERLIN_DISTRICT,
    WAITING_FOR_LOCATION,
)

__all__ = [
    "DATA_SOURCE_URLS",
    "DEFAULT_REFERER",
    "DEFAULT_USER_AGENT",
    "ADDRESS_NOT_FOUND",
    "ENTER_ADDRESS",
    "ERROR",
    "LOADING",
    "NO_BURNING_TODAY",
    "NO_DISTRICT_FOUND",
    "NOT_AVAILABLE",
    "SUTHERLIN_DISTRICT",
    "WAITING_FOR_LOCATION",
]
