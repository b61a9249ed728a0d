"""Address geocoding for manually entered locations.

Resolves a free-text address to a coordinate with the OpenStreetMap
Nominatim search API. Nominatim's usage policy requires an identifying
user agent and at most one request per second.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from oregon_burn.config import BurnConfig
from oregon_burn.models.district import Coordinate
from oregon_burn.sources.base import BaseClient, DataSourceError

logger = logging.getLogger(__name__)

GEOCODER_USER_AGENT = "oregon-burn/0.1 (rural open burning information)"


class GeocodingError(Exception):
    """Raised when an address lookup fails (as opposed to finding nothing)."""

    pass


class Geocoder(ABC):
    """Resolves free-text addresses to coordinates."""

    @abstractmethod
    async def geocode(self, address: str) -> Optional[Coordinate]:
        """Return the best match for ``address``, or None if nothing matched.

        Raises:
            GeocodingError: If the lookup itself failed
        """
        pass


class NominatimGeocoder(Geocoder, BaseClient):
    """Geocoder backed by OpenStreetMap Nominatim.

    Example:
        >>> geocoder = NominatimGeocoder()
        >>> point = await geocoder.geocode("Sutherlin, OR")
        >>> round(point.latitude, 1)
        43.4
    """

    def __init__(self, config: Optional[BurnConfig] = None, country: str = "us"):
        """Initialize Nominatim geocoder.

        Args:
            config: Geocoder URL and contact email (default BurnConfig())
            country: ISO country code restricting results (default "us")
        """
        self.config = config or BurnConfig()
        self.country = country
        BaseClient.__init__(
            self,
            rate_limit=60,  # Nominatim allows one request per second
            timeout=30.0,
            headers={"User-Agent": GEOCODER_USER_AGENT},
        )

    async def geocode(self, address: str) -> Optional[Coordinate]:
        params = {
            "q": address,
            "format": "jsonv2",
            "limit": 1,
            "countrycodes": self.country,
        }
        if self.config.geocoder_email:
            params["email"] = self.config.geocoder_email

        logger.info(f"Geocoding address: {address[:60]}")

        try:
            content = await self._get_text(self.config.geocoder_url, params=params)
            results = json.loads(content)
        except DataSourceError as e:
            raise GeocodingError(str(e)) from e
        except json.JSONDecodeError as e:
            raise GeocodingError(f"Invalid geocoder response: {e}") from e

        if not results:
            logger.warning(f"No geocoding results for: {address}")
            return None

        try:
            top = results[0]
            point = Coordinate(latitude=float(top["lat"]), longitude=float(top["lon"]))
        except (KeyError, IndexError, TypeError, ValueError, PydanticValidationError) as e:
            raise GeocodingError(f"Malformed geocoder result: {e}") from e

        logger.info(
            f"Geocoded to Lat: {point.latitude}, Lon: {point.longitude} "
            f"({top.get('display_name', '')})"
        )
        return point

    async def fetch(self, address: str) -> Optional[Coordinate]:
        """Geocode an address (implements BaseClient.fetch)."""
        return await self.geocode(address)
