"""Base client and extraction interfaces for burn status sources."""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Dict, Optional

import aiohttp

from oregon_burn.models.status import BurnAdvisory, RestrictionLevel

logger = logging.getLogger(__name__)


class DataSourceError(Exception):
    """Custom exception for data source errors."""

    pass


class NetworkError(DataSourceError):
    """Transport failure: DNS, connect, read, or timeout."""

    pass


class HTTPStatusError(DataSourceError):
    """Server answered with a non-2xx status."""

    def __init__(self, status: int, body_preview: str = ""):
        self.status = status
        self.body_preview = body_preview
        super().__init__(f"HTTP {status}")


class DecodeError(DataSourceError):
    """Response body could not be decoded as text."""

    pass


class ParseError(DataSourceError):
    """Response text could not be parsed as an HTML document."""

    pass


class FormatDriftError(DataSourceError):
    """Document parsed, but an expected landmark is missing."""

    pass


class AdvisoryExtractor(ABC):
    """Site-specific extraction of the daily burn advisory."""

    @abstractmethod
    def extract_advisory(self, document: str, day: date) -> BurnAdvisory:
        """Extract the burn windows announced for ``day`` from an HTML document."""
        pass


class RestrictionExtractor(ABC):
    """Site-specific extraction of the public use restriction level."""

    @abstractmethod
    def extract_restriction_level(self, document: str) -> RestrictionLevel:
        """Extract the restriction level from an HTML document."""
        pass


class BaseClient(ABC):
    """Abstract base client with common functionality for all data sources.

    Provides:
    - Rate limiting
    - A single GET with distinct errors for each failure mode
    - Logging

    Failed requests are not retried; callers try again on their next refresh.
    """

    def __init__(
        self,
        rate_limit: int = 60,
        timeout: float = 120.0,
        headers: Optional[Dict[str, str]] = None,
    ):
        """Initialize base client.

        Args:
            rate_limit: Maximum requests per minute
            timeout: Total request timeout in seconds
            headers: Headers sent with every request
        """
        self.rate_limit = rate_limit
        self.timeout = timeout
        self.headers = dict(headers or {})
        self.last_request: Optional[datetime] = None

    async def _rate_limit_wait(self):
        """Implement rate limiting to avoid overwhelming upstream sites."""
        now = datetime.now()
        if self.last_request is not None:
            time_since_last = (now - self.last_request).total_seconds()
            min_interval = 60.0 / self.rate_limit

            if time_since_last < min_interval:
                wait_time = min_interval - time_since_last
                logger.debug(f"Rate limiting: waiting {wait_time:.2f}s")
                await asyncio.sleep(wait_time)

        self.last_request = datetime.now()

    async def _get_text(self, url: str, **kwargs) -> str:
        """GET a page and return its body decoded as UTF-8.

        Args:
            url: Request URL
            **kwargs: Additional arguments for the request

        Returns:
            Response body text

        Raises:
            NetworkError: On transport failure or timeout
            HTTPStatusError: On a non-2xx status
            DecodeError: If the body is not valid UTF-8
        """
        await self._rate_limit_wait()
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        try:
            async with aiohttp.ClientSession(headers=self.headers) as session:
                async with session.get(url, timeout=timeout, **kwargs) as response:
                    body = await response.read()
                    if not 200 <= response.status < 300:
                        preview = body.decode("utf-8", errors="replace")[:100]
                        logger.warning(
                            f"HTTP error {response.status} from {url}: {preview}..."
                        )
                        raise HTTPStatusError(response.status, preview)
        except aiohttp.ClientError as e:
            logger.warning(f"Request to {url} failed: {e}")
            raise NetworkError(str(e) or type(e).__name__) from e
        except asyncio.TimeoutError as e:
            logger.warning(f"Request to {url} timed out after {self.timeout}s")
            raise NetworkError(f"timed out after {self.timeout:g}s") from e

        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.warning(f"Could not decode response from {url}: {e}")
            raise DecodeError(str(e)) from e

    @abstractmethod
    async def fetch(self, *args, **kwargs) -> Any:
        """Fetch data from the source.

        This method must be implemented by subclasses.
        """
        pass
