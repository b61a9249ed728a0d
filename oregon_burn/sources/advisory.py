"""Willamette Valley smoke management burn advisory client.

The smoke management site publishes a daily "Open Burn Announcement" as a
``<pre>`` block whose first line is a bold header naming the date. The burn
windows are free text inside that block, so they are pulled out with
phrase-anchored regular expressions.
"""

import logging
import re
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from bs4 import BeautifulSoup

from oregon_burn.config import BurnConfig
from oregon_burn.constants.status import NO_BURNING_TODAY
from oregon_burn.models.status import BurnAdvisory
from oregon_burn.sources.base import (
    AdvisoryExtractor,
    BaseClient,
    DataSourceError,
    DecodeError,
    FormatDriftError,
    HTTPStatusError,
    NetworkError,
    ParseError,
)

logger = logging.getLogger(__name__)

HEADER_PREFIX = "Open Burn Announcement for"

# English names regardless of the process locale
WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

TIME_RANGE = r"\d{1,2}:\d{2}\s*[ap]\.m\.\s*to\s*\d{1,2}:\d{2}\s*[ap]\.m\."


def _phrase(text: str) -> str:
    """Regex for a phrase that tolerates line wrapping between words."""
    return r"\s+".join(re.escape(word) for word in text.split())


AGRICULTURAL_PATTERN = re.compile(
    r"Agricultural burning:\s*\*?\s*"
    + _phrase(
        "When allowed locally and based on air quality considerations "
        "recommend agricultural burning be limited to the period from"
    )
    + rf"\s*({TIME_RANGE}\.?)",
    re.IGNORECASE | re.DOTALL,
)

BACKYARD_PATTERN = re.compile(
    r"Backyard burning inside special control areas:\s*\*?\s*"
    + _phrase(
        "When allowed locally and based on air quality considerations "
        "backyard burning is allowed from"
    )
    + rf"\s*({TIME_RANGE}\.?)",
    re.IGNORECASE | re.DOTALL,
)


def ordinal_suffix(day: int) -> str:
    """Ordinal suffix used by the announcement header.

    11, 12 and 13 fall through to "th".

    Examples:
        >>> [f"{d}{ordinal_suffix(d)}" for d in (1, 2, 3, 4, 11, 21, 23)]
        ['1st', '2nd', '3rd', '4th', '11th', '21st', '23rd']
    """
    if day in (1, 21, 31):
        return "st"
    if day in (2, 22):
        return "nd"
    if day in (3, 23):
        return "rd"
    return "th"


def announcement_header(day: date) -> str:
    """Header text the site uses for the announcement of ``day``.

    Examples:
        >>> announcement_header(date(2025, 6, 3))
        'Open Burn Announcement for Tuesday, June 3rd, 2025'
    """
    return (
        f"{HEADER_PREFIX} {WEEKDAYS[day.weekday()]}, {MONTHS[day.month - 1]} "
        f"{day.day}{ordinal_suffix(day.day)}, {day.year}"
    )


def normalize_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def extract_burn_time(text: str, pattern: re.Pattern) -> Optional[str]:
    """Return the time range captured by ``pattern``, or None.

    A sentence period after the final "a.m."/"p.m." is dropped; the
    abbreviation's own period is kept.
    """
    match = pattern.search(text)
    if not match:
        return None

    time_range = match.group(1).strip()
    if time_range.endswith(".."):
        time_range = time_range[:-1]
    return time_range


class SmokeManagementExtractor(AdvisoryExtractor):
    """Extracts burn windows from the smkmgt.com burn announcement page."""

    def find_announcement(self, document: str, day: date) -> str:
        """Return the text of the ``<pre>`` block announcing ``day``.

        Raises:
            ParseError: If the document cannot be parsed
            FormatDriftError: If no bold header for ``day`` sits in a ``<pre>``
        """
        target = announcement_header(day)
        logger.debug(f"Looking for announcement header: '{target}'")

        try:
            soup = BeautifulSoup(document, "html.parser")
        except Exception as e:
            raise ParseError(str(e)) from e

        bold_texts = []
        actual_header = None

        for bold in soup.find_all("b"):
            text = normalize_whitespace(bold.get_text())
            bold_texts.append(text)

            if text == target:
                actual_header = text
                parent = bold.parent
                if parent is not None and parent.name == "pre":
                    return parent.get_text()
            elif actual_header is None and text.startswith(HEADER_PREFIX):
                actual_header = text

        logger.debug(f"Bold tags found on page: {bold_texts or '(none)'}")
        raise FormatDriftError(
            f"Today's burn announcement not found. Expected: '{target}'. "
            f"Actual header from site: '{actual_header or 'None'}'."
        )

    def extract_advisory(self, document: str, day: date) -> BurnAdvisory:
        """Extract agricultural and backyard burn windows for ``day``.

        Each window is extracted independently; a window with no time range
        is reported as no burning permitted. A missing announcement yields
        N/A for both windows and an error message naming the expected header.
        """
        try:
            announcement = self.find_announcement(document, day)
        except FormatDriftError as e:
            logger.warning(str(e))
            return BurnAdvisory.unavailable(str(e))

        agricultural = extract_burn_time(announcement, AGRICULTURAL_PATTERN)
        backyard = extract_burn_time(announcement, BACKYARD_PATTERN)

        return BurnAdvisory(
            agricultural=agricultural or NO_BURNING_TODAY,
            backyard=backyard or NO_BURNING_TODAY,
        )


class BurnAdvisoryClient(BaseClient):
    """Client for the regional smoke management burn advisory.

    Source: https://smkmgt.com/burn.php

    The site is slow and refuses requests without a browser user agent and
    referer, so both headers are always sent and the timeout is generous.
    """

    def __init__(
        self,
        config: Optional[BurnConfig] = None,
        extractor: Optional[AdvisoryExtractor] = None,
    ):
        """Initialize burn advisory client.

        Args:
            config: Source URLs, headers, and timeout (default BurnConfig())
            extractor: Advisory extraction strategy (default SmokeManagementExtractor)
        """
        self.config = config or BurnConfig()
        self.extractor = extractor or SmokeManagementExtractor()
        super().__init__(
            rate_limit=self.config.rate_limit,
            timeout=self.config.request_timeout,
            headers={
                "User-Agent": self.config.user_agent,
                "Referer": self.config.referer,
            },
        )

    def today(self) -> date:
        """Current calendar date in the configured time zone."""
        return datetime.now(ZoneInfo(self.config.timezone)).date()

    async def fetch_advisory(
        self, day: Optional[date] = None, url: Optional[str] = None
    ) -> BurnAdvisory:
        """Fetch and extract the burn advisory for ``day`` (default today).

        Never raises for source problems; failures are reported through
        ``BurnAdvisory.error_message`` with both windows set to N/A.
        """
        day = day or self.today()
        url = url or self.config.advisory_url
        logger.info(f"Fetching burn advisory for {day.isoformat()} from {url}")

        try:
            document = await self._get_text(url)
        except NetworkError as e:
            return BurnAdvisory.unavailable(f"Network error: {e}")
        except HTTPStatusError as e:
            return BurnAdvisory.unavailable(
                f"HTTP Error: Status code {e.status}. Check URL or website status. "
                f"Response: {e.body_preview}..."
            )
        except DecodeError:
            return BurnAdvisory.unavailable(
                "Could not decode HTML content for burn advisory."
            )
        except DataSourceError as e:
            return BurnAdvisory.unavailable(f"Error fetching burn advisory: {e}")

        try:
            advisory = self.extractor.extract_advisory(document, day)
        except ParseError as e:
            logger.error(f"HTML parsing error for burn advisory: {e}")
            return BurnAdvisory.unavailable(f"Parsing error: {e}")
        except DataSourceError as e:
            logger.error(f"Error extracting burn advisory: {e}")
            return BurnAdvisory.unavailable(str(e))

        logger.info(
            f"Burn advisory: agricultural={advisory.agricultural!r}, "
            f"backyard={advisory.backyard!r}"
        )
        return advisory

    async def fetch(self, day: Optional[date] = None, **kwargs) -> BurnAdvisory:
        """Fetch the burn advisory (implements BaseClient.fetch)."""
        return await self.fetch_advisory(day, **kwargs)
