"""Douglas Forest Protective Association restriction level client.

The DFPA home page shows the current public use restriction level as plain
text after a label, with no id or class of its own::

    <h2><span>Current Public Use Restriction Level:</span><br><span>HIGH</span></h2>

so the level is found by position relative to the label.
"""

import logging
from typing import Optional

from bs4 import BeautifulSoup

from oregon_burn.config import BurnConfig
from oregon_burn.constants.status import ERROR, NOT_AVAILABLE
from oregon_burn.models.status import RestrictionLevel, UrgencyTier, urgency_tier
from oregon_burn.sources.base import (
    BaseClient,
    DataSourceError,
    FormatDriftError,
    ParseError,
    RestrictionExtractor,
)

logger = logging.getLogger(__name__)

LEVEL_LABEL = "Current Public Use Restriction Level"

__all__ = [
    "DFPARestrictionExtractor",
    "RestrictionLevelClient",
    "UrgencyTier",
    "urgency_tier",
]


class DFPARestrictionExtractor(RestrictionExtractor):
    """Extracts the restriction level from the DFPA home page."""

    def find_level_text(self, document: str) -> str:
        """Walk heading, label span, line break, level span.

        Raises:
            ParseError: If the document cannot be parsed
            FormatDriftError: If any step of the path is missing
        """
        try:
            soup = BeautifulSoup(document, "html.parser")
        except Exception as e:
            raise ParseError(str(e)) from e

        for heading in soup.find_all("h2"):
            if LEVEL_LABEL not in heading.get_text():
                continue

            label = next(
                (
                    span
                    for span in heading.find_all("span", recursive=False)
                    if LEVEL_LABEL in span.get_text()
                ),
                None,
            )
            if label is None:
                continue

            line_break = label.find_next_sibling("br")
            if line_break is None:
                continue

            level = line_break.find_next_sibling("span")
            if level is None:
                continue

            return level.get_text().strip()

        raise FormatDriftError("Could not find the fire danger level element")

    def extract_restriction_level(self, document: str) -> RestrictionLevel:
        """Return the trimmed level text, or N/A if the page changed shape."""
        try:
            text = self.find_level_text(document)
        except FormatDriftError as e:
            logger.warning(str(e))
            return RestrictionLevel(text=NOT_AVAILABLE, error_message=str(e))

        return RestrictionLevel(text=text or NOT_AVAILABLE)


class RestrictionLevelClient(BaseClient):
    """Client for the DFPA public use restriction level.

    Source: https://www.dfpa.net/
    """

    def __init__(
        self,
        config: Optional[BurnConfig] = None,
        extractor: Optional[RestrictionExtractor] = None,
    ):
        """Initialize restriction level client.

        Args:
            config: Source URLs and timeout (default BurnConfig())
            extractor: Restriction extraction strategy (default DFPARestrictionExtractor)
        """
        self.config = config or BurnConfig()
        self.extractor = extractor or DFPARestrictionExtractor()
        super().__init__(
            rate_limit=self.config.rate_limit,
            timeout=self.config.request_timeout,
        )

    async def fetch_restriction(self, url: Optional[str] = None) -> RestrictionLevel:
        """Fetch the current restriction level.

        Returns "Error" when the site is unreachable or unreadable, as distinct
        from "N/A" when the page loaded but the level could not be located.
        """
        url = url or self.config.restriction_url
        logger.info(f"Fetching public use restriction level from {url}")

        try:
            document = await self._get_text(url)
            level = self.extractor.extract_restriction_level(document)
        except DataSourceError as e:
            logger.error(f"Error fetching restriction level: {e}")
            return RestrictionLevel(
                text=ERROR, error_message=f"Error fetching restriction level: {e}"
            )

        logger.info(f"Restriction level: {level.text} ({level.tier.value})")
        return level

    async def fetch(self, **kwargs) -> RestrictionLevel:
        """Fetch the restriction level (implements BaseClient.fetch)."""
        return await self.fetch_restriction(**kwargs)
