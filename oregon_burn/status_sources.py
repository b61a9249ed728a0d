"""Status source registry for Oregon fire districts.

This module defines, in ONE place, where each district's burn status comes
from. Each status source includes:
- Metadata (id, name, description)
- Kind, which selects the extraction strategy ("advisory" or "restriction")
- URL of the page to scrape

Districts without an explicit route use the regional smoke management
advisory. Adding a district with its own source is a data change here.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from oregon_burn.config import BurnConfig
from oregon_burn.constants.status import SUTHERLIN_DISTRICT

ADVISORY = "advisory"
RESTRICTION = "restriction"

DEFAULT_SOURCE_ID = "willamette_valley_advisory"


@dataclass(frozen=True)
class StatusSource:
    """Where and how to read the burn status for a district."""

    id: str
    name: str
    kind: str  # advisory, restriction
    url: str
    description: str = ""


def default_sources(config: Optional[BurnConfig] = None) -> Dict[str, StatusSource]:
    """Status sources keyed by id, with URLs taken from ``config``."""
    config = config or BurnConfig()
    return {
        DEFAULT_SOURCE_ID: StatusSource(
            id=DEFAULT_SOURCE_ID,
            name="Willamette Valley Burn Advisory",
            kind=ADVISORY,
            url=config.advisory_url,
            description="Daily agricultural and backyard burn windows from smoke management",
        ),
        "dfpa_restriction": StatusSource(
            id="dfpa_restriction",
            name="DFPA Public Use Restriction Level",
            kind=RESTRICTION,
            url=config.restriction_url,
            description="Douglas Forest Protective Association fire danger level",
        ),
    }


# District name -> status source id
DISTRICT_ROUTES: Dict[str, str] = {
    SUTHERLIN_DISTRICT: "dfpa_restriction",
}


@dataclass
class StatusRouter:
    """Maps district names to status sources.

    District names are matched case-insensitively, since the district
    dataset and other lists spell names with different capitalisation.

    Examples:
        >>> router = StatusRouter.from_config()
        >>> router.source_for("SUTHERLIN FD").kind
        'restriction'
        >>> router.source_for("Eugene Springfield Fire").kind
        'advisory'
    """

    sources: Dict[str, StatusSource]
    routes: Dict[str, str] = field(default_factory=dict)
    default_source_id: str = DEFAULT_SOURCE_ID

    def __post_init__(self):
        unknown = set(self.routes.values()) - set(self.sources)
        if self.default_source_id not in self.sources:
            unknown.add(self.default_source_id)
        if unknown:
            raise ValueError(f"Routes reference unknown status sources: {sorted(unknown)}")
        self._routes = {name.casefold(): source_id for name, source_id in self.routes.items()}

    @classmethod
    def from_config(cls, config: Optional[BurnConfig] = None) -> "StatusRouter":
        return cls(sources=default_sources(config), routes=dict(DISTRICT_ROUTES))

    @property
    def default(self) -> StatusSource:
        return self.sources[self.default_source_id]

    def source_for(self, district_name: Optional[str]) -> StatusSource:
        """Status source for a district, falling back to the default source."""
        if not district_name:
            return self.default
        source_id = self._routes.get(district_name.casefold(), self.default_source_id)
        return self.sources[source_id]
