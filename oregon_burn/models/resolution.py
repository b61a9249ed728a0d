"""Pydantic models for location resolution results."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from oregon_burn.models.district import ContactInfo, Coordinate
from oregon_burn.models.status import BurnAdvisory, RestrictionLevel


class ResolutionState(str, Enum):
    """Lifecycle of one resolution cycle."""

    IDLE = "idle"
    RESOLVING = "resolving"
    ADVISORY_FETCH = "advisory-fetch"
    RESTRICTION_FETCH = "restriction-fetch"
    SETTLED = "settled"


class LocationMode(str, Enum):
    """Which coordinate source is authoritative."""

    LIVE = "live"
    MANUAL = "manual"


class ResolutionResult(BaseModel):
    """Latest district and burn status published by the resolution service."""

    sequence: int = Field(0, description="Resolution cycle number", ge=0)
    state: ResolutionState = Field(default=ResolutionState.IDLE)
    location: Optional[Coordinate] = Field(None, description="Coordinate used")
    district_name: Optional[str] = Field(
        None, description="District name or a status message"
    )
    contact: Optional[ContactInfo] = Field(None, description="District contacts")
    advisory: Optional[BurnAdvisory] = Field(None, description="Burn advisory")
    restriction: Optional[RestrictionLevel] = Field(
        None, description="Restriction level"
    )
    error_message: Optional[str] = Field(
        None, description="Geocoding or resolution error for display"
    )
