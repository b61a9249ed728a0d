"""Pydantic models for burn advisories and restriction levels."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from oregon_burn.constants.status import NO_BURNING_TODAY, NOT_AVAILABLE


class UrgencyTier(str, Enum):
    """Display urgency for a public use restriction level."""

    HIGHEST = "highest"
    ELEVATED = "elevated"
    CAUTION = "caution"
    NORMAL = "normal"
    UNKNOWN = "unknown"


_TIERS_BY_LEVEL = {
    "EXTREME": UrgencyTier.HIGHEST,
    "HIGH": UrgencyTier.ELEVATED,
    "MODERATE": UrgencyTier.CAUTION,
    "LOW": UrgencyTier.NORMAL,
}


def urgency_tier(level: Optional[str]) -> UrgencyTier:
    """Map restriction level text to an urgency tier (case-insensitive).

    Examples:
        >>> urgency_tier("high")
        <UrgencyTier.ELEVATED: 'elevated'>
        >>> urgency_tier("N/A")
        <UrgencyTier.UNKNOWN: 'unknown'>
    """
    if not level:
        return UrgencyTier.UNKNOWN
    return _TIERS_BY_LEVEL.get(level.strip().upper(), UrgencyTier.UNKNOWN)


def _is_permitted(window: str) -> bool:
    return NOT_AVAILABLE not in window and NO_BURNING_TODAY not in window


class BurnAdvisory(BaseModel):
    """Today's open burning windows from the smoke management announcement."""

    agricultural: str = Field(..., description="Agricultural burn window")
    backyard: str = Field(
        ..., description="Backyard burn window inside special control areas"
    )
    error_message: Optional[str] = Field(
        None, description="Why extraction failed, if it did"
    )

    class Config:
        """Pydantic config."""

        json_schema_extra = {
            "example": {
                "agricultural": "8:00 a.m. to 2:00 p.m.",
                "backyard": "No burning permitted today",
            }
        }

    @classmethod
    def unavailable(cls, error_message: Optional[str] = None) -> "BurnAdvisory":
        """Advisory with both windows marked not available."""
        return cls(
            agricultural=NOT_AVAILABLE,
            backyard=NOT_AVAILABLE,
            error_message=error_message,
        )

    @property
    def agricultural_permitted(self) -> bool:
        return _is_permitted(self.agricultural)

    @property
    def backyard_permitted(self) -> bool:
        return _is_permitted(self.backyard)


class RestrictionLevel(BaseModel):
    """Public use restriction level scraped from the DFPA site."""

    text: str = Field(..., description="Trimmed level text, N/A, or Error")
    error_message: Optional[str] = Field(
        None, description="Why the level could not be read, if it could not"
    )

    @property
    def tier(self) -> UrgencyTier:
        return urgency_tier(self.text)
