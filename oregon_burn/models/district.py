"""Pydantic models for fire district reference data."""

import re
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field, field_validator


class Coordinate(BaseModel):
    """WGS84 geographic coordinate in decimal degrees."""

    latitude: float = Field(..., description="Latitude", ge=-90, le=90)
    longitude: float = Field(..., description="Longitude", ge=-180, le=180)

    class Config:
        """Pydantic config."""

        frozen = True
        json_schema_extra = {
            "example": {"latitude": 43.3904, "longitude": -123.3126}
        }

    @classmethod
    def from_lon_lat(cls, position: Sequence[float]) -> "Coordinate":
        """Build a coordinate from a GeoJSON ``[longitude, latitude]`` position."""
        return cls(latitude=position[1], longitude=position[0])


class DistrictPolygon(BaseModel):
    """Boundary of one structural fire district.

    Multi-polygons are flattened into a single list of rings; every ring is an
    independent containment test (holes are not subtracted).
    """

    name: str = Field(..., description="District name", min_length=1)
    geometry_type: str = Field(..., description="Polygon or MultiPolygon")
    rings: List[List[Coordinate]] = Field(
        default_factory=list, description="Rings in load order"
    )

    class Config:
        """Pydantic config."""

        frozen = True

    @field_validator("geometry_type")
    @classmethod
    def _check_geometry_type(cls, value: str) -> str:
        if value not in ("Polygon", "MultiPolygon"):
            raise ValueError(f"Unsupported geometry type: {value}")
        return value


class ContactInfo(BaseModel):
    """Burn line and office contacts for a fire district.

    Field aliases match the keys of the burn lines lookup file.
    """

    district_name: str = Field(..., alias="DistrictName", min_length=1)
    burn_line_phone: Optional[str] = Field(None, alias="BurnLinePhone")
    main_phone: Optional[str] = Field(None, alias="MainPhone")
    website: Optional[str] = Field(None, alias="Website")
    ofc_district: Optional[str] = Field(
        None, alias="OFCDistrict", description="Originating OFC district"
    )

    class Config:
        """Pydantic config."""

        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "DistrictName": "Sutherlin FD",
                "BurnLinePhone": "(541) 459-2212",
                "MainPhone": "(541) 459-2212",
                "Website": "https://www.ci.sutherlin.or.us/",
                "OFCDistrict": "Douglas",
            }
        }

    @property
    def has_contact_numbers(self) -> bool:
        """Whether either phone number is present."""
        return bool(self.burn_line_phone or self.main_phone)

    @staticmethod
    def dial_uri(phone: Optional[str]) -> Optional[str]:
        """Return a ``tel:`` URI for a display phone number, keeping digits only.

        Examples:
            >>> ContactInfo.dial_uri("(541) 459-2212")
            'tel:5414592212'
        """
        if not phone:
            return None
        digits = re.sub(r"\D", "", phone)
        return f"tel:{digits}" if digits else None
