"""Fire district index: polygon geofencing and contact lookup.

Loads Oregon structural fire district boundaries from a GeoJSON feature
collection and the burn lines contact table, then resolves coordinates to a
district by containment with a nearest-boundary fallback.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from shapely.errors import GEOSException
from shapely.geometry import shape

from oregon_burn.models.district import ContactInfo, Coordinate, DistrictPolygon
from oregon_burn.utils.geometry import distance_point_to_polygon, point_in_polygon
from oregon_burn.validation import (
    ValidationError,
    geometry_problem,
    validate_contact_records,
    validate_feature_collection,
    validate_json_file,
)

logger = logging.getLogger(__name__)

Source = Union[str, Path, Dict[str, Any], List[Any], None]

SUPPORTED_GEOMETRY_TYPES = ("Polygon", "MultiPolygon")


@dataclass(frozen=True)
class DistrictMatch:
    """Outcome of resolving a coordinate to a district.

    Attributes:
        name: District name, or None when the index is empty
        contact: Contact info for the district, if the lookup has it
        matched_by: "contains" or "nearest", None when nothing matched
    """

    name: Optional[str] = None
    contact: Optional[ContactInfo] = None
    matched_by: Optional[str] = None


def _read_source(source: Source) -> Any:
    if isinstance(source, (str, Path)):
        return validate_json_file(Path(source))
    return source


def _rings_from_geometry(geometry: Dict[str, Any]) -> List[List[Coordinate]]:
    """Parse a Polygon/MultiPolygon into lat/lon rings, flattening parts."""
    geom = shape(geometry)
    problem = geometry_problem(geom)
    if problem == "empty geometry":
        raise ValueError(problem)
    if problem:
        logger.debug(f"Keeping invalid geometry ({problem})")

    polygons = geom.geoms if geom.geom_type == "MultiPolygon" else [geom]
    rings = []
    for polygon in polygons:
        for ring in [polygon.exterior, *polygon.interiors]:
            rings.append([Coordinate.from_lon_lat(xy) for xy in ring.coords])
    return rings


def parse_district_features(
    features: List[Dict[str, Any]],
    name_property: str = "Agency_Name",
) -> List[DistrictPolygon]:
    """Convert GeoJSON features into district polygons, skipping bad features.

    Args:
        features: GeoJSON feature dictionaries
        name_property: Property holding the district name

    Returns:
        District polygons in feature order
    """
    districts = []

    for idx, feature in enumerate(features):
        properties = feature.get("properties") if isinstance(feature, dict) else None
        geometry = feature.get("geometry") if isinstance(feature, dict) else None
        name = properties.get(name_property) if isinstance(properties, dict) else None

        if not isinstance(name, str) or not name or not isinstance(geometry, dict):
            logger.warning(
                f"Skipping feature {idx} without '{name_property}' string property or invalid format"
            )
            continue

        geometry_type = geometry.get("type")
        if geometry_type not in SUPPORTED_GEOMETRY_TYPES:
            logger.warning(
                f"Skipping district {name}: unsupported geometry type {geometry_type}"
            )
            continue

        try:
            rings = _rings_from_geometry(geometry)
            districts.append(
                DistrictPolygon(name=name, geometry_type=geometry_type, rings=rings)
            )
        except (
            GEOSException,
            PydanticValidationError,
            ValueError,
            TypeError,
            IndexError,
            KeyError,
            AttributeError,
        ) as e:
            logger.warning(f"Failed to normalize coordinates for district {name}: {e}")

    return districts


def parse_contact_records(records: List[Any]) -> Dict[str, ContactInfo]:
    """Build the district name to contact lookup, skipping unnamed records."""
    lookup: Dict[str, ContactInfo] = {}

    for idx, record in enumerate(records):
        if not isinstance(record, dict) or not record.get("DistrictName"):
            logger.warning(
                f"Skipping contact record {idx} with missing or empty DistrictName"
            )
            continue

        try:
            contact = ContactInfo.model_validate(record)
        except PydanticValidationError as e:
            logger.warning(f"Skipping invalid contact record {idx}: {e}")
            continue

        if contact.district_name in lookup:
            logger.warning(
                f"Duplicate contact record for {contact.district_name}; keeping the first"
            )
            continue
        lookup[contact.district_name] = contact

    return lookup


class DistrictIndex:
    """Fire district polygons plus the burn lines contact lookup.

    The index is built once and never mutated. Resolution is a linear scan,
    which is cheap for the few hundred districts in Oregon.

    Example:
        >>> index = DistrictIndex.load(
        ...     "Oregon Structural Fire Districts.geojson", "burn_lines_lookup.json"
        ... )
        >>> match = index.resolve(Coordinate(latitude=43.39, longitude=-123.31))
        >>> match.name
        'Sutherlin FD'
    """

    def __init__(
        self,
        districts: Optional[List[DistrictPolygon]] = None,
        contacts: Optional[Dict[str, ContactInfo]] = None,
    ):
        self._districts = list(districts or [])
        self._contacts = dict(contacts or {})

    @classmethod
    def load(
        cls,
        polygon_source: Source,
        contact_source: Source = None,
        name_property: str = "Agency_Name",
    ) -> "DistrictIndex":
        """Load districts and contacts; never raises for bad reference data.

        Args:
            polygon_source: Path to a GeoJSON FeatureCollection, or the parsed dict
            contact_source: Path to the burn lines lookup JSON, or the parsed list
            name_property: GeoJSON property holding the district name

        Returns:
            DistrictIndex, possibly partial or empty
        """
        districts: List[DistrictPolygon] = []
        contacts: Dict[str, ContactInfo] = {}

        if polygon_source is not None:
            try:
                features = validate_feature_collection(_read_source(polygon_source))
                districts = parse_district_features(features, name_property)
                skipped = len(features) - len(districts)
                logger.info(
                    f"Loaded {len(districts)} fire district polygons"
                    + (f" ({skipped} skipped)" if skipped else "")
                )
            except ValidationError as e:
                logger.error(f"Error loading fire district GeoJSON: {e}")

        if contact_source is not None:
            try:
                records = validate_contact_records(_read_source(contact_source))
                contacts = parse_contact_records(records)
                logger.info(f"Loaded {len(contacts)} burn line contacts")
            except ValidationError as e:
                logger.error(f"Error loading burn lines lookup: {e}")

        return cls(districts, contacts)

    def __len__(self) -> int:
        return len(self._districts)

    @property
    def districts(self) -> List[DistrictPolygon]:
        return list(self._districts)

    @property
    def contacts(self) -> Dict[str, ContactInfo]:
        return dict(self._contacts)

    def contact_for(self, name: Optional[str]) -> Optional[ContactInfo]:
        """Exact, case-sensitive contact lookup."""
        if name is None:
            return None
        return self._contacts.get(name)

    def find_containing(self, point: Coordinate) -> Optional[DistrictPolygon]:
        """First district in load order whose rings contain the point."""
        for district in self._districts:
            if point_in_polygon(point, district):
                return district
        return None

    def find_nearest(self, point: Coordinate) -> Optional[DistrictPolygon]:
        """District whose boundary is closest to the point; ties keep load order."""
        nearest = None
        min_distance = float("inf")

        for district in self._districts:
            distance = distance_point_to_polygon(point, district)
            if distance < min_distance:
                min_distance = distance
                nearest = district

        if nearest is not None:
            logger.debug(f"Nearest district {nearest.name} at {min_distance:.0f} m")
        return nearest

    def resolve(self, point: Coordinate) -> DistrictMatch:
        """Resolve a coordinate to a district and its contact info.

        Containment is tried first; if no polygon contains the point, the
        district with the nearest boundary is returned.
        """
        district = self.find_containing(point)
        matched_by = "contains"

        if district is None:
            logger.info(
                "No district found at exact location. Searching for nearest district..."
            )
            district = self.find_nearest(point)
            matched_by = "nearest"

        if district is None:
            logger.warning(
                f"No district found for location {point.latitude}, {point.longitude}"
            )
            return DistrictMatch()

        contact = self.contact_for(district.name)
        if contact is None:
            logger.info(f"No contact info found for district: {district.name}")

        return DistrictMatch(name=district.name, contact=contact, matched_by=matched_by)
