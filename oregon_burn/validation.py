"""
Data validation utilities for Oregon burn status reference data.

This module provides functions to validate the bundled reference files:
1. Files exist and are not empty
2. Files are valid JSON with the expected top-level shape
3. District geometries are valid (self-intersections are reported, not fatal)
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from shapely.geometry.base import BaseGeometry
from shapely.validation import explain_validity


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_file_exists(file_path: Path, min_size_bytes: int = 2) -> None:
    """
    Validate that a file exists and is not empty.

    Args:
        file_path: Path to the file
        min_size_bytes: Minimum file size in bytes (default 2, i.e. ``[]``)

    Raises:
        ValidationError: If file doesn't exist or is too small
    """
    if not file_path.exists():
        raise ValidationError(f"File does not exist: {file_path}")

    size = file_path.stat().st_size
    if size < min_size_bytes:
        raise ValidationError(
            f"File is too small ({size} bytes, expected at least {min_size_bytes}): {file_path}"
        )


def validate_json_file(file_path: Path) -> Any:
    """
    Validate that a file is valid JSON.

    Args:
        file_path: Path to JSON file

    Returns:
        Parsed JSON data

    Raises:
        ValidationError: If the file is missing, unreadable, or invalid JSON
    """
    validate_file_exists(file_path)

    try:
        with open(file_path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {file_path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ValidationError(f"Could not read {file_path}: {e}") from e


def validate_feature_collection(data: Any) -> List[Dict[str, Any]]:
    """
    Validate a parsed GeoJSON FeatureCollection and return its features.

    Args:
        data: Parsed GeoJSON document

    Returns:
        List of feature dictionaries (individual features are not checked)

    Raises:
        ValidationError: If the document has no ``features`` array
    """
    if not isinstance(data, dict):
        raise ValidationError(f"GeoJSON root is not an object: {type(data).__name__}")

    features = data.get("features")
    if not isinstance(features, list):
        raise ValidationError("GeoJSON 'features' array not found or invalid")

    return features


def validate_contact_records(data: Any) -> List[Dict[str, Any]]:
    """
    Validate a parsed burn lines lookup and return its records.

    Raises:
        ValidationError: If the document is not a list
    """
    if not isinstance(data, list):
        raise ValidationError(
            f"Burn lines lookup is not a list: {type(data).__name__}"
        )
    return data


def geometry_problem(geom: BaseGeometry) -> Optional[str]:
    """Describe why a geometry is invalid, or None if it is valid."""
    if geom.is_empty:
        return "empty geometry"
    if not geom.is_valid:
        return explain_validity(geom)
    return None
