"""Pytest configuration for async tests, markers, and shared fixtures.

To run async tests, ensure pytest-asyncio is installed:
    pip install pytest-asyncio

Or use the dev dependencies:
    pip install -e ".[dev]"

Test markers:
    integration: Tests that make real requests to the burn status sites (slow, may fail due to network)

Run tests:
    pytest tests/                           # Run all tests except integration
    pytest tests/ -m integration           # Run only integration tests
    pytest tests/ -m "not integration"     # Explicitly skip integration tests
"""

from unittest.mock import AsyncMock, MagicMock

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests that make real HTTP requests (deselect with '-m \"not integration\"')",
    )


def pytest_collection_modifyitems(config, items):
    """Automatically skip integration tests unless explicitly requested.

    Integration tests are skipped by default because they:
    - Make real HTTP requests
    - Are slower (the advisory site can take a minute to answer)
    - May fail due to network issues or page layout changes
    """
    # Don't auto-skip if user explicitly selected integration tests
    if config.getoption("-m") == "integration":
        return

    skip_integration = pytest.mark.skip(
        reason="Integration test - skipped by default. Run with: pytest -m integration"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture
def mock_session_get():
    """Configure a patched aiohttp.ClientSession to answer one GET.

    Usage:
        with patch("aiohttp.ClientSession") as mock_session:
            session = mock_session_get(mock_session, status=200, body=b"...")
    """

    def configure(mock_session, status=200, body=b"", side_effect=None):
        mock_response = AsyncMock()
        mock_response.status = status
        mock_response.read = AsyncMock(return_value=body)

        mock_get_context = AsyncMock()
        mock_get_context.__aenter__.return_value = mock_response
        mock_get_context.__aexit__.return_value = None

        mock_session_instance = mock_session.return_value.__aenter__.return_value
        mock_session_instance.get = MagicMock(
            return_value=mock_get_context, side_effect=side_effect
        )
        return mock_session_instance

    return configure


def square_feature(name, west, south, east, north, name_property="Agency_Name"):
    """GeoJSON Polygon feature for an axis-aligned box."""
    return {
        "type": "Feature",
        "properties": {name_property: name},
        "geometry": {
            "type": "Polygon",
            "coordinates": [
                [
                    [west, south],
                    [east, south],
                    [east, north],
                    [west, north],
                    [west, south],
                ]
            ],
        },
    }


@pytest.fixture
def square():
    """Factory for axis-aligned box district features."""
    return square_feature


@pytest.fixture
def district_collection():
    """Two side-by-side districts with a one-degree gap between them."""
    return {
        "type": "FeatureCollection",
        "features": [
            square_feature("Eugene Springfield Fire", -79.0, 44.0, -78.0, 45.0),
            square_feature("Sutherlin FD", -77.0, 44.0, -76.0, 45.0),
        ],
    }


@pytest.fixture
def contact_records():
    """Burn lines lookup records as stored in burn_lines_lookup.json."""
    return [
        {
            "DistrictName": "Sutherlin FD",
            "BurnLinePhone": "(541) 459-2212",
            "MainPhone": "(541) 459-2212",
            "Website": "https://www.ci.sutherlin.or.us/",
            "OFCDistrict": "Douglas",
        },
        {
            "DistrictName": "Eugene Springfield Fire",
            "BurnLinePhone": "(541) 726-3643",
        },
    ]
