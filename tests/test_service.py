"""Tests for the location resolution service."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from oregon_burn.districts import DistrictIndex
from oregon_burn.models.district import Coordinate
from oregon_burn.models.resolution import LocationMode, ResolutionState
from oregon_burn.models.status import BurnAdvisory, RestrictionLevel
from oregon_burn.service import LocationResolutionService
from oregon_burn.sources.advisory import BurnAdvisoryClient
from oregon_burn.sources.base import AdvisoryExtractor, FormatDriftError
from oregon_burn.sources.geocoding import GeocodingError

EUGENE = Coordinate(latitude=44.5, longitude=-78.5)
EUGENE_EDGE = Coordinate(latitude=44.9, longitude=-78.9)
SUTHERLIN = Coordinate(latitude=44.5, longitude=-76.5)

ADVISORY = BurnAdvisory(agricultural="8:00 a.m. to 2:00 p.m.", backyard="No burning permitted today")


@pytest.fixture
def index(district_collection, contact_records):
    return DistrictIndex.load(district_collection, contact_records)


@pytest.fixture
def advisory_client():
    client = MagicMock()
    client.fetch_advisory = AsyncMock(return_value=ADVISORY)
    return client


@pytest.fixture
def restriction_client():
    client = MagicMock()
    client.fetch_restriction = AsyncMock(return_value=RestrictionLevel(text="HIGH"))
    return client


@pytest.fixture
def geocoder():
    mock_geocoder = MagicMock()
    mock_geocoder.geocode = AsyncMock(return_value=SUTHERLIN)
    return mock_geocoder


@pytest.fixture
def service(index, advisory_client, restriction_client, geocoder):
    return LocationResolutionService(
        index,
        advisory_client=advisory_client,
        restriction_client=restriction_client,
        geocoder=geocoder,
    )


class TestResolve:
    """Tests for resolution cycles."""

    @pytest.mark.asyncio
    async def test_waiting_for_location(self, service, advisory_client):
        """Test that resolving without a location asks the user to wait."""
        result = service.resolve()

        assert result.state is ResolutionState.SETTLED
        assert result.district_name == "Waiting for location..."
        assert result.advisory is None
        advisory_client.fetch_advisory.assert_not_called()

    @pytest.mark.asyncio
    async def test_advisory_route(self, service, advisory_client, restriction_client):
        """Test that ordinary districts show the smoke management advisory."""
        result = service.update_live_location(EUGENE)

        assert result.state is ResolutionState.ADVISORY_FETCH
        assert result.district_name == "Eugene Springfield Fire"
        assert result.advisory.agricultural == "Loading..."
        assert result.advisory.backyard == "Loading..."
        assert result.contact.burn_line_phone == "(541) 726-3643"

        await service.wait_for_pending()

        assert service.state is ResolutionState.SETTLED
        assert service.result.advisory == ADVISORY
        assert service.result.district_name == "Eugene Springfield Fire"
        advisory_client.fetch_advisory.assert_awaited_once_with(
            url="https://smkmgt.com/burn.php"
        )
        restriction_client.fetch_restriction.assert_not_called()

    @pytest.mark.asyncio
    async def test_restriction_route(self, service, advisory_client, restriction_client):
        """Test that Sutherlin shows the DFPA restriction level."""
        result = service.update_live_location(SUTHERLIN)

        assert result.state is ResolutionState.RESTRICTION_FETCH
        assert result.district_name == "Sutherlin FD"
        assert result.restriction.text == "Loading..."
        assert result.advisory is None

        await service.wait_for_pending()

        assert service.state is ResolutionState.SETTLED
        assert service.result.restriction.text == "HIGH"
        assert service.result.contact.ofc_district == "Douglas"
        restriction_client.fetch_restriction.assert_awaited_once_with(
            url="https://www.dfpa.net/"
        )
        advisory_client.fetch_advisory.assert_not_called()

    @pytest.mark.asyncio
    async def test_point_outside_all_districts(self, service):
        """Test that the nearest district is used outside every polygon."""
        service.update_live_location(Coordinate(latitude=44.5, longitude=-75.0))
        await service.wait_for_pending()

        assert service.result.district_name == "Sutherlin FD"
        assert service.result.restriction.text == "HIGH"

    @pytest.mark.asyncio
    async def test_empty_index(self, advisory_client, restriction_client):
        """Test that no districts loaded gives a settled no-district result."""
        service = LocationResolutionService(
            DistrictIndex(),
            advisory_client=advisory_client,
            restriction_client=restriction_client,
        )

        result = service.update_live_location(EUGENE)
        await service.wait_for_pending()

        assert result.state is ResolutionState.SETTLED
        assert result.district_name == "No district found for location."
        assert result.advisory.agricultural == "N/A"
        assert result.advisory.backyard == "N/A"
        assert result.restriction.text == "N/A"
        advisory_client.fetch_advisory.assert_not_called()
        restriction_client.fetch_restriction.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_fetch_settles_with_error(self, service, advisory_client):
        """Test that a reported fetch failure still settles the cycle."""
        advisory_client.fetch_advisory.return_value = BurnAdvisory.unavailable(
            "Network error: unreachable"
        )

        service.update_live_location(EUGENE)
        await service.wait_for_pending()

        assert service.state is ResolutionState.SETTLED
        assert service.result.advisory.agricultural == "N/A"
        assert service.result.advisory.error_message == "Network error: unreachable"

    @pytest.mark.asyncio
    async def test_refresh_fetches_again(self, service, advisory_client):
        service.update_live_location(EUGENE)
        await service.wait_for_pending()

        service.refresh()
        await service.wait_for_pending()

        assert advisory_client.fetch_advisory.await_count == 2
        assert service.result.sequence == 2


class LayoutChangedExtractor(AdvisoryExtractor):
    """Extractor for a page whose layout no longer matches."""

    def extract_advisory(self, document, day):
        raise FormatDriftError("layout changed")


class TestFetchFailures:
    """Tests that every fetch failure still settles its cycle."""

    @pytest.mark.asyncio
    async def test_extractor_error_settles_cycle(self, index, restriction_client):
        """Test that a raising extractor yields N/A instead of Loading..."""
        advisory_client = BurnAdvisoryClient(extractor=LayoutChangedExtractor())
        service = LocationResolutionService(
            index,
            advisory_client=advisory_client,
            restriction_client=restriction_client,
        )

        with patch.object(
            advisory_client, "_get_text", AsyncMock(return_value="<html></html>")
        ):
            service.update_live_location(EUGENE)
            await service.wait_for_pending()

        assert service.state is ResolutionState.SETTLED
        assert service.result.advisory.agricultural == "N/A"
        assert service.result.advisory.backyard == "N/A"
        assert service.result.advisory.error_message == "layout changed"

    @pytest.mark.asyncio
    async def test_advisory_client_exception_settles_cycle(self, service, advisory_client):
        advisory_client.fetch_advisory.side_effect = RuntimeError("boom")

        service.update_live_location(EUGENE)
        await service.wait_for_pending()

        assert service.state is ResolutionState.SETTLED
        assert service.result.advisory.agricultural == "N/A"
        assert service.result.advisory.error_message == "Error fetching burn advisory: boom"

    @pytest.mark.asyncio
    async def test_restriction_client_exception_settles_cycle(
        self, service, restriction_client
    ):
        restriction_client.fetch_restriction.side_effect = RuntimeError("boom")

        service.update_live_location(SUTHERLIN)
        await service.wait_for_pending()

        assert service.state is ResolutionState.SETTLED
        assert service.result.restriction.text == "Error"
        assert service.result.restriction.error_message == (
            "Error fetching restriction level: boom"
        )


class TestStaleResults:
    """Tests that only the newest resolution cycle is shown."""

    @pytest.mark.asyncio
    async def test_slow_fetch_does_not_overwrite_newer_cycle(self, service, advisory_client):
        """Test that a fetch finishing after a newer cycle is discarded."""
        gate = asyncio.Event()
        calls = []

        async def slow_then_fast(url=None):
            calls.append(url)
            if len(calls) == 1:
                await gate.wait()
                return BurnAdvisory(agricultural="old", backyard="old")
            return BurnAdvisory(agricultural="new", backyard="new")

        advisory_client.fetch_advisory.side_effect = slow_then_fast
        seen = []
        service.subscribe(seen.append)

        service.update_live_location(EUGENE)
        await asyncio.sleep(0)
        service.update_live_location(EUGENE_EDGE)
        await asyncio.sleep(0)
        gate.set()
        await service.wait_for_pending()

        assert service.result.sequence == 2
        assert service.result.advisory.agricultural == "new"
        assert service.result.location == EUGENE_EDGE
        assert all(r.advisory is None or r.advisory.agricultural != "old" for r in seen)

    @pytest.mark.asyncio
    async def test_route_change_discards_previous_fetch(
        self, service, advisory_client, restriction_client
    ):
        """Test that moving to another district drops the earlier district's status."""
        gate = asyncio.Event()

        async def slow_advisory(url=None):
            await gate.wait()
            return ADVISORY

        advisory_client.fetch_advisory.side_effect = slow_advisory

        service.update_live_location(EUGENE)
        await asyncio.sleep(0)
        service.update_live_location(SUTHERLIN)
        await asyncio.sleep(0)
        gate.set()
        await service.wait_for_pending()

        assert service.result.district_name == "Sutherlin FD"
        assert service.result.restriction.text == "HIGH"
        assert service.result.advisory is None


class TestObservers:
    """Tests for result observers."""

    @pytest.mark.asyncio
    async def test_observer_sees_each_state(self, service):
        seen = []
        service.subscribe(seen.append)

        service.update_live_location(EUGENE)
        await service.wait_for_pending()

        assert [r.state for r in seen] == [
            ResolutionState.RESOLVING,
            ResolutionState.ADVISORY_FETCH,
            ResolutionState.SETTLED,
        ]
        assert {r.sequence for r in seen} == {1}

    @pytest.mark.asyncio
    async def test_unsubscribe(self, service):
        seen = []
        service.subscribe(seen.append)
        service.unsubscribe(seen.append)

        service.update_live_location(EUGENE)
        await service.wait_for_pending()

        assert seen == []

    @pytest.mark.asyncio
    async def test_failing_observer_does_not_block_others(self, service):
        """Test that one observer raising does not stop publication."""
        seen = []

        def broken(result):
            raise RuntimeError("display went away")

        service.subscribe(broken)
        service.subscribe(seen.append)

        service.update_live_location(EUGENE)
        await service.wait_for_pending()

        assert seen[-1].state is ResolutionState.SETTLED
        assert service.result.advisory == ADVISORY


class TestManualLocation:
    """Tests for manual address entry and mode switching."""

    @pytest.mark.asyncio
    async def test_manual_address(self, service, geocoder):
        service.set_mode(LocationMode.MANUAL)

        result = await service.set_manual_address("Sutherlin, OR")
        await service.wait_for_pending()

        geocoder.geocode.assert_awaited_once_with("Sutherlin, OR")
        assert result.district_name == "Sutherlin FD"
        assert service.manual_location == SUTHERLIN
        assert service.result.restriction.text == "HIGH"

    @pytest.mark.asyncio
    async def test_empty_address(self, service, geocoder):
        """Test that a blank address prompts for one without geocoding."""
        service.set_mode(LocationMode.MANUAL)

        result = await service.set_manual_address("   ")

        assert result.district_name == "Please enter an address."
        geocoder.geocode.assert_not_called()

    @pytest.mark.asyncio
    async def test_address_not_found(self, service, geocoder):
        geocoder.geocode.return_value = None
        service.set_mode(LocationMode.MANUAL)

        result = await service.set_manual_address("Atlantis")

        assert result.district_name == "Address not found."
        assert result.state is ResolutionState.SETTLED
        assert service.manual_location is None

    @pytest.mark.asyncio
    async def test_geocoding_failure(self, service, geocoder):
        geocoder.geocode.side_effect = GeocodingError("HTTP 503")
        service.set_mode(LocationMode.MANUAL)

        result = await service.set_manual_address("Sutherlin, OR")

        assert result.district_name == "Address not found."
        assert result.error_message == "Geocoding failed: HTTP 503"

    @pytest.mark.asyncio
    async def test_no_geocoder(self, index):
        service = LocationResolutionService(index, mode=LocationMode.MANUAL)

        result = await service.set_manual_address("Sutherlin, OR")

        assert result.district_name == "Address not found."
        assert "no geocoder" in result.error_message

    @pytest.mark.asyncio
    async def test_live_updates_ignored_in_manual_mode(self, service, advisory_client):
        """Test that device positions do not override a manual location."""
        service.set_mode(LocationMode.MANUAL)
        await service.set_manual_address("Sutherlin, OR")
        await service.wait_for_pending()

        assert service.update_live_location(EUGENE) is None
        await service.wait_for_pending()

        assert service.result.district_name == "Sutherlin FD"
        assert service.live_location == EUGENE
        advisory_client.fetch_advisory.assert_not_called()

    @pytest.mark.asyncio
    async def test_switching_back_to_live(self, service):
        service.update_live_location(EUGENE)
        service.set_mode(LocationMode.MANUAL)
        await service.set_manual_address("Sutherlin, OR")
        await service.wait_for_pending()

        result = service.set_mode(LocationMode.LIVE)
        await service.wait_for_pending()

        assert result.district_name == "Eugene Springfield Fire"
        assert service.result.advisory == ADVISORY
