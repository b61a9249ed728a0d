"""Location resolution service.

Ties the pieces together: picks the authoritative coordinate (live device
position or a geocoded manual address), resolves it to a fire district,
and fetches that district's burn status in the background.

The service runs on a single asyncio event loop. Geofencing is synchronous;
status fetches are scheduled as tasks and never awaited by ``resolve()``.
Every resolution cycle gets a sequence number, and a fetch result is only
applied if no newer cycle has been published since it started.
"""

import asyncio
import logging
from typing import Callable, List, Optional, Set

from oregon_burn.config import BurnConfig
from oregon_burn.constants.status import (
    ADDRESS_NOT_FOUND,
    ENTER_ADDRESS,
    ERROR,
    LOADING,
    NO_DISTRICT_FOUND,
    NOT_AVAILABLE,
    WAITING_FOR_LOCATION,
)
from oregon_burn.districts import DistrictIndex
from oregon_burn.models.district import Coordinate
from oregon_burn.models.resolution import (
    LocationMode,
    ResolutionResult,
    ResolutionState,
)
from oregon_burn.models.status import BurnAdvisory, RestrictionLevel
from oregon_burn.sources.advisory import BurnAdvisoryClient
from oregon_burn.sources.geocoding import Geocoder, GeocodingError
from oregon_burn.sources.restriction import RestrictionLevelClient
from oregon_burn.status_sources import RESTRICTION, StatusRouter, StatusSource

logger = logging.getLogger(__name__)

Observer = Callable[[ResolutionResult], None]


class LocationResolutionService:
    """Resolves the current location to a district and its burn status.

    Example:
        >>> index = DistrictIndex.load("districts.geojson", "burn_lines_lookup.json")
        >>> service = LocationResolutionService(index)
        >>> service.subscribe(print)
        >>> service.update_live_location(Coordinate(latitude=43.39, longitude=-123.31))
        >>> await service.wait_for_pending()
        >>> service.result.restriction.text
        'HIGH'
    """

    def __init__(
        self,
        index: DistrictIndex,
        config: Optional[BurnConfig] = None,
        router: Optional[StatusRouter] = None,
        advisory_client: Optional[BurnAdvisoryClient] = None,
        restriction_client: Optional[RestrictionLevelClient] = None,
        geocoder: Optional[Geocoder] = None,
        mode: LocationMode = LocationMode.LIVE,
    ):
        self.index = index
        self.config = config or BurnConfig()
        self.router = router or StatusRouter.from_config(self.config)
        self.advisory_client = advisory_client or BurnAdvisoryClient(self.config)
        self.restriction_client = restriction_client or RestrictionLevelClient(
            self.config
        )
        self.geocoder = geocoder

        self.mode = mode
        self.live_location: Optional[Coordinate] = None
        self.manual_location: Optional[Coordinate] = None
        self.manual_address = ""

        self._sequence = 0
        self._applied_sequence = 0
        self._result = ResolutionResult()
        self._observers: List[Observer] = []
        self._pending: Set[asyncio.Task] = set()

    # Published state

    @property
    def result(self) -> ResolutionResult:
        """Latest published result."""
        return self._result

    @property
    def state(self) -> ResolutionState:
        return self._result.state

    @property
    def location(self) -> Optional[Coordinate]:
        """Coordinate from whichever source the mode makes authoritative."""
        if self.mode == LocationMode.MANUAL:
            return self.manual_location
        return self.live_location

    def subscribe(self, observer: Observer) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _publish(self, result: ResolutionResult) -> bool:
        """Apply a result unless a newer cycle has already been published."""
        if result.sequence < self._applied_sequence:
            logger.info(
                f"Discarding stale result from cycle {result.sequence} "
                f"(current cycle {self._applied_sequence})"
            )
            return False

        self._applied_sequence = result.sequence
        self._result = result
        for observer in list(self._observers):
            try:
                observer(result)
            except Exception:
                logger.exception(f"Observer {observer!r} failed")
        return True

    # Triggers

    def update_live_location(self, point: Coordinate) -> Optional[ResolutionResult]:
        """Record a device position; resolves immediately in live mode."""
        self.live_location = point
        logger.info(f"Location updated: Lat: {point.latitude}, Lon: {point.longitude}")
        if self.mode == LocationMode.LIVE:
            return self.resolve()
        return None

    def set_mode(self, mode: LocationMode) -> ResolutionResult:
        """Switch the authoritative coordinate source and re-resolve."""
        if mode != self.mode:
            logger.info(f"Location mode changed: {self.mode.value} -> {mode.value}")
        self.mode = mode
        return self.resolve()

    def refresh(self) -> ResolutionResult:
        """Manual refresh: re-resolve and re-fetch with the current location."""
        return self.resolve()

    async def set_manual_address(self, address: str) -> ResolutionResult:
        """Geocode a free-text address and use it as the manual location."""
        self.manual_address = address

        if not address.strip():
            return self._publish_message(ENTER_ADDRESS, ENTER_ADDRESS)

        if self.geocoder is None:
            return self._publish_message(
                ADDRESS_NOT_FOUND, "Geocoding failed: no geocoder configured"
            )

        try:
            point = await self.geocoder.geocode(address)
        except GeocodingError as e:
            logger.warning(f"Geocoding failed for {address!r}: {e}")
            self.manual_location = None
            return self._publish_message(ADDRESS_NOT_FOUND, f"Geocoding failed: {e}")

        if point is None:
            self.manual_location = None
            return self._publish_message(ADDRESS_NOT_FOUND, ADDRESS_NOT_FOUND)

        self.manual_location = point
        logger.info(
            f"Successfully geocoded address to coordinates: "
            f"Lat: {point.latitude}, Lon: {point.longitude}"
        )
        return self.resolve()

    def _next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    def _publish_message(self, district_text: str, error_message: str) -> ResolutionResult:
        result = ResolutionResult(
            sequence=self._next_sequence(),
            state=ResolutionState.SETTLED,
            location=self.location,
            district_name=district_text,
            error_message=error_message,
        )
        self._publish(result)
        return result

    # Resolution cycle

    def resolve(self) -> ResolutionResult:
        """Run one resolution cycle and schedule the status fetch.

        Must be called from the running event loop. Returns the result
        published for this cycle; fetched status arrives later through
        observers and ``result``.
        """
        sequence = self._next_sequence()
        point = self.location

        if point is None:
            logger.info("No location available to find district.")
            result = ResolutionResult(
                sequence=sequence,
                state=ResolutionState.SETTLED,
                district_name=WAITING_FOR_LOCATION,
            )
            self._publish(result)
            return result

        self._publish(
            ResolutionResult(
                sequence=sequence, state=ResolutionState.RESOLVING, location=point
            )
        )

        match = self.index.resolve(point)

        if match.name is None:
            result = ResolutionResult(
                sequence=sequence,
                state=ResolutionState.SETTLED,
                location=point,
                district_name=NO_DISTRICT_FOUND,
                advisory=BurnAdvisory.unavailable(),
                restriction=RestrictionLevel(text=NOT_AVAILABLE),
            )
            self._publish(result)
            return result

        logger.info(f"Resolved district {match.name} ({match.matched_by})")
        source = self.router.source_for(match.name)

        if source.kind == RESTRICTION:
            result = ResolutionResult(
                sequence=sequence,
                state=ResolutionState.RESTRICTION_FETCH,
                location=point,
                district_name=match.name,
                contact=match.contact,
                restriction=RestrictionLevel(text=LOADING),
            )
            self._publish(result)
            self._schedule(self._fetch_restriction(sequence, source))
        else:
            result = ResolutionResult(
                sequence=sequence,
                state=ResolutionState.ADVISORY_FETCH,
                location=point,
                district_name=match.name,
                contact=match.contact,
                advisory=BurnAdvisory(agricultural=LOADING, backyard=LOADING),
            )
            self._publish(result)
            self._schedule(self._fetch_advisory(sequence, source))

        return result

    def _schedule(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Status fetch failed", exc_info=task.exception())

    async def _fetch_advisory(self, sequence: int, source: StatusSource) -> None:
        try:
            advisory = await self.advisory_client.fetch_advisory(url=source.url)
        except Exception as e:
            logger.exception(f"Burn advisory fetch failed for cycle {sequence}")
            advisory = BurnAdvisory.unavailable(f"Error fetching burn advisory: {e}")
        self._complete(sequence, advisory=advisory)

    async def _fetch_restriction(self, sequence: int, source: StatusSource) -> None:
        try:
            restriction = await self.restriction_client.fetch_restriction(url=source.url)
        except Exception as e:
            logger.exception(f"Restriction level fetch failed for cycle {sequence}")
            restriction = RestrictionLevel(
                text=ERROR, error_message=f"Error fetching restriction level: {e}"
            )
        self._complete(sequence, restriction=restriction)

    def _complete(self, sequence: int, **update) -> None:
        if sequence < self._applied_sequence:
            logger.info(f"Discarding stale status fetch from cycle {sequence}")
            return
        update["state"] = ResolutionState.SETTLED
        self._publish(self._result.model_copy(update=update))

    async def wait_for_pending(self) -> None:
        """Wait until every scheduled status fetch has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
