"""
Application services for the remaining availability of a call offering.

The service coordinates fetching declared availability and booked calls via
a repository adapter and delegates the actual computation to the
domain-level ``AvailabilityCalculator``. The clock is injected so callers
and tests control what "now" means.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Protocol

import pendulum
from pendulum import DateTime

from ..domain.availability_calculator import AvailabilityCalculator
from ..domain.exceptions import SelectedTimeUnavailableError
from ..domain.models import CallLimitations, TimeRange

logger = logging.getLogger(__name__)


class CallRepositoryProtocol(Protocol):
    """Protocol describing the data source behaviour needed by the service."""

    async def get_availabilities(self, call_id: str) -> List[TimeRange]:
        """Return the declared availability ranges of a call."""

    async def get_taken_ranges(self, call_id: str, now: DateTime) -> List[TimeRange]:
        """Return the ranges occupied by booked, not yet ended calls."""


class CallAvailabilityService:
    """
    Orchestrates data retrieval and availability calculation.

    Dependency inversion toward a protocol makes it easy to plug in the JSON
    file adapter or a stub in tests.
    """

    def __init__(
        self,
        repository: CallRepositoryProtocol,
        limitations: CallLimitations,
        timezone: str = "Europe/Berlin",
        clock: Optional[Callable[[], DateTime]] = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            repository: Source of availability and booked calls
            limitations: Notice and daily cap of the call offering
            timezone: IANA timezone of the call owner; the default clock
                reads "now" in this zone so calendar days match the owner's
            clock: Optional replacement for the default clock
        """
        self._repository = repository
        self._limitations = limitations
        self._calculator = AvailabilityCalculator(limitations)
        self.timezone = timezone
        self._clock = clock or (lambda: pendulum.now(self.timezone))

    async def remaining_availabilities(self, call_id: str) -> List[TimeRange]:
        """Return the windows a new call can still be booked into."""
        now = self._clock()
        return await self._remaining_at(call_id, now)

    async def validate_selected_time(self, call_id: str, selected: TimeRange) -> None:
        """
        Ensure a requested call fits the remaining availability.

        Raises:
            SelectedTimeUnavailableError: If the limits forbid the start time
                or no remaining window covers the whole range
        """
        now = self._clock()
        taken = await self._repository.get_taken_ranges(call_id, now)

        if not self._limitations.allows(selected.start, now, taken):
            logger.info("Call %s: %s rejected by limitations", call_id, selected)
            raise SelectedTimeUnavailableError()

        remaining = await self._remaining_at(call_id, now, taken=taken)
        if not any(window.contains(selected) for window in remaining):
            if any(booked.overlaps(selected) for booked in taken):
                logger.info("Call %s: %s clashes with a booked call", call_id, selected)
            else:
                logger.info("Call %s: %s is not within remaining availability", call_id, selected)
            raise SelectedTimeUnavailableError()

    async def is_selected_time_available(self, call_id: str, selected: TimeRange) -> bool:
        """Boolean form of ``validate_selected_time``."""
        try:
            await self.validate_selected_time(call_id, selected)
        except SelectedTimeUnavailableError:
            return False
        return True

    async def _remaining_at(
        self,
        call_id: str,
        now: DateTime,
        taken: List[TimeRange] | None = None,
    ) -> List[TimeRange]:
        availability = await self._repository.get_availabilities(call_id)
        if taken is None:
            taken = await self._repository.get_taken_ranges(call_id, now)

        return self._calculator.calculate(availability, taken, now)
