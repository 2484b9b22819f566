"""
Bookable hour slots for one artist on one date.

A slot is an "HH:00" string. Slots are derived from the studio's weekly
opening hours minus the times already booked for the artist on that date,
and are recomputed on every request.
"""
import asyncio
import itertools
import logging
from calendar import monthrange
from datetime import date
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Set

from app.core.config import settings
from app.services.booking_service import get_taken_times

logger = logging.getLogger(__name__)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

# Offered when a studio never configured opening hours. Note that this list is
# returned as-is: taken slots are NOT filtered out of it.
DEFAULT_SLOTS = [f"{hour:02d}:00" for hour in range(9, 18)]

DEFAULT_OPENING_HOURS = {
    "monday": {"open": "09:00", "close": "17:00", "isOpen": True},
    "tuesday": {"open": "09:00", "close": "17:00", "isOpen": True},
    "wednesday": {"open": "09:00", "close": "17:00", "isOpen": True},
    "thursday": {"open": "09:00", "close": "17:00", "isOpen": True},
    "friday": {"open": "09:00", "close": "17:00", "isOpen": True},
    "saturday": {"open": "10:00", "close": "16:00", "isOpen": False},
    "sunday": {"open": "10:00", "close": "16:00", "isOpen": False},
}


class AvailabilityUnavailableError(Exception):
    """Taken times could not be loaded and the fail-closed policy is active."""


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def _hour_of(value: Any) -> Optional[int]:
    # "10:30" -> 10; anything without a numeric hour -> None
    try:
        return int(str(value).split(":")[0])
    except (TypeError, ValueError):
        return None


def generate_slots(
    opening_hours: Optional[Dict[str, Any]],
    day: date,
    taken_slots: Iterable[str] = (),
) -> List[str]:
    """
    Ordered list of free "HH:00" slots for ``day``.

    - No opening hours at all: DEFAULT_SLOTS, unfiltered.
    - Day missing or marked closed: [].
    - Otherwise every whole hour from open (inclusive) to close (exclusive),
      minus ``taken_slots``. Minutes are floored to the hour.
    """
    if opening_hours is None:
        return list(DEFAULT_SLOTS)

    schedule = opening_hours.get(weekday_name(day))
    if not schedule or not schedule.get("isOpen"):
        return []

    open_hour = _hour_of(schedule.get("open"))
    close_hour = _hour_of(schedule.get("close"))
    if open_hour is None or close_hour is None:
        return []

    taken = set(taken_slots)
    slots = []
    for hour in range(open_hour, close_hour):
        slot = f"{hour:02d}:00"
        if slot not in taken:
            slots.append(slot)
    return slots


def is_date_disabled(
    day: date,
    opening_hours: Optional[Dict[str, Any]],
    today: Optional[date] = None,
) -> bool:
    """A calendar date can't be picked if it is in the past or its weekday is closed."""
    today = today or date.today()
    if day < today:
        return True

    if opening_hours:
        schedule = opening_hours.get(weekday_name(day))
        if schedule is not None and schedule.get("isOpen") is False:
            return True

    return False


def disabled_days_of_month(
    year: int,
    month: int,
    opening_hours: Optional[Dict[str, Any]],
    today: Optional[date] = None,
) -> List[int]:
    _, num_days = monthrange(year, month)
    return [
        day_number
        for day_number in range(1, num_days + 1)
        if is_date_disabled(date(year, month, day_number), opening_hours, today)
    ]


async def fetch_taken_slots(artist_id: str, day: date) -> Set[str]:
    """Start times already booked for the artist on ``day``, as "HH:MM"."""
    rows = await get_taken_times(artist_id, day.isoformat())
    return {str(row["slot"])[:5] for row in rows if row.get("slot")}


async def load_taken_slots(artist_id: str, day: date) -> Set[str]:
    """
    fetch_taken_slots with the configured failure policy applied.

    Fail-open (default) logs the error and reports nothing taken, which may
    offer already-booked hours. Fail-closed raises AvailabilityUnavailableError.
    """
    try:
        return await fetch_taken_slots(artist_id, day)
    except Exception as e:
        if settings.AVAILABILITY_FAIL_OPEN:
            logger.error(f"Error fetching taken slots for artist {artist_id} on {day}: {e}")
            return set()
        logger.error(f"Availability unavailable for artist {artist_id} on {day}: {e}")
        raise AvailabilityUnavailableError(str(e)) from e


async def get_availability(
    studio: Dict[str, Any], artist_id: str, day: date
) -> Dict[str, Any]:
    """Availability payload for one (studio, artist, date)."""
    opening_hours = studio.get("openingHours")
    taken = await load_taken_slots(artist_id, day)
    slots = generate_slots(opening_hours, day, taken)
    taken_sorted = sorted(taken)

    return {
        "studioId": str(studio.get("id") or studio.get("_id")),
        "artistId": artist_id,
        "date": day.isoformat(),
        "slots": slots,
        "takenSlots": taken_sorted,
        "isClosed": not slots and not taken_sorted,
        "isFullyBooked": not slots and bool(taken_sorted),
    }


class SlotRequestGate:
    """
    Monotonic request-generation counter.

    Every new selection gets a larger generation; a result may only be
    delivered while its generation is still the latest one issued.
    """

    def __init__(self):
        self._counter = itertools.count(1)
        self._latest = 0

    def issue(self) -> int:
        self._latest = next(self._counter)
        return self._latest

    def is_current(self, generation: int) -> bool:
        return generation == self._latest

    @property
    def latest(self) -> int:
        return self._latest


class AvailabilityStream:
    """
    Serves availability for a stream of (artist, date) selections from one client.

    The studio is loaded again for every selection so schedule edits show up
    on an open socket. A new selection cancels the fetch in flight for the
    previous one, and any result that still completes for an older generation
    is dropped, so the client only ever receives the answer for its last
    selection.
    """

    def __init__(
        self,
        load_studio: Callable[[], Awaitable[Optional[Dict[str, Any]]]],
        send: Callable[[Dict[str, Any]], Awaitable[None]],
        compute: Callable[..., Awaitable[Dict[str, Any]]] = get_availability,
    ):
        self.load_studio = load_studio
        self.send = send
        self.compute = compute
        self.gate = SlotRequestGate()
        self._task: Optional[asyncio.Task] = None

    def select(self, artist_id: str, day: date) -> asyncio.Task:
        generation = self.gate.issue()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = asyncio.ensure_future(self._run(generation, artist_id, day))
        return self._task

    async def _run(self, generation: int, artist_id: str, day: date) -> None:
        studio = await self.load_studio()
        if studio is None:
            payload = {"error": "Studio not found", "date": day.isoformat()}
        else:
            try:
                payload = await self.compute(studio, artist_id, day)
            except AvailabilityUnavailableError:
                payload = {"error": "Availability is temporarily unavailable", "date": day.isoformat()}

        if not self.gate.is_current(generation):
            logger.debug(f"Dropping stale availability result (generation {generation})")
            return
        await self.send({**payload, "generation": generation})

    async def close(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
