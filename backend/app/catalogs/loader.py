"""Master catalog loading with per-catalog degradation.

Each fetch is independent: a failing catalog becomes an empty list (or the
default notes library) and the others still load.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from backend.app.adapters.store import StoreClient, StoreError, error_message
from backend.app.models.catalogs import (
    Catalogs,
    DayItinerary,
    Destination,
    NotesLibrary,
    PackageTheme,
    State,
    TransferRate,
    VehicleType,
)
from backend.app.models.common import RecordStatus
from backend.app.utils.metrics import PrometheusStoreMetrics

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_INCLUSIONS = [
    "2 nights stay (triple/couple sharing)",
    "Breakfast included",
    "Private AC vehicle for entire trip",
    "Toll charges",
    "Parking charges",
]
DEFAULT_EXCLUSIONS = [
    "GST extra",
    "Personal expenses",
    "Lunch not included",
    "Anything not mentioned in inclusions",
]
FALLBACK_NOTES = NotesLibrary(
    inclusions=["Breakfast included", "Private vehicle"],
    exclusions=["GST extra", "Personal expenses"],
)


def _is_active(entry: dict[str, Any]) -> bool:
    return entry.get("status") == RecordStatus.active.value


def _items(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    items = data.get(key) or []
    if not isinstance(items, list):
        logger.warning(f"Store returned a non-list {key!r} payload, ignoring it")
        return []
    return [item for item in items if isinstance(item, dict)]


async def fetch_states(client: StoreClient) -> list[State]:
    data = await client.get("/api/states")
    return [
        State(id=s.get("id"), name=s["name"], code=s.get("code"), status=s["status"])
        for s in _items(data, "states")
        if _is_active(s)
    ]


async def fetch_destinations(client: StoreClient, state: str = "") -> list[Destination]:
    """Fetch active destinations, scoped to a state when one is given."""
    params = {"state": state} if state else None
    data = await client.get("/api/destinations", params=params)
    return [
        Destination(id=d.get("id"), name=d["name"], state=d.get("state"), status=d["status"])
        for d in _items(data, "destinations")
        if _is_active(d)
    ]


async def fetch_package_themes(client: StoreClient) -> list[PackageTheme]:
    data = await client.get("/api/package-themes")
    return [
        PackageTheme(id=t.get("id"), name=t["name"], status=t["status"])
        for t in _items(data, "packageThemes")
        if _is_active(t)
    ]


async def fetch_day_itineraries(client: StoreClient) -> list[DayItinerary]:
    data = await client.get("/api/day-itineraries")
    return [
        DayItinerary(
            id=d["id"],
            name=d.get("name") or d.get("title") or "",
            num_days=d.get("numDays") or d.get("num_days") or 1,
            destinations=d.get("destinations") or [],
        )
        for d in _items(data, "dayItineraries")
        if _is_active(d)
    ]


async def fetch_vehicle_types(client: StoreClient) -> list[VehicleType]:
    data = await client.get("/api/vehicle-types")
    return [
        VehicleType(
            id=v.get("id"),
            vehicle_type=v.get("vehicle_type") or "",
            capacity=v.get("capacity"),
            state=v.get("state"),
        )
        for v in _items(data, "vehicleTypes")
        if _is_active(v)
    ]


async def fetch_transfer_rates(client: StoreClient) -> list[TransferRate]:
    data = await client.get("/transfers")
    return [
        TransferRate(
            vehicle_type=t.get("vehicle_type") or "",
            destination=t.get("destination") or "",
            price=t.get("price"),
        )
        for t in _items(data, "transfers")
    ]


def _is_exclusion(note: dict[str, Any]) -> bool:
    category = str(note.get("category") or "").lower()
    return "exc" in category or "exclude" in category or category == "exclusion"


def classify_notes(notes: list[dict[str, Any]]) -> NotesLibrary:
    """Split active notes into inclusion and exclusion texts.

    Anything that is not an exclusion counts as an inclusion. Empty results
    fall back to the default lists.
    """
    active_status = RecordStatus.active.value.lower()
    active = [
        n for n in notes if str(n.get("status") or active_status).lower() == active_status
    ]

    inclusions = [
        n.get("description") or n.get("title") or ""
        for n in active
        if not _is_exclusion(n)
    ]
    exclusions = [
        n.get("description") or n.get("title") or ""
        for n in active
        if _is_exclusion(n)
    ]

    return NotesLibrary(
        inclusions=[text for text in inclusions if text] or list(DEFAULT_INCLUSIONS),
        exclusions=[text for text in exclusions if text] or list(DEFAULT_EXCLUSIONS),
    )


async def fetch_notes_library(client: StoreClient) -> NotesLibrary:
    data = await client.get("/api/itinerary-notes-inclusions")
    return classify_notes(_items(data, "notesInclusions"))


async def _degrade(
    name: str,
    fetch: Callable[[], Awaitable[T]],
    fallback: T,
    metrics: PrometheusStoreMetrics,
) -> T:
    """Run one catalog fetch, returning fallback on any store failure."""
    try:
        return await fetch()
    except (StoreError, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Failed to fetch {name}: {error_message(e)}")
        metrics.inc_catalog_fallback(name)
        return fallback


async def load_catalogs(
    client: StoreClient, metrics: PrometheusStoreMetrics | None = None
) -> Catalogs:
    """Fetch every master catalog concurrently.

    Args:
        client: Store client
        metrics: Metrics recorder for fallbacks

    Returns:
        Catalogs bundle; failed catalogs are empty (notes use a minimal default)
    """
    metrics = metrics or PrometheusStoreMetrics()

    states, themes, day_its, vehicle_types, rates, notes = await asyncio.gather(
        _degrade("states", lambda: fetch_states(client), [], metrics),
        _degrade("package_themes", lambda: fetch_package_themes(client), [], metrics),
        _degrade("day_itineraries", lambda: fetch_day_itineraries(client), [], metrics),
        _degrade("vehicle_types", lambda: fetch_vehicle_types(client), [], metrics),
        _degrade("transfer_rates", lambda: fetch_transfer_rates(client), [], metrics),
        _degrade(
            "notes",
            lambda: fetch_notes_library(client),
            FALLBACK_NOTES.model_copy(deep=True),
            metrics,
        ),
    )

    return Catalogs(
        states=states,
        package_themes=themes,
        day_itineraries=day_its,
        vehicle_types=vehicle_types,
        transfer_rates=rates,
        notes=notes,
    )


async def load_destinations(
    client: StoreClient, state: str = "", metrics: PrometheusStoreMetrics | None = None
) -> list[Destination] | None:
    """Fetch destinations for a state, or None when the fetch failed."""
    try:
        return await fetch_destinations(client, state)
    except (StoreError, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Failed to fetch destinations: {error_message(e)}")
        (metrics or PrometheusStoreMetrics()).inc_catalog_fallback("destinations")
        return None
