"""Package totals.

Two independent projections of cost are kept apart on purpose:
- events total: sum of the billable events of a saved package (listing)
- vehicle lines total: sum of the draft's vehicle/price lines (builder)
"""

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from backend.app.adapters.store import StoreClient, StoreError, error_message
from backend.app.models.package import PackageDraft, PackageRecord
from backend.app.utils.numbers import parse_price

logger = logging.getLogger(__name__)


def sum_event_prices(events: Iterable[Any]) -> float:
    """Sum ``event_data.price`` over events; unparseable prices add nothing."""
    total = 0.0
    for event in events:
        if not isinstance(event, dict):
            continue
        event_data = event.get("event_data")
        if isinstance(event_data, dict):
            total += parse_price(event_data.get("price"))
    return total


async def compute_events_total(client: StoreClient, package_id: int) -> float:
    """Fetch a package's events and sum their prices.

    Any failure yields 0 for this package only.
    """
    try:
        data = await client.get(f"/api/itineraries/{package_id}/events")
    except StoreError as e:
        logger.warning(f"Total price for package {package_id} defaulted to 0: {error_message(e)}")
        return 0.0

    events = data.get("events") or []
    if not isinstance(events, list):
        logger.warning(f"Package {package_id} events payload is not a list")
        return 0.0
    return sum_event_prices(events)


async def attach_totals(
    client: StoreClient, records: list[PackageRecord]
) -> list[PackageRecord]:
    """Compute every row's events total concurrently and cache it on the row."""

    async def _with_total(record: PackageRecord) -> PackageRecord:
        if record.id is None:
            return record
        total = await compute_events_total(client, record.id)
        return record.model_copy(update={"total_price": total})

    return list(await asyncio.gather(*(_with_total(r) for r in records)))


def vehicle_lines_total(draft: PackageDraft) -> float:
    """Sum of the draft's vehicle line prices (not the billable total)."""
    return sum(line.price for line in draft.package_vehicles)
