"""Rate matching and vehicle line editing."""

import logging
import uuid
from collections.abc import Iterable

from backend.app.models.catalogs import TransferRate, VehicleType
from backend.app.models.common import AcType
from backend.app.models.package import PackageDraft, PackageVehicleOption

logger = logging.getLogger(__name__)


def _normalize(value: str | None) -> str:
    return (value or "").strip().lower()


def match_rate(
    vehicle_type_name: str,
    primary_destination: str,
    rate_table: Iterable[TransferRate],
) -> float | None:
    """Look up the transfer price for a vehicle type at the primary destination.

    Both sides are trimmed and lower-cased, then compared for exact equality;
    there is no partial credit.

    Returns:
        Price of the first matching row, or None when no row matches
    """
    wanted_vehicle = _normalize(vehicle_type_name)
    wanted_dest = _normalize(primary_destination)

    for rate in rate_table:
        if _normalize(rate.vehicle_type) == wanted_vehicle and _normalize(rate.destination) == wanted_dest:
            return rate.price
    return None


def _replace_line(
    draft: PackageDraft, index: int, line: PackageVehicleOption
) -> PackageDraft:
    lines = list(draft.package_vehicles)
    lines[index] = line
    return draft.model_copy(update={"package_vehicles": lines})


def select_vehicle_type(
    draft: PackageDraft,
    index: int,
    vehicle_type_name: str,
    vehicle_types: Iterable[VehicleType],
    rate_table: Iterable[TransferRate],
) -> PackageDraft:
    """Set the vehicle type of one line and pre-fill capacity and price.

    Capacity comes from the matching entry of ``vehicle_types`` (expected to be
    the state-filtered list). A matched rate overwrites the price, even a
    manually typed one; without a match the previous price is kept.

    Raises:
        IndexError: If index does not address an existing line
    """
    line = draft.package_vehicles[index]

    selected = next((vt for vt in vehicle_types if vt.vehicle_type == vehicle_type_name), None)
    price = match_rate(vehicle_type_name, draft.primary_destination, rate_table)

    if price is None:
        logger.debug(
            f"No transfer rate for {vehicle_type_name!r} at {draft.primary_destination!r}"
        )

    updated = line.model_copy(
        update={
            "vehicle_type": vehicle_type_name,
            "capacity": (selected.capacity if selected else None) or 0,
            "price": price if price is not None else line.price,
        }
    )
    return _replace_line(draft, index, updated)


def set_vehicle_price(draft: PackageDraft, index: int, price: float) -> PackageDraft:
    """Manual price edit; never triggers a re-match."""
    line = draft.package_vehicles[index]
    return _replace_line(draft, index, line.model_copy(update={"price": price or 0.0}))


def set_vehicle_ac_type(draft: PackageDraft, index: int, ac_type: AcType) -> PackageDraft:
    line = draft.package_vehicles[index]
    return _replace_line(draft, index, line.model_copy(update={"ac_type": ac_type}))


def add_vehicle_line(draft: PackageDraft) -> PackageDraft:
    line = PackageVehicleOption(id=f"vehicle-{uuid.uuid4().hex[:12]}")
    return draft.model_copy(update={"package_vehicles": [*draft.package_vehicles, line]})


def remove_vehicle_line(draft: PackageDraft, index: int) -> PackageDraft:
    lines = [line for i, line in enumerate(draft.package_vehicles) if i != index]
    return draft.model_copy(update={"package_vehicles": lines})
