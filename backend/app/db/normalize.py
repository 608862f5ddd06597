"""Translation between the store's wire format and the internal package shape.

The store mixes snake_case and camelCase field names and keeps array fields
as JSON text. Incoming rows prefer the snake_case value and fall back to
camelCase; JSON text that does not parse is passed through unchanged.
"""

import json
import logging
from enum import Enum
from typing import Any

from pydantic import TypeAdapter, ValidationError

from backend.app.models.package import (
    PackageDraft,
    PackageItineraryDay,
    PackageRecord,
    PackageVehicleOption,
)
from backend.app.utils.numbers import coerce_int

logger = logging.getLogger(__name__)

# record field -> camelCase wire name (snake_case wire name == record field)
DUAL_NAMED_FIELDS: dict[str, str] = {
    "primary_destination": "primaryDestination",
    "package_type": "packageType",
    "package_category": "packageCategory",
    "package_theme": "packageTheme",
    "pickup_point": "pickupPoint",
    "drop_point": "dropPoint",
    "short_description": "shortDescription",
    "start_date": "startDate",
    "end_date": "endDate",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}

JSON_FIELDS: dict[str, str] = {
    "other_destinations": "otherDestinations",
    "package_itineraries": "packageItineraries",
    "package_vehicles": "packageVehicles",
    "package_includes": "packageIncludes",
    "package_excludes": "packageExcludes",
}

_FLAG_ADAPTER = TypeAdapter(bool)

_JSON_ITEM_ADAPTERS: dict[str, TypeAdapter[Any]] = {
    "other_destinations": TypeAdapter(str),
    "package_itineraries": TypeAdapter(PackageItineraryDay),
    "package_vehicles": TypeAdapter(PackageVehicleOption),
    "package_includes": TypeAdapter(str),
    "package_excludes": TypeAdapter(str),
}


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def parse_json_field(value: Any) -> Any:
    """Parse JSON text, returning the raw string when it is not valid JSON.

    Non-string values are returned as they are; empty values become None.
    """
    if _is_empty(value):
        return None
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return value
    return value


def _pick(raw: dict[str, Any], snake: str, camel: str) -> Any:
    value = raw.get(snake)
    return raw.get(camel) if _is_empty(value) else value


def _optional_int(value: Any) -> int | None:
    if _is_empty(value) or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _flag(value: Any) -> bool:
    """Read a stored boolean; "false", "0" and unrecognised values are False."""
    if _is_empty(value):
        return False
    try:
        return _FLAG_ADAPTER.validate_python(value)
    except ValidationError:
        logger.warning(f"Unrecognised flag value {value!r}, treating it as false")
        return False


def _valid_items(field: str, items: list[Any]) -> list[Any]:
    """Validate list entries one by one, dropping only the ones that do not fit."""
    adapter = _JSON_ITEM_ADAPTERS[field]
    valid = []
    for position, item in enumerate(items):
        try:
            valid.append(adapter.validate_python(item))
        except ValidationError as e:
            logger.warning(
                f"Dropping {field}[{position}]: {e.error_count()} validation error(s)"
            )
    return valid


def _json_field(raw: dict[str, Any], field: str, camel: str) -> Any:
    source = raw.get(field)
    parsed = parse_json_field(source)
    if parsed is None:
        source = raw.get(camel)
        parsed = parse_json_field(source)
    if parsed is None:
        return []
    if isinstance(parsed, str):
        logger.warning(f"{field} is not valid JSON, passing the raw text through")
        return parsed

    if not isinstance(parsed, list):
        logger.warning(f"{field} is not a JSON list, passing the raw text through")
        return source if isinstance(source, str) else json.dumps(parsed)

    return _valid_items(field, parsed)


def normalize_incoming(raw: dict[str, Any]) -> PackageRecord:
    """Normalize one package row from the store."""
    fields: dict[str, Any] = {
        field: _optional_str(_pick(raw, field, camel))
        for field, camel in DUAL_NAMED_FIELDS.items()
    }
    fields.update({field: _json_field(raw, field, camel) for field, camel in JSON_FIELDS.items()})

    return PackageRecord(
        id=_optional_int(raw.get("id")),
        name=str(raw.get("name") or ""),
        status=_optional_str(raw.get("status")),
        adults=_optional_int(raw.get("adults")),
        children=_optional_int(raw.get("children")),
        notes=_optional_str(raw.get("notes")),
        marketplace_shared=_flag(_pick(raw, "marketplace_shared", "marketplaceShared")),
        destinations=str(raw.get("destinations") or ""),
        state=_optional_str(raw.get("state")),
        num_days=_optional_int(_pick(raw, "num_days", "numDays")),
        num_nights=_optional_int(_pick(raw, "num_nights", "numNights")),
        raw=dict(raw),
        **fields,
    )


def _scalar(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value if value is not None else ""


def _dump_list(value: Any) -> Any:
    """Serialize a list field; raw strings pass through unchanged."""
    if isinstance(value, str):
        return value
    return [
        item.model_dump(mode="json", by_alias=True) if hasattr(item, "model_dump") else item
        for item in value
    ]


def joined_destinations(package: PackageDraft | PackageRecord) -> str:
    """Primary and other destinations as one comma-joined display string."""
    names = [package.primary_destination or ""]
    if isinstance(package.other_destinations, list):
        names.extend(package.other_destinations)
    return ", ".join(name for name in names if name)


def build_outgoing(package: PackageDraft | PackageRecord) -> dict[str, Any]:
    """Build the create/update payload for the store.

    Sends the legacy comma-joined ``destinations`` string alongside the
    structured camelCase fields.
    """
    return {
        "name": package.name,
        "startDate": package.start_date or None,
        "endDate": package.end_date or None,
        "adults": package.adults if package.adults is not None else 1,
        "children": package.children or 0,
        "destinations": joined_destinations(package),
        "notes": package.notes or None,
        "state": package.state or "",
        "primaryDestination": package.primary_destination or "",
        "otherDestinations": _dump_list(package.other_destinations),
        "numDays": coerce_int(package.num_days, 1),
        "numNights": coerce_int(package.num_nights, 0),
        "packageType": _scalar(package.package_type),
        "packageCategory": _scalar(package.package_category),
        "packageTheme": package.package_theme or "",
        "pickupPoint": package.pickup_point or "",
        "dropPoint": package.drop_point or "",
        "shortDescription": package.short_description or "",
        "packageItineraries": _dump_list(package.package_itineraries),
        "packageVehicles": _dump_list(package.package_vehicles),
        "packageIncludes": _dump_list(package.package_includes),
        "packageExcludes": _dump_list(package.package_excludes),
        "status": _scalar(package.status) or "Active",
    }
