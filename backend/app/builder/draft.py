"""Package draft editing: day plan, includes/excludes, validation, tabs."""

import logging
import uuid
from collections.abc import Iterable
from typing import Any, TypeVar

from backend.app.models.common import (
    TAB_ORDER,
    BuilderTab,
    PackageCategory,
    PackageStatus,
    PackageType,
)
from backend.app.models.package import (
    PackageDraft,
    PackageItineraryDay,
    PackageRecord,
    PackageVehicleOption,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", PackageType, PackageCategory, PackageStatus)


class DraftValidationError(Exception):
    """Draft is not ready to be saved."""

    def __init__(self, message: str, field: str, tab: BuilderTab = BuilderTab.general) -> None:
        super().__init__(message)
        self.field = field
        self.tab = tab


# Day plan


def renumber_days(days: Iterable[PackageItineraryDay]) -> list[PackageItineraryDay]:
    """Return days with day_number equal to position + 1."""
    return [
        day if day.day_number == i + 1 else day.model_copy(update={"day_number": i + 1})
        for i, day in enumerate(days)
    ]


def _with_days(draft: PackageDraft, days: list[PackageItineraryDay]) -> PackageDraft:
    return draft.model_copy(update={"package_itineraries": renumber_days(days)})


def add_day(draft: PackageDraft) -> PackageDraft:
    day = PackageItineraryDay(
        id=f"day-{uuid.uuid4().hex[:12]}",
        day_number=len(draft.package_itineraries) + 1,
    )
    return _with_days(draft, [*draft.package_itineraries, day])


def remove_day(draft: PackageDraft, index: int) -> PackageDraft:
    days = [d for i, d in enumerate(draft.package_itineraries) if i != index]
    return _with_days(draft, days)


def _swap(draft: PackageDraft, a: int, b: int) -> PackageDraft:
    days = list(draft.package_itineraries)
    if not (0 <= a < len(days) and 0 <= b < len(days)):
        return draft
    days[a], days[b] = days[b], days[a]
    return _with_days(draft, days)


def move_day_up(draft: PackageDraft, index: int) -> PackageDraft:
    return _swap(draft, index, index - 1)


def move_day_down(draft: PackageDraft, index: int) -> PackageDraft:
    return _swap(draft, index, index + 1)


def assign_day_itinerary(
    draft: PackageDraft, index: int, day_itinerary_id: int | None
) -> PackageDraft:
    days = list(draft.package_itineraries)
    days[index] = days[index].model_copy(update={"day_itinerary_id": day_itinerary_id})
    return _with_days(draft, days)


# Includes / excludes


def _set_list(draft: PackageDraft, field: str, values: list[str]) -> PackageDraft:
    return draft.model_copy(update={field: values})


def add_include(draft: PackageDraft, text: str = "") -> PackageDraft:
    return _set_list(draft, "package_includes", [*draft.package_includes, text])


def update_include(draft: PackageDraft, index: int, text: str) -> PackageDraft:
    values = list(draft.package_includes)
    values[index] = text
    return _set_list(draft, "package_includes", values)


def remove_include(draft: PackageDraft, index: int) -> PackageDraft:
    values = [v for i, v in enumerate(draft.package_includes) if i != index]
    return _set_list(draft, "package_includes", values)


def add_exclude(draft: PackageDraft, text: str = "") -> PackageDraft:
    return _set_list(draft, "package_excludes", [*draft.package_excludes, text])


def update_exclude(draft: PackageDraft, index: int, text: str) -> PackageDraft:
    values = list(draft.package_excludes)
    values[index] = text
    return _set_list(draft, "package_excludes", values)


def remove_exclude(draft: PackageDraft, index: int) -> PackageDraft:
    values = [v for i, v in enumerate(draft.package_excludes) if i != index]
    return _set_list(draft, "package_excludes", values)


def quick_add_suggestions(library: Iterable[str], current: Iterable[str], limit: int = 8) -> list[str]:
    """Library texts not yet on the draft, capped for the quick-add row."""
    chosen = set(current)
    return [text for text in library if text not in chosen][:limit]


# Validation and navigation


def validate_for_save(draft: PackageDraft) -> None:
    """Check the fields a package cannot be saved without.

    Raises:
        DraftValidationError: Naming the first missing field
    """
    if not draft.name.strip():
        raise DraftValidationError("Please enter package name", field="name")
    if not draft.state:
        raise DraftValidationError("Please select a state", field="state")
    if not draft.primary_destination:
        raise DraftValidationError(
            "Please select a primary destination", field="primary_destination"
        )


def next_tab(tab: BuilderTab) -> BuilderTab:
    index = TAB_ORDER.index(tab)
    return TAB_ORDER[min(index + 1, len(TAB_ORDER) - 1)]


def previous_tab(tab: BuilderTab) -> BuilderTab:
    index = TAB_ORDER.index(tab)
    return TAB_ORDER[max(index - 1, 0)]


def package_context(draft: PackageDraft) -> str | None:
    """One-line summary shown above the includes/excludes tabs."""
    if not (draft.state and draft.primary_destination):
        return None
    context = (
        f"{draft.num_days}D/{draft.num_nights}N - {draft.primary_destination}, {draft.state}"
    )
    if draft.other_destinations:
        context += f" (+ {', '.join(draft.other_destinations)})"
    return context


# Loading a persisted package


def _as_list(record: PackageRecord, field: str) -> list[Any]:
    value = getattr(record, field)
    if isinstance(value, str):
        logger.warning(f"Package {record.id}: {field} is not a list, starting it empty")
        return []
    return list(value)


def _as_enum(enum: type[E], value: str | None) -> E | None:
    if not value:
        return None
    try:
        return enum(value)
    except ValueError:
        logger.warning(f"Ignoring unknown {enum.__name__} value {value!r}")
        return None


def draft_from_record(record: PackageRecord) -> PackageDraft:
    """Seed an editable draft from a persisted package."""
    days: list[PackageItineraryDay] = _as_list(record, "package_itineraries")
    vehicles: list[PackageVehicleOption] = _as_list(record, "package_vehicles")
    primary = record.primary_destination or ""
    others = [d for d in _as_list(record, "other_destinations") if d != primary]

    return PackageDraft(
        id=record.id,
        status=_as_enum(PackageStatus, record.status) or PackageStatus.active,
        name=record.name,
        start_date=(record.start_date or "")[:10] or None,
        end_date=(record.end_date or "")[:10] or None,
        adults=record.adults if record.adults is not None else 1,
        children=record.children or 0,
        notes=record.notes or "",
        marketplace_shared=record.marketplace_shared,
        state=record.state or "",
        primary_destination=primary,
        other_destinations=others,
        num_days=record.num_days or 1,
        num_nights=record.num_nights or 0,
        package_type=_as_enum(PackageType, record.package_type),
        package_category=_as_enum(PackageCategory, record.package_category),
        package_theme=record.package_theme or "",
        pickup_point=record.pickup_point or "",
        drop_point=record.drop_point or "",
        short_description=record.short_description or "",
        package_itineraries=renumber_days(days),
        package_vehicles=vehicles,
        package_includes=_as_list(record, "package_includes"),
        package_excludes=_as_list(record, "package_excludes"),
    )
