"""Selection cascade: State -> Destinations -> Day-itineraries / Vehicle types.

All transitions are pure: they take a draft and return a new one.
"""

from collections.abc import Iterable, Iterator

from backend.app.models.catalogs import DayItinerary, Destination, VehicleType
from backend.app.models.package import PackageDraft


def on_state_changed(draft: PackageDraft, new_state: str) -> PackageDraft:
    """Select a new state and drop every destination choice.

    The destination list is about to be refetched for ``new_state`` (or the
    global list when it is empty), so no validity check is attempted here.
    """
    return draft.model_copy(
        update={"state": new_state, "primary_destination": "", "other_destinations": []}
    )


def reconcile_destinations(
    draft: PackageDraft, available: Iterable[Destination]
) -> PackageDraft:
    """Prune destination choices that are missing from the available list."""
    names = {d.name for d in available}

    primary = draft.primary_destination
    if primary and primary not in names:
        primary = ""

    others = [
        name for name in draft.other_destinations if name in names and name != primary
    ]
    if len(others) == len(draft.other_destinations):
        others = draft.other_destinations

    if primary == draft.primary_destination and others is draft.other_destinations:
        return draft
    return draft.model_copy(update={"primary_destination": primary, "other_destinations": others})


def destinations_overlap(tagged: str, selected: str) -> bool:
    """Fuzzy destination match used for day-itinerary relevance.

    Case-insensitive substring containment in either direction, so
    "Gokarna" and "Gokarna Beach" match each other. Blank names never match.
    """
    a = tagged.strip().lower()
    b = selected.strip().lower()
    if not a or not b:
        return False
    return a in b or b in a


def filter_day_itineraries(
    draft: PackageDraft, day_itineraries: Iterable[DayItinerary]
) -> Iterator[DayItinerary]:
    """Yield day-itineraries plausibly related to the chosen destinations.

    Without a primary destination there is no constraint yet and every
    itinerary is yielded.
    """
    if not draft.primary_destination:
        yield from day_itineraries
        return

    selected = [draft.primary_destination, *draft.other_destinations]
    for itinerary in day_itineraries:
        if any(
            destinations_overlap(tag, choice)
            for tag in itinerary.destinations
            for choice in selected
        ):
            yield itinerary


def filter_vehicle_types(
    draft: PackageDraft, vehicle_types: Iterable[VehicleType]
) -> list[VehicleType]:
    """Vehicle types offered for the draft's state (exact state match)."""
    return [vt for vt in vehicle_types if vt.state == draft.state]


def pickup_drop_options(available: Iterable[Destination]) -> list[str]:
    """Pickup and drop points come from the state-scoped destination list."""
    return [d.name for d in available]


def suggest_other_destinations(
    draft: PackageDraft,
    available: Iterable[Destination],
    query: str = "",
    limit: int = 50,
) -> list[Destination]:
    """Destinations still selectable as "other" destinations.

    Nothing is suggested until a state is chosen.
    """
    if not draft.state:
        return []

    needle = query.strip().lower()
    suggestions = []
    for dest in available:
        if dest.name == draft.primary_destination or dest.name in draft.other_destinations:
            continue
        if needle and needle not in dest.name.lower():
            continue
        suggestions.append(dest)
        if len(suggestions) >= limit:
            break
    return suggestions


def set_primary_destination(draft: PackageDraft, name: str) -> PackageDraft:
    """Choose the primary destination, removing it from the other destinations."""
    name = name.strip()
    others = [d for d in draft.other_destinations if d != name]
    return draft.model_copy(update={"primary_destination": name, "other_destinations": others})


def add_other_destination(draft: PackageDraft, name: str) -> PackageDraft:
    name = name.strip()
    if not name or name == draft.primary_destination or name in draft.other_destinations:
        return draft
    return draft.model_copy(update={"other_destinations": [*draft.other_destinations, name]})


def remove_other_destination(draft: PackageDraft, name: str) -> PackageDraft:
    return draft.model_copy(
        update={"other_destinations": [d for d in draft.other_destinations if d != name]}
    )
