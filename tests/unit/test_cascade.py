"""Tests for the selection cascade (state -> destinations -> dependents)."""

from backend.app.builder.cascade import (
    add_other_destination,
    destinations_overlap,
    filter_day_itineraries,
    filter_vehicle_types,
    on_state_changed,
    pickup_drop_options,
    reconcile_destinations,
    remove_other_destination,
    set_primary_destination,
    suggest_other_destinations,
)
from backend.app.models.catalogs import DayItinerary, Destination, VehicleType
from backend.app.models.package import PackageDraft


def make_draft(**kwargs: object) -> PackageDraft:
    defaults: dict[str, object] = {
        "state": "Karnataka",
        "primary_destination": "Gokarna",
        "other_destinations": ["Hubli"],
    }
    defaults.update(kwargs)
    return PackageDraft(**defaults)


def test_state_change_clears_destinations_unconditionally() -> None:
    """Even destinations valid in the new state are cleared."""
    draft = make_draft()

    updated = on_state_changed(draft, "Kerala")

    assert updated.state == "Kerala"
    assert updated.primary_destination == ""
    assert updated.other_destinations == []
    # Original draft untouched
    assert draft.primary_destination == "Gokarna"


def test_state_change_keeps_unrelated_fields() -> None:
    draft = make_draft(name="Coastal Escape", num_days=3, pickup_point="Hubli")

    updated = on_state_changed(draft, "")

    assert updated.name == "Coastal Escape"
    assert updated.num_days == 3
    assert updated.pickup_point == "Hubli"


def test_karnataka_to_kerala_scenario(kerala_destinations: list[Destination]) -> None:
    """Gokarna picked in Karnataka, state switched to Kerala: everything cleared."""
    draft = make_draft(other_destinations=[])

    updated = reconcile_destinations(on_state_changed(draft, "Kerala"), kerala_destinations)

    assert updated.primary_destination == ""
    assert updated.other_destinations == []


def test_reconcile_clears_foreign_primary(kerala_destinations: list[Destination]) -> None:
    draft = make_draft(state="Kerala", other_destinations=["Munnar"])

    updated = reconcile_destinations(draft, kerala_destinations)

    assert updated.primary_destination == ""
    assert updated.other_destinations == ["Munnar"]


def test_reconcile_filters_other_destinations(karnataka_destinations: list[Destination]) -> None:
    draft = make_draft(other_destinations=["Hubli", "Munnar", "Gokarna"])

    updated = reconcile_destinations(draft, karnataka_destinations)

    assert updated.primary_destination == "Gokarna"
    assert updated.other_destinations == ["Hubli"]


def test_reconcile_returns_same_draft_when_consistent(
    karnataka_destinations: list[Destination],
) -> None:
    draft = make_draft()

    assert reconcile_destinations(draft, karnataka_destinations) is draft


def test_reconcile_against_empty_list_clears_everything() -> None:
    draft = make_draft()

    updated = reconcile_destinations(draft, [])

    assert updated.primary_destination == ""
    assert updated.other_destinations == []


def test_cascade_invariant_holds_for_every_choice(
    karnataka_destinations: list[Destination], kerala_destinations: list[Destination]
) -> None:
    """After state change + reconcile, choices belong to the scoped list or are empty."""
    catalogs = {"Karnataka": karnataka_destinations, "Kerala": kerala_destinations}
    names = ["Gokarna", "Hubli", "Munnar", "Kochi", ""]

    for primary in names:
        for others in ([], ["Hubli"], ["Munnar", "Kochi"], ["Gokarna", "Munnar"]):
            for state, available in catalogs.items():
                draft = make_draft(primary_destination=primary, other_destinations=others)
                draft = reconcile_destinations(on_state_changed(draft, state), available)
                allowed = {d.name for d in available}

                assert draft.primary_destination in allowed | {""}
                assert set(draft.other_destinations) <= allowed
                assert draft.primary_destination not in draft.other_destinations


def test_destinations_overlap_is_fuzzy_both_ways() -> None:
    assert destinations_overlap("Gokarna Beach", "gokarna")
    assert destinations_overlap("GOKARNA", "Gokarna Beach")
    assert destinations_overlap(" Hubli ", "hubli")
    assert not destinations_overlap("Munnar", "Gokarna")


def test_destinations_overlap_ignores_blank_names() -> None:
    assert not destinations_overlap("", "Gokarna")
    assert not destinations_overlap("Gokarna", "  ")


def test_filter_day_itineraries_without_primary_returns_all() -> None:
    itineraries = [
        DayItinerary(id=1, name="A", destinations=["Munnar"]),
        DayItinerary(id=2, name="B", destinations=[]),
    ]
    draft = make_draft(primary_destination="", other_destinations=[])

    assert list(filter_day_itineraries(draft, itineraries)) == itineraries


def test_filter_day_itineraries_matches_primary_and_others() -> None:
    itineraries = [
        DayItinerary(id=1, name="Beach", destinations=["Gokarna Beach"]),
        DayItinerary(id=2, name="Heritage", destinations=["Hubli"]),
        DayItinerary(id=3, name="Tea", destinations=["Munnar"]),
        DayItinerary(id=4, name="Untagged", destinations=[]),
    ]
    draft = make_draft()

    result = [it.id for it in filter_day_itineraries(draft, itineraries)]

    assert result == [1, 2]


def test_filter_day_itineraries_is_lazy() -> None:
    def endless():
        n = 0
        while True:
            n += 1
            yield DayItinerary(id=n, name=f"Day {n}", destinations=["Gokarna"])

    draft = make_draft()
    results = filter_day_itineraries(draft, endless())

    assert next(results).id == 1
    assert next(results).id == 2


def test_filter_vehicle_types_requires_exact_state(vehicle_types: list[VehicleType]) -> None:
    draft = make_draft()

    result = filter_vehicle_types(draft, vehicle_types)

    assert [vt.id for vt in result] == [1, 2]
    assert filter_vehicle_types(make_draft(state="karnataka"), vehicle_types) == []


def test_pickup_drop_options_are_destination_names(
    karnataka_destinations: list[Destination],
) -> None:
    assert pickup_drop_options(karnataka_destinations) == ["Gokarna", "Hubli"]


def test_suggest_other_destinations_excludes_chosen() -> None:
    available = [
        Destination(name="Gokarna", state="Karnataka"),
        Destination(name="Hubli", state="Karnataka"),
        Destination(name="Honnavar", state="Karnataka"),
        Destination(name="Murudeshwar", state="Karnataka"),
    ]
    draft = make_draft()

    assert [d.name for d in suggest_other_destinations(draft, available)] == [
        "Honnavar",
        "Murudeshwar",
    ]
    assert [d.name for d in suggest_other_destinations(draft, available, "MURU")] == [
        "Murudeshwar"
    ]
    assert len(suggest_other_destinations(draft, available, limit=1)) == 1


def test_suggest_other_destinations_needs_state() -> None:
    available = [Destination(name="Gokarna", state="Karnataka")]

    assert suggest_other_destinations(make_draft(state=""), available) == []


def test_set_primary_removes_it_from_others() -> None:
    draft = make_draft(other_destinations=["Hubli", "Honnavar"])

    updated = set_primary_destination(draft, "Hubli")

    assert updated.primary_destination == "Hubli"
    assert updated.other_destinations == ["Honnavar"]


def test_add_and_remove_other_destination() -> None:
    draft = make_draft(other_destinations=[])

    draft = add_other_destination(draft, " Hubli ")
    draft = add_other_destination(draft, "Hubli")
    draft = add_other_destination(draft, "Gokarna")

    assert draft.other_destinations == ["Hubli"]

    assert remove_other_destination(draft, "Hubli").other_destinations == []
