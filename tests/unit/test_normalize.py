"""Tests for store wire-format normalization."""

import json

import pytest

from backend.app.builder.draft import draft_from_record
from backend.app.db.normalize import (
    build_outgoing,
    joined_destinations,
    normalize_incoming,
    parse_json_field,
)
from backend.app.models.common import PackageCategory, PackageType
from backend.app.models.package import PackageDraft, PackageItineraryDay, PackageVehicleOption


def test_parse_json_field() -> None:
    assert parse_json_field('["Munnar","Kochi"]') == ["Munnar", "Kochi"]
    assert parse_json_field("Munnar, Kochi") == "Munnar, Kochi"
    assert parse_json_field("") is None
    assert parse_json_field(None) is None
    assert parse_json_field(["already"]) == ["already"]


def test_snake_case_wins_over_camel_case() -> None:
    record = normalize_incoming(
        {"id": 1, "primary_destination": "Gokarna", "primaryDestination": "Hubli"}
    )

    assert record.primary_destination == "Gokarna"


def test_camel_case_used_when_snake_case_empty() -> None:
    record = normalize_incoming(
        {
            "id": 1,
            "primary_destination": "",
            "primaryDestination": "Hubli",
            "pickupPoint": "Hubli Airport",
            "numDays": 4,
        }
    )

    assert record.primary_destination == "Hubli"
    assert record.pickup_point == "Hubli Airport"
    assert record.num_days == 4


def test_zero_is_not_treated_as_missing() -> None:
    record = normalize_incoming({"id": 1, "num_nights": 0, "numNights": 3})

    assert record.num_nights == 0


def test_string_encoded_lists_are_parsed() -> None:
    record = normalize_incoming(
        {
            "id": 3,
            "other_destinations": '["Munnar","Kochi"]',
            "packageItineraries": json.dumps(
                [{"id": "day-1", "dayNumber": 1, "dayItineraryId": 12}]
            ),
            "package_vehicles": [
                {"id": "v1", "vehicleType": "Sedan", "capacity": 4, "price": 4100, "acType": "AC"}
            ],
        }
    )

    assert record.other_destinations == ["Munnar", "Kochi"]
    assert record.package_itineraries == [
        PackageItineraryDay(id="day-1", day_number=1, day_itinerary_id=12)
    ]
    assert record.package_vehicles[0].vehicle_type == "Sedan"
    assert record.package_includes == []


def test_malformed_json_passes_through_raw() -> None:
    record = normalize_incoming({"id": 4, "other_destinations": "Munnar, Kochi"})

    assert record.other_destinations == "Munnar, Kochi"


def test_wrong_shape_passes_through_as_text() -> None:
    record = normalize_incoming({"id": 5, "package_includes": '{"not": "a list"}'})

    assert record.package_includes == '{"not": "a list"}'


def test_raw_row_is_kept_but_not_dumped() -> None:
    row = {"id": 6, "name": "Tea Trails", "totalPrice": 100}

    record = normalize_incoming(row)

    assert record.raw == row
    assert "raw" not in record.model_dump()


def test_joined_destinations() -> None:
    draft = PackageDraft(primary_destination="Gokarna", other_destinations=["Hubli", "Honnavar"])

    assert joined_destinations(draft) == "Gokarna, Hubli, Honnavar"
    assert joined_destinations(PackageDraft(other_destinations=["Hubli"])) == "Hubli"


def test_build_outgoing_payload() -> None:
    draft = PackageDraft(
        name="Coastal Escape",
        state="Karnataka",
        primary_destination="Gokarna",
        other_destinations=["Hubli"],
        num_days=0,
        package_type=PackageType.private,
        package_category=PackageCategory.premium,
        package_itineraries=[PackageItineraryDay(id="day-1", day_number=1, day_itinerary_id=10)],
        package_vehicles=[PackageVehicleOption(id="v1", vehicle_type="Sedan", price=3500)],
        package_includes=["Breakfast included"],
    )

    payload = build_outgoing(draft)

    assert payload["destinations"] == "Gokarna, Hubli"
    assert payload["primaryDestination"] == "Gokarna"
    assert payload["otherDestinations"] == ["Hubli"]
    assert payload["numDays"] == 1
    assert payload["numNights"] == 0
    assert payload["packageType"] == "Private"
    assert payload["packageCategory"] == "Premium"
    assert payload["packageTheme"] == ""
    assert payload["packageItineraries"] == [
        {"id": "day-1", "dayNumber": 1, "dayItineraryId": 10}
    ]
    assert payload["packageVehicles"][0]["vehicleType"] == "Sedan"
    assert payload["packageVehicles"][0]["acType"] == "AC"
    assert payload["packageIncludes"] == ["Breakfast included"]
    assert payload["status"] == "Active"


def test_record_survives_a_trip_through_the_store_format() -> None:
    draft = PackageDraft(
        name="Tea Trails",
        state="Kerala",
        primary_destination="Munnar",
        other_destinations=["Kochi"],
        num_days=3,
        num_nights=2,
        package_type=PackageType.group,
        package_vehicles=[PackageVehicleOption(id="v1", vehicle_type="Sedan", price=4100)],
    )

    stored = build_outgoing(draft)
    stored["otherDestinations"] = json.dumps(stored["otherDestinations"])
    record = normalize_incoming({"id": 9, **stored})

    assert record.primary_destination == "Munnar"
    assert record.other_destinations == ["Kochi"]
    assert record.num_days == 3
    assert record.num_nights == 2
    assert record.package_type == "Group"
    assert record.package_vehicles == draft.package_vehicles


def test_build_outgoing_passes_raw_strings_through() -> None:
    record = normalize_incoming({"id": 4, "name": "Old", "other_destinations": "Munnar, Kochi"})

    payload = build_outgoing(record)

    assert payload["otherDestinations"] == "Munnar, Kochi"
    assert payload["destinations"] == ""
    assert payload["status"] == "Active"


def test_outgoing_preserves_values_of_snake_case_row() -> None:
    raw = {
        "id": 12,
        "name": "Backwaters",
        "state": "Kerala",
        "primary_destination": "Alleppey",
        "other_destinations": '["Munnar","Kochi"]',
        "num_days": "4",
        "num_nights": 3,
        "package_vehicles": json.dumps(
            [{"id": "v1", "vehicleType": "Sedan", "capacity": 4, "price": "4100", "acType": "AC"}]
        ),
    }

    payload = build_outgoing(normalize_incoming(raw))

    assert payload["primaryDestination"] == "Alleppey"
    assert payload["otherDestinations"] == ["Munnar", "Kochi"]
    assert payload["destinations"] == "Alleppey, Munnar, Kochi"
    assert payload["numDays"] == 4
    assert payload["numNights"] == 3
    assert payload["packageVehicles"][0]["price"] == 4100


def test_loosely_typed_lines_survive_edit_and_save() -> None:
    """Null prices/capacities and numeric ids are coerced, not discarded."""
    raw = {
        "id": 7,
        "name": "Coastal Escape",
        "package_vehicles": json.dumps(
            [
                {"id": "v1", "vehicleType": "Sedan", "capacity": 4, "price": 3500, "acType": "AC"},
                {"id": "v2", "vehicleType": "Tempo Traveller", "capacity": None, "price": None},
            ]
        ),
        "package_itineraries": '[{"id": 1, "dayNumber": 1, "dayItineraryId": 10}]',
    }

    record = normalize_incoming(raw)
    payload = build_outgoing(draft_from_record(record))

    assert [line["price"] for line in payload["packageVehicles"]] == [3500, 0]
    assert [line["capacity"] for line in payload["packageVehicles"]] == [4, 0]
    assert payload["packageVehicles"][1]["acType"] == "AC"
    assert payload["packageItineraries"] == [{"id": "1", "dayNumber": 1, "dayItineraryId": 10}]


def test_only_unusable_list_entries_are_dropped() -> None:
    raw = {
        "id": 8,
        "package_vehicles": [{"id": "v1", "vehicleType": "Sedan", "price": "4100"}, "junk"],
        "package_includes": ["Breakfast", {"text": "nested"}, "Toll charges"],
    }

    record = normalize_incoming(raw)

    assert isinstance(record.package_vehicles, list)
    assert [line.price for line in record.package_vehicles] == [4100]
    assert record.package_includes == ["Breakfast", "Toll charges"]


@pytest.mark.parametrize(
    ("stored", "expected"),
    [(True, True), ("true", True), (1, True), ("false", False), ("0", False), (None, False),
     ("maybe", False)],
)
def test_marketplace_flag_parsing(stored: object, expected: bool) -> None:
    assert normalize_incoming({"id": 1, "marketplace_shared": stored}).marketplace_shared is expected


def test_marketplace_flag_camel_case_fallback() -> None:
    record = normalize_incoming({"id": 1, "marketplaceShared": "true"})

    assert record.marketplace_shared is True
