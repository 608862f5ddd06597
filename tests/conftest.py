"""Shared pytest fixtures for all test suites."""

import pytest

from backend.app.adapters.store import StoreClient
from backend.app.models.catalogs import Destination, TransferRate, VehicleType
from tests.fakes import FakeStore, destinations_handler


@pytest.fixture
def fake_store() -> FakeStore:
    """Empty fake store; tests register the routes they need."""
    return FakeStore()


@pytest.fixture
def store_client(fake_store: FakeStore) -> StoreClient:
    return fake_store.client()


@pytest.fixture
def catalog_store(fake_store: FakeStore) -> FakeStore:
    """Fake store with every master catalog populated."""
    fake_store.on("GET", "/api/destinations", destinations_handler)
    fake_store.on(
        "GET",
        "/api/states",
        {
            "states": [
                {"id": 1, "name": "Karnataka", "code": "KA", "status": "Active"},
                {"id": 2, "name": "Kerala", "code": "KL", "status": "Active"},
                {"id": 3, "name": "Goa", "code": "GA", "status": "Inactive"},
            ]
        },
    )
    fake_store.on(
        "GET",
        "/api/package-themes",
        {"packageThemes": [{"id": 1, "name": "Beach", "status": "Active"}]},
    )
    fake_store.on(
        "GET",
        "/api/day-itineraries",
        {
            "dayItineraries": [
                {"id": 10, "name": "Gokarna Beach Hop", "numDays": 1,
                 "destinations": ["Gokarna Beach"], "status": "Active"},
                {"id": 11, "title": "Hubli Heritage", "num_days": 2,
                 "destinations": ["Hubli"], "status": "Active"},
                {"id": 12, "name": "Munnar Tea Trail", "destinations": ["Munnar"],
                 "status": "Active"},
                {"id": 13, "name": "Retired Plan", "destinations": ["Gokarna"],
                 "status": "Inactive"},
            ]
        },
    )
    fake_store.on(
        "GET",
        "/api/vehicle-types",
        {
            "vehicleTypes": [
                {"id": 1, "vehicle_type": "Sedan", "capacity": 4, "state": "Karnataka",
                 "status": "Active"},
                {"id": 2, "vehicle_type": "Tempo Traveller", "capacity": 12,
                 "state": "Karnataka", "status": "Active"},
                {"id": 3, "vehicle_type": "Sedan", "capacity": 4, "state": "Kerala",
                 "status": "Active"},
            ]
        },
    )
    fake_store.on(
        "GET",
        "/api/transfers",
        {
            "transfers": [
                {"vehicle_type": "Sedan", "destination": "Gokarna", "price": 3500},
                {"vehicle_type": "Tempo Traveller", "destination": "Gokarna", "price": "7200"},
                {"vehicle_type": "Sedan", "destination": "Munnar", "price": 4100},
            ]
        },
    )
    fake_store.on(
        "GET",
        "/api/itinerary-notes-inclusions",
        {
            "notesInclusions": [
                {"title": "Breakfast", "description": "Daily breakfast", "category": "Inclusion",
                 "status": "Active"},
                {"title": "GST", "description": "GST extra", "category": "Exclusion",
                 "status": "Active"},
                {"title": "Old note", "category": "Inclusion", "status": "Inactive"},
            ]
        },
    )
    return fake_store


@pytest.fixture
def karnataka_destinations() -> list[Destination]:
    return [
        Destination(id=1, name="Gokarna", state="Karnataka"),
        Destination(id=2, name="Hubli", state="Karnataka"),
    ]


@pytest.fixture
def kerala_destinations() -> list[Destination]:
    return [
        Destination(id=4, name="Munnar", state="Kerala"),
        Destination(id=5, name="Kochi", state="Kerala"),
    ]


@pytest.fixture
def vehicle_types() -> list[VehicleType]:
    return [
        VehicleType(id=1, vehicle_type="Sedan", capacity=4, state="Karnataka"),
        VehicleType(id=2, vehicle_type="Tempo Traveller", capacity=12, state="Karnataka"),
        VehicleType(id=3, vehicle_type="Sedan", capacity=4, state="Kerala"),
    ]


@pytest.fixture
def rate_table() -> list[TransferRate]:
    return [
        TransferRate(vehicle_type="Sedan", destination="Gokarna", price=3500),
        TransferRate(vehicle_type="Tempo Traveller", destination="Gokarna", price=7200),
        TransferRate(vehicle_type="Sedan", destination="Munnar", price=4100),
    ]
