"""Master catalog models - read-only reference data for the package builder."""

from pydantic import BaseModel, Field, field_validator

from backend.app.utils.numbers import parse_price


class State(BaseModel):
    """Administrative state; dependents reference it by name."""

    id: int | None = None
    name: str
    code: str | None = None
    status: str = "Active"


class Destination(BaseModel):
    """Destination scoped to exactly one state (by state name)."""

    id: int | None = None
    name: str
    state: str | None = None
    status: str = "Active"


class PackageTheme(BaseModel):
    """Marketing theme offered on the general tab."""

    id: int | None = None
    name: str
    status: str = "Active"


class DayItinerary(BaseModel):
    """Reusable single/multi-day plan tagged with destination names."""

    id: int
    name: str
    num_days: int = 1
    destinations: list[str] = Field(default_factory=list)


class VehicleType(BaseModel):
    """Vehicle type offered in one state."""

    id: int | None = None
    vehicle_type: str
    capacity: int | None = None
    state: str | None = None


class TransferRate(BaseModel):
    """One row of the transfer rate table (vehicle type x destination)."""

    vehicle_type: str = ""
    destination: str = ""
    price: float = 0.0

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: object) -> float:
        return parse_price(value)


class NotesLibrary(BaseModel):
    """Shared inclusion/exclusion texts used for quick-add."""

    inclusions: list[str] = Field(default_factory=list)
    exclusions: list[str] = Field(default_factory=list)


class Catalogs(BaseModel):
    """Every master catalog the builder needs, loaded together."""

    states: list[State] = Field(default_factory=list)
    package_themes: list[PackageTheme] = Field(default_factory=list)
    day_itineraries: list[DayItinerary] = Field(default_factory=list)
    vehicle_types: list[VehicleType] = Field(default_factory=list)
    transfer_rates: list[TransferRate] = Field(default_factory=list)
    notes: NotesLibrary = Field(default_factory=NotesLibrary)
