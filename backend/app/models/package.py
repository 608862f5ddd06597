"""Package models - the builder draft and the normalized persisted row."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from backend.app.models.common import AcType, PackageCategory, PackageStatus, PackageType
from backend.app.utils.numbers import coerce_int, parse_price


class PackageItineraryDay(BaseModel):
    """One day slot of the package, optionally bound to a day-itinerary."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    day_number: int = Field(..., ge=1)
    day_itinerary_id: int | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("day_number", mode="before")
    @classmethod
    def _coerce_day_number(cls, value: Any) -> int:
        # Renumbered from list position on load
        return max(coerce_int(value, 1), 1)

    @field_validator("day_itinerary_id", mode="before")
    @classmethod
    def _coerce_day_itinerary_id(cls, value: Any) -> int | None:
        if value is None or value == "":
            return None
        return coerce_int(value, 0) or None


class PackageVehicleOption(BaseModel):
    """Vehicle/price line of the package."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    vehicle_type: str = ""
    capacity: int = 0  # copied from the VehicleType at selection time
    price: float = 0.0
    ac_type: AcType = AcType.ac

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("vehicle_type", mode="before")
    @classmethod
    def _coerce_vehicle_type(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("capacity", mode="before")
    @classmethod
    def _coerce_capacity(cls, value: Any) -> int:
        return coerce_int(value, 0)

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> float:
        return parse_price(value)

    @field_validator("ac_type", mode="before")
    @classmethod
    def _coerce_ac_type(cls, value: Any) -> Any:
        return AcType.ac if value in (None, "") else value


class PackageDraft(BaseModel):
    """In-progress package configuration edited through the builder tabs.

    Invariants:
    - primary_destination never appears in other_destinations
    - day_number of package_itineraries equals list index + 1
    - total price is never stored here; see builder.pricing
    """

    id: int | None = None
    status: PackageStatus = PackageStatus.active

    # Legacy listing fields
    name: str = ""
    start_date: str | None = None
    end_date: str | None = None
    adults: int = 1
    children: int = 0
    notes: str = ""
    marketplace_shared: bool = False

    # General tab
    state: str = ""
    primary_destination: str = ""
    other_destinations: list[str] = Field(default_factory=list)
    num_days: int = 1
    num_nights: int = 0
    package_type: PackageType | None = None
    package_category: PackageCategory | None = None
    package_theme: str = ""
    pickup_point: str = ""
    drop_point: str = ""
    short_description: str = ""

    package_itineraries: list[PackageItineraryDay] = Field(default_factory=list)
    package_vehicles: list[PackageVehicleOption] = Field(default_factory=list)
    package_includes: list[str] = Field(default_factory=list)
    package_excludes: list[str] = Field(default_factory=list)


class PackageRecord(BaseModel):
    """Persisted package after normalization from the store's wire format.

    List fields may still hold the raw stored string when it was not valid
    JSON; consumers must check before iterating.
    """

    id: int | None = None
    name: str = ""
    status: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    adults: int | None = None
    children: int | None = None
    notes: str | None = None
    marketplace_shared: bool = False
    destinations: str = ""
    created_at: str | None = None
    updated_at: str | None = None

    state: str | None = None
    primary_destination: str | None = None
    other_destinations: list[str] | str = Field(default_factory=list)
    num_days: int | None = None
    num_nights: int | None = None
    package_type: str | None = None
    package_category: str | None = None
    package_theme: str | None = None
    pickup_point: str | None = None
    drop_point: str | None = None
    short_description: str | None = None

    package_itineraries: list[PackageItineraryDay] | str = Field(default_factory=list)
    package_vehicles: list[PackageVehicleOption] | str = Field(default_factory=list)
    package_includes: list[str] | str = Field(default_factory=list)
    package_excludes: list[str] | str = Field(default_factory=list)

    # Sum of the package's event prices, filled by builder.pricing.attach_totals
    total_price: float = 0.0

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
