"""Models package - re-exports for convenience."""

from backend.app.models.catalogs import (
    Catalogs,
    DayItinerary,
    Destination,
    NotesLibrary,
    PackageTheme,
    State,
    TransferRate,
    VehicleType,
)
from backend.app.models.common import (
    TAB_ORDER,
    AcType,
    BuilderTab,
    PackageCategory,
    PackageStatus,
    PackageType,
    RecordStatus,
)
from backend.app.models.package import (
    PackageDraft,
    PackageItineraryDay,
    PackageRecord,
    PackageVehicleOption,
)

__all__ = [
    # Common
    "RecordStatus",
    "PackageStatus",
    "PackageType",
    "PackageCategory",
    "AcType",
    "BuilderTab",
    "TAB_ORDER",
    # Catalogs
    "State",
    "Destination",
    "PackageTheme",
    "DayItinerary",
    "VehicleType",
    "TransferRate",
    "NotesLibrary",
    "Catalogs",
    # Package
    "PackageDraft",
    "PackageItineraryDay",
    "PackageVehicleOption",
    "PackageRecord",
]
