"""Common types and enums shared across all models."""

from enum import Enum


class RecordStatus(str, Enum):
    """Status of a master catalog entry."""

    active = "Active"
    inactive = "Inactive"


class PackageStatus(str, Enum):
    """Lifecycle status of a package."""

    active = "Active"
    inactive = "Inactive"
    draft = "Draft"


class PackageType(str, Enum):
    """Who travels together."""

    private = "Private"
    group = "Group"


class PackageCategory(str, Enum):
    """Price band of a package."""

    budget = "Budget"
    deluxe = "Deluxe"
    premium = "Premium"


class AcType(str, Enum):
    """Vehicle air conditioning."""

    ac = "AC"
    non_ac = "Non-AC"


class BuilderTab(str, Enum):
    """Package builder tab, in display order."""

    general = "general"
    itineraries = "itineraries"
    vehicles = "vehicles"
    includes = "includes"
    excludes = "excludes"


TAB_ORDER: list[BuilderTab] = list(BuilderTab)
