"""Package builder endpoints - catalogs and draft transitions.

The admin UI keeps the draft and posts it with each event; these routes run
the cascade, rate matching and option filtering on it and return the result.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from backend.app.adapters.store import StoreClient, StoreError, error_message
from backend.app.api.deps import get_repository, get_store_client, validation_http_error
from backend.app.builder import cascade
from backend.app.builder.draft import (
    DraftValidationError,
    package_context,
    quick_add_suggestions,
    validate_for_save,
)
from backend.app.builder.pricing import vehicle_lines_total
from backend.app.builder.rates import match_rate
from backend.app.builder.session import PackageBuilderSession
from backend.app.catalogs.loader import fetch_transfer_rates, load_catalogs, load_destinations
from backend.app.config import get_settings
from backend.app.db.repositories import PackageRepository
from backend.app.models.catalogs import Catalogs, DayItinerary, Destination, VehicleType
from backend.app.models.package import PackageDraft

router = APIRouter(tags=["builder"])

Client = Annotated[StoreClient, Depends(get_store_client)]
Repository = Annotated[PackageRepository, Depends(get_repository)]


class StateChangeRequest(BaseModel):
    """Request body for POST /builder/state."""

    draft: PackageDraft
    state: str = ""


class DraftWithDestinations(BaseModel):
    """Draft after a cascade step, with the destinations now on offer."""

    draft: PackageDraft
    destinations: list[Destination]


class ReconcileRequest(BaseModel):
    """Request body for POST /builder/reconcile."""

    draft: PackageDraft
    destinations: list[Destination]


class OptionsRequest(BaseModel):
    """Request body for POST /builder/options."""

    draft: PackageDraft
    query: str = ""


class BuilderOptions(BaseModel):
    """Choices the builder tabs offer for the current draft."""

    destinations: list[Destination]
    other_destination_suggestions: list[Destination]
    pickup_drop_points: list[str]
    day_itineraries: list[DayItinerary]
    vehicle_types: list[VehicleType]
    inclusion_suggestions: list[str]
    exclusion_suggestions: list[str]
    package_context: str | None
    vehicle_lines_total: float


class VehicleTypeRequest(BaseModel):
    """Request body for POST /builder/vehicle-type."""

    draft: PackageDraft
    index: int = Field(..., ge=0)
    vehicle_type: str


class RateMatchResponse(BaseModel):
    """Response for GET /builder/rate."""

    price: float | None


async def _session(
    client: StoreClient, repository: PackageRepository, draft: PackageDraft
) -> PackageBuilderSession:
    session = PackageBuilderSession(client, repository)
    session.draft = draft
    await session.load_catalogs()
    await session.refresh_destinations()
    return session


@router.get("/catalogs", response_model=Catalogs)
async def get_catalogs(client: Client) -> Catalogs:
    """All master catalogs; a failing catalog comes back empty."""
    return await load_catalogs(client)


@router.get("/destinations", response_model=list[Destination])
async def get_destinations(
    client: Client, state: Annotated[str, Query(max_length=100)] = ""
) -> list[Destination]:
    return await load_destinations(client, state) or []


@router.post("/builder/state", response_model=DraftWithDestinations)
async def change_state(
    request: StateChangeRequest, client: Client, repository: Repository
) -> DraftWithDestinations:
    """Select a state: clear destination choices and load its destinations."""
    session = PackageBuilderSession(client, repository)
    session.draft = request.draft
    draft = await session.change_state(request.state)
    return DraftWithDestinations(draft=draft, destinations=session.destinations)


@router.post("/builder/reconcile", response_model=PackageDraft)
async def reconcile(request: ReconcileRequest) -> PackageDraft:
    return cascade.reconcile_destinations(request.draft, request.destinations)


@router.post("/builder/options", response_model=BuilderOptions)
async def builder_options(
    request: OptionsRequest, client: Client, repository: Repository
) -> BuilderOptions:
    session = await _session(client, repository, request.draft)
    draft = session.draft
    limit = get_settings().quick_add_limit

    return BuilderOptions(
        destinations=session.destinations,
        other_destination_suggestions=session.other_destination_suggestions(request.query),
        pickup_drop_points=session.pickup_drop_options(),
        day_itineraries=session.day_itinerary_options(),
        vehicle_types=session.vehicle_type_options(),
        inclusion_suggestions=quick_add_suggestions(
            session.catalogs.notes.inclusions, draft.package_includes, limit
        ),
        exclusion_suggestions=quick_add_suggestions(
            session.catalogs.notes.exclusions, draft.package_excludes, limit
        ),
        package_context=package_context(draft),
        vehicle_lines_total=vehicle_lines_total(draft),
    )


@router.post("/builder/vehicle-type", response_model=PackageDraft)
async def select_vehicle_type(
    request: VehicleTypeRequest, client: Client, repository: Repository
) -> PackageDraft:
    """Choose a vehicle line's type; capacity and price are pre-filled."""
    if request.index >= len(request.draft.package_vehicles):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"No vehicle line at index {request.index}",
        )
    session = await _session(client, repository, request.draft)
    return session.select_vehicle_type(request.index, request.vehicle_type)


@router.get("/builder/rate", response_model=RateMatchResponse)
async def rate(
    client: Client,
    vehicle_type: Annotated[str, Query(min_length=1)],
    destination: Annotated[str, Query(min_length=1)],
) -> RateMatchResponse:
    """Transfer price for a vehicle type at a destination, if the table has one."""
    try:
        rates = await fetch_transfer_rates(client)
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=error_message(e, "Failed to fetch transfers"),
        ) from e
    return RateMatchResponse(price=match_rate(vehicle_type, destination, rates))


@router.post("/builder/validate", status_code=status.HTTP_204_NO_CONTENT)
async def validate(draft: PackageDraft) -> None:
    try:
        validate_for_save(draft)
    except DraftValidationError as e:
        raise validation_http_error(e) from e
