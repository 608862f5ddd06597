"""Package endpoints - listing with totals, save, duplicate, delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel

from backend.app.api.deps import get_repository, operation_http_error, validation_http_error
from backend.app.builder.draft import DraftValidationError, draft_from_record
from backend.app.db.repositories import PackageOperationError, PackageRepository
from backend.app.models.package import PackageDraft, PackageRecord

router = APIRouter(prefix="/packages", tags=["packages"])

Repository = Annotated[PackageRepository, Depends(get_repository)]


class PackageListResponse(BaseModel):
    """Response for GET /packages."""

    packages: list[PackageRecord]


class PackageSaveResponse(BaseModel):
    """Response for package writes."""

    package: PackageRecord | None


@router.get("", response_model=PackageListResponse)
async def list_packages(
    repository: Repository,
    search: Annotated[str, Query(max_length=200)] = "",
) -> PackageListResponse:
    """List packages with their events total, optionally filtered by name."""
    try:
        await repository.fetch_all()
    except PackageOperationError as e:
        raise operation_http_error(e) from e
    return PackageListResponse(packages=repository.listing.search(search))


@router.get("/{package_id}", response_model=PackageRecord)
async def get_package(package_id: int, repository: Repository) -> PackageRecord:
    try:
        return await repository.get(package_id)
    except PackageOperationError as e:
        raise operation_http_error(e) from e


@router.get("/{package_id}/draft", response_model=PackageDraft)
async def edit_package(package_id: int, repository: Repository) -> PackageDraft:
    """Editable draft seeded from a persisted package."""
    try:
        record = await repository.get(package_id)
    except PackageOperationError as e:
        raise operation_http_error(e) from e
    return draft_from_record(record)


async def _save(draft: PackageDraft, repository: PackageRepository) -> PackageSaveResponse:
    try:
        record = await repository.save(draft)
    except DraftValidationError as e:
        raise validation_http_error(e) from e
    except PackageOperationError as e:
        raise operation_http_error(e) from e
    return PackageSaveResponse(package=record)


@router.post("", response_model=PackageSaveResponse, status_code=status.HTTP_201_CREATED)
async def create_package(draft: PackageDraft, repository: Repository) -> PackageSaveResponse:
    return await _save(draft.model_copy(update={"id": None}), repository)


@router.put("/{package_id}", response_model=PackageSaveResponse)
async def update_package(
    package_id: int, draft: PackageDraft, repository: Repository
) -> PackageSaveResponse:
    return await _save(draft.model_copy(update={"id": package_id}), repository)


@router.post(
    "/{package_id}/duplicate",
    response_model=PackageSaveResponse,
    status_code=status.HTTP_201_CREATED,
)
async def duplicate_package(package_id: int, repository: Repository) -> PackageSaveResponse:
    try:
        existing = await repository.get(package_id)
        record = await repository.duplicate(existing)
    except PackageOperationError as e:
        raise operation_http_error(e) from e
    return PackageSaveResponse(package=record)


@router.post("/{package_id}/marketplace", response_model=PackageRecord)
async def toggle_marketplace(package_id: int, repository: Repository) -> PackageRecord:
    try:
        existing = await repository.get(package_id)
        return await repository.toggle_marketplace(existing)
    except PackageOperationError as e:
        raise operation_http_error(e) from e


@router.delete("/{package_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_package(package_id: int, repository: Repository) -> Response:
    try:
        await repository.remove(package_id)
    except PackageOperationError as e:
        raise operation_http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
