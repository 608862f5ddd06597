"""Request-scoped dependencies for the API routes."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, status

from backend.app.adapters.store import StoreClient
from backend.app.builder.draft import DraftValidationError
from backend.app.db.repositories import PackageOperationError, PackageRepository


async def get_store_client() -> AsyncGenerator[StoreClient, None]:
    """Store client for one request, closed afterwards."""
    client = StoreClient.from_settings()
    try:
        yield client
    finally:
        await client.aclose()


async def get_repository(
    client: Annotated[StoreClient, Depends(get_store_client)],
) -> PackageRepository:
    return PackageRepository(client)


def operation_http_error(exc: PackageOperationError) -> HTTPException:
    """Map a failed store operation onto an HTTP error with its user message."""
    code = (
        status.HTTP_404_NOT_FOUND
        if exc.status_code == status.HTTP_404_NOT_FOUND
        else status.HTTP_502_BAD_GATEWAY
    )
    return HTTPException(status_code=code, detail=exc.message)


def validation_http_error(exc: DraftValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"message": str(exc), "field": exc.field, "tab": exc.tab.value},
    )
