"""Health check endpoints.

- /health: process is up
- /healthz: external store reachability, with component details
"""

from typing import Any

from fastapi import APIRouter, Response

from backend.app.adapters.store import StoreClient, StoreError
from backend.app.config import Settings, get_settings

router = APIRouter()


async def check_store(settings: Settings) -> tuple[bool, str]:
    """Check that the external store answers the states catalog.

    Returns:
        (is_ok, status_message)
    """
    try:
        async with StoreClient.from_settings(settings) as client:
            await client.get("/api/states")
        return (True, "ok")
    except StoreError as e:
        return (False, f"error: {e.status_code or type(e.__cause__).__name__}")


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz() -> dict[str, Any] | Response:
    """Health check endpoint.

    Returns:
        200 with component status if the store is reachable
        503 otherwise (the builder still serves degraded, empty catalogs)
    """
    settings = get_settings()

    store_ok, store_status = await check_store(settings)

    response_body = {
        "status": "ok" if store_ok else "degraded",
        "components": {"store": store_status},
    }

    if not store_ok:
        import json

        return Response(
            content=json.dumps(response_body),
            status_code=503,
            media_type="application/json",
        )

    return response_body
