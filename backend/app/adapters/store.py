"""External data store adapter - generic JSON request/response over HTTP.

Every catalog read, package mutation and event fetch goes through
StoreClient.request. Failures surface as StoreError; callers decide whether
to degrade (catalogs, totals) or report (mutations).
"""

import time
from types import TracebackType
from typing import Any

import httpx

from backend.app.config import Settings, get_settings
from backend.app.utils.logging import StructuredStoreLogger
from backend.app.utils.metrics import PrometheusStoreMetrics

GENERIC_ERROR = "API request failed"


class StoreError(Exception):
    """Request to the external store failed."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.data = data or {}


def error_message(exc: BaseException, fallback: str | None = None) -> str:
    """Derive the user-facing message for a failed store call.

    Args:
        exc: Raised exception
        fallback: Message used when the error carries none

    Returns:
        Payload ``error`` field, else exception text, else fallback
    """
    if isinstance(exc, StoreError):
        payload_error = exc.data.get("error")
        if isinstance(payload_error, str) and payload_error:
            return payload_error
        return str(exc) or fallback or GENERIC_ERROR
    return str(exc) or fallback or "An unexpected error occurred"


class StoreClient:
    """Async client for the external store."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
        metrics: PrometheusStoreMetrics | None = None,
        logger: StructuredStoreLogger | None = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: Store root URL (trailing slash ignored)
            token: Optional bearer token
            timeout: Per-request timeout in seconds
            client: Optional httpx client (for testing with mocks)
            metrics: Metrics recorder
            logger: Structured logger
        """
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._metrics = metrics or PrometheusStoreMetrics()
        self._logger = logger or StructuredStoreLogger()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "StoreClient":
        """Build a client from application settings."""
        settings = settings or get_settings()
        return cls(
            base_url=settings.store_base_url,
            token=settings.store_api_token,
            timeout=settings.store_timeout_seconds,
        )

    def resolve_url(self, path: str) -> str:
        """Map a store path onto a full URL.

        ``/api/...`` paths hang off the base URL, absolute URLs are kept,
        anything else is placed under ``/api``.
        """
        if path.startswith("/api"):
            return f"{self.base_url}{path}"
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}/api{path}"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        json: Any | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Send one request and decode the JSON body.

        Raises:
            StoreError: On transport failure or non-2xx status
        """
        url = self.resolve_url(path)
        start = time.monotonic()

        try:
            response = await self._client.request(
                method, url, json=json, params=params, headers=self._headers()
            )
        except httpx.HTTPError as e:
            elapsed_ms = (time.monotonic() - start) * 1000
            self._metrics.record_latency(method, "transport_error", elapsed_ms)
            self._metrics.inc_error(method, "transport_error")
            self._logger.log_request(
                method, path, "transport_error", elapsed_ms, error_reason=type(e).__name__
            )
            raise StoreError(str(e) or GENERIC_ERROR) from e

        elapsed_ms = (time.monotonic() - start) * 1000

        if not response.is_success:
            try:
                data = response.json()
            except ValueError:
                data = {"error": GENERIC_ERROR}
            if not isinstance(data, dict):
                data = {"error": GENERIC_ERROR}

            self._metrics.record_latency(method, "http_error", elapsed_ms)
            self._metrics.inc_error(method, f"http_{response.status_code}")
            self._logger.log_request(
                method,
                path,
                "http_error",
                elapsed_ms,
                status_code=response.status_code,
                error_reason=str(data.get("error") or ""),
            )
            raise StoreError(
                str(data.get("error") or GENERIC_ERROR),
                status_code=response.status_code,
                data=data,
            )

        self._metrics.record_latency(method, "success", elapsed_ms)
        self._logger.log_request(
            method, path, "success", elapsed_ms, status_code=response.status_code
        )

        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as e:
            raise StoreError("Store returned a non-JSON body", response.status_code) from e
        return body if isinstance(body, dict) else {"data": body}

    async def get(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any) -> dict[str, Any]:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any) -> dict[str, Any]:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> dict[str, Any]:
        return await self.request("DELETE", path)

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "StoreClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
