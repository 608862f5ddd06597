"""Package repository backed by the external store, plus the in-memory listing."""

import logging
from dataclasses import dataclass, field
from typing import Any

from backend.app.adapters.store import StoreClient, StoreError, error_message
from backend.app.builder.draft import validate_for_save
from backend.app.builder.pricing import attach_totals
from backend.app.db.normalize import build_outgoing, normalize_incoming
from backend.app.models.package import PackageDraft, PackageRecord

logger = logging.getLogger(__name__)

PACKAGES_PATH = "/api/itineraries"


class PackageOperationError(Exception):
    """A package mutation or listing load failed; message is user-facing."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class PackageListing:
    """Rows shown in the package list, newest first."""

    rows: list[PackageRecord] = field(default_factory=list)

    def search(self, query: str) -> list[PackageRecord]:
        """Rows whose name contains the query (case-insensitive); unnamed rows are hidden."""
        named = [r for r in self.rows if r.name]
        needle = query.strip().lower()
        if not needle:
            return named
        return [r for r in named if needle in r.name.lower()]

    def get(self, package_id: int) -> PackageRecord | None:
        return next((r for r in self.rows if r.id == package_id), None)

    def replace(self, record: PackageRecord) -> None:
        self.rows = [record if r.id == record.id else r for r in self.rows]

    def prepend(self, record: PackageRecord) -> None:
        self.rows = [record, *self.rows]

    def remove(self, package_id: int) -> None:
        self.rows = [r for r in self.rows if r.id != package_id]


class PackageRepository:
    """Create/read/update/duplicate/delete packages against the store.

    Every failing store call raises PackageOperationError and leaves the
    listing untouched.
    """

    def __init__(self, client: StoreClient, listing: PackageListing | None = None) -> None:
        self._client = client
        self.listing = listing if listing is not None else PackageListing()

    @staticmethod
    def _record_from(data: dict[str, Any]) -> PackageRecord | None:
        row = data.get("itinerary")
        return normalize_incoming(row) if isinstance(row, dict) else None

    async def fetch_all(self) -> list[PackageRecord]:
        """Load every package, normalize it and attach its events total.

        Raises:
            PackageOperationError: If the list itself cannot be loaded
        """
        try:
            data = await self._client.get(PACKAGES_PATH)
        except StoreError as e:
            logger.error(f"Failed to load packages: {error_message(e)}")
            raise PackageOperationError("Failed to load itineraries", e.status_code) from e

        rows = [normalize_incoming(r) for r in data.get("itineraries") or [] if isinstance(r, dict)]
        self.listing.rows = await attach_totals(self._client, rows)
        logger.info(f"Loaded {len(self.listing.rows)} packages")
        return self.listing.rows

    async def get(self, package_id: int) -> PackageRecord:
        try:
            data = await self._client.get(f"{PACKAGES_PATH}/{package_id}")
        except StoreError as e:
            raise PackageOperationError(
                error_message(e, "Failed to load package"), e.status_code
            ) from e

        record = self._record_from(data)
        if record is None:
            raise PackageOperationError("Package not found", 404)
        return record

    async def _refresh(self) -> None:
        try:
            await self.fetch_all()
        except PackageOperationError as e:
            logger.warning(f"Listing refresh after save failed: {e.message}")

    async def save(self, draft: PackageDraft) -> PackageRecord | None:
        """Insert (no id) or update (with id) a package.

        Raises:
            DraftValidationError: If required fields are missing
            PackageOperationError: If the store rejects the write
        """
        validate_for_save(draft)
        payload = build_outgoing(draft)

        try:
            if draft.id is None:
                data = await self._client.post(PACKAGES_PATH, json=payload)
            else:
                data = await self._client.put(f"{PACKAGES_PATH}/{draft.id}", json=payload)
        except StoreError as e:
            logger.error(f"Package save failed: {error_message(e)}")
            raise PackageOperationError(
                error_message(e, "Failed to save package"), e.status_code
            ) from e

        record = self._record_from(data)
        if record is None:
            return None

        if draft.id is None:
            self.listing.prepend(record)
        else:
            self.listing.replace(record)
        logger.info(f"Saved package {record.id} ({'insert' if draft.id is None else 'update'})")

        await self._refresh()
        refreshed = self.listing.get(record.id) if record.id is not None else None
        return refreshed or record

    async def duplicate(self, existing: PackageRecord) -> PackageRecord | None:
        """Create a copy of a persisted package; the store assigns the new id."""
        payload = {k: v for k, v in existing.raw.items() if k not in ("id", "totalPrice")}
        if not payload:
            payload = build_outgoing(existing)
        payload["name"] = f"{existing.name} Copy"

        try:
            data = await self._client.post(PACKAGES_PATH, json=payload)
        except StoreError as e:
            raise PackageOperationError(
                error_message(e, "Failed to duplicate"), e.status_code
            ) from e

        record = self._record_from(data)
        if record is not None:
            self.listing.prepend(record)
        return record

    async def remove(self, package_id: int) -> None:
        """Delete a package. Confirmation is the caller's job."""
        try:
            await self._client.delete(f"{PACKAGES_PATH}/{package_id}")
        except StoreError as e:
            raise PackageOperationError(
                error_message(e, "Failed to delete package"), e.status_code
            ) from e

        self.listing.remove(package_id)
        logger.info(f"Deleted package {package_id}")

    async def toggle_marketplace(self, record: PackageRecord) -> PackageRecord:
        """Flip the marketplace sharing flag of a package."""
        shared = not record.marketplace_shared
        try:
            await self._client.put(
                f"{PACKAGES_PATH}/{record.id}", json={"marketplace_shared": shared}
            )
        except StoreError as e:
            raise PackageOperationError(
                error_message(e, "Error updating marketplace status"), e.status_code
            ) from e

        updated = record.model_copy(update={"marketplace_shared": shared})
        self.listing.replace(updated)
        return updated
