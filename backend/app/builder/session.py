"""Package builder session - one draft driven by user events.

Operations run one at a time on a single event loop. Destination fetches are
tagged with a selection generation; a response that arrives after a newer
state change is dropped instead of overwriting the newer list.
"""

import logging

from backend.app.adapters.store import StoreClient
from backend.app.builder import cascade, draft as draft_ops, rates
from backend.app.catalogs.loader import load_catalogs, load_destinations
from backend.app.config import get_settings
from backend.app.db.repositories import PackageRepository
from backend.app.models.catalogs import Catalogs, DayItinerary, Destination, VehicleType
from backend.app.models.package import PackageDraft, PackageRecord

logger = logging.getLogger(__name__)


class PackageBuilderSession:
    """Stateful wrapper around the pure draft transitions."""

    def __init__(
        self,
        client: StoreClient,
        repository: PackageRepository,
        catalogs: Catalogs | None = None,
    ) -> None:
        self._client = client
        self._repository = repository
        self.catalogs = catalogs or Catalogs()
        self.draft = PackageDraft()
        self.destinations: list[Destination] = []
        self.generation = 0

    async def load_catalogs(self) -> Catalogs:
        self.catalogs = await load_catalogs(self._client)
        return self.catalogs

    async def open(self, record: PackageRecord | None = None) -> PackageDraft:
        """Start a new draft, or edit a persisted package."""
        self.draft = draft_ops.draft_from_record(record) if record else PackageDraft()
        await self.refresh_destinations()
        return self.draft

    async def refresh_destinations(self) -> list[Destination]:
        """Refetch destinations for the current state and reconcile the draft."""
        self.generation += 1
        generation = self.generation
        state = self.draft.state

        destinations = await load_destinations(self._client, state)

        if generation != self.generation:
            logger.debug(
                f"Dropping destinations for {state!r} (generation {generation}, "
                f"current {self.generation})"
            )
            return self.destinations

        if destinations is None:
            # Fetch failed: show no options but keep the current choices.
            self.destinations = []
            return self.destinations

        self.destinations = destinations
        if self.draft.state:
            self.draft = cascade.reconcile_destinations(self.draft, destinations)
        return self.destinations

    async def change_state(self, new_state: str) -> PackageDraft:
        """Select a state, clear dependent choices and reload destinations."""
        self.draft = cascade.on_state_changed(self.draft, new_state)
        await self.refresh_destinations()
        return self.draft

    def set_primary_destination(self, name: str) -> PackageDraft:
        self.draft = cascade.set_primary_destination(self.draft, name)
        return self.draft

    def add_other_destination(self, name: str) -> PackageDraft:
        self.draft = cascade.add_other_destination(self.draft, name)
        return self.draft

    def remove_other_destination(self, name: str) -> PackageDraft:
        self.draft = cascade.remove_other_destination(self.draft, name)
        return self.draft

    def other_destination_suggestions(self, query: str = "") -> list[Destination]:
        return cascade.suggest_other_destinations(
            self.draft,
            self.destinations,
            query,
            limit=get_settings().other_destination_suggestion_limit,
        )

    def day_itinerary_options(self) -> list[DayItinerary]:
        return list(cascade.filter_day_itineraries(self.draft, self.catalogs.day_itineraries))

    def vehicle_type_options(self) -> list[VehicleType]:
        return cascade.filter_vehicle_types(self.draft, self.catalogs.vehicle_types)

    def pickup_drop_options(self) -> list[str]:
        return cascade.pickup_drop_options(self.destinations)

    def select_vehicle_type(self, index: int, vehicle_type_name: str) -> PackageDraft:
        self.draft = rates.select_vehicle_type(
            self.draft,
            index,
            vehicle_type_name,
            self.vehicle_type_options(),
            self.catalogs.transfer_rates,
        )
        return self.draft

    async def save(self) -> PackageRecord | None:
        """Persist the draft; on success the session starts a fresh draft."""
        record = await self._repository.save(self.draft)
        self.draft = PackageDraft()
        return record
