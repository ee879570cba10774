"""
In-memory Inventory Store (process-local)

Selected with STORE_BACKEND=memory and used by the unit tests. Writes are
staged per unit of work and applied to the shared state only on commit, so a
failed admission leaves the ledger untouched exactly like the SQL adapter.
Serialization between units of work comes from the per-key booking lock.
"""

from datetime import datetime, timezone
import itertools
from typing import Optional

import attrs

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.movie_booking.app.interface.i_inventory_store import IInventoryStore
from src.service.movie_booking.domain.entity.booking_entity import Booking
from src.service.movie_booking.domain.entity.inventory_entity import Inventory
from src.service.movie_booking.domain.value_object.inventory_key import (
    InventoryKey,
    normalize_name,
)


class InMemoryInventoryState:
    """Committed data shared by every InMemoryUnitOfWork of one container."""

    def __init__(self) -> None:
        self.inventories: dict[InventoryKey, Inventory] = {}
        self.bookings: list[Booking] = []
        self._ids = itertools.count(1)

    def next_id(self) -> int:
        return next(self._ids)


class InMemoryInventoryStore(IInventoryStore):
    def __init__(self, *, state: InMemoryInventoryState) -> None:
        self.state = state
        self.pending_inventories: dict[InventoryKey, Optional[Inventory]] = {}  # None = deleted
        self.pending_bookings: list[Booking] = []

    def _current(self, key: InventoryKey) -> Optional[Inventory]:
        if key in self.pending_inventories:
            return self.pending_inventories[key]
        return self.state.inventories.get(key)

    @Logger.io
    async def find_inventory(
        self, *, key: InventoryKey, for_update: bool = False
    ) -> Optional[Inventory]:
        return self._current(key)

    @Logger.io
    async def save_inventory(self, *, inventory: Inventory) -> Inventory:
        key = inventory.key
        existing = self._current(key)
        if inventory.id is None:
            if existing is not None:
                raise ConflictError('Movie already exists in this theatre')
            now = datetime.now(timezone.utc)
            inventory = attrs.evolve(
                inventory,
                id=self.state.next_id(),
                created_at=inventory.created_at or now,
                updated_at=inventory.updated_at or now,
            )
        self.pending_inventories[key] = inventory
        return inventory

    @Logger.io
    async def sum_booked_seats(self, *, key: InventoryKey) -> int:
        return sum(
            booking.seat_count
            for booking in (*self.state.bookings, *self.pending_bookings)
            if booking.key == key
        )

    @Logger.io
    async def save_booking(self, *, booking: Booking) -> Booking:
        self.pending_bookings.append(booking)
        return booking

    @Logger.io
    async def list_inventories(
        self, *, movie_name_contains: Optional[str] = None
    ) -> list[Inventory]:
        keys = {*self.state.inventories, *self.pending_inventories}
        inventories = [inv for key in keys if (inv := self._current(key)) is not None]
        if movie_name_contains:
            fragment = normalize_name(movie_name_contains)
            inventories = [inv for inv in inventories if fragment in inv.key.movie]
        return sorted(inventories, key=lambda inv: inv.id or 0)

    @Logger.io
    async def delete_inventory(self, *, key: InventoryKey) -> bool:
        if self._current(key) is None:
            return False
        self.pending_inventories[key] = None
        return True

    def apply(self) -> None:
        for key, inventory in self.pending_inventories.items():
            if inventory is None:
                self.state.inventories.pop(key, None)
            else:
                self.state.inventories[key] = inventory
        self.state.bookings.extend(self.pending_bookings)
        self.discard()

    def discard(self) -> None:
        self.pending_inventories.clear()
        self.pending_bookings.clear()


class InMemoryUnitOfWork(AbstractUnitOfWork):
    def __init__(self, *, state: InMemoryInventoryState) -> None:
        self.state = state

    async def __aenter__(self) -> AbstractUnitOfWork:
        self._store = InMemoryInventoryStore(state=self.state)
        self.inventory_store = self._store
        return await super().__aenter__()

    async def _commit(self) -> None:
        self._store.apply()

    async def rollback(self) -> None:
        self._store.discard()
