"""
Inventory Store Interface

Port the booking core reads and mutates inventory and the booking ledger
through. Every lookup is keyed by the case-insensitive InventoryKey.
Implementations run inside the caller's unit of work and never commit.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.service.movie_booking.domain.entity.booking_entity import Booking
from src.service.movie_booking.domain.entity.inventory_entity import Inventory
from src.service.movie_booking.domain.value_object.inventory_key import InventoryKey


class IInventoryStore(ABC):
    @abstractmethod
    async def find_inventory(
        self, *, key: InventoryKey, for_update: bool = False
    ) -> Optional[Inventory]:
        """
        Args:
            key: Normalized (movie, theatre) identity
            for_update: Lock the inventory row until the transaction ends

        Raises:
            StoreUnavailableError: If the store cannot be reached
        """
        pass

    @abstractmethod
    async def save_inventory(self, *, inventory: Inventory) -> Inventory:
        """Insert or update by key. Raises ConflictError when inserting a duplicate key."""
        pass

    @abstractmethod
    async def sum_booked_seats(self, *, key: InventoryKey) -> int:
        """Sum of seat_count over every booking recorded for the key (0 when none)."""
        pass

    @abstractmethod
    async def save_booking(self, *, booking: Booking) -> Booking:
        pass

    @abstractmethod
    async def list_inventories(
        self, *, movie_name_contains: Optional[str] = None
    ) -> list[Inventory]:
        pass

    @abstractmethod
    async def delete_inventory(self, *, key: InventoryKey) -> bool:
        """Remove the inventory record; the booking ledger is kept. Returns False if absent."""
        pass
