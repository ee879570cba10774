from datetime import datetime, timezone
from typing import Optional

import attrs

from src.platform.exception.exceptions import ValidationError
from src.service.movie_booking.domain.availability_calculator import Availability, compute_status
from src.service.movie_booking.domain.enum.inventory_status import InventoryStatus
from src.service.movie_booking.domain.enum.rule import InventoryRule
from src.service.movie_booking.domain.value_object.inventory_key import InventoryKey


def _validate_capacity(total_capacity: int) -> None:
    if total_capacity < 0:
        raise ValidationError(
            'Total tickets must not be negative', rule=InventoryRule.CAPACITY_NON_NEGATIVE
        )


@attrs.define
class Inventory:
    movie_name: str
    theatre_name: str
    total_capacity: int
    status: InventoryStatus
    id: Optional[int] = None  # Only None before first persistence
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def key(self) -> InventoryKey:
        return InventoryKey.of(movie_name=self.movie_name, theatre_name=self.theatre_name)

    @classmethod
    def create(
        cls, *, movie_name: str, theatre_name: str, total_capacity: int, booked_count: int = 0
    ) -> 'Inventory':
        InventoryKey.of(movie_name=movie_name, theatre_name=theatre_name)
        _validate_capacity(total_capacity)

        now = datetime.now(timezone.utc)
        availability = compute_status(total_capacity=total_capacity, booked_count=booked_count)
        return cls(
            movie_name=movie_name.strip(),
            theatre_name=theatre_name.strip(),
            total_capacity=total_capacity,
            status=availability.status,
            created_at=now,
            updated_at=now,
        )

    def with_capacity(self, *, total_capacity: int, booked_count: int) -> 'Inventory':
        """New capacity together with the status it implies, as one change."""
        _validate_capacity(total_capacity)
        availability = compute_status(total_capacity=total_capacity, booked_count=booked_count)
        return attrs.evolve(
            self,
            total_capacity=total_capacity,
            status=availability.status,
            updated_at=datetime.now(timezone.utc),
        )

    def apply_availability(self, *, availability: Availability) -> 'Inventory':
        return attrs.evolve(
            self, status=availability.status, updated_at=datetime.now(timezone.utc)
        )
