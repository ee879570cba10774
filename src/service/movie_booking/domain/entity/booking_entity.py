from datetime import datetime, timezone
from typing import Sequence

import attrs
import uuid_utils
from uuid_utils import UUID

from src.platform.exception.exceptions import ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.movie_booking.domain.enum.rule import SeatRule
from src.service.movie_booking.domain.value_object.inventory_key import InventoryKey


@attrs.define(frozen=True)
class Booking:
    """Immutable ledger entry: seats reserved against one Inventory."""

    id: UUID
    movie_name: str
    theatre_name: str
    seat_count: int
    seat_labels: tuple[str, ...]
    booked_by: str
    created_at: datetime

    @property
    def key(self) -> InventoryKey:
        return InventoryKey.of(movie_name=self.movie_name, theatre_name=self.theatre_name)

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        movie_name: str,
        theatre_name: str,
        seat_count: int,
        seat_labels: Sequence[str],
        booked_by: str,
    ) -> 'Booking':
        """
        Raises:
            ValidationError: first violated rule, checked in order:
                seat count positive, labels provided, label count matches, labels unique
        """
        if seat_count <= 0:
            raise ValidationError(
                'Number of tickets must be positive', rule=SeatRule.SEAT_COUNT_POSITIVE
            )
        if not seat_labels:
            raise ValidationError(
                'Seat numbers must be provided', rule=SeatRule.SEAT_LABELS_REQUIRED
            )
        if len(seat_labels) != seat_count:
            raise ValidationError(
                'Number of seat numbers must match number of tickets',
                rule=SeatRule.SEAT_LABELS_MATCH_COUNT,
            )
        if len(set(seat_labels)) != len(seat_labels):
            raise ValidationError(
                'Duplicate seat numbers are not allowed', rule=SeatRule.SEAT_LABELS_UNIQUE
            )
        if not booked_by or not booked_by.strip():
            raise ValidationError('Requester must be provided', rule=SeatRule.REQUESTER_REQUIRED)

        InventoryKey.of(movie_name=movie_name, theatre_name=theatre_name)
        return cls(
            id=uuid_utils.uuid7(),
            movie_name=movie_name.strip(),
            theatre_name=theatre_name.strip(),
            seat_count=seat_count,
            seat_labels=tuple(seat_labels),
            booked_by=booked_by.strip(),
            created_at=datetime.now(timezone.utc),
        )
