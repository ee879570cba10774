"""
Seats Booked Domain Event

Emitted after a booking is durably persisted. The status-update listener
consumes it and recomputes the inventory status for the same key.
"""

from datetime import datetime

import attrs
from uuid_utils import UUID

from src.service.movie_booking.domain.entity.booking_entity import Booking


@attrs.define(frozen=True)
class SeatsBookedEvent:
    booking_id: UUID
    movie_name: str
    theatre_name: str
    seat_count: int
    occurred_at: datetime
    trace_headers: dict[str, str] = attrs.field(factory=dict)  # W3C trace context carrier

    @classmethod
    def from_booking(
        cls, *, booking: Booking, trace_headers: dict[str, str] | None = None
    ) -> 'SeatsBookedEvent':
        return cls(
            booking_id=booking.id,
            movie_name=booking.movie_name,
            theatre_name=booking.theatre_name,
            seat_count=booking.seat_count,
            occurred_at=booking.created_at,
            trace_headers=trace_headers or {},
        )
