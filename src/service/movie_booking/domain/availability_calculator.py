"""
Availability Calculator

Pure derivation of remaining seats and status from capacity and the booked
aggregate. Remaining is clamped at zero so an overbooked ledger still reports
SOLD_OUT instead of a negative count.
"""

import attrs

from src.service.movie_booking.domain.enum.inventory_status import InventoryStatus


@attrs.define(frozen=True)
class Availability:
    booked: int
    remaining: int
    status: InventoryStatus


def compute_status(*, total_capacity: int, booked_count: int) -> Availability:
    remaining = max(total_capacity - booked_count, 0)
    status = InventoryStatus.SOLD_OUT if remaining <= 0 else InventoryStatus.BOOK_ASAP
    return Availability(booked=booked_count, remaining=remaining, status=status)
