"""Movie Booking Domain Enums"""

from src.service.movie_booking.domain.enum.inventory_status import InventoryStatus
from src.service.movie_booking.domain.enum.rule import InventoryRule, SeatRule

__all__ = ['InventoryRule', 'InventoryStatus', 'SeatRule']
