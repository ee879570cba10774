"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.movie_booking.driven_adapter.model.booking_model import BookingModel
from src.service.movie_booking.driven_adapter.model.inventory_model import InventoryModel

__all__ = [
    'BookingModel',
    'InventoryModel',
]
