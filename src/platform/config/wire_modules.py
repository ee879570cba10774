"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.movie_booking.app.command import (
    add_movie_use_case,
    book_seats_use_case,
    delete_movie_use_case,
    recompute_status_use_case,
    set_capacity_use_case,
)
from src.service.movie_booking.app.query import get_booked_info_use_case, list_movies_use_case


WIRE_MODULES: list[ModuleType] = [
    add_movie_use_case,
    book_seats_use_case,
    delete_movie_use_case,
    recompute_status_use_case,
    set_capacity_use_case,
    get_booked_info_use_case,
    list_movies_use_case,
]
