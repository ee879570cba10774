from enum import StrEnum


class InventoryStatus(StrEnum):
    """Availability label derived from capacity vs. booked seats; never set directly."""

    BOOK_ASAP = 'BOOK_ASAP'
    SOLD_OUT = 'SOLD_OUT'
