from enum import StrEnum


class SeatRule(StrEnum):
    SEAT_COUNT_POSITIVE = 'seat_count_positive'
    SEAT_LABELS_REQUIRED = 'seat_labels_required'
    SEAT_LABELS_MATCH_COUNT = 'seat_labels_match_count'
    SEAT_LABELS_UNIQUE = 'seat_labels_unique'
    REQUESTER_REQUIRED = 'requester_required'


class InventoryRule(StrEnum):
    CAPACITY_NON_NEGATIVE = 'capacity_non_negative'
    NAME_REQUIRED = 'name_required'
