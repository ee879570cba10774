"""
Seats Booked Publisher Interface

One-way outbound port for booking notifications. Use cases depend on this
interface, not on the queue/transport behind it.
"""

from abc import ABC, abstractmethod

from src.service.movie_booking.domain.domain_event.seats_booked_event import SeatsBookedEvent


class ISeatsBookedPublisher(ABC):
    @abstractmethod
    async def publish_seats_booked(self, *, event: SeatsBookedEvent) -> None:
        """
        Hand a SeatsBookedEvent to the status-update listener.

        Raises:
            EventPublishError: If the event could not be enqueued
        """
        pass
