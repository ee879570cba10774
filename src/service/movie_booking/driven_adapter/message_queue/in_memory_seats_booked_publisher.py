"""
In-memory Seats Booked Publisher

Process-local queue between the booking transaction and the status-update
listener. Events cross the queue as orjson payloads, the same shape they
would have on an external broker.

Memory Management:
- Stream max buffer: NOTIFICATION_BUFFER_SIZE events
- Full buffer or closed stream: EventPublishError (the booking stays committed)
"""

from datetime import datetime

from anyio import BrokenResourceError, ClosedResourceError, WouldBlock, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream
import orjson
from uuid_utils import UUID

from src.platform.exception.exceptions import EventPublishError
from src.platform.logging.loguru_io import Logger
from src.service.movie_booking.app.interface.i_seats_booked_publisher import ISeatsBookedPublisher
from src.service.movie_booking.domain.domain_event.seats_booked_event import SeatsBookedEvent


def serialize_event(event: SeatsBookedEvent) -> bytes:
    return orjson.dumps(
        {
            'event_type': 'seats_booked',
            'booking_id': str(event.booking_id),
            'movie_name': event.movie_name,
            'theatre_name': event.theatre_name,
            'seat_count': event.seat_count,
            'occurred_at': event.occurred_at.isoformat(),
            'trace_headers': event.trace_headers,
        }
    )


def deserialize_event(data: bytes) -> SeatsBookedEvent:
    payload = orjson.loads(data)
    return SeatsBookedEvent(
        booking_id=UUID(payload['booking_id']),
        movie_name=payload['movie_name'],
        theatre_name=payload['theatre_name'],
        seat_count=payload['seat_count'],
        occurred_at=datetime.fromisoformat(payload['occurred_at']),
        trace_headers=payload.get('trace_headers') or {},
    )


class InMemorySeatsBookedPublisher(ISeatsBookedPublisher):
    def __init__(self, *, max_buffer_size: int) -> None:
        self._send_stream, self._receive_stream = create_memory_object_stream[bytes](
            max_buffer_size=max_buffer_size
        )

    def subscribe(self) -> MemoryObjectReceiveStream[bytes]:
        """Receive end for a consumer; clones share one queue (each event is delivered once)."""
        return self._receive_stream.clone()

    async def publish_seats_booked(self, *, event: SeatsBookedEvent) -> None:
        try:
            self._send_stream.send_nowait(serialize_event(event))
        except WouldBlock as e:
            raise EventPublishError('Booking notification queue is full') from e
        except (ClosedResourceError, BrokenResourceError) as e:
            raise EventPublishError('Booking notification queue is closed') from e

        Logger.base.debug(
            f'📤 [NOTIFY] Queued seats_booked {event.booking_id} '
            f'({event.movie_name}@{event.theatre_name}, seats={event.seat_count})'
        )

    async def aclose(self) -> None:
        await self._send_stream.aclose()
        await self._receive_stream.aclose()
