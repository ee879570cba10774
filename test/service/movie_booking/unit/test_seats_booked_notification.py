"""
Unit tests for the booking notification path

Tests the in-memory publisher (bounded queue, orjson payloads) and the
StatusUpdateConsumer that recomputes status for each SeatsBooked event.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import anyio
import pytest
import uuid_utils

from src.platform.exception.exceptions import EventPublishError, NotFoundError
from src.service.movie_booking.app.command.recompute_status_use_case import (
    RecomputeStatusUseCase,
)
from src.service.movie_booking.domain.domain_event.seats_booked_event import SeatsBookedEvent
from src.service.movie_booking.domain.enum.inventory_status import InventoryStatus
from src.service.movie_booking.domain.value_object.inventory_key import InventoryKey
from src.service.movie_booking.driven_adapter.message_queue.in_memory_seats_booked_publisher import (
    InMemorySeatsBookedPublisher,
    deserialize_event,
    serialize_event,
)
from src.service.movie_booking.driving_adapter.mq_consumer.status_update_consumer import (
    StatusUpdateConsumer,
)


def _event(movie_name: str = 'Dune', theatre_name: str = 'PVR', seat_count: int = 2):
    return SeatsBookedEvent(
        booking_id=uuid_utils.uuid7(),
        movie_name=movie_name,
        theatre_name=theatre_name,
        seat_count=seat_count,
        occurred_at=datetime.now(timezone.utc),
        trace_headers={'traceparent': '00-0af7651916cd43dd8448eb211c80319c-b7ad6b7169203331-01'},
    )


class TestInMemorySeatsBookedPublisher:
    @pytest.mark.asyncio
    async def test_event_survives_the_queue(self):
        publisher = InMemorySeatsBookedPublisher(max_buffer_size=10)
        stream = publisher.subscribe()
        event = _event()

        await publisher.publish_seats_booked(event=event)

        with anyio.fail_after(1):
            received = deserialize_event(await stream.receive())
        assert received == event

    @pytest.mark.asyncio
    async def test_full_queue_raises(self):
        publisher = InMemorySeatsBookedPublisher(max_buffer_size=1)
        publisher.subscribe()
        await publisher.publish_seats_booked(event=_event())

        with pytest.raises(EventPublishError, match='full'):
            await publisher.publish_seats_booked(event=_event())

    @pytest.mark.asyncio
    async def test_closed_queue_raises(self):
        publisher = InMemorySeatsBookedPublisher(max_buffer_size=10)
        await publisher.aclose()

        with pytest.raises(EventPublishError, match='closed'):
            await publisher.publish_seats_booked(event=_event())

    def test_payload_is_tagged(self):
        assert b'"event_type":"seats_booked"' in serialize_event(_event())


class TestStatusUpdateConsumer:
    @pytest.mark.asyncio
    async def test_recomputes_status_for_each_event(self, uow_factory, booking_lock, state, seed):
        # Given: stored status is stale after a full booking
        seed(total_capacity=4, booked=4, status=InventoryStatus.BOOK_ASAP)
        publisher = InMemorySeatsBookedPublisher(max_buffer_size=10)
        consumer = StatusUpdateConsumer(
            receive_stream=publisher.subscribe(),
            recompute_status_use_case=RecomputeStatusUseCase(
                uow_factory=uow_factory, booking_lock=booking_lock, store_timeout=1.0
            ),
        )

        # When: the event is consumed
        await publisher.publish_seats_booked(event=_event(seat_count=4))
        await publisher.aclose()
        with anyio.fail_after(2):
            await consumer.run()

        # Then
        key = InventoryKey.of(movie_name='Dune', theatre_name='PVR')
        assert state.inventories[key].status is InventoryStatus.SOLD_OUT

    @pytest.mark.asyncio
    async def test_failure_does_not_stop_consumption(self):
        # Given: first recompute fails, second succeeds
        use_case = AsyncMock(spec=RecomputeStatusUseCase)
        use_case.recompute_status.side_effect = [
            NotFoundError('Movie/Theatre not found'),
            InventoryStatus.SOLD_OUT,
        ]
        publisher = InMemorySeatsBookedPublisher(max_buffer_size=10)
        consumer = StatusUpdateConsumer(
            receive_stream=publisher.subscribe(), recompute_status_use_case=use_case
        )

        await publisher.publish_seats_booked(event=_event(movie_name='Deleted'))
        await publisher.publish_seats_booked(event=_event(movie_name='Dune'))
        await publisher.aclose()

        with anyio.fail_after(2):
            await consumer.run()

        assert [c.kwargs['movie_name'] for c in use_case.recompute_status.await_args_list] == [
            'Deleted',
            'Dune',
        ]

    @pytest.mark.asyncio
    async def test_runs_in_task_group_until_closed(self):
        use_case = AsyncMock(spec=RecomputeStatusUseCase)
        publisher = InMemorySeatsBookedPublisher(max_buffer_size=10)
        consumer = StatusUpdateConsumer(
            receive_stream=publisher.subscribe(), recompute_status_use_case=use_case
        )

        with anyio.fail_after(2):
            async with anyio.create_task_group() as tg:
                await consumer.start(task_group=tg)
                await publisher.publish_seats_booked(event=_event())
                await publisher.aclose()

        use_case.recompute_status.assert_awaited_once_with(movie_name='Dune', theatre_name='PVR')
