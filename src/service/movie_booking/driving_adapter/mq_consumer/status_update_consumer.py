from anyio.abc import TaskGroup
from anyio.streams.memory import MemoryObjectReceiveStream
from opentelemetry import trace

from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import extract_trace_context
from src.service.movie_booking.app.command.recompute_status_use_case import (
    RecomputeStatusUseCase,
)
from src.service.movie_booking.domain.domain_event.seats_booked_event import SeatsBookedEvent
from src.service.movie_booking.driven_adapter.message_queue.in_memory_seats_booked_publisher import (
    deserialize_event,
)


class StatusUpdateConsumer:
    """Consume SeatsBooked events and recompute the inventory status for each one"""

    def __init__(
        self,
        *,
        receive_stream: MemoryObjectReceiveStream[bytes],
        recompute_status_use_case: RecomputeStatusUseCase,
    ) -> None:
        self.receive_stream = receive_stream
        self.recompute_status_use_case = recompute_status_use_case
        self.tracer = trace.get_tracer(__name__)

    async def start(self, *, task_group: TaskGroup) -> None:
        """Start consuming in the given task group"""
        task_group.start_soon(self.run)
        Logger.base.info('🔔 [STATUS-CONSUMER] Started')

    async def run(self) -> None:
        """Consume until the publisher closes the stream"""
        async with self.receive_stream:
            async for data in self.receive_stream:
                await self._handle(data)
        Logger.base.info('🛑 [STATUS-CONSUMER] Stream closed, stopping')

    async def _handle(self, data: bytes) -> None:
        try:
            event = deserialize_event(data)
        except (ValueError, KeyError, TypeError) as e:
            Logger.base.warning(f'⚠️ [STATUS-CONSUMER] Dropping malformed event: {e}')
            return

        try:
            await self.handle_event(event=event)
        except CustomBaseError as e:
            # Status stays stale until the next booking or a manual recompute
            Logger.base.error(
                f'❌ [STATUS-CONSUMER] Recompute failed for '
                f'{event.movie_name}@{event.theatre_name}: {e.message}'
            )
        except Exception as e:
            Logger.base.exception(
                f'❌ [STATUS-CONSUMER] Unexpected error for booking {event.booking_id}: {e}'
            )

    @Logger.io
    async def handle_event(self, *, event: SeatsBookedEvent) -> None:
        with self.tracer.start_as_current_span(
            'consumer.recompute_status',
            context=extract_trace_context(headers=event.trace_headers),
            attributes={'booking.id': str(event.booking_id)},
        ):
            await self.recompute_status_use_case.recompute_status(
                movie_name=event.movie_name, theatre_name=event.theatre_name
            )
