import time
from typing import Callable, List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, store_deadline
from src.platform.exception.exceptions import (
    CapacityExceededError,
    CustomBaseError,
    EventPublishError,
    InfrastructureError,
    NotFoundError,
    ValidationError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.platform.observability.tracing import inject_trace_context
from src.platform.state.keyed_lock import KeyedLock
from src.service.movie_booking.app.interface.i_seats_booked_publisher import ISeatsBookedPublisher
from src.service.movie_booking.domain.domain_event.seats_booked_event import SeatsBookedEvent
from src.service.movie_booking.domain.entity.booking_entity import Booking


def _admission_result(error: CustomBaseError) -> str:
    if isinstance(error, ValidationError):
        return 'validation_error'
    if isinstance(error, NotFoundError):
        return 'not_found'
    if isinstance(error, CapacityExceededError):
        return 'capacity_exceeded'
    if isinstance(error, InfrastructureError):
        return 'unavailable'
    return 'rejected'


class BookSeatsUseCase:
    """
    Book seats against a movie/theatre inventory

    Flow:
    1. Validate the request (no store access on failure)
    2. Under the per-key lock, in one transaction: lock the inventory row,
       sum the booking ledger, run the admission check, persist the booking
    3. Publish SeatsBooked to the status-update listener (best effort)

    The booked count is always re-aggregated from the ledger, so two admissions
    for the same key can never both observe the same pre-booking total.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        booking_lock: KeyedLock,
        event_publisher: ISeatsBookedPublisher,
        store_timeout: float,
    ) -> None:
        self.uow_factory = uow_factory
        self.booking_lock = booking_lock
        self.event_publisher = event_publisher
        self.store_timeout = store_timeout
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        booking_lock: KeyedLock = Depends(Provide[Container.booking_lock]),
        event_publisher: ISeatsBookedPublisher = Depends(
            Provide[Container.seats_booked_publisher]
        ),
        store_timeout: float = Depends(
            Provide[Container.config_service.provided.STORE_TIMEOUT_SECONDS]
        ),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            booking_lock=booking_lock,
            event_publisher=event_publisher,
            store_timeout=store_timeout,
        )

    @Logger.io
    async def book_seats(
        self,
        *,
        movie_name: str,
        theatre_name: str,
        seat_count: int,
        seat_labels: List[str],
        requester: str,
    ) -> Booking:
        """
        Raises:
            ValidationError: Malformed request (names the violated rule)
            NotFoundError: Unknown movie/theatre
            CapacityExceededError: Not enough seats left; nothing is written
            InfrastructureError: Store or lock deadline exceeded (retryable)
        """
        with self.tracer.start_as_current_span(
            'use_case.book_seats',
            attributes={
                'movie.name': movie_name,
                'theatre.name': theatre_name,
                'booking.seat_count': seat_count,
            },
        ) as span:
            try:
                booking = Booking.create(
                    movie_name=movie_name,
                    theatre_name=theatre_name,
                    seat_count=seat_count,
                    seat_labels=seat_labels,
                    booked_by=requester,
                )
                duration = await self._admit(booking=booking)
            except CustomBaseError as e:
                metrics.record_booking(result=_admission_result(e))
                raise

            metrics.record_booking(result='accepted', seats=booking.seat_count, duration=duration)
            span.set_attribute('booking.id', str(booking.id))
            Logger.base.info(
                f'🎟️ [BOOK-SEATS] {booking.id}: {booking.seat_count} seat(s) '
                f'{list(booking.seat_labels)} for {booking.movie_name}@{booking.theatre_name} '
                f'by {booking.booked_by}'
            )

            await self._notify(booking=booking)
            return booking

    async def _admit(self, *, booking: Booking) -> float:
        key = booking.key
        async with self.booking_lock.hold(key=key.lock_name):
            start = time.perf_counter()
            with store_deadline(self.store_timeout):
                async with self.uow_factory() as uow:
                    inventory = await uow.inventory_store.find_inventory(key=key, for_update=True)
                    if inventory is None:
                        raise NotFoundError('Movie/Theatre not found')

                    booked = await uow.inventory_store.sum_booked_seats(key=key)
                    if booked + booking.seat_count > inventory.total_capacity:
                        Logger.base.warning(
                            f'🚫 [BOOK-SEATS] Rejected {booking.seat_count} seat(s) for {key}: '
                            f'booked={booked}, capacity={inventory.total_capacity}'
                        )
                        raise CapacityExceededError(
                            requested=booking.seat_count,
                            available=max(inventory.total_capacity - booked, 0),
                        )

                    await uow.inventory_store.save_booking(booking=booking)
                    await uow.commit()
            return time.perf_counter() - start

    async def _notify(self, *, booking: Booking) -> None:
        event = SeatsBookedEvent.from_booking(
            booking=booking, trace_headers=inject_trace_context()
        )
        try:
            await self.event_publisher.publish_seats_booked(event=event)
        except EventPublishError as e:
            # Booking is already committed; status catches up on the next recompute
            metrics.notification_failures.inc()
            Logger.base.error(f'📭 [NOTIFY] Booking {booking.id} not announced: {e.message}')
