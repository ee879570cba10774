from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, store_deadline
from src.platform.exception.exceptions import CustomBaseError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.platform.state.keyed_lock import KeyedLock
from src.service.movie_booking.domain.availability_calculator import compute_status
from src.service.movie_booking.domain.enum.inventory_status import InventoryStatus
from src.service.movie_booking.domain.value_object.inventory_key import InventoryKey


class RecomputeStatusUseCase:
    """
    Re-derive the inventory status from capacity and the booking ledger.

    Idempotent: the inventory is only written when the derived status differs
    from the stored one.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        booking_lock: KeyedLock,
        store_timeout: float,
    ) -> None:
        self.uow_factory = uow_factory
        self.booking_lock = booking_lock
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
        store_timeout: float = Depends(
            Provide[Container.config_service.provided.STORE_TIMEOUT_SECONDS]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory, booking_lock=booking_lock, store_timeout=store_timeout)

    @Logger.io
    async def recompute_status(self, *, movie_name: str, theatre_name: str) -> InventoryStatus:
        key = InventoryKey.of(movie_name=movie_name, theatre_name=theatre_name)
        with self.tracer.start_as_current_span(
            'use_case.recompute_status', attributes={'inventory.key': str(key)}
        ):
            try:
                status, changed = await self._recompute(key=key)
            except CustomBaseError:
                metrics.record_status_recompute(result='failed')
                raise

            metrics.record_status_recompute(result='changed' if changed else 'unchanged')
            return status

    async def _recompute(self, *, key: InventoryKey) -> tuple[InventoryStatus, bool]:
        async with self.booking_lock.hold(key=key.lock_name):
            with store_deadline(self.store_timeout):
                async with self.uow_factory() as uow:
                    inventory = await uow.inventory_store.find_inventory(key=key, for_update=True)
                    if inventory is None:
                        raise NotFoundError('Movie/Theatre not found')

                    booked = await uow.inventory_store.sum_booked_seats(key=key)
                    availability = compute_status(
                        total_capacity=inventory.total_capacity, booked_count=booked
                    )
                    if availability.status == inventory.status:
                        return inventory.status, False

                    await uow.inventory_store.save_inventory(
                        inventory=inventory.apply_availability(availability=availability)
                    )
                    await uow.commit()

        Logger.base.info(
            f'🔄 [STATUS] {key}: {inventory.status} → {availability.status} '
            f'(booked={availability.booked}, remaining={availability.remaining})'
        )
        return availability.status, True
