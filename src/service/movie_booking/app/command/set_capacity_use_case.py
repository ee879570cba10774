from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, store_deadline
from src.platform.exception.exceptions import NotFoundError, ValidationError
from src.platform.logging.loguru_io import Logger
from src.platform.state.keyed_lock import KeyedLock
from src.service.movie_booking.domain.entity.inventory_entity import Inventory
from src.service.movie_booking.domain.enum.rule import InventoryRule
from src.service.movie_booking.domain.value_object.inventory_key import InventoryKey


class SetCapacityUseCase:
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
    async def set_capacity(
        self, *, movie_name: str, theatre_name: str, total_capacity: int
    ) -> Inventory:
        """
        Change total capacity; the status implied by the new capacity is written
        in the same transaction.

        Raises:
            ValidationError: Negative capacity
            NotFoundError: Unknown movie/theatre
        """
        if total_capacity < 0:
            raise ValidationError(
                'Total tickets must not be negative', rule=InventoryRule.CAPACITY_NON_NEGATIVE
            )
        key = InventoryKey.of(movie_name=movie_name, theatre_name=theatre_name)

        with self.tracer.start_as_current_span(
            'use_case.set_capacity',
            attributes={'inventory.key': str(key), 'inventory.total_capacity': total_capacity},
        ):
            async with self.booking_lock.hold(key=key.lock_name):
                with store_deadline(self.store_timeout):
                    async with self.uow_factory() as uow:
                        inventory = await uow.inventory_store.find_inventory(
                            key=key, for_update=True
                        )
                        if inventory is None:
                            raise NotFoundError('Movie/Theatre not found')

                        booked = await uow.inventory_store.sum_booked_seats(key=key)
                        saved = await uow.inventory_store.save_inventory(
                            inventory=inventory.with_capacity(
                                total_capacity=total_capacity, booked_count=booked
                            )
                        )
                        await uow.commit()

            Logger.base.info(
                f'🎬 [CAPACITY] {key}: {inventory.total_capacity} → {saved.total_capacity} '
                f'(booked={booked}, status={saved.status})'
            )
            return saved
