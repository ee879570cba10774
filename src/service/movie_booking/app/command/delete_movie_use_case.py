from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, store_deadline
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.state.keyed_lock import KeyedLock
from src.service.movie_booking.domain.value_object.inventory_key import InventoryKey


class DeleteMovieUseCase:
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
    async def delete_movie(self, *, movie_name: str, theatre_name: str) -> None:
        """Remove the listing. Bookings already made stay in the ledger."""
        key = InventoryKey.of(movie_name=movie_name, theatre_name=theatre_name)

        with self.tracer.start_as_current_span(
            'use_case.delete_movie', attributes={'inventory.key': str(key)}
        ):
            async with self.booking_lock.hold(key=key.lock_name):
                with store_deadline(self.store_timeout):
                    async with self.uow_factory() as uow:
                        if not await uow.inventory_store.delete_inventory(key=key):
                            raise NotFoundError('Movie/Theatre not found')
                        await uow.commit()

            Logger.base.info(f'🗑️ [DELETE-MOVIE] {key}')
