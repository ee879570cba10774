from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, store_deadline
from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.platform.state.keyed_lock import KeyedLock
from src.service.movie_booking.domain.entity.inventory_entity import Inventory


class AddMovieUseCase:
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
    async def add_movie(
        self, *, movie_name: str, theatre_name: str, total_capacity: int
    ) -> Inventory:
        """
        Register a movie in a theatre.

        A ledger left behind by an earlier, deleted listing still counts toward
        the initial status.

        Raises:
            ValidationError: Blank name or negative capacity
            ConflictError: The movie is already listed in this theatre
        """
        draft = Inventory.create(
            movie_name=movie_name, theatre_name=theatre_name, total_capacity=total_capacity
        )
        key = draft.key

        with self.tracer.start_as_current_span(
            'use_case.add_movie', attributes={'inventory.key': str(key)}
        ):
            async with self.booking_lock.hold(key=key.lock_name):
                with store_deadline(self.store_timeout):
                    async with self.uow_factory() as uow:
                        if await uow.inventory_store.find_inventory(key=key) is not None:
                            raise ConflictError('Movie already exists in this theatre')

                        booked = await uow.inventory_store.sum_booked_seats(key=key)
                        inventory = await uow.inventory_store.save_inventory(
                            inventory=Inventory.create(
                                movie_name=movie_name,
                                theatre_name=theatre_name,
                                total_capacity=total_capacity,
                                booked_count=booked,
                            )
                        )
                        await uow.commit()

            Logger.base.info(
                f'🎬 [ADD-MOVIE] {inventory.movie_name}@{inventory.theatre_name} '
                f'capacity={inventory.total_capacity}, status={inventory.status}'
            )
            return inventory
