from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, store_deadline
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.movie_booking.domain.availability_calculator import Availability, compute_status
from src.service.movie_booking.domain.value_object.inventory_key import InventoryKey


class GetBookedInfoUseCase:
    """Live booked/remaining/status for a listing, derived from the ledger, not the stored status."""

    def __init__(
        self, *, uow_factory: Callable[[], AbstractUnitOfWork], store_timeout: float
    ) -> None:
        self.uow_factory = uow_factory
        self.store_timeout = store_timeout

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        store_timeout: float = Depends(
            Provide[Container.config_service.provided.STORE_TIMEOUT_SECONDS]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory, store_timeout=store_timeout)

    @Logger.io
    async def get_booked_info(self, *, movie_name: str, theatre_name: str) -> Availability:
        key = InventoryKey.of(movie_name=movie_name, theatre_name=theatre_name)
        with store_deadline(self.store_timeout):
            async with self.uow_factory() as uow:
                inventory = await uow.inventory_store.find_inventory(key=key)
                if inventory is None:
                    raise NotFoundError('Movie/Theatre not found')
                booked = await uow.inventory_store.sum_booked_seats(key=key)

        return compute_status(total_capacity=inventory.total_capacity, booked_count=booked)
