from typing import Callable, List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, store_deadline
from src.platform.logging.loguru_io import Logger
from src.service.movie_booking.domain.entity.inventory_entity import Inventory


class ListMoviesUseCase:
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

    @Logger.io(truncate_content=True)
    async def list_all(self) -> List[Inventory]:
        with store_deadline(self.store_timeout):
            async with self.uow_factory() as uow:
                return await uow.inventory_store.list_inventories()

    @Logger.io(truncate_content=True)
    async def search(self, *, movie_name: str) -> List[Inventory]:
        """Listings whose movie name contains `movie_name`, case-insensitively."""
        with store_deadline(self.store_timeout):
            async with self.uow_factory() as uow:
                return await uow.inventory_store.list_inventories(
                    movie_name_contains=movie_name
                )
