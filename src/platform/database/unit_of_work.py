"""
Unit of Work Pattern - one transaction per admission / status write

Architecture:
- UoW owns the session (or in-memory staging) lifecycle
- UoW owns commit/rollback; leaving the block without commit rolls back
- The inventory store reached through the UoW shares its transaction
- store_deadline bounds every store round-trip with a caller-side timeout
"""

from __future__ import annotations

import abc
from collections.abc import Callable, Iterator
from contextlib import AbstractAsyncContextManager, contextmanager
from typing import TYPE_CHECKING, Any

import anyio
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError, StoreUnavailableError


if TYPE_CHECKING:
    from src.service.movie_booking.app.interface.i_inventory_store import IInventoryStore


SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class AbstractUnitOfWork(abc.ABC):
    """
    Usage:
        async with uow_factory() as uow:
            inventory = await uow.inventory_store.find_inventory(key=key, for_update=True)
            await uow.inventory_store.save_booking(booking=booking)
            await uow.commit()
    """

    inventory_store: IInventoryStore

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args: Any) -> None:
        # Shielded: a store_deadline expiry must not cancel the rollback
        with anyio.CancelScope(shield=True):
            await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, *, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory
        self._session_cm: AbstractAsyncContextManager[AsyncSession] | None = None
        self.session: AsyncSession | None = None

    async def __aenter__(self) -> AbstractUnitOfWork:
        from src.service.movie_booking.driven_adapter.repo.inventory_store_impl import (
            InventoryStoreImpl,
        )

        self._session_cm = self._session_factory()
        try:
            self.session = await self._session_cm.__aenter__()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f'Inventory store unavailable: {e}') from e
        self.inventory_store = InventoryStoreImpl(session=self.session)
        return await super().__aenter__()

    async def __aexit__(self, *args: Any) -> None:
        # Rollback and close must complete even when a deadline cancelled the body
        with anyio.CancelScope(shield=True):
            try:
                await super().__aexit__(*args)
            finally:
                if self._session_cm is not None:
                    await self._session_cm.__aexit__(*args)
                self._session_cm = None
                self.session = None

    async def _commit(self) -> None:
        if self.session is None:
            raise RuntimeError('Unit of work used outside its async context')
        try:
            await self.session.commit()
        except IntegrityError as e:
            raise ConflictError('Data integrity violation') from e
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f'Inventory store commit failed: {e}') from e

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()


@contextmanager
def store_deadline(seconds: float) -> Iterator[None]:
    """Bound a store transaction; expiry is surfaced as a retryable StoreUnavailableError."""
    try:
        with anyio.fail_after(seconds):
            yield
    except TimeoutError as e:
        raise StoreUnavailableError(f'Inventory store timed out after {seconds}s') from e
