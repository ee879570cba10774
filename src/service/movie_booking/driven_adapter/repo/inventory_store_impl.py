"""
Inventory Store Implementation (SQLAlchemy async)

Runs on the session owned by SqlAlchemyUnitOfWork; writes are flushed, not
committed. `for_update` issues SELECT ... FOR UPDATE so concurrent admissions
for one key serialize on the inventory row across processes. SQLite ignores
the clause; there the per-key lock and SQLite's single writer provide the
same guarantee.
"""

from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError, StoreUnavailableError
from src.platform.logging.loguru_io import Logger
from src.service.movie_booking.app.interface.i_inventory_store import IInventoryStore
from src.service.movie_booking.domain.entity.booking_entity import Booking
from src.service.movie_booking.domain.entity.inventory_entity import Inventory
from src.service.movie_booking.domain.enum.inventory_status import InventoryStatus
from src.service.movie_booking.domain.value_object.inventory_key import (
    InventoryKey,
    normalize_name,
)
from src.service.movie_booking.driven_adapter.model.booking_model import BookingModel
from src.service.movie_booking.driven_adapter.model.inventory_model import InventoryModel


class InventoryStoreImpl(IInventoryStore):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _model_to_entity(model: InventoryModel) -> Inventory:
        return Inventory(
            id=model.id,
            movie_name=model.movie_name,
            theatre_name=model.theatre_name,
            total_capacity=model.total_capacity,
            status=InventoryStatus(model.status),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError('Movie already exists in this theatre') from e
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f'Inventory store write failed: {e}') from e

    async def _get_model(self, *, key: InventoryKey, for_update: bool) -> Optional[InventoryModel]:
        stmt = select(InventoryModel).where(
            InventoryModel.movie_key == key.movie,
            InventoryModel.theatre_key == key.theatre,
        )
        if for_update:
            stmt = stmt.with_for_update()
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f'Inventory store read failed: {e}') from e
        return result.scalar_one_or_none()

    @Logger.io
    async def find_inventory(
        self, *, key: InventoryKey, for_update: bool = False
    ) -> Optional[Inventory]:
        model = await self._get_model(key=key, for_update=for_update)
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def save_inventory(self, *, inventory: Inventory) -> Inventory:
        key = inventory.key
        model = await self._get_model(key=key, for_update=False) if inventory.id else None

        if model is None:
            model = InventoryModel(
                movie_key=key.movie,
                theatre_key=key.theatre,
                movie_name=inventory.movie_name,
                theatre_name=inventory.theatre_name,
                total_capacity=inventory.total_capacity,
                status=inventory.status.value,
            )
            if inventory.created_at:
                model.created_at = inventory.created_at
                model.updated_at = inventory.updated_at or inventory.created_at
            self.session.add(model)
        else:
            model.total_capacity = inventory.total_capacity
            model.status = inventory.status.value
            if inventory.updated_at:
                model.updated_at = inventory.updated_at

        await self._flush()
        return self._model_to_entity(model)

    @Logger.io
    async def sum_booked_seats(self, *, key: InventoryKey) -> int:
        stmt = select(func.coalesce(func.sum(BookingModel.seat_count), 0)).where(
            BookingModel.movie_key == key.movie,
            BookingModel.theatre_key == key.theatre,
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f'Inventory store read failed: {e}') from e
        return int(result.scalar_one())

    @Logger.io
    async def save_booking(self, *, booking: Booking) -> Booking:
        key = booking.key
        self.session.add(
            BookingModel(
                id=str(booking.id),
                movie_key=key.movie,
                theatre_key=key.theatre,
                movie_name=booking.movie_name,
                theatre_name=booking.theatre_name,
                seat_count=booking.seat_count,
                seat_labels=list(booking.seat_labels),
                booked_by=booking.booked_by,
                created_at=booking.created_at,
            )
        )
        await self._flush()
        return booking

    @Logger.io
    async def list_inventories(
        self, *, movie_name_contains: Optional[str] = None
    ) -> list[Inventory]:
        stmt = select(InventoryModel).order_by(InventoryModel.id)
        if movie_name_contains:
            stmt = stmt.where(
                InventoryModel.movie_key.contains(normalize_name(movie_name_contains), autoescape=True)
            )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f'Inventory store read failed: {e}') from e
        return [self._model_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def delete_inventory(self, *, key: InventoryKey) -> bool:
        stmt = delete(InventoryModel).where(
            InventoryModel.movie_key == key.movie,
            InventoryModel.theatre_key == key.theatre,
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f'Inventory store write failed: {e}') from e
        return bool(result.rowcount)

