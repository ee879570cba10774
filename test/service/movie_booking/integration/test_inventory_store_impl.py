"""
Integration tests for InventoryStoreImpl and SqlAlchemyUnitOfWork on SQLite

Test Coverage:
1. Inventory round trip and case-insensitive lookup
2. Duplicate key -> ConflictError (uk_movie_theatre)
3. Ledger aggregate and retention after delete
4. Rollback when the unit of work is left without commit
5. Use cases end to end on the SQL store, including concurrent admissions
"""

from unittest.mock import AsyncMock

import anyio
import pytest

from src.platform.exception.exceptions import CapacityExceededError, ConflictError
from src.platform.state.keyed_lock import KeyedLock
from src.service.movie_booking.app.command.book_seats_use_case import BookSeatsUseCase
from src.service.movie_booking.app.command.recompute_status_use_case import (
    RecomputeStatusUseCase,
)
from src.service.movie_booking.app.command.set_capacity_use_case import SetCapacityUseCase
from src.service.movie_booking.app.interface.i_seats_booked_publisher import ISeatsBookedPublisher
from src.service.movie_booking.domain.entity.booking_entity import Booking
from src.service.movie_booking.domain.entity.inventory_entity import Inventory
from src.service.movie_booking.domain.enum.inventory_status import InventoryStatus
from src.service.movie_booking.domain.value_object.inventory_key import InventoryKey


KEY = InventoryKey.of(movie_name='Dune', theatre_name='PVR')


def _booking(seat_count: int, prefix: str = 'A') -> Booking:
    return Booking.create(
        movie_name='Dune',
        theatre_name='PVR',
        seat_count=seat_count,
        seat_labels=[f'{prefix}{i}' for i in range(seat_count)],
        booked_by='alice',
    )


async def _add_inventory(uow_factory, total_capacity: int = 10) -> Inventory:
    async with uow_factory() as uow:
        inventory = await uow.inventory_store.save_inventory(
            inventory=Inventory.create(
                movie_name='Dune', theatre_name='PVR', total_capacity=total_capacity
            )
        )
        await uow.commit()
    return inventory


class TestInventoryStoreImpl:
    @pytest.mark.asyncio
    async def test_inventory_round_trip(self, sql_uow_factory):
        saved = await _add_inventory(sql_uow_factory)

        async with sql_uow_factory() as uow:
            found = await uow.inventory_store.find_inventory(
                key=InventoryKey.of(movie_name='DUNE', theatre_name='pvr'), for_update=True
            )

        assert found is not None
        assert found.id == saved.id
        assert (found.movie_name, found.theatre_name) == ('Dune', 'PVR')
        assert found.total_capacity == 10
        assert found.status is InventoryStatus.BOOK_ASAP

    @pytest.mark.asyncio
    async def test_missing_inventory(self, sql_uow_factory):
        async with sql_uow_factory() as uow:
            assert await uow.inventory_store.find_inventory(key=KEY) is None

    @pytest.mark.asyncio
    async def test_duplicate_key_conflicts(self, sql_uow_factory):
        await _add_inventory(sql_uow_factory)

        with pytest.raises(ConflictError):
            async with sql_uow_factory() as uow:
                await uow.inventory_store.save_inventory(
                    inventory=Inventory.create(
                        movie_name='dune', theatre_name='PVR', total_capacity=5
                    )
                )
                await uow.commit()

    @pytest.mark.asyncio
    async def test_update_existing_inventory(self, sql_uow_factory):
        saved = await _add_inventory(sql_uow_factory)

        async with sql_uow_factory() as uow:
            await uow.inventory_store.save_inventory(
                inventory=saved.with_capacity(total_capacity=3, booked_count=3)
            )
            await uow.commit()

        async with sql_uow_factory() as uow:
            found = await uow.inventory_store.find_inventory(key=KEY)
        assert found.total_capacity == 3
        assert found.status is InventoryStatus.SOLD_OUT

    @pytest.mark.asyncio
    async def test_sum_booked_seats(self, sql_uow_factory):
        await _add_inventory(sql_uow_factory)

        async with sql_uow_factory() as uow:
            assert await uow.inventory_store.sum_booked_seats(key=KEY) == 0
            await uow.inventory_store.save_booking(booking=_booking(3, 'A'))
            await uow.inventory_store.save_booking(booking=_booking(2, 'B'))
            await uow.commit()

        async with sql_uow_factory() as uow:
            assert await uow.inventory_store.sum_booked_seats(key=KEY) == 5

    @pytest.mark.asyncio
    async def test_exit_without_commit_rolls_back(self, sql_uow_factory):
        await _add_inventory(sql_uow_factory)

        async with sql_uow_factory() as uow:
            await uow.inventory_store.save_booking(booking=_booking(4))

        async with sql_uow_factory() as uow:
            assert await uow.inventory_store.sum_booked_seats(key=KEY) == 0

    @pytest.mark.asyncio
    async def test_delete_keeps_ledger(self, sql_uow_factory):
        await _add_inventory(sql_uow_factory)
        async with sql_uow_factory() as uow:
            await uow.inventory_store.save_booking(booking=_booking(2))
            await uow.commit()

        async with sql_uow_factory() as uow:
            assert await uow.inventory_store.delete_inventory(key=KEY) is True
            await uow.commit()

        async with sql_uow_factory() as uow:
            assert await uow.inventory_store.find_inventory(key=KEY) is None
            assert await uow.inventory_store.delete_inventory(key=KEY) is False
            assert await uow.inventory_store.sum_booked_seats(key=KEY) == 2

    @pytest.mark.asyncio
    async def test_list_and_search(self, sql_uow_factory):
        async with sql_uow_factory() as uow:
            for movie, theatre in [('Dune', 'PVR'), ('Dune', 'INOX'), ('Oppenheimer', 'PVR')]:
                await uow.inventory_store.save_inventory(
                    inventory=Inventory.create(
                        movie_name=movie, theatre_name=theatre, total_capacity=5
                    )
                )
            await uow.commit()

        async with sql_uow_factory() as uow:
            everything = await uow.inventory_store.list_inventories()
            dune = await uow.inventory_store.list_inventories(movie_name_contains='DUN')

        assert len(everything) == 3
        assert {(m.movie_name, m.theatre_name) for m in dune} == {('Dune', 'PVR'), ('Dune', 'INOX')}


class TestUseCasesOnSqlStore:
    @pytest.mark.asyncio
    async def test_concurrent_bookings_never_oversell(self, sql_uow_factory):
        await _add_inventory(sql_uow_factory, total_capacity=10)
        use_case = BookSeatsUseCase(
            uow_factory=sql_uow_factory,
            booking_lock=KeyedLock(timeout=5.0),
            event_publisher=AsyncMock(spec=ISeatsBookedPublisher),
            store_timeout=5.0,
        )
        outcomes: list[str] = []

        async def attempt(prefix: str) -> None:
            try:
                await use_case.book_seats(
                    movie_name='Dune',
                    theatre_name='PVR',
                    seat_count=6,
                    seat_labels=[f'{prefix}{i}' for i in range(6)],
                    requester=prefix,
                )
                outcomes.append('accepted')
            except CapacityExceededError:
                outcomes.append('capacity_exceeded')

        async with anyio.create_task_group() as tg:
            tg.start_soon(attempt, 'A')
            tg.start_soon(attempt, 'B')

        assert sorted(outcomes) == ['accepted', 'capacity_exceeded']
        async with sql_uow_factory() as uow:
            assert await uow.inventory_store.sum_booked_seats(key=KEY) == 6

    @pytest.mark.asyncio
    async def test_full_house_then_capacity_raise(self, sql_uow_factory):
        await _add_inventory(sql_uow_factory, total_capacity=10)
        lock = KeyedLock(timeout=5.0)
        book = BookSeatsUseCase(
            uow_factory=sql_uow_factory,
            booking_lock=lock,
            event_publisher=AsyncMock(spec=ISeatsBookedPublisher),
            store_timeout=5.0,
        )
        recompute = RecomputeStatusUseCase(
            uow_factory=sql_uow_factory, booking_lock=lock, store_timeout=5.0
        )
        set_capacity = SetCapacityUseCase(
            uow_factory=sql_uow_factory, booking_lock=lock, store_timeout=5.0
        )

        await book.book_seats(
            movie_name='Dune',
            theatre_name='PVR',
            seat_count=10,
            seat_labels=[f'A{i}' for i in range(10)],
            requester='alice',
        )
        assert (
            await recompute.recompute_status(movie_name='Dune', theatre_name='PVR')
            is InventoryStatus.SOLD_OUT
        )

        inventory = await set_capacity.set_capacity(
            movie_name='Dune', theatre_name='PVR', total_capacity=12
        )
        assert inventory.status is InventoryStatus.BOOK_ASAP
