import pytest

from src.platform.exception.exceptions import NotFoundError
from src.service.movie_booking.app.command.recompute_status_use_case import (
    RecomputeStatusUseCase,
)
from src.service.movie_booking.domain.enum.inventory_status import InventoryStatus
from src.service.movie_booking.domain.value_object.inventory_key import InventoryKey


KEY = InventoryKey.of(movie_name='Dune', theatre_name='PVR')


class TestRecomputeStatusUseCase:
    @pytest.fixture
    def use_case(self, uow_factory, booking_lock):
        return RecomputeStatusUseCase(
            uow_factory=uow_factory, booking_lock=booking_lock, store_timeout=1.0
        )

    @pytest.mark.asyncio
    async def test_full_house_becomes_sold_out(self, use_case, state, seed):
        # Given: capacity 10, 10 booked, stored status still BOOK_ASAP
        seed(total_capacity=10, booked=10, status=InventoryStatus.BOOK_ASAP)

        # When
        result = await use_case.recompute_status(movie_name='Dune', theatre_name='PVR')

        # Then
        assert result is InventoryStatus.SOLD_OUT
        assert state.inventories[KEY].status is InventoryStatus.SOLD_OUT

    @pytest.mark.asyncio
    async def test_sold_out_becomes_available_again(self, use_case, state, seed):
        seed(total_capacity=10, booked=3, status=InventoryStatus.SOLD_OUT)

        result = await use_case.recompute_status(movie_name='DUNE', theatre_name='pvr')

        assert result is InventoryStatus.BOOK_ASAP
        assert state.inventories[KEY].status is InventoryStatus.BOOK_ASAP

    @pytest.mark.asyncio
    async def test_second_call_writes_nothing(self, use_case, state, seed, metric_value):
        # Given: stale status
        seed(total_capacity=10, booked=10, status=InventoryStatus.BOOK_ASAP)
        first = await use_case.recompute_status(movie_name='Dune', theatre_name='PVR')
        persisted = state.inventories[KEY]
        unchanged_before = metric_value(
            'movie_booking_status_recomputes_total', {'result': 'unchanged'}
        )

        # When: recompute again with no new bookings
        second = await use_case.recompute_status(movie_name='Dune', theatre_name='PVR')

        # Then: same status, stored record not replaced
        assert first is second is InventoryStatus.SOLD_OUT
        assert state.inventories[KEY] is persisted
        assert (
            metric_value('movie_booking_status_recomputes_total', {'result': 'unchanged'})
            == unchanged_before + 1
        )

    @pytest.mark.asyncio
    async def test_status_already_correct_is_not_rewritten(self, use_case, state, seed):
        inventory = seed(total_capacity=10, booked=2)

        result = await use_case.recompute_status(movie_name='Dune', theatre_name='PVR')

        assert result is InventoryStatus.BOOK_ASAP
        assert state.inventories[KEY] is inventory

    @pytest.mark.asyncio
    async def test_unknown_movie(self, use_case, metric_value):
        failed_before = metric_value('movie_booking_status_recomputes_total', {'result': 'failed'})

        with pytest.raises(NotFoundError):
            await use_case.recompute_status(movie_name='Unknown', theatre_name='PVR')

        assert (
            metric_value('movie_booking_status_recomputes_total', {'result': 'failed'})
            == failed_before + 1
        )
