"""
Test Configuration and Fixtures

- Environment is set before any application module reads settings
- Unit tests run against the in-memory inventory store
- Integration tests build their own SQLite engine (see integration/conftest.py)
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    os.environ['STORE_BACKEND'] = 'memory'
    os.environ.setdefault('DEBUG', 'true')
    os.environ.setdefault('BOOKING_LOCK_TIMEOUT_SECONDS', '2')
    os.environ.setdefault('STORE_TIMEOUT_SECONDS', '2')

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)


_early_setup_test_environment()

# =============================================================================
# Imports (after environment setup)
# =============================================================================
from collections.abc import Callable  # noqa: E402
from datetime import datetime, timezone  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

from prometheus_client import REGISTRY  # noqa: E402
import pytest  # noqa: E402

from src.platform.state.keyed_lock import KeyedLock  # noqa: E402
from src.service.movie_booking.app.interface.i_seats_booked_publisher import (  # noqa: E402
    ISeatsBookedPublisher,
)
from src.service.movie_booking.domain.availability_calculator import compute_status  # noqa: E402
from src.service.movie_booking.domain.entity.booking_entity import Booking  # noqa: E402
from src.service.movie_booking.domain.entity.inventory_entity import Inventory  # noqa: E402
from src.service.movie_booking.driven_adapter.repo.in_memory_inventory_store import (  # noqa: E402
    InMemoryInventoryState,
    InMemoryUnitOfWork,
)


@pytest.fixture
def state() -> InMemoryInventoryState:
    return InMemoryInventoryState()


@pytest.fixture
def uow_factory(state: InMemoryInventoryState) -> Callable[[], InMemoryUnitOfWork]:
    return lambda: InMemoryUnitOfWork(state=state)


@pytest.fixture
def booking_lock() -> KeyedLock:
    return KeyedLock(timeout=1.0)


@pytest.fixture
def publisher() -> AsyncMock:
    return AsyncMock(spec=ISeatsBookedPublisher)


@pytest.fixture
def seed(state: InMemoryInventoryState) -> Callable[..., Inventory]:
    """Write an inventory (and optionally prior bookings) straight into committed state."""

    def _seed(
        *,
        movie_name: str = 'Dune',
        theatre_name: str = 'PVR',
        total_capacity: int = 10,
        booked: int = 0,
        status=None,
    ) -> Inventory:
        now = datetime.now(timezone.utc)
        inventory = Inventory(
            id=state.next_id(),
            movie_name=movie_name,
            theatre_name=theatre_name,
            total_capacity=total_capacity,
            status=status
            or compute_status(total_capacity=total_capacity, booked_count=booked).status,
            created_at=now,
            updated_at=now,
        )
        state.inventories[inventory.key] = inventory
        if booked:
            state.bookings.append(
                Booking.create(
                    movie_name=movie_name,
                    theatre_name=theatre_name,
                    seat_count=booked,
                    seat_labels=[f'Z{i}' for i in range(booked)],
                    booked_by='seed',
                )
            )
        return inventory

    return _seed


@pytest.fixture
def metric_value() -> Callable[..., float]:
    """Current value of a Prometheus sample (0.0 if never recorded)."""

    def _value(name: str, labels: dict[str, str] | None = None) -> float:
        return REGISTRY.get_sample_value(name, labels or {}) or 0.0

    return _value
