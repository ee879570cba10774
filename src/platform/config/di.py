"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.state.keyed_lock import KeyedLock
from src.service.movie_booking.driven_adapter.message_queue.in_memory_seats_booked_publisher import (
    InMemorySeatsBookedPublisher,
)
from src.service.movie_booking.driven_adapter.repo.in_memory_inventory_store import (
    InMemoryInventoryState,
    InMemoryUnitOfWork,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (uses AsyncEngineManager with settings from config_service)
    database = providers.Singleton(Database)

    # Committed data for STORE_BACKEND=memory
    in_memory_state = providers.Singleton(InMemoryInventoryState)

    # One unit of work per call; use cases receive the provider itself as a factory
    unit_of_work = providers.Selector(
        config_service.provided.STORE_BACKEND,
        sqlalchemy=providers.Factory(
            SqlAlchemyUnitOfWork, session_factory=database.provided.session
        ),
        memory=providers.Factory(InMemoryUnitOfWork, state=in_memory_state),
    )

    # Per-key serialization of every inventory write (admission, status, capacity)
    booking_lock = providers.Singleton(
        KeyedLock, timeout=config_service.provided.BOOKING_LOCK_TIMEOUT_SECONDS
    )

    # Message Queue Publishers
    seats_booked_publisher = providers.Singleton(
        InMemorySeatsBookedPublisher,
        max_buffer_size=config_service.provided.NOTIFICATION_BUFFER_SIZE,
    )


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
