"""
Production FastAPI Application

HTTP API plus the in-process status-update consumer.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import cleanup, container, setup
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import create_db_and_tables, dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.service.movie_booking.app.command.recompute_status_use_case import (
    RecomputeStatusUseCase,
)
from src.service.movie_booking.driving_adapter.mq_consumer.status_update_consumer import (
    StatusUpdateConsumer,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Movie Booking] Starting up...')

    tracing = TracingConfig(service_name='movie-booking')
    tracing.setup()
    Logger.base.info('📊 [Movie Booking] OpenTelemetry tracing configured')

    setup()
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Movie Booking] Dependency injection wired')

    config = container.config_service()
    if config.STORE_BACKEND == 'sqlalchemy':
        engine = get_engine()
        tracing.instrument_sqlalchemy(engine=engine)
        await create_db_and_tables(engine)
        Logger.base.info('🗄️  [Movie Booking] Database engine ready + instrumented')
    else:
        Logger.base.warning('🧪 [Movie Booking] Using process-local in-memory inventory store')

    publisher = container.seats_booked_publisher()
    consumer = StatusUpdateConsumer(
        receive_stream=publisher.subscribe(),
        recompute_status_use_case=RecomputeStatusUseCase(
            uow_factory=container.unit_of_work,
            booking_lock=container.booking_lock(),
            store_timeout=config.STORE_TIMEOUT_SECONDS,
        ),
    )

    async with anyio.create_task_group() as tg:
        await consumer.start(task_group=tg)
        Logger.base.info('✅ [Movie Booking] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Movie Booking] Shutting down...')
        # Closing the publisher ends the consumer loop after it drains the queue
        await publisher.aclose()

    if config.STORE_BACKEND == 'sqlalchemy':
        await dispose_engine()
        Logger.base.info('🗄️  [Movie Booking] Database engine disposed')

    tracing.shutdown()
    container.unwire()
    cleanup()

    Logger.base.info('👋 [Movie Booking] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
