"""
FastAPI application assembly

Builds the app used by `src.main` (and by TestClient in the API tests):
tracing instrumentation, CORS, error mapping, the movie/booking routers and
the operational endpoints.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.constant.route_constant import API_PREFIX
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.observability.tracing import TracingConfig
from src.service.movie_booking.driving_adapter.http_controller.booking_controller import (
    router as booking_router,
)
from src.service.movie_booking.driving_adapter.http_controller.movie_controller import (
    router as movie_router,
)


Lifespan = Callable[[FastAPI], AbstractAsyncContextManager[Any]]

# Order matters: the literal '/movies/add' must be matched before '/{movie_name}/add'
API_ROUTERS: tuple[tuple[APIRouter, str], ...] = (
    (movie_router, 'movie'),
    (booking_router, 'booking'),
)

operations_router = APIRouter(tags=['operations'])


@operations_router.get('/health')
async def health_check() -> dict[str, str]:
    return {
        'status': 'healthy',
        'service': settings.PROJECT_NAME,
        'version': settings.VERSION,
        'store_backend': settings.STORE_BACKEND,
    }


@operations_router.get('/metrics')
async def get_metrics() -> PlainTextResponse:
    """Prometheus scrape endpoint."""
    return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


def create_app(*, lifespan: Lifespan, service_name: str = 'movie-booking') -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description='Ticket inventory and seat booking for movie theatres',
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Instrument before routes are mounted so every route gets a server span
    TracingConfig(service_name=service_name).instrument_fastapi(app=app)

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )
    register_exception_handlers(app)

    for router, tag in API_ROUTERS:
        app.include_router(router, prefix=API_PREFIX, tags=[tag])
    app.include_router(operations_router)

    return app
