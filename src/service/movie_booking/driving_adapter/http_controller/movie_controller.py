from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from opentelemetry import trace

from src.platform.constant.route_constant import (
    MOVIE_ADD,
    MOVIE_DELETE,
    MOVIE_LIST_ALL,
    MOVIE_SEARCH,
    MOVIE_SET_CAPACITY,
)
from src.platform.logging.loguru_io import Logger
from src.service.movie_booking.app.command.add_movie_use_case import AddMovieUseCase
from src.service.movie_booking.app.command.delete_movie_use_case import DeleteMovieUseCase
from src.service.movie_booking.app.command.set_capacity_use_case import SetCapacityUseCase
from src.service.movie_booking.app.query.list_movies_use_case import ListMoviesUseCase
from src.service.movie_booking.domain.entity.inventory_entity import Inventory
from src.service.movie_booking.driving_adapter.http_controller.schema.movie_schema import (
    MovieCreateRequest,
    MovieResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


def _to_response(inventory: Inventory) -> MovieResponse:
    return MovieResponse(
        id=inventory.id or 0,
        movie_name=inventory.movie_name,
        theatre_name=inventory.theatre_name,
        total_tickets=inventory.total_capacity,
        status=inventory.status.value,
        created_at=inventory.created_at,
        updated_at=inventory.updated_at,
    )


@router.get(MOVIE_LIST_ALL, response_model=List[MovieResponse])
@Logger.io
async def list_movies(
    use_case: ListMoviesUseCase = Depends(ListMoviesUseCase.depends),
) -> List[MovieResponse]:
    return [_to_response(inventory) for inventory in await use_case.list_all()]


@router.get(MOVIE_SEARCH, response_model=List[MovieResponse])
@Logger.io
async def search_movies(
    movie_name: str,
    use_case: ListMoviesUseCase = Depends(ListMoviesUseCase.depends),
) -> List[MovieResponse]:
    return [_to_response(inventory) for inventory in await use_case.search(movie_name=movie_name)]


@router.post(MOVIE_ADD, status_code=status.HTTP_201_CREATED)
@Logger.io
async def add_movie(
    request: MovieCreateRequest,
    use_case: AddMovieUseCase = Depends(AddMovieUseCase.depends),
) -> MovieResponse:
    inventory = await use_case.add_movie(
        movie_name=request.movie_name,
        theatre_name=request.theatre_name,
        total_capacity=request.total_tickets,
    )
    return _to_response(inventory)


@router.patch(MOVIE_SET_CAPACITY)
@Logger.io
async def set_capacity(
    movie_name: str,
    theatre: str,
    total: int = Query(..., description='New total number of tickets'),
    use_case: SetCapacityUseCase = Depends(SetCapacityUseCase.depends),
) -> MovieResponse:
    with tracer.start_as_current_span('controller.set_capacity') as span:
        span.set_attribute('movie_name', movie_name)
        span.set_attribute('theatre', theatre)
        inventory = await use_case.set_capacity(
            movie_name=movie_name, theatre_name=theatre, total_capacity=total
        )
        return _to_response(inventory)


@router.delete(MOVIE_DELETE, status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_movie(
    movie_name: str,
    theatre: str,
    use_case: DeleteMovieUseCase = Depends(DeleteMovieUseCase.depends),
) -> Response:
    await use_case.delete_movie(movie_name=movie_name, theatre_name=theatre)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
