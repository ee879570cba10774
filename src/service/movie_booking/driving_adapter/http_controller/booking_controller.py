from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.constant.route_constant import (
    BOOKING_BOOKED_INFO,
    BOOKING_CREATE,
    BOOKING_RECOMPUTE_STATUS,
)
from src.platform.logging.loguru_io import Logger
from src.service.movie_booking.app.command.book_seats_use_case import BookSeatsUseCase
from src.service.movie_booking.app.command.recompute_status_use_case import (
    RecomputeStatusUseCase,
)
from src.service.movie_booking.app.query.get_booked_info_use_case import GetBookedInfoUseCase
from src.service.movie_booking.driving_adapter.http_controller.schema.booking_schema import (
    BookedInfoResponse,
    BookingResponse,
    BookSeatsRequest,
    StatusResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post(BOOKING_CREATE, status_code=status.HTTP_201_CREATED)
@Logger.io
async def book_seats(
    movie_name: str,
    request: BookSeatsRequest,
    use_case: BookSeatsUseCase = Depends(BookSeatsUseCase.depends),
) -> BookingResponse:
    with tracer.start_as_current_span('controller.book_seats') as span:
        span.set_attribute('movie_name', movie_name)
        span.set_attribute('theatre', request.theatre_name)
        span.set_attribute('user_login_id', request.user_login_id)

        booking = await use_case.book_seats(
            movie_name=movie_name,
            theatre_name=request.theatre_name,
            seat_count=request.number_of_tickets,
            seat_labels=request.seat_numbers,
            requester=request.user_login_id,
        )
        span.set_attribute('booking.id', str(booking.id))

        return BookingResponse(
            id=str(booking.id),
            movie_name=booking.movie_name,
            theatre_name=booking.theatre_name,
            number_of_tickets=booking.seat_count,
            seat_numbers=list(booking.seat_labels),
            user_login_id=booking.booked_by,
            booked_at=booking.created_at,
        )


@router.put(BOOKING_RECOMPUTE_STATUS)
@Logger.io
async def recompute_status(
    movie_name: str,
    theatre: str,
    use_case: RecomputeStatusUseCase = Depends(RecomputeStatusUseCase.depends),
) -> StatusResponse:
    inventory_status = await use_case.recompute_status(movie_name=movie_name, theatre_name=theatre)
    return StatusResponse(movie_name=movie_name, theatre_name=theatre, status=inventory_status.value)


@router.get(BOOKING_BOOKED_INFO)
@Logger.io
async def get_booked_info(
    movie_name: str,
    theatre: str,
    use_case: GetBookedInfoUseCase = Depends(GetBookedInfoUseCase.depends),
) -> BookedInfoResponse:
    availability = await use_case.get_booked_info(movie_name=movie_name, theatre_name=theatre)
    return BookedInfoResponse(
        booked=availability.booked,
        remaining=availability.remaining,
        status=availability.status.value,
    )
