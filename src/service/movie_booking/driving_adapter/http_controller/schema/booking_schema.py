from datetime import datetime
from typing import List

from pydantic import BaseModel


class BookSeatsRequest(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'theatre_name': 'PVR',
                'number_of_tickets': 2,
                'seat_numbers': ['A1', 'A2'],
                'user_login_id': 'alice',
            }
        },
    }

    theatre_name: str
    number_of_tickets: int
    seat_numbers: List[str] = []
    user_login_id: str


class BookingResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'movie_name': 'Dune',
                'theatre_name': 'PVR',
                'number_of_tickets': 2,
                'seat_numbers': ['A1', 'A2'],
                'user_login_id': 'alice',
                'booked_at': '2025-01-10T10:30:00',
            }
        },
    }

    id: str  # UUID7
    movie_name: str
    theatre_name: str
    number_of_tickets: int
    seat_numbers: List[str]
    user_login_id: str
    booked_at: datetime


class StatusResponse(BaseModel):
    movie_name: str
    theatre_name: str
    status: str


class BookedInfoResponse(BaseModel):
    model_config = {
        'json_schema_extra': {'example': {'booked': 8, 'remaining': 2, 'status': 'BOOK_ASAP'}},
    }

    booked: int
    remaining: int
    status: str
