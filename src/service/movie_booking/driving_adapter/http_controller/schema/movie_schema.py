from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class MovieCreateRequest(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {'movie_name': 'Dune', 'theatre_name': 'PVR', 'total_tickets': 100}
        },
    }

    movie_name: str
    theatre_name: str
    total_tickets: int


class MovieResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': 1,
                'movie_name': 'Dune',
                'theatre_name': 'PVR',
                'total_tickets': 100,
                'status': 'BOOK_ASAP',
                'created_at': '2025-01-10T10:30:00',
            }
        },
    }

    id: int
    movie_name: str
    theatre_name: str
    total_tickets: int
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
