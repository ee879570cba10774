from typing import Annotated, List, Literal

import orjson
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from src.platform.constant.path import ENV_EXAMPLE_FILE, ENV_FILE


_ENV_FILE = ENV_FILE if ENV_FILE.exists() else ENV_EXAMPLE_FILE


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Movie Booking'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # CORS: comma separated or a JSON list; NoDecode leaves parsing to the validator
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str):
            if v.lstrip().startswith('['):
                return [str(origin) for origin in orjson.loads(v)]
            return [i.strip() for i in v.split(',') if i.strip()]
        if isinstance(v, list):
            return v
        return []

    # Database
    DATABASE_URL_ASYNC: str = 'sqlite+aiosqlite:///./movie_booking.db'
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 10  # Wait for a pooled connection (seconds)
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True

    # Inventory store adapter: 'sqlalchemy' (DATABASE_URL_ASYNC) or 'memory' (process-local)
    STORE_BACKEND: Literal['sqlalchemy', 'memory'] = 'sqlalchemy'

    # Deadlines (seconds); expiry is reported as a retryable 503
    STORE_TIMEOUT_SECONDS: float = 5.0
    BOOKING_LOCK_TIMEOUT_SECONDS: float = 5.0

    # In-process booking event queue
    NOTIFICATION_BUFFER_SIZE: int = 1000

    # Tracing
    OTEL_CONSOLE_EXPORT: bool = False


settings = Settings()  # type: ignore
