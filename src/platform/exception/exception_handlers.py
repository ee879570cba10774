"""
HTTP error mapping

Domain errors keep their own status code and message. Validation failures
(domain or request schema) always name a `rule` so clients can branch on it;
retryable infrastructure failures add a Retry-After header.
"""

from typing import Any, Callable, Coroutine, cast

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from src.platform.exception.exceptions import (
    CustomBaseError,
    InfrastructureError,
    ValidationError,
)


ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]

RETRY_AFTER_SECONDS = '1'
REQUEST_SCHEMA_RULE = 'request_schema'


async def custom_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = cast(CustomBaseError, exc)
    content: dict[str, Any] = {'detail': error.message}
    headers: dict[str, str] = {}
    if isinstance(error, ValidationError):
        content['rule'] = str(error.rule)
    if isinstance(error, InfrastructureError):
        headers['Retry-After'] = RETRY_AFTER_SECONDS
    return JSONResponse(status_code=error.status_code, content=content, headers=headers or None)


async def request_validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    validation_error = cast(RequestValidationError, exc)
    errors = [
        {'field': '.'.join(str(part) for part in error['loc']), 'message': error['msg']}
        for error in validation_error.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'detail': errors, 'rule': REQUEST_SCHEMA_RULE},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'detail': 'Internal server error'},
    )


EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    CustomBaseError: custom_error_handler,
    RequestValidationError: request_validation_error_handler,
    Exception: unhandled_error_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
