"""
@Logger.io - call / return / exception logging for use cases, stores and controllers

In DEBUG mode each decorated call writes an entry and an exit line, indented
by nesting depth so one request reads as a call tree:

    -> BookSeatsUseCase.book_seats(movie_name='Dune', theatre_name='PVR', ...)
      -> InventoryStoreImpl.find_inventory(key=InventoryKey(...), for_update=True)
      <- InventoryStoreImpl.find_inventory 0.42ms: Inventory(...)
    <- BookSeatsUseCase.book_seats 2.10ms: Booking(...)

Exceptions are logged once, at the innermost decorated frame: client errors
(status < 500) as WARNING, infrastructure errors as ERROR, anything else with
its traceback. The exception is always re-raised.
"""

from collections.abc import Awaitable, Callable
from contextvars import Token
from functools import wraps
from inspect import iscoroutinefunction, signature
import re
import time
from typing import Any, ParamSpec, TypeVar, cast, overload

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io_config import call_depth_var, logger


_P = ParamSpec('_P')
_T = TypeVar('_T')

MAX_CONTENT_LENGTH = 500
MASK = '********'
SENSITIVE_KEYWORDS = frozenset({'password', 'token', 'secret', 'authorization'})

_SENSITIVE_PATTERN = re.compile(
    r"(\b(?:" + '|'.join(sorted(SENSITIVE_KEYWORDS)) + r")\b)(\s*[=:]\s*)('[^']*'|\"[^\"]*\"|\S+)",
    re.IGNORECASE,
)


def _mask(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            k: MASK if str(k).lower() in SENSITIVE_KEYWORDS else _mask(v) for k, v in value.items()
        }
    if type(value) in (list, tuple):
        return type(value)(_mask(item) for item in value)
    return value


def _render(value: Any, *, truncate: bool) -> str:
    text = _SENSITIVE_PATTERN.sub(rf"\1\2'{MASK}'", repr(_mask(value)))
    if truncate and len(text) > MAX_CONTENT_LENGTH:
        return f'{text[:MAX_CONTENT_LENGTH]}...(+{len(text) - MAX_CONTENT_LENGTH} chars)'
    return text


def _describe_call(
    func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any], *, truncate: bool
) -> str:
    try:
        arguments = signature(func).bind_partial(*args, **kwargs).arguments
    except TypeError:
        return f'*{_render(args, truncate=truncate)}, **{_render(kwargs, truncate=truncate)}'
    return ', '.join(
        f'{name}={_render(value, truncate=truncate)}'
        for name, value in arguments.items()
        if name not in ('self', 'cls')
    )


class LoguruIO:
    def __init__(self, *, truncate_content: bool) -> None:
        self.truncate_content = truncate_content

    def _enter(
        self, func: Callable[..., Any], target: str, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> tuple[Token[int], float]:
        depth = call_depth_var.get()
        if settings.DEBUG:
            call = _describe_call(func, args, kwargs, truncate=self.truncate_content)
            logger.bind(target=target).debug(f'{"  " * depth}-> {target}({call})')
        return call_depth_var.set(depth + 1), time.perf_counter()

    def _leave(self, target: str, return_value: Any, started: float) -> None:
        if settings.DEBUG:
            elapsed_ms = (time.perf_counter() - started) * 1000
            indent = '  ' * (call_depth_var.get() - 1)
            logger.bind(target=target).debug(
                f'{indent}<- {target} {elapsed_ms:.2f}ms: '
                f'{_render(return_value, truncate=self.truncate_content)}'
            )

    @staticmethod
    def _fail(target: str, e: Exception) -> None:
        if getattr(e, '_io_logged', False):
            return
        e._io_logged = True  # type: ignore[attr-defined]
        bound = logger.bind(target=target)
        if isinstance(e, CustomBaseError):
            level = 'WARNING' if e.status_code < 500 else 'ERROR'
            bound.log(level, f'{type(e).__name__}({e.status_code}): {e.message}')
        else:
            bound.exception(f'{type(e).__name__}: {e}')

    def __call__(self, func: Callable[_P, _T]) -> Callable[_P, _T]:
        target = func.__qualname__

        if iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                token, started = self._enter(func, target, args, kwargs)
                try:
                    return_value = await cast(Awaitable[Any], func(*args, **kwargs))
                except Exception as e:
                    self._fail(target, e)
                    raise
                else:
                    self._leave(target, return_value, started)
                    return return_value
                finally:
                    call_depth_var.reset(token)

            return cast(Callable[_P, _T], async_wrapper)

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            token, started = self._enter(func, target, args, kwargs)
            try:
                return_value = func(*args, **kwargs)
            except Exception as e:
                self._fail(target, e)
                raise
            else:
                self._leave(target, return_value, started)
                return return_value
            finally:
                call_depth_var.reset(token)

        return cast(Callable[_P, _T], sync_wrapper)


class Logger:
    base = logger

    @overload
    @staticmethod
    def io(func: Callable[_P, _T]) -> Callable[_P, _T]: ...

    @overload
    @staticmethod
    def io(func: None = ..., *, truncate_content: bool = ...) -> LoguruIO: ...

    @staticmethod
    def io(
        func: Callable[_P, _T] | None = None, *, truncate_content: bool = False
    ) -> Callable[_P, _T] | LoguruIO:
        decorator = LoguruIO(truncate_content=truncate_content)
        return decorator(func) if func is not None else decorator
