class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ValidationError(DomainError):
    """Client-correctable input error; `rule` names the violated rule."""

    def __init__(self, message: str, *, rule: str) -> None:
        self.rule = rule
        super().__init__(message, 400)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class CapacityExceededError(ConflictError):
    def __init__(self, *, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        super().__init__('Not enough tickets available')


class InfrastructureError(CustomBaseError):
    """Store/transport failure. Safe for the caller to retry with backoff."""

    retryable = True

    def __init__(self, message: str) -> None:
        super().__init__(message, 503)


class StoreUnavailableError(InfrastructureError):
    pass


class LockTimeoutError(InfrastructureError):
    pass


class EventPublishError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 500)
