"""
Domain exceptions and their HTTP mapping.

Services raise these; ``setup_exception_handlers`` turns them into JSON
responses so routers never build error payloads by hand.
"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from oficina.logging_config import get_logger

logger = get_logger(__name__)


class OficinaError(Exception):
    """Base class for all business errors."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(OficinaError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str):
        super().__init__(f"{entity} not found")
        self.entity = entity


class ConflictError(OficinaError):
    status_code = status.HTTP_400_BAD_REQUEST


class InsufficientStockError(OficinaError):
    """Raised when a part is requested in a larger quantity than is in stock."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, part_name: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for '{part_name}': requested {requested}, available {available}"
        )
        self.part_name = part_name
        self.requested = requested
        self.available = available


class InvalidTransitionError(OficinaError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot change service order status from '{current}' to '{target}'")
        self.current = current
        self.target = target


class BusinessRuleError(OficinaError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


async def oficina_error_handler(request: Request, exc: OficinaError) -> JSONResponse:
    logger.warning(
        f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.detail}"
    )
    content = {"detail": exc.detail}
    if isinstance(exc, InsufficientStockError):
        content["requested"] = exc.requested
        content["available"] = exc.available
    return JSONResponse(status_code=exc.status_code, content=content)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Log any unhandled exception and return a generic message with an error ID
    the client can quote when reporting the problem.
    """
    error_id = id(exc)
    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Could not complete the request",
            "error_id": error_id,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI application."""
    app.add_exception_handler(OficinaError, oficina_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
