from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

logger = structlog.get_logger()


class HelpDeskError(Exception):
    """
    Base class for errors raised by the help desk services.
    Each subclass maps onto one HTTP status code.
    """
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(HelpDeskError):
    status_code = status.HTTP_404_NOT_FOUND


class PermissionDeniedError(HelpDeskError):
    status_code = status.HTTP_403_FORBIDDEN


class InvalidStatusTransitionError(HelpDeskError):
    status_code = status.HTTP_409_CONFLICT


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all for unhandled exceptions.
    Prevents stack trace leakage to clients.
    """
    logger.error("unhandled_exception", error=str(exc), path=request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred. Please try again later."},
    )

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Standard HTTP exception handler.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )

async def help_desk_exception_handler(request: Request, exc: HelpDeskError):
    logger.info("help_desk_error", error=exc.detail, status_code=exc.status_code, path=request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Pydantic validation error handler.
    Invalid input is a client error (400) with the offending fields listed.
    """
    errors = jsonable_encoder(exc.errors())
    logger.warning("validation_error", errors=errors, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": _summarize(errors), "errors": errors},
    )


def _summarize(errors: list) -> str:
    if not errors:
        return "Validation error"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if field:
        return f"Invalid {field}: {first.get('msg', 'invalid value')}"
    return first.get("msg", "Validation error")
