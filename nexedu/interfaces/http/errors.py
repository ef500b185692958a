import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...domain.errors import InternalError, NexEduError, Unauthenticated, ValidationError

logger = structlog.get_logger(__name__)

RATE_LIMIT_MESSAGE = "Muitas requisições. Tente novamente mais tarde"


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def nexedu_error_handler(request: Request, exc: NexEduError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return error_response(exc.status_code, exc.message, headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info("request_validation_failed", path=request.url.path, errors=exc.errors())
    return error_response(ValidationError.status_code, ValidationError.default_message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("rate_limit_exceeded", path=request.url.path, limit=str(exc.detail))
    return error_response(429, RATE_LIMIT_MESSAGE, {"Retry-After": "60"})


async def unhandled_error_handler(request: Request, exc: Exception):
    # nenhum detalhe interno vai para o cliente
    logger.exception("unhandled_error", path=request.url.path, error_type=type(exc).__name__)
    return error_response(InternalError.status_code, InternalError.default_message)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NexEduError, nexedu_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
