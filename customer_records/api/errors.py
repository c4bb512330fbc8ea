from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from customer_records.core.logging_config import get_logger
from customer_records.domain.errors import (
    DuplicatePhoneNumber,
    NotFound,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": exc.message})


async def duplicate_phone_handler(request: Request, exc: DuplicatePhoneNumber) -> JSONResponse:
    logger.info(f"Rejected duplicate phone number on {request.method} {request.url.path}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": exc.message})


async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": exc.message})


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error(
        f"Storage failure on {request.method} {request.url.path}",
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(DuplicatePhoneNumber, duplicate_phone_handler)
    app.add_exception_handler(NotFound, not_found_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
