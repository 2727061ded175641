from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import UserDirectoryError, StorageError
from app.core.logging import get_logger
from app.schemas.response import ErrorResponse
from utils.constants import INVALID_BODY_MESSAGE, INTERNAL_ERROR_MESSAGE

logger = get_logger(__name__)

def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    Every error body has the shape {"message": ...}.
    """
    @app.exception_handler(UserDirectoryError)
    async def user_directory_exception_handler(request: Request, exc: UserDirectoryError):
        if isinstance(exc, StorageError):
            logger.error(
                f"{request.method} {request.url.path} storage failure: {exc.details or exc.message}",
                extra={"method": request.method, "path": request.url.path}
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(message=exc.message).model_dump()
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handles standard HTTP exceptions (404 for unknown routes, 405, etc.)
        """
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(message=str(exc.detail)).model_dump(),
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handles bodies FastAPI could not parse into a request schema.
        """
        logger.debug(
            f"Rejected request body: {exc.errors()}",
            extra={"method": request.method, "path": request.url.path}
        )
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(message=INVALID_BODY_MESSAGE).model_dump()
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all for unhandled exceptions.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else "unknown"
            },
            exc_info=True
        )

        # Detail stays in the log above, in every environment
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(message=INTERNAL_ERROR_MESSAGE).model_dump()
        )
