"""Exception handlers that render failures in the shape the Diyetim clients read.

The web dashboard and the mobile app show ``response.message`` in a toast, so
every error body carries the text at the top level::

    {"success": false, "message": "...", "status_code": 404, "details": {...}}

Schema failures add a ``validation_errors`` list with one entry per field.
"""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import AppException
from core.logger import get_logger

logger = get_logger("core.error_handlers")

VALIDATION_MESSAGE = "Validation error"
DATABASE_MESSAGE = "A database error occurred"
INTERNAL_MESSAGE = "An internal server error occurred"


def error_body(message: str, status_code: int, details: Optional[Dict[str, Any]] = None,
               validation_errors: Optional[List[Dict[str, str]]] = None) -> Dict[str, Any]:
    body = {"success": False, "message": message, "status_code": status_code}
    if details:
        body["details"] = details
    if validation_errors is not None:
        body["validation_errors"] = validation_errors
    return body


def create_error_response(message: str, status_code: int = 500, details: Optional[Dict[str, Any]] = None,
                          validation_errors: Optional[List[Dict[str, str]]] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code,
                        content=error_body(message, status_code, details, validation_errors))


def field_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    """Flatten pydantic errors to ``{field, message, type}`` with dotted locations."""
    return [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    logger.warning("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
    return create_error_response(exc.message, exc.status_code, exc.details)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = field_errors(exc)
    logger.warning("%s %s rejected: %s", request.method, request.url.path, errors)
    return create_error_response(VALIDATION_MESSAGE, status.HTTP_422_UNPROCESSABLE_ENTITY,
                                 validation_errors=errors)


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # SQL text stays in the log only
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return create_error_response(DATABASE_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR,
                                 {"type": "database_error"})


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return create_error_response(INTERNAL_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR,
                                 {"type": "internal_error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
    logger.info("Exception handlers registered")
