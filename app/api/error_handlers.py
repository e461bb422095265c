"""
Global exception handlers.

Rejected input of any kind (rule set failures, storage-level name clashes,
malformed requests) shares one 422 envelope: ``{"message", "errors"}``.
"""
import logging
from typing import Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.exceptions import ValidationFailed, ProductNotFoundError, DuplicateProductNameError
from app.validation.product_rules import PRODUCT_MESSAGES

logger = logging.getLogger(__name__)

VALIDATION_FAILED_MESSAGE = "Validasi gagal."
NOT_FOUND_MESSAGE = "Produk tidak ditemukan."
SERVER_ERROR_MESSAGE = "Terjadi kesalahan pada server."


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(ValidationFailed)
    async def validation_failed_handler(request: Request, exc: ValidationFailed):
        logger.warning(f"Validation failed on {request.url.path}: {exc.errors}")
        return validation_error_response(exc.errors)

    @app.exception_handler(DuplicateProductNameError)
    async def duplicate_name_handler(request: Request, exc: DuplicateProductNameError):
        logger.warning(f"Name clash on {request.url.path}: {exc}")
        return validation_error_response(
            {"product_name": [PRODUCT_MESSAGES["product_name.unique"]]}
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Malformed request on {request.url.path}: {exc.errors()}")
        return validation_error_response(_collect_request_errors(exc))

    @app.exception_handler(ProductNotFoundError)
    async def not_found_handler(request: Request, exc: ProductNotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"status": "error", "message": NOT_FOUND_MESSAGE},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all, never leaks internal details."""
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "message": SERVER_ERROR_MESSAGE},
        )


def validation_error_response(errors: Dict[str, List[str]]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"message": VALIDATION_FAILED_MESSAGE, "errors": errors},
    )


def _collect_request_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    """Group FastAPI's request errors by field with Indonesian messages."""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = error.get("loc", ())
        if error.get("type") == "json_invalid" or not loc:
            # loc carries the character offset of the syntax error
            field = "body"
        else:
            field = str(loc[-1]) if len(loc) > 1 else str(loc[0])
        errors.setdefault(field, []).append(_request_error_message(field, error))
    return errors


def _request_error_message(field: str, error: dict) -> str:
    error_type = error.get("type", "")
    if error_type == "json_invalid":
        return "Format JSON tidak valid."
    if error_type in ("dict_type", "model_attributes_type"):
        return "Data harus berupa objek JSON."
    if error_type in ("int_parsing", "int_type", "int_from_float"):
        return f"{field} harus berupa bilangan bulat."
    if error_type == "greater_than_equal":
        return f"{field} tidak boleh kurang dari {error.get('ctx', {}).get('ge')}."
    if error_type == "less_than_equal":
        return f"{field} tidak boleh lebih dari {error.get('ctx', {}).get('le')}."
    return f"Nilai {field} tidak valid."
