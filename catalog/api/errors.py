"""Exception handlers turning every failure into the standard error envelope.

Each exception is first classified into an ``ErrorKind``; ``describe``
supplies the status code and error code for that kind.
"""
import logging
from http import HTTPStatus
from typing import Any, Dict, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog.exceptions import CatalogError, ErrorKind, ErrorMapping, ValidationError, describe
from catalog.schemas.common import ApiResponse, ErrorResponse

logger = logging.getLogger(__name__)


def _envelope_response(
    mapping: ErrorMapping,
    message: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    error = ErrorResponse(
        error_code=mapping.error_code,
        message=message or mapping.message,
        details=details or {},
    )
    envelope = ApiResponse.error(mapping.message, status_code=mapping.status_code, data=error)
    return JSONResponse(
        status_code=mapping.status_code,
        content=envelope.model_dump(mode="json", by_alias=True),
        headers=headers,
    )


def error_response(
    kind: ErrorKind,
    message: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """Build the envelope for a failure of the given kind."""
    return _envelope_response(describe(kind), message, details)


def http_error_mapping(status_code: int) -> ErrorMapping:
    """
    Map a framework-raised HTTP error onto the envelope.

    FastAPI raises a bare 400 only when the request body cannot be decoded;
    routing errors (404, 405) keep their status with the standard reason as code.
    """
    if status_code == 400:
        return describe(ErrorKind.MALFORMED_JSON)
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        return ErrorMapping(status_code, "HTTP_ERROR", "HTTP error")
    return ErrorMapping(status_code, phrase.upper().replace(" ", "_").replace("-", "_"), phrase)


def _field_name(loc: Tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) or "body"


def _expected_type(error_type: str) -> str:
    # pydantic error types look like "int_parsing", "decimal_parsing", "bool_type"
    if error_type == "int_from_float":
        return "int"
    return error_type.rsplit("_", 1)[0]


def _is_type_error(error_type: str) -> bool:
    return error_type.endswith("_parsing") or error_type.endswith("_type") or error_type == "int_from_float"


def classify_request_error(exc: RequestValidationError) -> Tuple[ErrorKind, str, Dict[str, Any]]:
    """
    Classify a FastAPI request validation failure.

    Returns:
        Tuple of (kind, client message, details)
    """
    errors = exc.errors()
    body_errors = [e for e in errors if e["loc"] and e["loc"][0] == "body"]
    param_errors = [e for e in errors if e["loc"] and e["loc"][0] in ("query", "path")]

    for error in body_errors:
        if error["type"] == "json_invalid" or len(error["loc"]) == 1:
            return (
                ErrorKind.MALFORMED_JSON,
                "The JSON request body is invalid",
                {"suggestion": "Check the JSON syntax of the request body"},
            )

    if body_errors:
        details = {_field_name(e["loc"][1:]): e["msg"] for e in body_errors}
        return ErrorKind.VALIDATION, "Validation failed for the submitted data", details

    for error in param_errors:
        if _is_type_error(error["type"]):
            parameter = str(error["loc"][-1])
            expected = _expected_type(error["type"])
            return (
                ErrorKind.TYPE_MISMATCH,
                f"Parameter '{parameter}' must be of type {expected}",
                {"parameter": parameter, "expectedType": expected},
            )

    details = {str(e["loc"][-1]): e["msg"] for e in param_errors or errors}
    return ErrorKind.PARAMETER_VALIDATION, "Parameter validation failed", details


def _domain_details(exc: CatalogError, request: Request) -> Dict[str, Any]:
    if isinstance(exc, ValidationError):
        return dict(exc.errors)
    if exc.kind == ErrorKind.NOT_FOUND:
        return {"path": request.url.path}
    if exc.kind == ErrorKind.ALREADY_EXISTS:
        return {"suggestion": "Use a different name or update the existing product"}
    return {"suggestion": "Check the values sent in the request"}


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error translator to the application."""

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        kind, message, details = classify_request_error(exc)
        logger.warning(f"{describe(kind).error_code} on {request.url.path}: {details}")
        return error_response(kind, message, details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        mapping = http_error_mapping(exc.status_code)
        logger.warning(f"{mapping.error_code} on {request.url.path}: {exc.detail}")
        details = {"path": request.url.path}
        if exc.status_code == 400:
            details = {"suggestion": "Check the encoding and JSON syntax of the request body"}
        return _envelope_response(mapping, str(exc.detail), details, getattr(exc, "headers", None))

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
        logger.warning(f"{describe(exc.kind).error_code} on {request.url.path}: {exc.message}")
        return error_response(exc.kind, exc.message, _domain_details(exc, request))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
        return error_response(
            ErrorKind.INTERNAL,
            "An internal server error occurred",
            {"path": request.url.path},
        )
