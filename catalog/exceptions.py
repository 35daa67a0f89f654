"""Domain exceptions and the error-kind table.

Services raise these to signal business-rule violations. Every exception
that reaches the HTTP boundary is classified into an ``ErrorKind``, and
``describe`` turns that kind into the status code, error code and envelope
message sent to the client.
"""
import enum
from typing import Dict, NamedTuple, Optional


class ErrorKind(str, enum.Enum):
    """Categories of failures the API reports."""
    VALIDATION = "validation"
    PARAMETER_VALIDATION = "parameter_validation"
    CUSTOM_VALIDATION = "custom_validation"
    MALFORMED_JSON = "malformed_json"
    TYPE_MISMATCH = "type_mismatch"
    ILLEGAL_ARGUMENT = "illegal_argument"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    INTERNAL = "internal"


class ErrorMapping(NamedTuple):
    status_code: int
    error_code: str
    message: str


_ERROR_TABLE: Dict[ErrorKind, ErrorMapping] = {
    ErrorKind.VALIDATION: ErrorMapping(400, "VALIDATION_ERROR", "Invalid input data"),
    ErrorKind.PARAMETER_VALIDATION: ErrorMapping(400, "PARAMETER_VALIDATION_ERROR", "Invalid parameters"),
    ErrorKind.CUSTOM_VALIDATION: ErrorMapping(400, "CUSTOM_VALIDATION_ERROR", "Validation error"),
    ErrorKind.MALFORMED_JSON: ErrorMapping(400, "MALFORMED_JSON", "Invalid JSON format"),
    ErrorKind.TYPE_MISMATCH: ErrorMapping(400, "TYPE_MISMATCH_ERROR", "Incorrect data type"),
    ErrorKind.ILLEGAL_ARGUMENT: ErrorMapping(400, "ILLEGAL_ARGUMENT", "Invalid argument"),
    ErrorKind.NOT_FOUND: ErrorMapping(404, "PRODUCT_NOT_FOUND", "Resource not found"),
    ErrorKind.ALREADY_EXISTS: ErrorMapping(409, "PRODUCT_ALREADY_EXISTS", "Resource conflict"),
    ErrorKind.INTERNAL: ErrorMapping(500, "INTERNAL_SERVER_ERROR", "Internal server error"),
}


def describe(kind: ErrorKind) -> ErrorMapping:
    """Map an error kind to its HTTP status, error code and envelope message."""
    return _ERROR_TABLE[kind]


class CatalogError(Exception):
    """Base class for all domain exceptions."""
    kind = ErrorKind.INTERNAL

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(CatalogError):
    """Raised when a candidate product breaks a catalog business rule."""
    kind = ErrorKind.CUSTOM_VALIDATION

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None) -> None:
        self.errors = errors or {}
        super().__init__(message)


class ProductNotFoundError(CatalogError):
    """Raised when the requested product does not exist or has been soft-deleted."""
    kind = ErrorKind.NOT_FOUND

    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(f"Product not found with ID: {product_id}")


class ProductAlreadyExistsError(CatalogError):
    """Raised when another active product already uses the same name."""
    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"A product named '{name}' already exists")


class InvalidArgumentError(CatalogError):
    """Raised when arguments are individually valid but inconsistent (e.g. min > max)."""
    kind = ErrorKind.ILLEGAL_ARGUMENT
