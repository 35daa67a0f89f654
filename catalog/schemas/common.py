from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar
import math

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Largest value an INTEGER/BIGINT column accepts
MAX_INT64 = 2**63 - 1


class CamelModel(BaseModel):
    """Base schema exposing camelCase field names on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(CamelModel):
    """Error body carried in the envelope's data field on failures."""
    error_code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.now)

    @field_serializer("timestamp", when_used="json")
    def serialize_timestamp(self, value: datetime) -> str:
        return value.strftime(TIMESTAMP_FORMAT)


class ApiResponse(CamelModel, Generic[T]):
    """Uniform envelope returned by every endpoint."""
    success: bool
    message: str
    data: Optional[T] = None
    timestamp: datetime = Field(default_factory=datetime.now)
    status_code: int = 200

    @field_serializer("timestamp", when_used="json")
    def serialize_timestamp(self, value: datetime) -> str:
        return value.strftime(TIMESTAMP_FORMAT)

    @classmethod
    def ok(cls, data: Any = None, message: str = "Operation completed successfully", status_code: int = 200):
        return cls(success=True, message=message, data=data, status_code=status_code)

    @classmethod
    def error(cls, message: str, status_code: int = 500, data: Any = None):
        return cls(success=False, message=message, data=data, status_code=status_code)


class PageMetadata(CamelModel):
    """Pagination metadata (page numbers are zero-based)."""
    number: int
    size: int
    total_elements: int
    total_pages: int
    first: bool
    last: bool
    has_next: bool
    has_previous: bool

    @classmethod
    def build(cls, number: int, size: int, total_elements: int) -> "PageMetadata":
        total_pages = math.ceil(total_elements / size) if size > 0 else 1
        has_next = number + 1 < total_pages
        return cls(
            number=number,
            size=size,
            total_elements=total_elements,
            total_pages=total_pages,
            first=number == 0,
            last=not has_next,
            has_next=has_next,
            has_previous=number > 0,
        )


class PagedResponse(CamelModel, Generic[T]):
    """Page of items plus its pagination metadata."""
    content: List[T]
    page: PageMetadata
