"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

from app.core.config import settings


class ResponseStatus(str, Enum):
    OK = "OK"
    ERROR = "Error"


class Response(BaseModel):
    """Envelope shared by every API response."""
    status: ResponseStatus
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "Response":
        return cls(status=ResponseStatus.OK)

    @classmethod
    def fail(cls, message: str) -> "Response":
        return cls(status=ResponseStatus.ERROR, error=message)


class ValidationErrorResponse(Response):
    """Error envelope carrying per-field validation errors."""
    errors: List[Dict[str, Any]] = []


_http_url = TypeAdapter(HttpUrl)


class SaveURLRequest(BaseModel):
    """Request schema for publishing a URL under an alias."""
    url: str
    alias: str = Field(..., min_length=1, max_length=settings.ALIAS_MAX_LENGTH)

    @field_validator("alias")
    def alias_without_separators(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("alias must not be blank")
        if "/" in v:
            raise ValueError("alias must not contain '/'")
        return v

    @field_validator("url")
    def url_is_http(cls, v: str) -> str:
        """Check the URL but keep it exactly as submitted."""
        try:
            _http_url.validate_python(v)
        except ValidationError as e:
            raise ValueError("url must be a valid http or https URL") from e
        return v


class SaveURLResponse(Response):
    """Response schema for a stored alias."""
    alias: str
    id: int
