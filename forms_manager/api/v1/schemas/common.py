"""Common schema types for API requests and responses."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake-case attributes exchanged as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self, exclude_unset: bool = False) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, exclude_unset=exclude_unset)


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")

    model_config = {"json_schema_extra": {
        "example": {
            "error_code": "NOT_FOUND",
            "message": "Form with ID '661e4ca5039739ef2902b214' not found",
            "details": None,
        }
    }}


class StatusResponse(BaseModel):
    """Acknowledgement returned by mutations that have no richer result."""

    id: str
    status: str
    slug: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
