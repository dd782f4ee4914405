"""API v1 request and response schemas."""

from forms_manager.api.v1.schemas.common import CamelModel, ErrorResponse, HealthResponse, StatusResponse
from forms_manager.api.v1.schemas.forms import (
    ComponentInput,
    ConditionInput,
    FormListResponse,
    FormMetadataInput,
    FormMetadataUpdate,
    ListInput,
    OptionRequest,
    PageInput,
    SecretRequest,
    SectionAssignmentRequest,
    passthrough,
)

__all__ = [
    "CamelModel",
    "ComponentInput",
    "ConditionInput",
    "ErrorResponse",
    "FormListResponse",
    "FormMetadataInput",
    "FormMetadataUpdate",
    "HealthResponse",
    "ListInput",
    "OptionRequest",
    "PageInput",
    "SecretRequest",
    "SectionAssignmentRequest",
    "StatusResponse",
    "passthrough",
]
