"""Request and response schemas for forms and their definitions."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from forms_manager.api.v1.schemas.common import CamelModel


class Contact(CamelModel):
    phone: Optional[str] = None
    email: Optional[Dict[str, str]] = None
    online: Optional[Dict[str, str]] = None


class FormMetadataInput(CamelModel):
    """Fields supplied when creating a form."""

    title: str = Field(..., min_length=1, max_length=250)
    organisation: str = Field(..., min_length=1)
    team_name: str = Field(..., min_length=1)
    team_email: str = Field(..., min_length=1)
    contact: Optional[Contact] = None
    submission_guidance: Optional[str] = None
    privacy_notice_type: Optional[str] = None
    privacy_notice_text: Optional[str] = None
    privacy_notice_url: Optional[str] = None
    terms_and_conditions_agreed: Optional[bool] = None
    notification_email: Optional[str] = None


class FormMetadataUpdate(CamelModel):
    """Partial update; only the fields sent are applied."""

    title: Optional[str] = Field(None, min_length=1, max_length=250)
    organisation: Optional[str] = None
    team_name: Optional[str] = None
    team_email: Optional[str] = None
    contact: Optional[Contact] = None
    submission_guidance: Optional[str] = None
    privacy_notice_type: Optional[str] = None
    privacy_notice_text: Optional[str] = None
    privacy_notice_url: Optional[str] = None
    terms_and_conditions_agreed: Optional[bool] = None
    notification_email: Optional[str] = None


class FormListResponse(BaseModel):
    data: List[Dict[str, Any]]
    meta: Dict[str, Any]


class PageInput(BaseModel):
    """A page; everything beyond ``path`` and ``title`` is passed through."""

    model_config = ConfigDict(extra="allow")

    path: str = Field(..., min_length=1)
    title: str = ""


class ComponentInput(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    name: str
    title: str = ""


class ListInput(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    title: str
    type: str
    items: List[Dict[str, Any]] = Field(default_factory=list)


class ConditionInput(BaseModel):
    model_config = ConfigDict(extra="allow")

    display_name: str = Field(..., alias="displayName")
    items: List[Dict[str, Any]] = Field(..., min_length=1)


class SectionAssignment(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    title: str
    hide_title: Optional[bool] = None
    page_ids: List[str] = Field(default_factory=list)


class SectionAssignmentRequest(CamelModel):
    sections: List[SectionAssignment]


class OptionRequest(CamelModel):
    option_value: str


class SecretRequest(CamelModel):
    secret_value: str = Field(..., min_length=1)


def passthrough(model: BaseModel) -> Dict[str, Any]:
    """Body of a free-form definition model, extras included, keyed as sent."""
    return model.model_dump(by_alias=True, exclude_none=True)
