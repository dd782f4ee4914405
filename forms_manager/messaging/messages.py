"""
Audit event messages.

Every message shares one schema-versioned envelope; the event-specific
payload lives in ``data``. Messages serialize with camelCase keys via
``model_dump_json(by_alias=True)``.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AuditEventMessageSchemaVersion(int, Enum):
    V1 = 1


class AuditEventMessageSource(str, Enum):
    FORMS_MANAGER = "FORMS_MANAGER"


class AuditEventMessageCategory(str, Enum):
    FORM = "FORM"


class AuditEventMessageType(str, Enum):
    FORM_CREATED = "FORM_CREATED"
    FORM_TITLE_UPDATED = "FORM_TITLE_UPDATED"
    FORM_ORGANISATION_UPDATED = "FORM_ORGANISATION_UPDATED"
    FORM_TEAM_NAME_UPDATED = "FORM_TEAM_NAME_UPDATED"
    FORM_TEAM_EMAIL_UPDATED = "FORM_TEAM_EMAIL_UPDATED"
    FORM_NOTIFICATION_EMAIL_UPDATED = "FORM_NOTIFICATION_EMAIL_UPDATED"
    FORM_SUBMISSION_GUIDANCE_UPDATED = "FORM_SUBMISSION_GUIDANCE_UPDATED"
    FORM_PRIVACY_NOTICE_UPDATED = "FORM_PRIVACY_NOTICE_UPDATED"
    FORM_SUPPORT_CONTACT_UPDATED = "FORM_SUPPORT_CONTACT_UPDATED"
    FORM_UPDATED = "FORM_UPDATED"
    FORM_LIVE_CREATED_FROM_DRAFT = "FORM_LIVE_CREATED_FROM_DRAFT"
    FORM_DRAFT_CREATED_FROM_LIVE = "FORM_DRAFT_CREATED_FROM_LIVE"
    FORM_DRAFT_DELETED = "FORM_DRAFT_DELETED"
    FORM_MIGRATED = "FORM_MIGRATED"
    FORM_DELETED = "FORM_DELETED"
    FORM_SECRET_SAVED = "FORM_SECRET_SAVED"


class FormDefinitionRequestType(str, Enum):
    """Which draft-definition edit a FORM_UPDATED message describes."""
    REPLACE_DRAFT = "REPLACE_DRAFT"
    CREATE_PAGE = "CREATE_PAGE"
    UPDATE_PAGE = "UPDATE_PAGE"
    UPDATE_PAGE_FIELDS = "UPDATE_PAGE_FIELDS"
    DELETE_PAGE = "DELETE_PAGE"
    REORDER_PAGES = "REORDER_PAGES"
    CREATE_COMPONENT = "CREATE_COMPONENT"
    UPDATE_COMPONENT = "UPDATE_COMPONENT"
    DELETE_COMPONENT = "DELETE_COMPONENT"
    REORDER_COMPONENTS = "REORDER_COMPONENTS"
    CREATE_LIST = "CREATE_LIST"
    UPDATE_LIST = "UPDATE_LIST"
    DELETE_LIST = "DELETE_LIST"
    CREATE_CONDITION = "CREATE_CONDITION"
    UPDATE_CONDITION = "UPDATE_CONDITION"
    DELETE_CONDITION = "DELETE_CONDITION"
    ASSIGN_SECTIONS = "ASSIGN_SECTIONS"
    UNASSIGN_SECTIONS = "UNASSIGN_SECTIONS"
    UPDATE_OPTION = "UPDATE_OPTION"


class MessageAuthor(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    display_name: str


class AuditMessage(BaseModel):
    """Envelope published for every audited change."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    schema_version: AuditEventMessageSchemaVersion = AuditEventMessageSchemaVersion.V1
    source: AuditEventMessageSource = AuditEventMessageSource.FORMS_MANAGER
    category: AuditEventMessageCategory = AuditEventMessageCategory.FORM
    type: AuditEventMessageType
    entity_id: str
    created_at: datetime
    created_by: MessageAuthor
    data: Optional[Dict[str, Any]] = None
    message_created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)
