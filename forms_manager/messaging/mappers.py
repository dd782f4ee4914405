"""
Audit message mappers.

Build ``AuditMessage`` values from mapped form metadata (camelCase dicts)
and the change being audited.

All functions are pure (no DB, no I/O, no logging) to enable Tier-1 testing.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from forms_manager.messaging.messages import (
    AuditEventMessageType,
    AuditMessage,
    FormDefinitionRequestType,
    MessageAuthor,
)

Metadata = Dict[str, Any]
Author = Dict[str, str]


def message_author(author: Author) -> MessageAuthor:
    return MessageAuthor(id=author["id"], display_name=author["displayName"])


def form_message_data_base(metadata: Metadata) -> Dict[str, Any]:
    return {"formId": metadata["id"], "slug": metadata["slug"]}


def create_v1_message(
    message_type: AuditEventMessageType,
    metadata: Metadata,
    data: Optional[Dict[str, Any]] = None,
    updated: Optional[Dict[str, Any]] = None,
) -> AuditMessage:
    """
    Envelope stamped from the update when it carries audit fields,
    otherwise from the metadata's own ``updatedAt/By``.
    """
    updated = updated or {}
    created_by = updated.get("updatedBy") or metadata["updatedBy"]
    return AuditMessage(
        type=message_type,
        entity_id=metadata["id"],
        created_at=updated.get("updatedAt") or metadata["updatedAt"],
        created_by=message_author(created_by),
        data=data,
    )


def _changes(previous: Dict[str, Any], new: Dict[str, Any]) -> Dict[str, Any]:
    return {"previous": previous, "new": new}


# =============================================================================
# FORM LIFECYCLE
# =============================================================================

def form_created_mapper(metadata: Metadata) -> AuditMessage:
    data = {
        **form_message_data_base(metadata),
        "title": metadata["title"],
        "organisation": metadata["organisation"],
        "teamName": metadata["teamName"],
        "teamEmail": metadata["teamEmail"],
    }
    return AuditMessage(
        type=AuditEventMessageType.FORM_CREATED,
        entity_id=metadata["id"],
        created_at=metadata["createdAt"],
        created_by=message_author(metadata["createdBy"]),
        data=data,
    )


def form_title_updated_mapper(metadata: Metadata, old_metadata: Metadata) -> AuditMessage:
    data = {
        **form_message_data_base(metadata),
        "changes": _changes({"title": old_metadata["title"]}, {"title": metadata["title"]}),
    }
    return create_v1_message(AuditEventMessageType.FORM_TITLE_UPDATED, metadata, data)


def form_live_created_from_draft_mapper(metadata: Metadata) -> AuditMessage:
    return create_v1_message(
        AuditEventMessageType.FORM_LIVE_CREATED_FROM_DRAFT, metadata, form_message_data_base(metadata)
    )


def form_draft_created_from_live_mapper(metadata: Metadata) -> AuditMessage:
    return create_v1_message(
        AuditEventMessageType.FORM_DRAFT_CREATED_FROM_LIVE, metadata, form_message_data_base(metadata)
    )


def form_draft_deleted_mapper(metadata: Metadata) -> AuditMessage:
    return create_v1_message(
        AuditEventMessageType.FORM_DRAFT_DELETED, metadata, form_message_data_base(metadata)
    )


def form_migrated_mapper(metadata: Metadata) -> AuditMessage:
    return create_v1_message(
        AuditEventMessageType.FORM_MIGRATED, metadata, form_message_data_base(metadata)
    )


def form_deleted_mapper(metadata: Metadata, author: Author, date: datetime) -> AuditMessage:
    return create_v1_message(
        AuditEventMessageType.FORM_DELETED,
        metadata,
        form_message_data_base(metadata),
        {"updatedAt": date, "updatedBy": author},
    )


def form_secret_saved_mapper(metadata: Metadata, secret_name: str, author: Author, date: datetime) -> AuditMessage:
    """The secret value is never part of the message."""
    return create_v1_message(
        AuditEventMessageType.FORM_SECRET_SAVED,
        metadata,
        {**form_message_data_base(metadata), "secretName": secret_name},
        {"updatedAt": date, "updatedBy": author},
    )


def form_updated_mapper(
    metadata: Metadata,
    request_type: FormDefinitionRequestType,
    payload: Any,
) -> AuditMessage:
    data = {
        **form_message_data_base(metadata),
        "requestType": request_type.value,
        "payload": payload,
    }
    return create_v1_message(AuditEventMessageType.FORM_UPDATED, metadata, data)


# =============================================================================
# METADATA FIELD UPDATES
# =============================================================================

# Updated field -> (message type, fields reported in ``changes``)
_PRIVACY_NOTICE_FIELDS = ("privacyNoticeType", "privacyNoticeText", "privacyNoticeUrl")

METADATA_FIELD_EVENTS: Dict[str, Tuple[AuditEventMessageType, Tuple[str, ...]]] = {
    "organisation": (AuditEventMessageType.FORM_ORGANISATION_UPDATED, ("organisation",)),
    "teamName": (AuditEventMessageType.FORM_TEAM_NAME_UPDATED, ("teamName",)),
    "teamEmail": (AuditEventMessageType.FORM_TEAM_EMAIL_UPDATED, ("teamEmail",)),
    "notificationEmail": (AuditEventMessageType.FORM_NOTIFICATION_EMAIL_UPDATED, ("notificationEmail",)),
    "submissionGuidance": (AuditEventMessageType.FORM_SUBMISSION_GUIDANCE_UPDATED, ("submissionGuidance",)),
    "privacyNoticeType": (AuditEventMessageType.FORM_PRIVACY_NOTICE_UPDATED, _PRIVACY_NOTICE_FIELDS),
    "privacyNoticeText": (AuditEventMessageType.FORM_PRIVACY_NOTICE_UPDATED, _PRIVACY_NOTICE_FIELDS),
    "privacyNoticeUrl": (AuditEventMessageType.FORM_PRIVACY_NOTICE_UPDATED, _PRIVACY_NOTICE_FIELDS),
    "contact": (AuditEventMessageType.FORM_SUPPORT_CONTACT_UPDATED, ("contact",)),
}


def get_form_metadata_audit_messages(
    metadata: Metadata,
    old_metadata: Metadata,
    update: Dict[str, Any],
) -> List[AuditMessage]:
    """
    One message per changed field group, in field order.

    Fields supplied with an unchanged value produce nothing; the three
    privacy notice fields share a single message.
    """
    messages: List[AuditMessage] = []
    emitted = set()

    for key, (message_type, fields) in METADATA_FIELD_EVENTS.items():
        if key not in update or message_type in emitted:
            continue
        if all(old_metadata.get(name) == metadata.get(name) for name in fields):
            continue

        emitted.add(message_type)
        data = {
            **form_message_data_base(metadata),
            "changes": _changes(
                {name: old_metadata.get(name) for name in fields},
                {name: metadata.get(name) for name in fields},
            ),
        }
        messages.append(create_v1_message(message_type, metadata, data, update))

    return messages
