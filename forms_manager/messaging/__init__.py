"""Audit event messages, mappers and publishers."""

from forms_manager.messaging.messages import (
    AuditEventMessageCategory,
    AuditEventMessageType,
    AuditMessage,
    FormDefinitionRequestType,
    MessageAuthor,
)
from forms_manager.messaging.publisher import (
    EventPublisher,
    InMemoryEventPublisher,
    SnsEventPublisher,
)

__all__ = [
    "AuditEventMessageCategory",
    "AuditEventMessageType",
    "AuditMessage",
    "EventPublisher",
    "FormDefinitionRequestType",
    "InMemoryEventPublisher",
    "MessageAuthor",
    "SnsEventPublisher",
]
