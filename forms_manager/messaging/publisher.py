"""Audit event publishers."""

import asyncio
import logging
import uuid
from typing import List, Optional

from forms_manager.core.config import Settings
from forms_manager.domain.errors import wrap_error
from forms_manager.messaging.messages import AuditMessage

logger = logging.getLogger(__name__)


class EventPublisher:
    """Publishes audit messages. Failures propagate to the caller."""

    async def publish(self, message: AuditMessage) -> Optional[str]:
        """Publish one message.

        Args:
            message: Message to publish

        Returns:
            Transport message id, or None when publishing is disabled
        """
        raise NotImplementedError


class SnsEventPublisher(EventPublisher):
    """Publishes messages to an SNS topic as JSON."""

    def __init__(self, client, topic_arn: Optional[str], enabled: bool = True):
        self.client = client
        self.topic_arn = topic_arn
        self.enabled = enabled

    @classmethod
    def from_settings(cls, client, settings: Settings) -> "SnsEventPublisher":
        return cls(client, settings.sns_topic_arn, settings.publish_audit_events)

    async def publish(self, message: AuditMessage) -> Optional[str]:
        if not self.enabled:
            logger.debug(f"Audit publishing disabled, skipping {message.type.value} for {message.entity_id}")
            return None

        try:
            response = await asyncio.to_thread(
                self.client.publish,
                TopicArn=self.topic_arn,
                Message=message.to_json(),
            )
        except Exception as error:
            logger.error(f"[publishEvent] Publishing {message.type.value} for {message.entity_id} failed - {error}")
            raise wrap_error(error)

        message_id = response.get("MessageId")
        logger.info(f"Published {message.type.value} for {message.entity_id} as message {message_id}")
        return message_id


class InMemoryEventPublisher(EventPublisher):
    """Collects messages in order (for testing and local runs)."""

    def __init__(self):
        self.messages: List[AuditMessage] = []

    async def publish(self, message: AuditMessage) -> Optional[str]:
        self.messages.append(message)
        return str(uuid.uuid4())

    def types(self) -> List[str]:
        return [message.type.value for message in self.messages]

    def clear(self) -> None:
        self.messages.clear()
