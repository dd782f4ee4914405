"""
Service context.

Bundles the database handle, repositories and publisher that every service
function receives as its first argument. Built once at startup (or per test)
and passed in explicitly; services never reach for module-level handles.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from forms_manager.core.aws import get_s3_client, get_sns_client
from forms_manager.core.config import Settings
from forms_manager.core.database import PostgresDatabase
from forms_manager.domain.repositories import (
    FormDefinitionBlobRepository,
    FormDefinitionRepository,
    FormMetadataRepository,
    FormVersionsRepository,
    InMemoryDatabase,
    InMemoryFormDefinitionRepository,
    InMemoryFormMetadataRepository,
    InMemoryFormVersionsRepository,
    InMemorySecretsRepository,
    PostgresFormDefinitionRepository,
    PostgresFormMetadataRepository,
    PostgresFormVersionsRepository,
    PostgresSecretsRepository,
    SecretsRepository,
)
from forms_manager.messaging.publisher import (
    EventPublisher,
    InMemoryEventPublisher,
    SnsEventPublisher,
)

logger = logging.getLogger(__name__)


@dataclass
class FormsContext:
    """Everything a service operation needs."""
    database: Any  # PostgresDatabase or InMemoryDatabase
    definitions: FormDefinitionRepository
    metadata: FormMetadataRepository
    versions: FormVersionsRepository
    secrets: SecretsRepository
    publisher: EventPublisher
    settings: Settings = field(default_factory=Settings)
    blobs: Optional[FormDefinitionBlobRepository] = None


def create_postgres_context(
    settings: Settings,
    database: PostgresDatabase,
    publisher: EventPublisher,
    blobs: Optional[FormDefinitionBlobRepository] = None,
) -> FormsContext:
    return FormsContext(
        database=database,
        definitions=PostgresFormDefinitionRepository(),
        metadata=PostgresFormMetadataRepository(),
        versions=PostgresFormVersionsRepository(),
        secrets=PostgresSecretsRepository(),
        publisher=publisher,
        settings=settings,
        blobs=blobs,
    )


def create_in_memory_context(
    settings: Optional[Settings] = None,
    publisher: Optional[EventPublisher] = None,
    blobs: Optional[FormDefinitionBlobRepository] = None,
) -> FormsContext:
    """In-memory context with real storage semantics (for Tier-1 tests)."""
    return FormsContext(
        database=InMemoryDatabase(),
        definitions=InMemoryFormDefinitionRepository(),
        metadata=InMemoryFormMetadataRepository(),
        versions=InMemoryFormVersionsRepository(),
        secrets=InMemorySecretsRepository(),
        publisher=publisher or InMemoryEventPublisher(),
        settings=settings or Settings(),
        blobs=blobs,
    )


def create_context(settings: Settings, database: Optional[PostgresDatabase] = None) -> FormsContext:
    """
    Wire the context from settings.

    Without a database handle the in-memory store is used; the SNS publisher
    is always wired (it is a no-op while audit publishing is disabled).
    """
    publisher = SnsEventPublisher.from_settings(get_sns_client(settings), settings)

    blobs = None
    if settings.form_definition_bucket_name:
        blobs = FormDefinitionBlobRepository(
            get_s3_client(settings),
            settings.form_definition_bucket_name,
            settings.form_directory,
        )

    if database is None:
        logger.warning("DATABASE_URL not set, using the in-memory store")
        return create_in_memory_context(settings, publisher, blobs)

    return create_postgres_context(settings, database, publisher, blobs)
