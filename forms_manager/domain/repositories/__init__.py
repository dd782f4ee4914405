"""
Form repositories.

Each repository has a base class holding the shared logic and two storage
implementations: PostgreSQL (production) and in-memory (Tier-1 tests).
"""

from forms_manager.domain.repositories.form_definition_blob_repository import FormDefinitionBlobRepository
from forms_manager.domain.repositories.form_definition_repository import FormDefinitionRepository
from forms_manager.domain.repositories.form_metadata_repository import (
    DemoteTransition,
    DiscardDraftTransition,
    FormMetadataRepository,
    PatchTransition,
    PromoteTransition,
)
from forms_manager.domain.repositories.form_versions_repository import FormVersionsRepository, VersionPage
from forms_manager.domain.repositories.in_memory_form_definition_repository import InMemoryFormDefinitionRepository
from forms_manager.domain.repositories.in_memory_form_metadata_repository import InMemoryFormMetadataRepository
from forms_manager.domain.repositories.in_memory_form_versions_repository import InMemoryFormVersionsRepository
from forms_manager.domain.repositories.in_memory_secrets_repository import InMemorySecretsRepository
from forms_manager.domain.repositories.in_memory_store import InMemoryDatabase, InMemoryTables
from forms_manager.domain.repositories.postgres_form_definition_repository import PostgresFormDefinitionRepository
from forms_manager.domain.repositories.postgres_form_metadata_repository import PostgresFormMetadataRepository
from forms_manager.domain.repositories.postgres_form_versions_repository import PostgresFormVersionsRepository
from forms_manager.domain.repositories.postgres_secrets_repository import PostgresSecretsRepository
from forms_manager.domain.repositories.secrets_repository import SecretsRepository

__all__ = [
    "DemoteTransition",
    "DiscardDraftTransition",
    "FormDefinitionBlobRepository",
    "FormDefinitionRepository",
    "FormMetadataRepository",
    "FormVersionsRepository",
    "InMemoryDatabase",
    "InMemoryFormDefinitionRepository",
    "InMemoryFormMetadataRepository",
    "InMemoryFormVersionsRepository",
    "InMemorySecretsRepository",
    "InMemoryTables",
    "PatchTransition",
    "PostgresFormDefinitionRepository",
    "PostgresFormMetadataRepository",
    "PostgresFormVersionsRepository",
    "PostgresSecretsRepository",
    "PromoteTransition",
    "SecretsRepository",
    "VersionPage",
]
