"""
SQLAlchemy models for forms.

Each table keeps a handful of indexed scalar columns next to a JSON document
column holding the nested value (metadata document, definitions, version
snapshot). JSONB on PostgreSQL, plain JSON elsewhere.
"""

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from forms_manager.core.database import Base

# Python None is stored as SQL NULL, never as a JSON null document
JSONDocument = JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")


class FormMetadataRow(Base):
    """Administrative record for a form (title, team, draft/live audit)."""

    __tablename__ = "form_metadata"

    id = Column(String(36), primary_key=True)

    slug = Column(
        String(255),
        nullable=False,
        unique=True,
        doc="URL slug derived from the title",
    )

    last_version_number = Column(
        Integer,
        nullable=False,
        default=0,
        doc="Highest version number handed out for this form",
    )

    document = Column(JSONDocument, nullable=False)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class FormDefinitionRow(Base):
    """Draft and live definitions of a form, keyed by the form id."""

    __tablename__ = "form_definitions"

    id = Column(String(36), primary_key=True)
    draft = Column(JSONDocument, nullable=True)
    live = Column(JSONDocument, nullable=True)


class FormVersionRow(Base):
    """Append-only snapshot of a form definition."""

    __tablename__ = "form_versions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    form_id = Column(String(36), nullable=False, index=True)
    version_number = Column(Integer, nullable=False)
    document = Column(JSONDocument, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("form_id", "version_number", name="uq_form_versions_form_version"),
    )


class FormSecretRow(Base):
    """Encrypted secret value attached to a form."""

    __tablename__ = "form_secrets"

    form_id = Column(String(36), primary_key=True)
    secret_name = Column(String(255), primary_key=True)
    secret_value = Column(Text, nullable=False)
