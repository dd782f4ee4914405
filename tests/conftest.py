"""
Shared pytest fixtures for all tests.

Every service test runs against the in-memory context, which keeps real
storage and transaction semantics without a database.
"""

import pytest
import pytest_asyncio

from forms_manager.core.config import Settings
from forms_manager.services.context import create_in_memory_context
from forms_manager.services.forms import create_form


# =============================================================================
# SAMPLE DATA
# =============================================================================

AUTHOR = {"id": "f50ceeed-b7a4-47cf-a498-094efc99f8bc", "displayName": "Enrique Chase"}

OTHER_AUTHOR = {"id": "a9e7c2d1-0b4f-4c6e-9a1d-3f5e7b9c2d4a", "displayName": "Jane Doe"}

FORM_INPUT = {
    "title": "My Form",
    "organisation": "Defra",
    "teamName": "Forms Team",
    "teamEmail": "forms@example.gov.uk",
}

READY_FOR_LIVE = {
    "contact": {"phone": "0800 000 000"},
    "submissionGuidance": "We will be in touch within 5 working days.",
    "privacyNoticeUrl": "https://www.gov.uk/help/privacy-notice",
    "termsAndConditionsAgreed": True,
    "notificationEmail": "notify@example.gov.uk",
}


# =============================================================================
# CONTEXT FIXTURES
# =============================================================================

@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def ctx(settings):
    """Fresh in-memory service context per test."""
    return create_in_memory_context(settings)


@pytest.fixture
def publisher(ctx):
    return ctx.publisher


@pytest.fixture
def author():
    return dict(AUTHOR)


@pytest.fixture
def other_author():
    return dict(OTHER_AUTHOR)


@pytest.fixture
def form_input():
    return dict(FORM_INPUT)


@pytest.fixture
def ready_fields():
    """Metadata fields publishing requires."""
    return dict(READY_FOR_LIVE)


@pytest_asyncio.fixture
async def form(ctx, author, form_input):
    """A newly created draft form."""
    return await create_form(ctx, form_input, author)


@pytest_asyncio.fixture
async def ready_form(ctx, author, form_input, ready_fields):
    """A draft form carrying every field publishing requires."""
    return await create_form(ctx, {**form_input, **ready_fields}, author)
