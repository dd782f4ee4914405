"""Tests for the in-memory form repositories.

Tier-1 tests: real storage and transaction semantics, no DB.
"""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from forms_manager.domain.definition.constants import FormStatus
from forms_manager.domain.definition.templates import empty_v2
from forms_manager.domain.errors import (
    ConflictError,
    DuplicatePagePathError,
    FormAlreadyExistsError,
    FormIsLiveError,
    InvalidFormDefinitionError,
    NotFoundError,
)
from forms_manager.domain.repositories import (
    InMemoryDatabase,
    InMemoryFormDefinitionRepository,
    InMemoryFormMetadataRepository,
    InMemoryFormVersionsRepository,
    InMemorySecretsRepository,
)
from forms_manager.domain.repositories.form_definition_repository import FormDefinitionRepository
from forms_manager.domain.repositories.form_metadata_repository import (
    DemoteTransition,
    FormMetadataRepository,
    PatchTransition,
    PromoteTransition,
    apply_transition,
)
from forms_manager.domain.repositories.form_versions_repository import FormVersionsRepository
from forms_manager.domain.repositories.secrets_repository import SecretsRepository

FORM_ID = "661e4ca5039739ef2902b214"
AUTHOR = {"id": "f50ceeed-b7a4-47cf-a498-094efc99f8bc", "displayName": "Enrique Chase"}
LATER = datetime(2024, 8, 1, 12, 0, tzinfo=timezone.utc)


def _metadata(form_id=FORM_ID, slug="my-form"):
    return {
        "id": form_id,
        "slug": slug,
        "title": "My Form",
        "organisation": "Defra",
        "teamName": "Forms Team",
        "teamEmail": "forms@example.gov.uk",
        "draft": {
            "createdAt": "2024-06-25T23:00:00+00:00",
            "createdBy": AUTHOR,
            "updatedAt": "2024-06-25T23:00:00+00:00",
            "updatedBy": AUTHOR,
        },
    }


def _page(page_id="p1", path="/question"):
    return {"id": page_id, "path": path, "title": "Question", "components": []}


@pytest.fixture
def database():
    return InMemoryDatabase()


@pytest.fixture
def tables(database):
    return database.tables


# =============================================================================
# TRANSITIONS
# =============================================================================

class TestApplyTransition:

    def test_patch_sets_fields_and_stamps_draft(self):
        updated = apply_transition(_metadata(), PatchTransition(author=AUTHOR, date=LATER, fields={"title": "New"}))
        assert updated["title"] == "New"
        assert updated["draft"]["updatedAt"] == LATER.isoformat()
        assert updated["updatedBy"] == AUTHOR

    def test_promote_creates_live_and_clears_draft(self):
        updated = apply_transition(_metadata(), PromoteTransition(author=AUTHOR, date=LATER))
        assert "draft" not in updated
        assert updated["live"]["createdAt"] == LATER.isoformat()

    def test_demote_creates_fresh_draft(self):
        live = apply_transition(_metadata(), PromoteTransition(author=AUTHOR, date=LATER))
        updated = apply_transition(live, DemoteTransition(author=AUTHOR, date=LATER))
        assert updated["draft"]["createdAt"] == LATER.isoformat()
        assert "live" in updated


# =============================================================================
# METADATA
# =============================================================================

@pytest.mark.asyncio
class TestInMemoryFormMetadataRepository:

    @pytest.fixture
    def repo(self):
        return InMemoryFormMetadataRepository()

    async def test_create_and_get(self, repo, tables):
        await repo.create(_metadata(), tables)
        document = await repo.get(FORM_ID, tables)
        assert document["slug"] == "my-form"
        assert document["lastVersionNumber"] == 0

    async def test_get_missing_raises_not_found(self, repo, tables):
        with pytest.raises(NotFoundError, match="not found"):
            await repo.get("missing", tables)

    async def test_duplicate_slug_rejected(self, repo, tables):
        await repo.create(_metadata(), tables)
        with pytest.raises(FormAlreadyExistsError):
            await repo.create(_metadata(form_id="other"), tables)

    async def test_update_returns_post_image(self, repo, tables):
        await repo.create(_metadata(), tables)
        updated = await repo.update(FORM_ID, PatchTransition(author=AUTHOR, date=LATER, fields={"teamName": "X"}), tables)
        assert updated["teamName"] == "X"

    async def test_update_missing_raises_not_found(self, repo, tables):
        with pytest.raises(NotFoundError):
            await repo.update("missing", PatchTransition(author=AUTHOR, date=LATER), tables)

    async def test_update_never_moves_version_counter(self, repo, tables):
        await repo.create(_metadata(), tables)
        await repo.get_and_increment_version_number(FORM_ID, tables)
        updated = await repo.update(
            FORM_ID, PatchTransition(author=AUTHOR, date=LATER, fields={"lastVersionNumber": 99}), tables
        )
        assert updated["lastVersionNumber"] == 1

    async def test_increment_is_monotonic(self, repo, tables):
        await repo.create(_metadata(), tables)
        numbers = [await repo.get_and_increment_version_number(FORM_ID, tables) for _ in range(3)]
        assert numbers == [1, 2, 3]

    async def test_remove_missing_is_conflict(self, repo, tables):
        with pytest.raises(ConflictError):
            await repo.remove("missing", tables)

    async def test_add_version_summary(self, repo, tables):
        await repo.create(_metadata(), tables)
        await repo.add_version_summary(FORM_ID, {"versionNumber": 1, "createdAt": "x"}, tables)
        assert (await repo.get(FORM_ID, tables))["versions"] == [{"versionNumber": 1, "createdAt": "x"}]


# =============================================================================
# DEFINITIONS
# =============================================================================

@pytest.mark.asyncio
class TestInMemoryFormDefinitionRepository:

    @pytest.fixture
    def repo(self):
        return InMemoryFormDefinitionRepository()

    async def test_insert_then_get_draft(self, repo, tables):
        await repo.insert(FORM_ID, empty_v2(), tables)
        assert await repo.get(FORM_ID, tables) == empty_v2()

    async def test_get_live_before_publish_not_found(self, repo, tables):
        await repo.insert(FORM_ID, empty_v2(), tables)
        with pytest.raises(NotFoundError):
            await repo.get(FORM_ID, tables, FormStatus.LIVE)

    async def test_insert_invalid_rejected(self, repo, tables):
        with pytest.raises(InvalidFormDefinitionError):
            await repo.insert(FORM_ID, {**empty_v2(), "pages": [{"path": "no-slash"}]}, tables)
        assert FORM_ID not in tables.definitions

    async def test_add_page_validates_before_write(self, repo, tables):
        await repo.insert(FORM_ID, empty_v2(), tables)
        await repo.add_page_at_position(FORM_ID, _page(), tables, position=-1)

        with pytest.raises(DuplicatePagePathError):
            await repo.add_page_at_position(FORM_ID, _page("p2", "/question"), tables)

        pages = (await repo.get(FORM_ID, tables))["pages"]
        assert [p["id"] for p in pages] == ["p1", pages[-1]["id"]]

    async def test_invalid_edit_leaves_draft_unchanged(self, repo, tables):
        await repo.insert(FORM_ID, empty_v2(), tables)
        with pytest.raises(InvalidFormDefinitionError):
            await repo.add_list(FORM_ID, {"id": "l1", "name": "", "title": "T", "type": "string", "items": []}, tables)
        assert (await repo.get(FORM_ID, tables))["lists"] == []

    async def test_create_live_clears_draft(self, repo, tables):
        await repo.insert(FORM_ID, empty_v2(), tables)
        await repo.create_live_from_draft(FORM_ID, tables)

        assert await repo.get(FORM_ID, tables, FormStatus.LIVE) == empty_v2()
        with pytest.raises(NotFoundError):
            await repo.get(FORM_ID, tables, FormStatus.DRAFT)

    async def test_delete_condition_unassigns_pages(self, repo, tables):
        definition = empty_v2()
        definition["pages"].insert(0, {**_page(), "condition": "c1"})
        definition["pages"][0]["components"] = [{"id": "comp", "type": "TextField", "name": "name"}]
        definition["conditions"] = [{
            "id": "c1",
            "displayName": "Named",
            "items": [{"id": "i1", "componentId": "comp", "operator": "is", "type": "StringValue", "value": "x"}],
        }]
        await repo.insert(FORM_ID, definition, tables)

        updated = await repo.delete_condition(FORM_ID, "c1", tables)

        assert updated["conditions"] == []
        assert "condition" not in updated["pages"][0]

    @pytest.mark.parametrize("operation,args", [
        ("update_name", ("Name",)),
        ("update_option", ("showReferenceNumber", True)),
        ("add_page_at_position", ({"id": "p", "path": "/p", "title": "P"},)),
        ("update_page", ("p1", {"id": "p1", "path": "/p", "title": "P"})),
        ("update_page_fields", ("p1", {"title": "P"})),
        ("delete_page", ("p1",)),
        ("reorder_pages", (["p1"],)),
        ("add_component", ("p1", {"id": "c", "type": "TextField", "name": "c"})),
        ("update_component", ("p1", "c", {"id": "c", "type": "TextField", "name": "c"})),
        ("delete_component", ("p1", "c")),
        ("reorder_components", ("p1", ["c"])),
        ("add_list", ({"id": "l", "name": "l", "title": "L", "type": "string", "items": []},)),
        ("update_list", ("l", {"id": "l", "name": "l", "title": "L", "type": "string", "items": []})),
        ("delete_list", ("l",)),
        ("add_condition", ({"id": "c", "displayName": "C", "items": []},)),
        ("update_condition", ("c", {"id": "c", "displayName": "C", "items": []})),
        ("delete_condition", ("c",)),
        ("assign_sections", ([],)),
    ])
    async def test_live_mutations_rejected_without_storage_access(self, repo, tables, operation, args):
        repo._find = AsyncMock()
        repo._write = AsyncMock()

        with pytest.raises(FormIsLiveError):
            await getattr(repo, operation)(FORM_ID, *args, tables, state=FormStatus.LIVE)

        repo._find.assert_not_called()
        repo._write.assert_not_called()


# =============================================================================
# VERSIONS AND SECRETS
# =============================================================================

@pytest.mark.asyncio
class TestInMemoryFormVersionsRepository:

    @pytest.fixture
    def repo(self):
        return InMemoryFormVersionsRepository()

    def _version(self, number, form_id=FORM_ID):
        return {"formId": form_id, "versionNumber": number, "createdAt": f"2024-07-0{number}T00:00:00+00:00"}

    async def test_latest_and_page_are_newest_first(self, repo, tables):
        for number in (1, 2, 3):
            await repo.create_version(self._version(number), tables)

        assert (await repo.get_latest_version(FORM_ID, tables))["versionNumber"] == 3
        page = await repo.get_versions(FORM_ID, tables, limit=2)
        assert [v["versionNumber"] for v in page.versions] == [3, 2]
        assert page.total_count == 3

    async def test_duplicate_version_is_conflict(self, repo, tables):
        await repo.create_version(self._version(1), tables)
        with pytest.raises(ConflictError):
            await repo.create_version(self._version(1), tables)

    async def test_latest_version_number_zero_when_empty(self, repo, tables):
        assert await repo.get_latest_version_number(FORM_ID, tables) == 0

    async def test_summaries_batch_includes_every_form(self, repo, tables):
        await repo.create_version(self._version(1), tables)
        await repo.create_version(self._version(2), tables)

        batch = await repo.get_version_summaries_batch([FORM_ID, "other"], tables)

        assert [s["versionNumber"] for s in batch[FORM_ID]] == [2, 1]
        assert batch["other"] == []

    async def test_remove_versions_for_form(self, repo, tables):
        await repo.create_version(self._version(1), tables)
        await repo.create_version(self._version(1, form_id="other"), tables)
        assert await repo.remove_versions_for_form(FORM_ID, tables) == 1
        assert len(tables.versions) == 1


@pytest.mark.asyncio
class TestInMemorySecretsRepository:

    async def test_save_overwrites(self, tables):
        repo = InMemorySecretsRepository()
        await repo.save(FORM_ID, "apiKey", "one", tables)
        await repo.save(FORM_ID, "apiKey", "two", tables)
        assert await repo.get(FORM_ID, "apiKey", tables) == "two"

    async def test_missing_secret(self, tables):
        repo = InMemorySecretsRepository()
        assert await repo.exists(FORM_ID, "apiKey", tables) is False
        with pytest.raises(NotFoundError):
            await repo.get(FORM_ID, "apiKey", tables)


# =============================================================================
# TRANSACTIONS
# =============================================================================

@pytest.mark.asyncio
class TestInMemoryDatabase:

    async def test_rollback_restores_tables(self, database):
        repo = InMemoryFormMetadataRepository()

        with pytest.raises(RuntimeError):
            async with database.transaction() as session:
                await repo.create(_metadata(), session)
                raise RuntimeError("boom")

        assert database.tables.metadata == {}

    async def test_commit_keeps_writes(self, database):
        repo = InMemoryFormMetadataRepository()
        async with database.transaction() as session:
            await repo.create(_metadata(), session)
        assert FORM_ID in database.tables.metadata

    async def test_rollback_keeps_writes_committed_meanwhile(self, database):
        repo = InMemoryFormMetadataRepository()
        entered = asyncio.Event()

        async def failing():
            with pytest.raises(RuntimeError):
                async with database.transaction() as session:
                    await repo.create(_metadata(), session)
                    entered.set()
                    await asyncio.sleep(0.01)
                    raise RuntimeError("boom")

        async def committing():
            await entered.wait()
            async with database.transaction() as session:
                await repo.create(_metadata("other", "other-form"), session)

        await asyncio.gather(failing(), committing())

        assert list(database.tables.metadata) == ["other"]


# =============================================================================
# STORAGE PRIMITIVES
# =============================================================================

class TestRepositoryBases:

    @pytest.mark.parametrize("base", [
        FormDefinitionRepository,
        FormMetadataRepository,
        FormVersionsRepository,
        SecretsRepository,
    ])
    def test_base_requires_storage_primitives(self, base):
        with pytest.raises(TypeError):
            base()
