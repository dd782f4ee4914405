"""Tests for FormDefinitionBlobRepository.

Tier-1 tests using a mocked S3 client.
"""

import json
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from forms_manager.domain.definition.constants import FormStatus
from forms_manager.domain.errors import InternalError, NotFoundError
from forms_manager.domain.repositories import FormDefinitionBlobRepository

FORM_ID = "661e4ca5039739ef2902b214"
BUCKET = "form-definitions"


def _client_error(code):
    return ClientError({"Error": {"Code": code, "Message": code}}, "GetObject")


def _body(content: bytes):
    body = MagicMock()
    body.read.return_value = content
    return {"Body": body}


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def repo(client):
    return FormDefinitionBlobRepository(client, BUCKET, "forms")


class TestKeys:

    def test_key_per_state(self, repo):
        assert repo.key(FORM_ID) == f"forms/draft/{FORM_ID}.json"
        assert repo.key(FORM_ID, FormStatus.LIVE) == f"forms/live/{FORM_ID}.json"


@pytest.mark.asyncio
class TestFormDefinitionBlobRepository:

    async def test_get_parses_json(self, repo, client):
        client.get_object.return_value = _body(json.dumps({"name": "Legacy"}).encode("utf-8"))

        assert await repo.get(FORM_ID) == {"name": "Legacy"}
        client.get_object.assert_called_once_with(Bucket=BUCKET, Key=f"forms/draft/{FORM_ID}.json")

    async def test_missing_key_is_not_found(self, repo, client):
        client.get_object.side_effect = _client_error("NoSuchKey")
        with pytest.raises(NotFoundError, match="not found"):
            await repo.get(FORM_ID, FormStatus.LIVE)

    async def test_empty_object_is_not_found(self, repo, client):
        client.get_object.return_value = _body(b"")
        with pytest.raises(NotFoundError, match="empty"):
            await repo.get(FORM_ID)

    async def test_other_client_errors_wrapped(self, repo, client):
        client.get_object.side_effect = _client_error("AccessDenied")
        with pytest.raises(InternalError):
            await repo.get(FORM_ID)

    async def test_put_writes_json(self, repo, client):
        await repo.put(FORM_ID, {"name": "Legacy"})

        kwargs = client.put_object.call_args.kwargs
        assert kwargs["Key"] == f"forms/draft/{FORM_ID}.json"
        assert json.loads(kwargs["Body"]) == {"name": "Legacy"}
        assert kwargs["ContentType"] == "application/json"

    async def test_copy_draft_to_live(self, repo, client):
        await repo.copy(FORM_ID, FormStatus.DRAFT, FormStatus.LIVE)

        client.copy_object.assert_called_once_with(
            Bucket=BUCKET,
            Key=f"forms/live/{FORM_ID}.json",
            CopySource={"Bucket": BUCKET, "Key": f"forms/draft/{FORM_ID}.json"},
        )

    async def test_copy_missing_source(self, repo, client):
        client.copy_object.side_effect = _client_error("NoSuchKey")
        with pytest.raises(NotFoundError):
            await repo.copy(FORM_ID, FormStatus.LIVE, FormStatus.DRAFT)
