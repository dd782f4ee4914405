"""
Legacy file-based form definitions stored in S3.

Objects are keyed ``<form_directory>/<draft|live>/<form_id>.json``. A missing
object and an empty object are both reported as NotFoundError. boto3 calls
are blocking and run in a worker thread.
"""

import asyncio
import json
import logging
from typing import Any, Dict

from botocore.exceptions import ClientError

from forms_manager.domain.definition.constants import STATE_FIELDS, FormStatus
from forms_manager.domain.errors import NotFoundError, wrap_error

logger = logging.getLogger(__name__)

_MISSING_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


class FormDefinitionBlobRepository:
    """Reads, writes and promotes definition JSON files in one bucket."""

    def __init__(self, client, bucket_name: str, form_directory: str):
        self.client = client
        self.bucket_name = bucket_name
        self.form_directory = form_directory

    def key(self, form_id: str, state: FormStatus = FormStatus.DRAFT) -> str:
        return f"{self.form_directory}/{STATE_FIELDS[state]}/{form_id}.json"

    async def get(self, form_id: str, state: FormStatus = FormStatus.DRAFT) -> Dict[str, Any]:
        key = self.key(form_id, state)
        logger.info(f"Reading form definition from s3://{self.bucket_name}/{key}")
        try:
            response = await asyncio.to_thread(self.client.get_object, Bucket=self.bucket_name, Key=key)
            body = await asyncio.to_thread(response["Body"].read)
        except ClientError as error:
            if error.response.get("Error", {}).get("Code") in _MISSING_CODES:
                raise NotFoundError(f"Form definition {key} not found", cause=error)
            logger.error(f"[getBlobDefinition] Reading {key} failed - {error}")
            raise wrap_error(error)

        if not body:
            raise NotFoundError(f"Form definition {key} is empty")
        return json.loads(body)

    async def put(self, form_id: str, definition: Dict[str, Any], state: FormStatus = FormStatus.DRAFT) -> None:
        key = self.key(form_id, state)
        logger.info(f"Writing form definition to s3://{self.bucket_name}/{key}")
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket_name,
                Key=key,
                Body=json.dumps(definition).encode("utf-8"),
                ContentType="application/json",
            )
        except ClientError as error:
            logger.error(f"[putBlobDefinition] Writing {key} failed - {error}")
            raise wrap_error(error)

    async def copy(self, form_id: str, source: FormStatus, target: FormStatus) -> None:
        source_key = self.key(form_id, source)
        target_key = self.key(form_id, target)
        logger.info(f"Copying form definition {source_key} -> {target_key}")
        try:
            await asyncio.to_thread(
                self.client.copy_object,
                Bucket=self.bucket_name,
                Key=target_key,
                CopySource={"Bucket": self.bucket_name, "Key": source_key},
            )
        except ClientError as error:
            if error.response.get("Error", {}).get("Code") in _MISSING_CODES:
                raise NotFoundError(f"Form definition {source_key} not found", cause=error)
            logger.error(f"[copyBlobDefinition] Copying {source_key} failed - {error}")
            raise wrap_error(error)
