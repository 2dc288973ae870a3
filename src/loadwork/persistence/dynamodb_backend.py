"""DynamoDB backend implementing IWorkflowStore."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from loadwork.core.exceptions import StoreError
from loadwork.models.record import WorkflowRecord, WorkRecord

logger = logging.getLogger(__name__)


def _to_dynamodb(obj: Any) -> Any:
    """Convert JSON floats to Decimal, which is all DynamoDB accepts."""
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _to_dynamodb(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_to_dynamodb(i) for i in obj]
    return obj


def _decode_decimals(obj: Any) -> Any:
    """Convert Decimal values in a DynamoDB item back to int/float."""
    if isinstance(obj, Decimal):
        return int(obj) if obj == int(obj) else float(obj)
    if isinstance(obj, dict):
        return {k: _decode_decimals(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_decode_decimals(i) for i in obj]
    return obj


class DynamoDBWorkflowStore:
    """Production IWorkflowStore backed by a DynamoDB table keyed on ``id``.

    Each work lives under the ``works`` map attribute, so an update touches a
    single nested path and never rewrites sibling works.
    """

    def __init__(self, table: str, region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        self._table_name = table
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._ddb = boto3.resource("dynamodb", **kwargs)
        self._table = self._ddb.Table(table)

    def get_or_default(self, target_id: str) -> WorkflowRecord:
        # if_not_exists makes this an insert-only upsert: an existing works map
        # is returned untouched.
        try:
            resp = self._table.update_item(
                Key={"id": target_id},
                UpdateExpression="SET works = if_not_exists(works, :empty)",
                ExpressionAttributeValues={":empty": {}},
                ReturnValues="ALL_NEW",
            )
        except (ClientError, BotoCoreError) as exc:
            raise StoreError(f"fail to upsert workflow record {target_id!r}: {exc}") from exc
        item = resp.get("Attributes")
        if not item:
            raise StoreError(f"no workflow record is found for {target_id!r}")
        logger.debug("loaded workflow record %s (%d works)", target_id, len(item.get("works", {})))
        return WorkflowRecord.model_validate(_decode_decimals(item))

    def update_work_record(self, target_id: str, work_record: WorkRecord) -> None:
        doc = _to_dynamodb(work_record.model_dump(mode="json"))
        try:
            self._table.update_item(
                Key={"id": target_id},
                UpdateExpression="SET works.#name = :record",
                ConditionExpression="attribute_exists(id)",
                ExpressionAttributeNames={"#name": work_record.name},
                ExpressionAttributeValues={":record": doc},
            )
        except (ClientError, BotoCoreError) as exc:
            raise StoreError(f"fail to update work record {work_record.name!r}: {exc}") from exc
