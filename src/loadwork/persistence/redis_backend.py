"""Redis backend implementing IWorkflowStore."""

from __future__ import annotations

import logging

import redis

from loadwork.core.exceptions import StoreError
from loadwork.models.record import WorkflowRecord, WorkRecord

logger = logging.getLogger(__name__)

WORK_FIELD_PREFIX = "works."


class RedisWorkflowStore:
    """IWorkflowStore keeping one hash per workflow.

    The ``id`` field is created with HSETNX and every work is its own
    ``works.<name>`` field, so both operations are single atomic commands.
    """

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0,
                 key_prefix: str = "workflow") -> None:
        self._key_prefix = key_prefix
        self._client = redis.Redis(
            host=host, port=port, db=db, decode_responses=True,
        )

    def _key(self, target_id: str) -> str:
        return f"{self._key_prefix}:{target_id}"

    def get_or_default(self, target_id: str) -> WorkflowRecord:
        key = self._key(target_id)
        try:
            if self._client.hsetnx(key, "id", target_id):
                logger.debug("created workflow record %s", target_id)
            fields = self._client.hgetall(key)
        except redis.RedisError as exc:
            raise StoreError(f"Redis load failed for {key!r}: {exc}") from exc
        works = {
            field[len(WORK_FIELD_PREFIX):]: WorkRecord.model_validate_json(value)
            for field, value in fields.items()
            if field.startswith(WORK_FIELD_PREFIX)
        }
        return WorkflowRecord(id=fields.get("id", target_id), works=works)

    def update_work_record(self, target_id: str, work_record: WorkRecord) -> None:
        key = self._key(target_id)
        try:
            if not self._client.exists(key):
                raise StoreError(f"no workflow record {key!r} to update")
            self._client.hset(key, f"{WORK_FIELD_PREFIX}{work_record.name}",
                              work_record.model_dump_json())
        except redis.RedisError as exc:
            raise StoreError(
                f"Redis update failed for {key!r} work {work_record.name!r}: {exc}"
            ) from exc
