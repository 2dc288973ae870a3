"""In-memory backends for unit tests — dict-backed fakes."""

from __future__ import annotations

import copy
from typing import BinaryIO

from loadwork.core.exceptions import ObjectStoreError, StoreError
from loadwork.core.types import JsonDict
from loadwork.models.record import WorkflowRecord, WorkRecord


class MemoryWorkflowStore:
    """Dict-backed IWorkflowStore for unit tests.

    Documents are kept in their serialized JSON form, like a real store.
    """

    def __init__(self) -> None:
        self._docs: dict[str, JsonDict] = {}

    def get_or_default(self, target_id: str) -> WorkflowRecord:
        doc = self._docs.setdefault(target_id, {"id": target_id, "works": {}})
        return WorkflowRecord.model_validate(copy.deepcopy(doc))

    def update_work_record(self, target_id: str, work_record: WorkRecord) -> None:
        doc = self._docs.get(target_id)
        if doc is None:
            raise StoreError(
                f"fail to update work record {work_record.name!r}: no workflow {target_id!r}"
            )
        doc["works"][work_record.name] = work_record.model_dump(mode="json")

    def document_count(self) -> int:
        return len(self._docs)


class MemoryObjectStore:
    """Dict-backed IObjectStore for unit tests."""

    def __init__(self) -> None:
        self._objects: dict[str, bytes] = {}

    def read(self, key: str) -> bytes:
        try:
            return self._objects[key]
        except KeyError:
            raise ObjectStoreError(key, f"no such key: {key!r}") from None

    def write(self, key: str, data: bytes) -> str:
        self._objects[key] = data
        return key

    def download_fileobj(self, key: str, fileobj: BinaryIO) -> None:
        fileobj.write(self.read(key))

    def upload_fileobj(self, fileobj: BinaryIO, key: str) -> str:
        return self.write(key, fileobj.read())
