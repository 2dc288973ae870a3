"""Protocol interfaces for the external collaborators of a step.

Structural typing only: backends and test fakes satisfy these without
inheriting from them.
"""

from __future__ import annotations

from typing import BinaryIO, Protocol, runtime_checkable

from loadwork.models.record import WorkflowRecord, WorkRecord


# ---------------------------------------------------------------------------
# Persistence: Workflow Record Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IWorkflowStore(Protocol):
    """Durable keyed store of WorkflowRecords.

    Implementations must create records with an insert-only upsert and update
    a single ``works.<name>`` entry without reading the document first.
    """

    def get_or_default(self, target_id: str) -> WorkflowRecord: ...

    def update_work_record(self, target_id: str, work_record: WorkRecord) -> None: ...


# ---------------------------------------------------------------------------
# Persistence: Object Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IObjectStore(Protocol):
    """S3-compatible blob storage interface."""

    def read(self, key: str) -> bytes: ...

    def write(self, key: str, data: bytes) -> str: ...

    def download_fileobj(self, key: str, fileobj: BinaryIO) -> None: ...

    def upload_fileobj(self, fileobj: BinaryIO, key: str) -> str: ...
