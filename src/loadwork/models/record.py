"""Workflow and work record models."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field

from loadwork.core.types import JsonDict


class WorkStatus(StrEnum):
    NOT_STARTED = "NotStarted"
    SUCCEEDED = "Succeeded"
    FAIL_RETRYABLE = "FailRetryable"
    FAIL_PERMANENT = "FailPermanent"


class Depend(BaseModel):
    """A required predecessor work and the artifacts needed from it."""

    model_config = {"frozen": True}

    work_name: str
    work_version: str = ""
    artifacts: list[str] = Field(default_factory=list)


class WorkRecord(BaseModel):
    """Outcome of one execution of a work, stored under ``works.<name>``."""

    name: str
    version: str
    status: WorkStatus
    error: Optional[str] = None
    updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    artifacts: list[str] = Field(default_factory=list)
    metadata: JsonDict = Field(default_factory=dict)

    @classmethod
    def succeeded(
        cls, name: str, version: str, artifacts: list[str], metadata: JsonDict
    ) -> WorkRecord:
        return cls(
            name=name,
            version=version,
            status=WorkStatus.SUCCEEDED,
            artifacts=list(artifacts),
            metadata=dict(metadata),
        )

    @classmethod
    def failed(cls, name: str, version: str, error: str, retryable: bool) -> WorkRecord:
        return cls(
            name=name,
            version=version,
            status=WorkStatus.FAIL_RETRYABLE if retryable else WorkStatus.FAIL_PERMANENT,
            error=error,
        )


class WorkflowRecord(BaseModel):
    """Shared record of every work attempted within one workflow run."""

    id: str
    works: dict[str, WorkRecord] = Field(default_factory=dict)

    def get_work(self, name: str) -> Optional[WorkRecord]:
        return self.works.get(name)


class Directories(BaseModel):
    """Workspace layout shared by the transfers and the external program."""

    model_config = {"frozen": True}

    indir: str
    indir_artifacts: str
    outdir: str
    outdir_artifacts: str
