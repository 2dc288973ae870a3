"""StepExecutor — runs one work and records its outcome on the workflow record.

Sequence per invocation:

    load record -> stage directories -> check depends -> snapshot + download
    -> run program -> upload outputs + read metadata -> record outcome

Whatever happens after the record is loaded, exactly one WorkRecord is
written for the work before the outcome is returned or re-raised.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from loadwork.core.config import StepSettings
from loadwork.core.exceptions import StepError
from loadwork.core.protocols import IObjectStore, IWorkflowStore
from loadwork.core.types import JsonDict
from loadwork.models.record import WorkflowRecord, WorkRecord
from loadwork.step.artifacts import ArtifactTransfer
from loadwork.step.depends import check_depends
from loadwork.step.sandbox import run_program
from loadwork.step.workspace import (
    METADATA_FILENAME,
    setup_directories,
    write_workflow_snapshot,
)

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> None:
    raise ValueError(f"{name} is not a JSON value")


def read_metadata_or_empty(path: str | Path) -> JsonDict:
    """Read the program's metadata document; a missing file means ``{}``."""
    path = Path(path)
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        return {}
    except OSError as exc:
        raise StepError(f"fail to open file: {path}: {exc}") from exc
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise StepError(f"invalid utf-8 string: {exc}") from exc
    try:
        # NaN and Infinity are Python extensions, not JSON
        metadata = json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise StepError(f"malformed json: {exc}") from exc
    if not isinstance(metadata, dict):
        raise StepError(f"malformed json: expected an object, got {type(metadata).__name__}")
    return metadata


def is_retryable(exc: BaseException) -> bool:
    """Only a StepError raised as retryable is retryable; everything else is permanent."""
    return isinstance(exc, StepError) and exc.retryable


class StepExecutor:
    """Executes a single work of a workflow run.

    The settings and both stores are injected at construction time.
    """

    def __init__(
        self,
        *,
        settings: StepSettings,
        workflow_store: IWorkflowStore,
        object_store: IObjectStore,
    ) -> None:
        self._settings = settings
        self._store = workflow_store
        self._transfer = ArtifactTransfer(
            object_store, max_concurrent=settings.max_concurrent_transfers,
        )

    async def run(self, argv: list[str]) -> WorkRecord:
        """Run ``argv`` as this work and return the WorkRecord written for it.

        Raises:
            StepError: the step failed; its WorkRecord has already been
                written with the matching Fail status.
            StoreError: the outcome could not be recorded.
        """
        if not argv:
            raise StepError("program is not given")
        program, args = argv[0], list(argv[1:])
        settings = self._settings

        workflow_record = self._store.get_or_default(settings.target_id)
        logger.info("loaded workflow record %s with %d works",
                    workflow_record.id, len(workflow_record.works))

        try:
            artifacts, metadata = await self._run_with_record(program, args, workflow_record)
        except Exception as exc:
            work_record = WorkRecord.failed(
                settings.work_name, settings.work_version, str(exc), is_retryable(exc),
            )
            logger.warning("work %s failed (%s): %s",
                           settings.work_name, work_record.status, exc)
            self._record(work_record)
            raise

        work_record = WorkRecord.succeeded(
            settings.work_name, settings.work_version, artifacts, metadata,
        )
        self._record(work_record)
        logger.info("work %s succeeded with %d artifacts",
                    settings.work_name, len(artifacts))
        return work_record

    async def _run_with_record(
        self, program: str, args: list[str], workflow_record: WorkflowRecord,
    ) -> tuple[list[str], JsonDict]:
        settings = self._settings

        dirs = setup_directories(settings.indir, settings.outdir, settings.depends)
        check_depends(workflow_record, settings.depends)

        write_workflow_snapshot(workflow_record, dirs.indir)
        await self._transfer.download(settings.target_id, settings.depends, dirs.indir_artifacts)
        logger.info("staged %d dependencies", len(settings.depends))

        run_program(program, args, settings.target_id, settings.indir, settings.outdir)

        artifacts = await self._transfer.upload(
            settings.target_id, settings.work_name, dirs.outdir_artifacts,
        )
        metadata = read_metadata_or_empty(Path(dirs.outdir) / METADATA_FILENAME)
        return artifacts, metadata

    def _record(self, work_record: WorkRecord) -> None:
        # Backends raise StoreError, which replaces the step's own outcome.
        self._store.update_work_record(self._settings.target_id, work_record)
