"""Workspace staging: the in/out directory layout and the record snapshot."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from loadwork.core.exceptions import StepError
from loadwork.models.record import Depend, Directories, WorkflowRecord

logger = logging.getLogger(__name__)

ARTIFACTS_DIRNAME = "artifacts"
SNAPSHOT_FILENAME = "workflow.json"
METADATA_FILENAME = "metadata.json"


def _ensure_dir(path: Path, label: str) -> None:
    if not path.exists():
        try:
            path.mkdir()
        except OSError as exc:
            raise StepError(f"fail to mkdir: {path}: {exc}") from exc
        logger.debug("created %s", path)
    elif not path.is_dir():
        raise StepError(f"{label} {path} is not a directory")


def setup_directories(indir: str, outdir: str, depends: list[Depend]) -> Directories:
    """Create the workspace layout, leaving existing directories alone.

    Any failure here is a permanent StepError: it means the local
    configuration is wrong, not that the step should be retried.
    """
    in_path = Path(indir)
    out_path = Path(outdir)
    in_artifacts = in_path / ARTIFACTS_DIRNAME
    out_artifacts = out_path / ARTIFACTS_DIRNAME

    _ensure_dir(in_path, "indir")
    _ensure_dir(in_artifacts, "indir")
    for dep in depends:
        _ensure_dir(in_artifacts / dep.work_name, "indir")
    _ensure_dir(out_path, "outdir")
    _ensure_dir(out_artifacts, "outdir")

    return Directories(
        indir=os.fspath(in_path),
        indir_artifacts=os.fspath(in_artifacts),
        outdir=os.fspath(out_path),
        outdir_artifacts=os.fspath(out_artifacts),
    )


def write_workflow_snapshot(workflow_record: WorkflowRecord, indir: str) -> Path:
    """Serialize the WorkflowRecord to ``<indir>/workflow.json``, replacing any old copy."""
    path = Path(indir) / SNAPSHOT_FILENAME
    try:
        path.write_text(workflow_record.model_dump_json(), encoding="utf-8")
    except OSError as exc:
        raise StepError(f"fail to create file: {path}: {exc}", retryable=True) from exc
    return path
