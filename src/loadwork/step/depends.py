"""Dependency gate: declared predecessors must be recorded at the right version."""

from __future__ import annotations

from loadwork.core.exceptions import StepError
from loadwork.models.record import Depend, WorkflowRecord, WorkRecord


def check_depends(workflow_record: WorkflowRecord, depends: list[Depend]) -> list[WorkRecord]:
    """Return the predecessor WorkRecords in declaration order.

    Stops at the first unmet dependency with a retryable StepError. A
    predecessor's own status is not inspected: a recorded work whose version
    matches is accepted.
    """
    accepted: list[WorkRecord] = []
    for dep in depends:
        work = workflow_record.get_work(dep.work_name)
        if work is None:
            raise StepError(f"Work '{dep.work_name}' is not completed yet", retryable=True)
        if work.version != dep.work_version:
            raise StepError(
                f"Work '{dep.work_name}' version mismatched: {dep.work_version} but {work.version}",
                retryable=True,
            )
        accepted.append(work)
    return accepted
