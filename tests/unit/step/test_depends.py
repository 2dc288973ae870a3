"""Tests for the dependency gate."""

from __future__ import annotations

import pytest

from loadwork.core.exceptions import StepError
from loadwork.models.record import Depend, WorkflowRecord, WorkRecord
from loadwork.step.depends import check_depends


def _workflow(*works: WorkRecord) -> WorkflowRecord:
    return WorkflowRecord(id="39", works={w.name: w for w in works})


def test_absent_dependency_is_retryable():
    with pytest.raises(StepError) as exc_info:
        check_depends(_workflow(), [Depend(work_name="x", work_version="1")])
    assert exc_info.value.retryable
    assert "not completed yet" in str(exc_info.value)
    assert str(exc_info.value) == "Work 'x' is not completed yet"


def test_version_mismatch_is_retryable():
    wf = _workflow(WorkRecord.succeeded("x", "2", [], {}))
    with pytest.raises(StepError) as exc_info:
        check_depends(wf, [Depend(work_name="x", work_version="1")])
    assert exc_info.value.retryable
    assert "version mismatched: 1 but 2" in str(exc_info.value)


def test_matching_version_is_accepted():
    x = WorkRecord.succeeded("x", "1", ["a.txt"], {})
    assert check_depends(_workflow(x), [Depend(work_name="x", work_version="1")]) == [x]


def test_returns_records_in_declaration_order():
    x = WorkRecord.succeeded("x", "1", [], {})
    y = WorkRecord.succeeded("y", "1", [], {})
    depends = [Depend(work_name="y", work_version="1"), Depend(work_name="x", work_version="1")]
    assert check_depends(_workflow(x, y), depends) == [y, x]


def test_failed_dependency_with_matching_version_is_accepted():
    failed = WorkRecord.failed("x", "1", "boom", retryable=False)
    assert check_depends(_workflow(failed), [Depend(work_name="x", work_version="1")]) == [failed]


def test_stops_at_first_unmet_dependency():
    depends = [Depend(work_name="first", work_version="1"), Depend(work_name="second", work_version="1")]
    with pytest.raises(StepError, match="first"):
        check_depends(_workflow(), depends)


def test_no_depends_is_trivially_satisfied():
    assert check_depends(_workflow(), []) == []
