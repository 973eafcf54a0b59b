from __future__ import annotations

from pathlib import Path

import pytest

from zipdiff.core.archive.comparer import ArchiveCompareOptions
from zipdiff.core.models import ArchiveCompareResult, CompareProgress
from zipdiff.workers import ArchiveCompareWorker, WorkerState, WorkerThread


@pytest.fixture
def pair(make_zip):
    left = make_zip("old.zip", {"a.txt": "one", "b.txt": "same"})
    right = make_zip("new.zip", {"a.txt": "two", "b.txt": "same"})
    return left, right


def collect(signal) -> list:
    received = []
    signal.connect(lambda *args: received.append(args))
    return received


def test_run_emits_result(qapp, pair) -> None:
    worker = ArchiveCompareWorker(*pair, options=ArchiveCompareOptions(parallel_workers=2))
    finished = collect(worker.signals.finished)
    statuses = collect(worker.signals.status)
    states = collect(worker.signals.state_changed)
    details = collect(worker.signals.phase_progress)
    progress = collect(worker.signals.progress)

    worker.run()

    assert len(finished) == 1
    result = finished[0][0]
    assert isinstance(result, ArchiveCompareResult)
    assert [d.filename for d in result.differences] == ["a.txt"]
    assert worker.result is result
    assert worker.state == WorkerState.COMPLETED
    assert [s[0] for s in states] == [WorkerState.RUNNING, WorkerState.COMPLETED]
    assert statuses[-1] == ("Complete",)
    assert all(isinstance(d[0], CompareProgress) for d in details)
    assert {d[0].phase for d in details} >= {"hashing", "cataloging", "comparing"}
    assert len(progress) == len(details)


def test_cancel_before_run(qapp, pair) -> None:
    worker = ArchiveCompareWorker(*pair)
    cancelled = collect(worker.signals.cancelled)
    finished = collect(worker.signals.finished)

    worker.cancel()
    worker.run()

    assert cancelled == [()]
    assert finished == []
    assert worker.state == WorkerState.CANCELLED
    assert worker.result is None


def test_missing_archive_emits_error(qapp, make_zip, tmp_path: Path) -> None:
    right = make_zip("new.zip", {"a.txt": "1"})
    worker = ArchiveCompareWorker(tmp_path / "missing.zip", right)
    errors = collect(worker.signals.error)

    worker.run()

    assert len(errors) == 1
    error_type, message = errors[0]
    assert error_type == "ArchiveOpenError"
    assert "missing.zip" in message
    assert worker.state == WorkerState.FAILED
    assert worker.error == (error_type, message)


def test_unreadable_entries_are_reported_in_status(qapp, make_zip) -> None:
    left = make_zip("old.zip", {"bad.txt": b"\xff\xfe"})
    right = make_zip("new.zip", {"bad.txt": b"\xff\xfd"})
    worker = ArchiveCompareWorker(left, right)
    statuses = collect(worker.signals.status)

    worker.run()

    assert statuses[-1] == ("Complete with 1 unreadable entries",)
    assert worker.result.differences == []


def test_cancel_after_completion_is_ignored(qapp, pair) -> None:
    worker = ArchiveCompareWorker(*pair)
    worker.run()

    worker.cancel()

    assert worker.state == WorkerState.COMPLETED
    assert not worker.is_cancelled


def test_runs_on_worker_thread(qapp, pair) -> None:
    worker = ArchiveCompareWorker(*pair)
    thread = WorkerThread(worker)
    finished = collect(worker.signals.finished)

    thread.start()
    for _ in range(500):
        qapp.processEvents()
        if thread.wait(10):
            break

    assert thread.isFinished()
    assert len(finished) == 1
    assert worker.state == WorkerState.COMPLETED
