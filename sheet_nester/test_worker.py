# sheet_nester/test_worker.py
# Progress channel + background job (streamed progress, cancellation).

from __future__ import annotations

import pytest

from sheet_nester.config import NestSettings
from sheet_nester.progress import NestingCancelled, ProgressChannel
from sheet_nester.types import PartType
from sheet_nester.worker import NestingJob, run_in_background


def _groups(qty: int = 10):
    return {"Oak 18": [(PartType("Shelf", 560, 300, material="Oak 18"), qty)]}


def test_channel_clamps_and_stops_after_close() -> None:
    ch = ProgressChannel()
    ch("start", -5)
    ch.publish("over", 120)
    ch.close()
    ch.publish("late", 50)

    events = list(ch)
    assert [(e.message, e.percent) for e in events] == [("start", 0.0), ("over", 100.0)]
    assert ch.closed
    assert ch.last.message == "over"
    # a second consumer sees the end marker too
    assert list(ch) == []


def test_channel_drain_is_non_blocking() -> None:
    ch = ProgressChannel()
    assert ch.drain() == []
    ch("a", 1)
    ch("b", 2)
    assert [e.message for e in ch.drain()] == ["a", "b"]
    assert ch.drain() == []


def test_background_job_streams_progress() -> None:
    job = run_in_background(_groups(), NestSettings(kerf_width=3))
    events = list(job.progress)
    result = job.result(timeout=30)

    assert job.done()
    assert result.num_placed() == 10
    assert events[0].message.startswith("Processing material")
    assert [e.message for e in events[-2:]] == ["Nesting optimization complete!", "Done"]
    assert events[-1].percent == 100.0


def test_cancelled_job_raises_from_result() -> None:
    job = NestingJob(_groups(), NestSettings())
    job.cancel()
    job.start()

    with pytest.raises(NestingCancelled):
        job.result(timeout=30)
    assert job.cancelled
    assert all(e.message != "Done" for e in job.progress)


def test_job_reports_input_errors() -> None:
    job = run_in_background({"Oak 18": [{"total_quantity": 1}]}, NestSettings())
    with pytest.raises(ValueError):
        job.result(timeout=30)


def test_result_without_outcome_raises_runtime_error() -> None:
    job = NestingJob(_groups(), NestSettings())
    job._done.set()  # finished flag without a stored result or error
    with pytest.raises(RuntimeError):
        job.result(timeout=1)
