"""Tests for timing helpers."""

import logging

import pytest

from meshorder.optimize.reorder import optimize_indices
from meshorder.test_meshes import create_grid
from meshorder.utils.timing import ProgressTimer, TimingLog, timed_operation


class TestTimedOperation:
    """Test stage timing."""

    def test_records_success(self):
        log = TimingLog()
        with timed_operation("stage", log) as result:
            pass
        assert result.success
        assert log.entries == [result]
        assert log.total_time() == result.elapsed_seconds

    def test_records_failure(self):
        log = TimingLog()
        with pytest.raises(RuntimeError):
            with timed_operation("stage", log):
                raise RuntimeError("boom")
        assert not log.entries[0].success
        assert log.entries[0].error == "boom"


class TestProgressTimer:
    """Test progress tracking."""

    def test_counts_and_elapsed(self):
        timer = ProgressTimer(4, "items", log_interval=0)
        timer.advance()
        timer.advance(2)
        assert timer.done == 3
        assert timer.fraction == 0.75
        assert timer.finish() >= 0.0

    def test_zero_total(self):
        assert ProgressTimer(0).fraction == 1.0

    def test_disabled_interval_is_quiet(self, caplog):
        timer = ProgressTimer(10, "items", log_interval=0, check_every=1)
        with caplog.at_level(logging.INFO, logger="meshorder.timing"):
            for _ in range(10):
                timer.advance()
        assert caplog.records == []

    def test_reorder_logs_elapsed_and_seeds(self, caplog):
        mesh = create_grid(rows=2, cols=2)
        with caplog.at_level(logging.INFO, logger="meshorder.optimize"):
            optimize_indices(mesh.indices, mesh.num_vertices)
        messages = [r.getMessage() for r in caplog.records if r.name == "meshorder.optimize"]
        assert any("1 seed triangle(s)" in m and "s with" in m for m in messages)
