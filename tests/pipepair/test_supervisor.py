"""
Tests for the run supervisor: modes, failure isolation and reaping.
"""

from unittest.mock import MagicMock

import pytest

from pipepair import pair as pair_module
from pipepair.channel import create_channel
from pipepair.exceptions import ChannelCreationError, SpawnError
from pipepair.pair import PairDescriptor
from pipepair.supervisor import (
    MultiPair,
    PairFailure,
    RunReport,
    RunSupervisor,
    SinglePair,
    UnitReport,
)
from pipepair.units import TerminationStatus


def _failing_factory(fail_on: int):
    """Channel factory whose fail_on-th call (1-based) raises."""
    calls = {"n": 0}

    def factory():
        calls["n"] += 1
        if calls["n"] == fail_on:
            raise ChannelCreationError("cannot create pipe", error="Too many open files")
        return create_channel()

    return factory


@pytest.mark.unit
class TestModes:
    """Test run modes and their pair layout."""

    def test_single_pair_defaults(self):
        """Test the single-pair default range is [1, 6)."""
        assert [(d.lo, d.hi) for d in SinglePair().descriptors()] == [(1, 6)]

    def test_multi_pair_ranges(self):
        """Test multi-pair descriptors come from consecutive ranges."""
        ranges = [(d.lo, d.hi) for d in MultiPair(count=2, span=5).descriptors()]
        assert ranges == [(1, 6), (6, 11)]


@pytest.mark.unit
class TestRunReport:
    """Test the overall outcome of a report."""

    def _unit(self, code=None, sig=None):
        return UnitReport("u", 1, TerminationStatus(exit_code=code, signal=sig))

    def test_ok_when_all_exit_zero(self):
        """Test ok with no failures and every unit exiting 0."""
        assert RunReport(units=[self._unit(0), self._unit(0)]).ok

    def test_not_ok_on_nonzero_exit(self):
        """Test a nonzero exit code fails the run."""
        assert not RunReport(units=[self._unit(0), self._unit(1)]).ok

    def test_not_ok_on_signal(self):
        """Test abnormal termination fails the run."""
        assert not RunReport(units=[self._unit(sig=9)]).ok

    def test_not_ok_on_pair_failure(self):
        """Test a skipped pair fails the run."""
        failure = PairFailure(PairDescriptor.from_range(1, 6), ChannelCreationError("x"))
        assert not RunReport(failures=[failure]).ok

    def test_empty_report_is_ok(self):
        """Test a run with nothing to do succeeds."""
        assert RunReport().ok


@pytest.mark.integration
class TestSinglePairRun:
    """Test a single pair through real processes."""

    def test_reaps_producer_then_consumer(self, root_lg, collector):
        """Test both units are reaped, producer first."""
        report = RunSupervisor(root_lg).run(SinglePair(lo=1, hi=6))

        assert report.ok
        assert [u.name for u in report.units] == ["/pair-1/producer", "/pair-1/consumer"]
        assert collector.values("/pair-1/consumer", "final sum: 15", "sum") == [15]

    def test_empty_range(self, root_lg, collector):
        """Test lo == hi: no progress records and a final sum of 0."""
        report = RunSupervisor(root_lg).run(SinglePair(lo=3, hi=3))

        assert report.ok
        assert collector.values("/pair-1/producer", "sent", "value") == []
        assert collector.values("/pair-1/consumer", "received", "value") == []
        assert collector.values("/pair-1/consumer", "final sum: 0", "sum") == [0]

    def test_without_unit_logs(self, root_lg, collector):
        """Test units can run silenced; the supervisor still reports."""
        report = RunSupervisor(root_lg, forward_unit_logs=False).run(SinglePair())

        assert report.ok
        assert collector.by_name("/pair-1/consumer") == []
        assert "run completed successfully" in collector.messages("/supervisor")

    def test_send_failure_ends_stream_early(self, root_lg, collector):
        """Test a producer failing mid-stream exits 1; the consumer keeps its partial sum."""
        report = RunSupervisor(root_lg).run(SinglePair(lo=2**31 - 2, hi=2**31 + 1))

        assert [u.status.code for u in report.units] == [1, 0]
        assert report.ok is False
        assert report.failures == []
        assert collector.values("/pair-1/consumer", "received", "sum") == [
            2147483646,
            4294967293,
        ]
        assert "send failed" in collector.messages("/pair-1/producer")


@pytest.mark.integration
class TestMultiPairRun:
    """Test several concurrent pairs."""

    def test_all_units_reaped_in_creation_order(self, root_lg):
        """Test every unit of every pair is reaped exactly once, in order."""
        report = RunSupervisor(root_lg).run(MultiPair(count=3, span=4))

        assert report.ok
        assert [u.name for u in report.units] == [
            f"/pair-{i}/{role}" for i in (1, 2, 3) for role in ("producer", "consumer")
        ]
        assert len({u.pid for u in report.units}) == 6

    def test_all_pairs_started_before_reap(self, root_lg, collector):
        """Test the spawn phase completes before the first child is reaped."""
        RunSupervisor(root_lg).run(MultiPair(count=2, span=2))

        messages = collector.messages("/supervisor")
        started = messages.index("all pairs started")
        first_reap = next(i for i, m in enumerate(messages) if m.startswith("child "))
        assert started < first_reap

    def test_narration(self, root_lg, collector):
        """Test the per-pair banners and created-child records."""
        RunSupervisor(root_lg).run(MultiPair(count=2, span=1))

        assert collector.messages("/supervisor/pair-1")[0] == "=== Pair 1 ==="
        assert collector.messages("/supervisor/pair-2")[0] == "=== Pair 2 ==="
        created = collector.messages("/supervisor/pair-2")
        assert "created producer" in created
        assert "created consumer" in created


@pytest.mark.integration
class TestFailureIsolation:
    """Test one pair's setup failure does not affect the others."""

    def test_channel_failure_skips_only_that_pair(self, root_lg):
        """Test a channel error for pair 2 of 3 leaves pairs 1 and 3 running."""
        supervisor = RunSupervisor(root_lg, channel_factory=_failing_factory(2))
        report = supervisor.run(MultiPair(count=3, span=5))

        assert [d.name for d in report.pairs] == ["pair-1", "pair-3"]
        assert [f.descriptor.name for f in report.failures] == ["pair-2"]
        assert isinstance(report.failures[0].error, ChannelCreationError)
        assert not any(u.name.startswith("/pair-2/") for u in report.units)
        assert len(report.units) == 4
        assert all(u.status.success for u in report.units)
        assert not report.ok

    def test_spawn_failure_still_reaps_started_producer(self, root_lg, monkeypatch):
        """Test a producer left behind by a failed consumer spawn is reaped in order."""
        real_spawn = pair_module.spawn
        calls = {"n": 0}

        def flaky_spawn(*args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 2:
                raise SpawnError("cannot start unit", unit=kwargs["name"])
            return real_spawn(*args, **kwargs)

        monkeypatch.setattr(pair_module, "spawn", flaky_spawn)
        report = RunSupervisor(root_lg).run(MultiPair(count=2, span=0))

        assert [f.descriptor.name for f in report.failures] == ["pair-1"]
        assert [u.name for u in report.units] == [
            "/pair-1/producer",
            "/pair-2/producer",
            "/pair-2/consumer",
        ]
        assert not report.ok

    def test_failure_is_logged(self, root_lg, collector):
        """Test the skipped pair is reported as an error record."""
        RunSupervisor(root_lg, channel_factory=_failing_factory(1)).run(
            MultiPair(count=1, span=1)
        )

        records = collector.by_name("/supervisor/pair-1")
        errors = [r for r in records if r.levelname == "ERROR"]
        assert [r.getMessage() for r in errors] == ["channel creation failed, skipping pair"]
        assert "run completed with failures" in collector.messages("/supervisor")


@pytest.mark.unit
class TestSupervisorLogger:
    """Test the supervisor's logger placement."""

    def test_derived_from_parent(self, root_lg):
        """Test the supervisor logs under <parent>/supervisor."""
        assert RunSupervisor(root_lg).lg.name == "/supervisor"

    def test_channel_factory_is_used(self, root_lg):
        """Test the injected factory creates every channel."""
        factory = MagicMock(side_effect=ChannelCreationError("no"))
        report = RunSupervisor(root_lg, channel_factory=factory).run(MultiPair(count=2, span=1))
        assert factory.call_count == 2
        assert report.units == []
