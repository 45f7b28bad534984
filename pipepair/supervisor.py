"""
Run supervisor: starts pairs, reaps every unit and reports how each ended.

Two modes share the same pair protocol:

- SinglePair: one pair, waited on producer first, then consumer.
- MultiPair: count pairs on consecutive ranges. Every unit of every pair is
  spawned before any is waited on, so all pairs run concurrently. The reap
  phase then waits on each unit in creation order.

A pair whose channel or units cannot be created is reported and skipped; the
remaining pairs still run. Units are never signalled or timed out: a hung
unit hangs the reap phase.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .channel import create_channel
from .config.settings import NO_PACING, Pacing
from .exceptions import ChannelCreationError, SpawnError
from .log import Logger, LoggerFactory
from .log.mp import LogQueueListener
from .pair import ChannelFactory, PairDescriptor, assign_ranges, run_pair
from .units import TerminationStatus, Unit, new_log_queue, wait


@dataclass(frozen=True)
class SinglePair:
    """One producer sending [lo, hi) to one consumer."""

    lo: int = 1
    hi: int = 6
    pacing: Pacing = NO_PACING

    def descriptors(self) -> list[PairDescriptor]:
        return [PairDescriptor.from_range(self.lo, self.hi)]


@dataclass(frozen=True)
class MultiPair:
    """count concurrent pairs of span values each, the first starting at start."""

    count: int = 2
    span: int = 5
    start: int = 1
    pacing: Pacing = NO_PACING

    def descriptors(self) -> list[PairDescriptor]:
        return assign_ranges(self.count, self.span, self.start)


RunMode = SinglePair | MultiPair


@dataclass(frozen=True)
class PairFailure:
    """A pair that could not be set up."""

    descriptor: PairDescriptor
    error: Exception


@dataclass(frozen=True)
class UnitReport:
    """One reaped unit and how it ended."""

    name: str
    pid: int
    status: TerminationStatus


@dataclass
class RunReport:
    """Everything a run produced, in creation order."""

    pairs: list[PairDescriptor] = field(default_factory=list)
    failures: list[PairFailure] = field(default_factory=list)
    units: list[UnitReport] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """No pair failed and every unit exited with status 0."""
        return not self.failures and all(u.status.success for u in self.units)


class RunSupervisor:
    """
    Creates pairs, collects their units and reaps them all.

    Example:
        lg = LoggerFactory.create_root(LogConfig.from_params("info"))
        report = RunSupervisor(lg).run(MultiPair(count=2, span=5))
        assert report.ok
    """

    def __init__(
        self,
        lg: Logger,
        channel_factory: ChannelFactory = create_channel,
        forward_unit_logs: bool = True,
    ) -> None:
        """
        Args:
            lg: Parent logger; the supervisor logs under "<lg>/supervisor"
            channel_factory: Creates one channel per pair
            forward_unit_logs: Ship unit log records to lg's handlers
        """
        self._root_lg = lg
        self._lg = LoggerFactory.derive(lg, "supervisor")
        self._channel_factory = channel_factory
        self._forward_unit_logs = forward_unit_logs

    @property
    def lg(self) -> Logger:
        return self._lg

    def run(self, mode: RunMode) -> RunReport:
        """
        Run all pairs of the mode to completion.

        Returns:
            RunReport with started pairs, skipped pairs and unit statuses
        """
        if not self._forward_unit_logs:
            return self._run(mode, None)

        log_queue = new_log_queue()
        try:
            with LogQueueListener(log_queue, self._root_lg):
                return self._run(mode, log_queue)
        finally:
            log_queue.close()
            log_queue.join_thread()

    def _run(self, mode: RunMode, log_queue: Any) -> RunReport:
        report = RunReport()
        if isinstance(mode, SinglePair):
            self._lg.info(
                "starting basic producer-consumer run", extra={"lo": mode.lo, "hi": mode.hi}
            )
        else:
            self._lg.info(
                f"creating {mode.count} producer-consumer pairs",
                extra={"span": mode.span, "start": mode.start},
            )

        units = self._start_pairs(mode, log_queue, report)
        if isinstance(mode, MultiPair):
            self._lg.info("all pairs started", extra={"started": len(report.pairs)})

        for unit in units:
            report.units.append(self._reap(unit))

        if report.ok:
            self._lg.info("run completed successfully", extra={"units": len(report.units)})
        else:
            self._lg.error(
                "run completed with failures",
                extra={
                    "failed_pairs": len(report.failures),
                    "failed_units": sum(1 for u in report.units if not u.status.success),
                },
            )
        return report

    def _start_pairs(
        self, mode: RunMode, log_queue: Any, report: RunReport
    ) -> list[Unit]:
        """
        Spawn phase: start every pair, recording the ones that fail.

        Returns:
            Every started unit in creation order, including units left
            behind by pairs that failed midway
        """
        units: list[Unit] = []
        for descriptor in mode.descriptors():
            plg = LoggerFactory.derive(self._lg, descriptor.name)
            plg.info(
                f"=== Pair {descriptor.index + 1} ===",
                extra={"lo": descriptor.lo, "hi": descriptor.hi},
            )
            try:
                handle = run_pair(
                    descriptor,
                    plg,
                    log_queue=log_queue,
                    pacing=mode.pacing,
                    channel_factory=self._channel_factory,
                )
            except ChannelCreationError as e:
                plg.error("channel creation failed, skipping pair", extra={"exception": e})
                report.failures.append(PairFailure(descriptor, e))
                continue
            except SpawnError as e:
                plg.error("spawn failed, skipping pair", extra={"exception": e})
                report.failures.append(PairFailure(descriptor, e))
                # Units started before the failure still have to be reaped
                units.extend(e.spawned)
                continue
            units.extend(handle.units)
            report.pairs.append(descriptor)
        return units

    def _reap(self, unit: Unit) -> UnitReport:
        status = wait(unit)
        extra = {"unit": unit.name, "pid": unit.pid, "status": status.code}
        if status.success:
            self._lg.info(f"child {status}", extra=extra)
        else:
            self._lg.warning(f"child {status}", extra=extra)
        return UnitReport(unit.name, unit.pid, status)
