"""
Pair supervisor: wires one producer and one consumer to a fresh channel.

The supervisor never moves data. After spawning both units it closes its own
copies of both channel ends; if it kept the write end open, the consumer
would never see end of stream and would block forever.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .channel import ReadEnd, WriteEnd, create_channel
from .config.settings import NO_PACING, Pacing
from .consumer import run_consumer
from .exceptions import SpawnError
from .log import Logger
from .producer import run_producer
from .units import Unit, spawn

ChannelFactory = Callable[[], tuple[ReadEnd, WriteEnd]]


@dataclass(frozen=True)
class PairDescriptor:
    """Pair number and its half-open value range [start, start + span)."""

    index: int
    start: int
    span: int

    @property
    def lo(self) -> int:
        return self.start

    @property
    def hi(self) -> int:
        return self.start + self.span

    @property
    def name(self) -> str:
        """One-based pair name used for unit and logger names."""
        return f"pair-{self.index + 1}"

    @classmethod
    def from_range(cls, lo: int, hi: int, index: int = 0) -> PairDescriptor:
        return cls(index=index, start=lo, span=max(0, hi - lo))


def assign_ranges(count: int, span: int, start: int = 1) -> list[PairDescriptor]:
    """
    Split consecutive values into count disjoint, contiguous ranges.

    Pair i covers [start + i*span, start + (i+1)*span).

    Raises:
        ValueError: If count or span is negative
    """
    if count < 0 or span < 0:
        raise ValueError(f"count and span must be non-negative, got {count}, {span}")
    return [PairDescriptor(index=i, start=start + i * span, span=span) for i in range(count)]


@dataclass(frozen=True)
class PairHandle:
    """The two units of a started pair, in creation order."""

    descriptor: PairDescriptor
    producer: Unit
    consumer: Unit

    @property
    def units(self) -> list[Unit]:
        return [self.producer, self.consumer]


def run_pair(
    descriptor: PairDescriptor,
    lg: Logger,
    log_queue: Any = None,
    pacing: Pacing = NO_PACING,
    channel_factory: ChannelFactory = create_channel,
) -> PairHandle:
    """
    Start one producer/consumer pair without waiting for it.

    Args:
        descriptor: Pair number and value range
        lg: Supervisor logger
        log_queue: Queue the units log through, or None to silence them
        pacing: Per-value delays for the units
        channel_factory: Creates the pair's channel

    Returns:
        Handle with both units, for the caller to reap

    Raises:
        ChannelCreationError: If the channel cannot be created; nothing is spawned
        SpawnError: If a unit cannot be started; ``spawned`` lists units that
            did start and still need reaping
    """
    read_end, write_end = channel_factory()
    unit_level = lg.getEffectiveLevel() if not lg.disabled else False
    spawned: list[Unit] = []
    try:
        producer = spawn(
            run_producer,
            write_end,
            descriptor.lo,
            descriptor.hi,
            pacing.producer,
            name=f"/{descriptor.name}/producer",
            release=[read_end],
            log_queue=log_queue,
            log_level=unit_level,
        )
        spawned.append(producer)
        lg.info("created producer", extra={"pair": descriptor.index + 1, "pid": producer.pid})

        consumer = spawn(
            run_consumer,
            read_end,
            pacing.consumer,
            name=f"/{descriptor.name}/consumer",
            release=[write_end],
            log_queue=log_queue,
            log_level=unit_level,
        )
        spawned.append(consumer)
        lg.info("created consumer", extra={"pair": descriptor.index + 1, "pid": consumer.pid})
    except SpawnError as e:
        e.spawned = spawned + e.spawned
        raise
    finally:
        read_end.close()
        write_end.close()

    lg.debug(
        "pair started",
        extra={"pair": descriptor.index + 1, "lo": descriptor.lo, "hi": descriptor.hi},
    )
    return PairHandle(descriptor, producer, consumer)
