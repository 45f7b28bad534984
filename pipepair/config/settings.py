"""
Typed, validated views of the run sections of a Config.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..dot_dict import DotDict
from ..exceptions import ConfigError


def _as_int(section: str, key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError("expected an integer", key=f"{section}.{key}", value=value)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(
            "expected an integer", key=f"{section}.{key}", value=value
        ) from e


def _as_delay(section: str, key: str, value: Any) -> float:
    if value is None:
        return 0.0
    try:
        delay = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError("expected seconds", key=f"{section}.{key}", value=value) from e
    if delay < 0:
        raise ConfigError("delay must not be negative", key=f"{section}.{key}", value=value)
    return delay


@dataclass(frozen=True)
class Pacing:
    """Seconds each unit sleeps after handling one value."""

    producer: float = 0.0
    consumer: float = 0.0

    @classmethod
    def from_config(cls, section: DotDict | None, name: str) -> Pacing:
        if section is None:
            return cls()
        return cls(
            producer=_as_delay(name, "pacing.producer", section.get("producer")),
            consumer=_as_delay(name, "pacing.consumer", section.get("consumer")),
        )


NO_PACING = Pacing()


@dataclass(frozen=True)
class BasicSettings:
    """Single-pair run: one producer sends [lo, hi) to one consumer."""

    lo: int
    hi: int
    pacing: Pacing = NO_PACING

    def __post_init__(self) -> None:
        if self.hi < self.lo:
            raise ConfigError("hi must not be below lo", lo=self.lo, hi=self.hi)

    @classmethod
    def from_config(cls, config: DotDict, section: str = "basic") -> BasicSettings:
        """
        Read and validate the single-pair section.

        Raises:
            ConfigError: On missing, mistyped or inconsistent values
        """
        node = config.get(section)
        if not isinstance(node, DotDict):
            raise ConfigError("missing config section", section=section)
        return cls(
            lo=_as_int(section, "lo", node.get("lo")),
            hi=_as_int(section, "hi", node.get("hi")),
            pacing=Pacing.from_config(node.get("pacing"), section),
        )


@dataclass(frozen=True)
class PairsSettings:
    """Multi-pair run: count pairs of span values each, starting at start."""

    count: int
    span: int
    start: int = 1
    pacing: Pacing = NO_PACING

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ConfigError("pair count must be at least 1", count=self.count)
        if self.span < 0:
            raise ConfigError("span must not be negative", span=self.span)

    @classmethod
    def from_config(cls, config: DotDict, section: str = "pairs") -> PairsSettings:
        """
        Read and validate the multi-pair section.

        Raises:
            ConfigError: On missing, mistyped or inconsistent values
        """
        node = config.get(section)
        if not isinstance(node, DotDict):
            raise ConfigError("missing config section", section=section)
        return cls(
            count=_as_int(section, "count", node.get("count")),
            span=_as_int(section, "span", node.get("span")),
            start=_as_int(section, "start", node.get("start", 1)),
            pacing=Pacing.from_config(node.get("pacing"), section),
        )
