"""
Consumer unit: sums integers from a channel until end of stream.

The consumer never knows how many values to expect. It stops only when the
channel reports end of stream, which happens once every holder of the write
end has closed it.
"""

import os
import time
from dataclasses import dataclass, field

from .channel import ReadEnd
from .exceptions import ReceiveFault
from .log import Logger


@dataclass
class ConsumeResult:
    """What one consumer saw: the values in receive order and their sum."""

    total: int = 0
    values: list[int] = field(default_factory=list)
    fault: ReceiveFault | None = None


def consume(read_end: ReadEnd, lg: Logger, delay: float = 0.0) -> ConsumeResult:
    """
    Receive until end of stream, keeping a running sum, then close the read end.

    Logs one "received" record per value with the running sum, then the
    final sum. A receive fault ends the stream early; the sum so far stands.

    Args:
        read_end: Channel end owned by this consumer
        lg: Logger for progress records
        delay: Seconds to sleep after each value

    Returns:
        ConsumeResult with the final sum
    """
    result = ConsumeResult()
    read_end.lg = lg
    for value in read_end:
        result.total += value
        result.values.append(value)
        lg.info("received", extra={"value": value, "sum": result.total})
        if delay:
            time.sleep(delay)

    result.fault = read_end.fault
    read_end.close()
    lg.info(f"final sum: {result.total}", extra={"sum": result.total, "count": len(result.values)})
    return result


def run_consumer(lg: Logger, read_end: ReadEnd, delay: float = 0.0) -> int:
    """Unit entry point: always exits 0, faults are reported in the log."""
    lg.info("consumer starting", extra={"pid": os.getpid()})
    consume(read_end, lg, delay)
    return 0
