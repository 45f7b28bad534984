"""
Producer unit: sends a contiguous run of integers over a channel.
"""

import os
import time

from .channel import WriteEnd
from .exceptions import SendFailure
from .log import Logger


def produce(write_end: WriteEnd, lo: int, hi: int, lg: Logger, delay: float = 0.0) -> int:
    """
    Send every integer in [lo, hi) in increasing order, then close the write end.

    Logs one "sent" record per value after the send completes.

    Args:
        write_end: Channel end owned by this producer
        lo: First value sent
        hi: One past the last value sent
        lg: Logger for progress records
        delay: Seconds to sleep after each value

    Returns:
        Number of values sent

    Raises:
        SendFailure: On the first failed send. The write end is left open;
            it is released when the unit exits.
    """
    count = 0
    for value in range(lo, hi):
        write_end.send(value)
        count += 1
        lg.info("sent", extra={"value": value})
        if delay:
            time.sleep(delay)
    write_end.close()
    return count


def run_producer(lg: Logger, write_end: WriteEnd, lo: int, hi: int, delay: float = 0.0) -> int:
    """Unit entry point: exit code 0 when all values were sent, 1 otherwise."""
    lg.info("producer starting", extra={"pid": os.getpid(), "lo": lo, "hi": hi})
    try:
        count = produce(write_end, lo, hi, lg, delay)
    except SendFailure as e:
        lg.error("send failed", extra={"exception": e})
        return 1
    lg.info(f"finished sending {count} numbers", extra={"count": count})
    return 0
