"""
Logging across process boundaries.

Execution units log through a queue to the supervisor:

    # Supervisor
    log_queue = multiprocessing.get_context("fork").Queue()
    listener = LogQueueListener(log_queue, lg)
    listener.start()
    # ... spawn units, handing them log_queue ...
    # ... wait for units ...
    listener.stop()

    # Unit
    lg = create_queue_logger(log_queue, "/pair-1/consumer")
    lg.info("received", extra={"value": 3, "sum": 6})  # dispatched by the supervisor
"""

from .queue_handler import MPQueueHandler, create_queue_logger
from .queue_listener import LogQueueListener

__all__ = [
    "MPQueueHandler",
    "LogQueueListener",
    "create_queue_logger",
]
