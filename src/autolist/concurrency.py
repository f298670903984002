"""Cooperative stop flag for scheduler runs."""

import threading

from loguru import logger

log = logger.bind(component="concurrency")


class StopFlag:
    """One-way "stop requested" flag.

    Can only be set, never cleared; a new run gets a new flag. Checked by
    the dispatch loop before each dispatch decision, it never interrupts
    a call that is already in flight.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def request_stop(self) -> None:
        if not self._event.is_set():
            log.info("Stop requested")
        self._event.set()

    @property
    def stop_requested(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Sleep up to ``timeout`` seconds, waking early on a stop request.

        Returns True if stop was requested.
        """
        return self._event.wait(timeout)
