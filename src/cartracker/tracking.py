#!/usr/bin/env python3
"""
Timers that drive RouteRecorder.tick() at a fixed interval.

The recorder does not schedule itself; one of these (or the host's own
event loop) issues the ticks and stops issuing them after stop().
"""

from typing import Callable, Optional
import logging
import threading
import time

from .recorder import RouteRecorder

DEFAULT_INTERVAL = 0.5

logger = logging.getLogger(__name__)


def poll(
    recorder: RouteRecorder,
    interval: float = DEFAULT_INTERVAL,
    duration: Optional[float] = None,
    until: Optional[Callable[[], bool]] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> int:
    """
    Tick the recorder in the calling thread until it stops recording.

    Args:
        recorder: Recorder to drive; polling ends as soon as it is idle
        interval: Seconds between ticks
        duration: Optional limit in seconds, measured with clock
        until: Optional predicate; polling ends once it returns True
        sleep: Function used to wait between ticks
        clock: Monotonic time source

    Returns:
        Number of ticks issued
    """
    if interval <= 0:
        raise ValueError(f"Tick interval must be positive, got {interval} seconds")

    deadline = None if duration is None else clock() + duration
    ticks = 0

    while recorder.is_recording:
        if deadline is not None and clock() >= deadline:
            logger.debug(f"Tracking duration of {duration}s elapsed")
            break
        if until is not None and until():
            break
        recorder.tick()
        ticks += 1
        sleep(interval)

    logger.debug(f"Issued {ticks} ticks")
    return ticks


class TickTimer:
    """Issues recorder ticks from a background thread until cancelled."""

    def __init__(self, recorder: RouteRecorder, interval: float = DEFAULT_INTERVAL):
        if interval <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval} seconds")
        self.recorder = recorder
        self.interval = interval
        self.ticks = 0
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._cancelled.clear()
        self._thread = threading.Thread(
            target=self._run, name="cartracker-ticks", daemon=True
        )
        self._thread.start()

    def cancel(self, timeout: Optional[float] = None) -> None:
        """Stop issuing ticks and wait for the thread to finish."""
        self._cancelled.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._cancelled.is_set():
            self.recorder.tick()
            self.ticks += 1
            self._cancelled.wait(self.interval)
