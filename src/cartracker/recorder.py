#!/usr/bin/env python3
"""
Route recorder: accumulates sampled positions into the active route.
"""

from enum import Enum
from typing import Callable, List, Optional
import logging
import threading

from .errors import LocationUnavailable
from .geometry import GeoPoint
from .location import LocationSampler
from .route import Route

logger = logging.getLogger(__name__)

RouteObserver = Callable[[Route, GeoPoint], None]


class RecorderState(Enum):
    """Enumeration for recorder states."""

    IDLE = "idle"
    RECORDING = "recording"

    def __str__(self) -> str:
        return self.value


class RouteRecorder:
    """
    Two-state recorder driven by an external timer.

    start() and stop() switch between IDLE and RECORDING; tick() pulls one
    fix from the sampler and appends it to the active route. State changes
    and appends happen under a single lock, so a tick racing stop() from
    another thread never lands after the route was finalized.
    """

    def __init__(self, sampler: LocationSampler):
        """Initializes a RouteRecorder.

        Args:
            sampler: Source of position fixes, queried once per tick.
        """
        self.sampler = sampler
        self._state = RecorderState.IDLE
        self._route: Optional[Route] = None
        self._observers: List[RouteObserver] = []
        self._lock = threading.Lock()

    @property
    def state(self) -> RecorderState:
        return self._state

    @property
    def is_recording(self) -> bool:
        return self._state == RecorderState.RECORDING

    @property
    def current_route(self) -> Optional[Route]:
        """The route being recorded, or the last finalized one while idle."""
        return self._route

    def add_observer(self, observer: RouteObserver) -> None:
        """Register a callback invoked as observer(route, point) after each append."""
        self._observers.append(observer)

    def remove_observer(self, observer: RouteObserver) -> None:
        self._observers.remove(observer)

    def start(self) -> Route:
        """
        Begin recording a new route.

        Does nothing when already recording, so a double start keeps the
        points recorded so far.

        Returns:
            The active route
        """
        with self._lock:
            if self._state == RecorderState.RECORDING:
                logger.debug("start() ignored: already recording")
                return self._route  # type: ignore[return-value]
            self._route = Route()
            self._state = RecorderState.RECORDING
            logger.info(f"Started recording (route color {self._route.color})")
            return self._route

    def stop(self) -> Optional[Route]:
        """
        Stop recording and finalize the active route.

        The route keeps its points, including when it has none, and stays
        available as current_route until the next start().

        Returns:
            The finalized route, or None if the recorder was idle
        """
        with self._lock:
            if self._state != RecorderState.RECORDING:
                logger.debug("stop() ignored: not recording")
                return None
            self._state = RecorderState.IDLE
            logger.info(f"Stopped recording with {len(self._route)} points")  # type: ignore[arg-type]
            return self._route

    def resume(self) -> Optional[Route]:
        """
        Continue recording into the route finalized by the last stop().

        Returns:
            The active route, or None if there is no unfrozen route to resume
        """
        with self._lock:
            if self._state == RecorderState.RECORDING:
                return self._route
            if self._route is None or self._route.frozen:
                logger.debug("resume() ignored: no route to continue")
                return None
            self._state = RecorderState.RECORDING
            logger.info(f"Resumed recording at {len(self._route)} points")
            return self._route

    def tick(self) -> Optional[GeoPoint]:
        """
        Sample one position and append it to the active route.

        Safe to call while idle: nothing is sampled or changed. A tick without
        a fix is skipped silently.

        Returns:
            The appended point, or None if nothing was appended
        """
        with self._lock:
            if self._state != RecorderState.RECORDING:
                return None
            route = self._route

        try:
            point = self.sampler.current_position()
        except LocationUnavailable as e:
            logger.debug(f"Skipping tick: {e}")
            return None

        with self._lock:
            # stop() or a restart may have run while the sampler was busy
            if self._state != RecorderState.RECORDING or self._route is not route:
                logger.debug("Discarding fix sampled for a route no longer recording")
                return None
            route.append(point)  # type: ignore[union-attr]

        logger.debug(f"Recorded point {len(route)}: {point}")  # type: ignore[arg-type]
        self._notify(route, point)  # type: ignore[arg-type]
        return point

    def _notify(self, route: Route, point: GeoPoint) -> None:
        for observer in list(self._observers):
            try:
                observer(route, point)
            except Exception as e:
                logger.warning(f"Route observer {observer!r} failed: {e}")
