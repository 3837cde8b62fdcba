#!/usr/bin/env python3
"""
Tracking session: the recorder, the route store and the export directory
of one application run.
"""

from datetime import datetime
from typing import Callable, Optional, Tuple
import logging
import os

from .config import TrackerConfig
from .gpx import DEFAULT_CREATOR, read_route, write_route
from .location import LocationSampler
from .recorder import RouteRecorder
from .route import Route
from .store import RouteStore

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


def log_notification(message: str) -> None:
    """Default notifier: status messages go to the log."""
    logger.info(message)


class TrackingSession:
    """
    Owns everything one run of the tracker works on.

    Created at start-up with open(), which rehydrates the saved routes, and
    torn down with close(). Usable as a context manager.
    """

    def __init__(
        self,
        sampler: LocationSampler,
        export_dir: str,
        creator: str = DEFAULT_CREATOR,
        notify: Optional[Notifier] = None,
    ):
        """Initializes a TrackingSession.

        Args:
            sampler: Position source for the recorder.
            export_dir: Directory GPX files are exported to and loaded from.
            creator: Creator attribute written into exported files.
            notify: Fire-and-forget sink for user-facing status messages.
        """
        self.recorder = RouteRecorder(sampler)
        self.store = RouteStore()
        self.export_dir = export_dir
        self.creator = creator
        self.notify = notify or log_notification

    @classmethod
    def from_config(
        cls,
        config: TrackerConfig,
        sampler: LocationSampler,
        notify: Optional[Notifier] = None,
    ) -> "TrackingSession":
        return cls(sampler, config.export_dir, creator=config.creator, notify=notify)

    @property
    def routes(self) -> Tuple[Route, ...]:
        return self.store.list()

    def open(self, load_saved: bool = True) -> int:
        """
        Create the export directory if needed and load the routes saved there.

        Args:
            load_saved: Whether to rehydrate the store from the export directory

        Returns:
            Number of routes loaded

        Raises:
            OSError: If the directory cannot be created or listed
        """
        os.makedirs(self.export_dir, exist_ok=True)
        if not load_saved:
            return 0
        return self.store.load_from_directory(self.export_dir)

    def close(self) -> None:
        if self.recorder.is_recording:
            self.recorder.stop()
        logger.debug("Session closed")

    def __enter__(self) -> "TrackingSession":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def start_tracking(self) -> Route:
        if self.recorder.is_recording:
            return self.recorder.current_route  # type: ignore[return-value]
        route = self.recorder.start()
        self.notify("Route tracking started")
        return route

    def stop_tracking(self) -> Optional[Route]:
        route = self.recorder.stop()
        if route is not None:
            self.notify(f"Route tracking stopped ({len(route)} points)")
        return route

    def tick(self):
        return self.recorder.tick()

    def export_current_route(self, now: Optional[datetime] = None) -> str:
        """
        Export the current route and move it into the store.

        A route exported while still recording is finalized first and a fresh
        route is started for further tracking. A route without points is
        exported as a valid GPX document without waypoints. When the write
        fails, recording continues into the same route.

        Args:
            now: Export time used in the filename (default: current local time)

        Returns:
            Path of the exported file

        Raises:
            RuntimeError: If nothing has been recorded in this session
            OSError: If the file cannot be written
        """
        route = self.recorder.current_route
        if route is None:
            raise RuntimeError("No route has been recorded yet")
        if route.frozen:
            self.notify(f"Route already exported to {os.path.basename(route.source or '')}")
            return route.source  # type: ignore[return-value]

        was_recording = self.recorder.stop() is not None
        try:
            filename = write_route(route, self.export_dir, now=now, creator=self.creator)
        except (OSError, RuntimeError):
            if was_recording:
                self.recorder.resume()
            raise
        route.freeze()
        self.store.add(route)
        self.notify(f"Route exported to {os.path.basename(filename)}")

        if was_recording:
            self.recorder.start()
        return filename

    def import_file(self, filename: str) -> Route:
        """
        Parse one GPX file and add it to the store.

        Raises:
            MalformedInput: If the file is not a valid GPX document
            OSError: If the file cannot be read
        """
        route = read_route(filename)
        route.freeze()
        self.store.add(route)
        self.notify(f"Imported {route.name} ({len(route)} points)")
        return route

    def remove_route(self, index: int, delete_file: bool = False) -> Route:
        """
        Remove a stored route, optionally deleting the GPX file behind it.

        Raises:
            RouteIndexError: If index is not in [0, count)
            OSError: If the file cannot be deleted
        """
        route = self.store.remove(index)
        if delete_file and route.source and os.path.exists(route.source):
            os.remove(route.source)
            logger.debug(f"Deleted {route.source}")
        self.notify("Route removed")
        return route
