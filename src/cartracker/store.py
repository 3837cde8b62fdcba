#!/usr/bin/env python3
"""
In-memory collection of finalized routes.
"""

from typing import Iterator, List, Tuple
import logging
import os

from .errors import MalformedInput, RouteIndexError
from .file_utils import is_gpx_filename
from .gpx import read_route
from .route import Route

logger = logging.getLogger(__name__)


class RouteStore:
    """
    Ordered collection of finalized routes.

    Display labels are derived from the position in the collection when they
    are asked for, so removing a route shifts the labels of the ones after
    it. Routes are handed out by reference; callers must not mutate them.
    """

    def __init__(self):
        self._routes: List[Route] = []

    def add(self, route: Route) -> None:
        """Append a route at the end of the collection."""
        self._routes.append(route)
        logger.debug(f"Added {self.label(len(self._routes) - 1)} ({len(route)} points)")

    def remove(self, index: int) -> Route:
        """
        Remove the route at index and re-index the ones after it.

        Args:
            index: 0-based position in the collection

        Returns:
            The removed route

        Raises:
            RouteIndexError: If index is not in [0, count); the collection is
                left unchanged
        """
        if not 0 <= index < len(self._routes):
            raise RouteIndexError(index, len(self._routes))
        route = self._routes.pop(index)
        logger.debug(f"Removed route {route.name or index + 1}")
        return route

    def list(self) -> Tuple[Route, ...]:
        """Return the stored routes in order, without copying their points."""
        return tuple(self._routes)

    @staticmethod
    def label(index: int) -> str:
        """Display label for the route at a 0-based index."""
        return f"Route {index + 1}"

    def labels(self) -> List[str]:
        return [self.label(i) for i in range(len(self._routes))]

    def load_from_directory(self, path: str) -> int:
        """
        Add every parsable GPX file in a directory to the store.

        Files are visited in name order. A file that is not valid GPX, or
        cannot be read, is logged and skipped; the rest of the scan goes on.

        Args:
            path: Directory to scan

        Returns:
            Number of routes added

        Raises:
            OSError: If the directory itself cannot be listed
        """
        entries = sorted(os.listdir(path))

        loaded = 0
        for entry in entries:
            filename = os.path.join(path, entry)
            if not is_gpx_filename(entry) or not os.path.isfile(filename):
                continue
            try:
                route = read_route(filename)
            except MalformedInput as e:
                logger.warning(f"Skipping malformed GPX file {filename}: {e}")
                continue
            except OSError as e:
                logger.warning(f"Skipping unreadable GPX file {filename}: {e}")
                continue
            route.freeze()
            self.add(route)
            loaded += 1

        logger.info(f"Loaded {loaded} routes from {path}")
        return loaded

    def __len__(self) -> int:
        return len(self._routes)

    def __getitem__(self, index: int) -> Route:
        return self._routes[index]

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)
