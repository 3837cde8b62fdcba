#!/usr/bin/env python3
"""
Route data model for recorded and imported tracks.
"""

from typing import Iterable, Iterator, List, Optional, Tuple
import logging
import random

from .geometry import GeoPoint

logger = logging.getLogger(__name__)


def random_color() -> str:
    """
    Pick a random display color for a route.

    Each channel is drawn from [50, 255] so routes never come out near-black
    on the map.

    Returns:
        Color as a "#rrggbb" string
    """
    r = random.randint(50, 255)
    g = random.randint(50, 255)
    b = random.randint(50, 255)
    return f"#{r:02x}{g:02x}{b:02x}"


class Route:
    """Represents one tracking session: an ordered sequence of GeoPoints."""

    def __init__(
        self,
        points: Optional[Iterable[GeoPoint]] = None,
        name: Optional[str] = None,
        color: Optional[str] = None,
        source: Optional[str] = None,
    ):
        """Initializes a Route object.

        Args:
            points: Initial points in recording order. The sequence is copied,
                so two routes never share point storage.
            name: Identity of the route, e.g. the stem of its GPX file.
            color: Display color ("#rrggbb"); a random one is picked if omitted.
            source: Path of the GPX file the route was loaded from or exported to.
        """
        self.points: List[GeoPoint] = list(points) if points is not None else []
        self.name = name
        self.color = color or random_color()
        self.source = source
        self._frozen = False

    @property
    def frozen(self) -> bool:
        """True once the route has been exported and may no longer change."""
        return self._frozen

    def freeze(self) -> None:
        """Mark the route as finalized; later appends raise RuntimeError."""
        self._frozen = True

    def append(self, point: GeoPoint) -> None:
        """
        Append a point at the end of the route.

        Args:
            point: Newly sampled position

        Raises:
            RuntimeError: If the route has been frozen
        """
        if self._frozen:
            raise RuntimeError(f"Route {self.name or '<unnamed>'} is frozen")
        self.points.append(point)

    def get_bbox(self) -> Tuple[float, float, float, float]:
        """
        Get the bounding box of this route.

        Returns:
            Tuple of (south, west, north, east) in decimal degrees

        Raises:
            ValueError: If the route has no points
        """
        if not self.points:
            raise ValueError("Cannot calculate bounding box for empty route")

        latitudes = [point.latitude for point in self.points]
        longitudes = [point.longitude for point in self.points]

        return (min(latitudes), min(longitudes), max(latitudes), max(longitudes))

    def __len__(self) -> int:
        """Return number of points in route."""
        return len(self.points)

    def __getitem__(self, index):
        """Allow indexing into points."""
        return self.points[index]

    def __iter__(self) -> Iterator[GeoPoint]:
        """Allow iteration over points."""
        return iter(self.points)

    def __repr__(self) -> str:
        return (
            f"Route(name={self.name!r}, points={len(self.points)}, "
            f"color={self.color!r}, frozen={self._frozen})"
        )
