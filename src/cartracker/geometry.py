#!/usr/bin/env python3
"""
Geographic point type shared by the recorder, the GPX codec and the store.
"""

from dataclasses import dataclass
from typing import List
import math


@dataclass(frozen=True)
class GeoPoint:
    """Represents a geographic position with latitude and longitude.

    Both values are decimal degrees. Latitude must lie in [-90, 90] and
    longitude in [-180, 180].

    Raises:
        ValueError: If either coordinate is non-finite or out of range.
    """

    latitude: float
    longitude: float

    def __post_init__(self):
        latitude = float(self.latitude)
        longitude = float(self.longitude)
        if not math.isfinite(latitude) or not -90.0 <= latitude <= 90.0:
            raise ValueError(f"Latitude {self.latitude!r} is outside [-90, 90]")
        if not math.isfinite(longitude) or not -180.0 <= longitude <= 180.0:
            raise ValueError(f"Longitude {self.longitude!r} is outside [-180, 180]")
        # Normalise ints and numeric strings to float
        object.__setattr__(self, "latitude", latitude)
        object.__setattr__(self, "longitude", longitude)

    def as_latlon(self) -> List[float]:
        """Return the point as a [latitude, longitude] pair (folium order)."""
        return [self.latitude, self.longitude]

    def __str__(self) -> str:
        return f"({self.latitude:.6f}, {self.longitude:.6f})"
