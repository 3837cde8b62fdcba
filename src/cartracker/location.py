#!/usr/bin/env python3
"""
Location samplers: sources of the device's current position.

A sampler never schedules itself. The recorder pulls one fix per tick by
calling current_position(), which either returns a GeoPoint or raises
LocationUnavailable.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable, Optional
import logging
import requests

from .errors import LocationUnavailable
from .geometry import GeoPoint
from .route import Route

DEFAULT_API_TIMEOUT = 10
GEOLOCATION_API_URL = "http://ip-api.com/json/"

logger = logging.getLogger(__name__)


class LocationSampler(ABC):
    """Abstract base class for position sources."""

    @abstractmethod
    def current_position(self) -> GeoPoint:
        """
        Obtain the current position.

        Returns:
            Best-effort current GeoPoint

        Raises:
            LocationUnavailable: If no fix can be obtained right now
        """
        pass


class StaticLocationSampler(LocationSampler):
    """Always reports the same fix, or never has one when point is None."""

    def __init__(self, point: Optional[GeoPoint]):
        self.point = point

    def current_position(self) -> GeoPoint:
        if self.point is None:
            raise LocationUnavailable("No fix configured")
        return self.point


class ScriptedLocationSampler(LocationSampler):
    """
    Reports a predetermined sequence of fixes, one per call.

    A None entry stands for a tick without a fix. Once the script is
    exhausted every call is unavailable.
    """

    def __init__(self, fixes: Iterable[Optional[GeoPoint]]):
        self._fixes = deque(fixes)

    @property
    def remaining(self) -> int:
        return len(self._fixes)

    def current_position(self) -> GeoPoint:
        if not self._fixes:
            raise LocationUnavailable("Scripted fixes exhausted")
        fix = self._fixes.popleft()
        if fix is None:
            raise LocationUnavailable("Scripted tick without a fix")
        return fix


class GpxReplaySampler(ScriptedLocationSampler):
    """Replays the points of a previously recorded route, one per call."""

    def __init__(self, route: Route):
        super().__init__(route.points)
        logger.debug(f"Replaying {len(route)} points from route {route.name}")


class IpGeolocationSampler(LocationSampler):
    """
    Best-effort position from an HTTP IP geolocation service.

    The service must answer with a JSON object carrying the latitude and
    longitude under latitude_key and longitude_key. If the object has a
    "status" member, anything other than "success" counts as no fix.
    """

    def __init__(
        self,
        url: str = GEOLOCATION_API_URL,
        timeout: float = DEFAULT_API_TIMEOUT,
        latitude_key: str = "lat",
        longitude_key: str = "lon",
    ):
        self.url = url
        self.timeout = timeout
        self.latitude_key = latitude_key
        self.longitude_key = longitude_key

    def current_position(self) -> GeoPoint:
        """
        Query the geolocation service once.

        Returns:
            GeoPoint reported by the service

        Raises:
            LocationUnavailable: On network or HTTP errors, an undecodable body,
                a failure status or missing/invalid coordinates
        """
        try:
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            logger.debug(f"Geolocation request to {self.url} failed: {e}")
            raise LocationUnavailable(f"Geolocation request failed: {e}") from e
        except ValueError as e:
            raise LocationUnavailable(f"Geolocation response is not JSON: {e}") from e

        if not isinstance(data, dict):
            raise LocationUnavailable("Geolocation response is not a JSON object")

        status = data.get("status", "success")
        if status != "success":
            message = data.get("message", status)
            raise LocationUnavailable(f"Geolocation service reported: {message}")

        try:
            return GeoPoint(data[self.latitude_key], data[self.longitude_key])
        except (KeyError, TypeError, ValueError) as e:
            raise LocationUnavailable(f"Geolocation response has no usable fix: {e}") from e
