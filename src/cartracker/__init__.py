#!/usr/bin/env python3
"""
Car Tracker - GPS route recording with GPX export.

This package samples the current position at a fixed interval into routes,
exports them as GPX files and reloads saved routes from disk.
"""
import importlib.metadata

__version__ = importlib.metadata.version("cartracker")

# Import main classes for public API
from .errors import CarTrackerError, LocationUnavailable, MalformedInput, RouteIndexError
from .geometry import GeoPoint
from .route import Route
from .location import (
    LocationSampler,
    StaticLocationSampler,
    ScriptedLocationSampler,
    GpxReplaySampler,
    IpGeolocationSampler,
)
from .recorder import RecorderState, RouteRecorder
from .store import RouteStore
from .session import TrackingSession

__all__ = [
    "CarTrackerError",
    "LocationUnavailable",
    "MalformedInput",
    "RouteIndexError",
    "GeoPoint",
    "Route",
    "LocationSampler",
    "StaticLocationSampler",
    "ScriptedLocationSampler",
    "GpxReplaySampler",
    "IpGeolocationSampler",
    "RecorderState",
    "RouteRecorder",
    "RouteStore",
    "TrackingSession",
]
