"""Exception types raised by the route tracker."""


class CarTrackerError(Exception):
    """Base class for all route tracker errors."""

    pass


class LocationUnavailable(CarTrackerError):
    """Raised by a location sampler when no position fix can be obtained."""

    pass


class MalformedInput(CarTrackerError):
    """Raised when GPX text cannot be turned into a route."""

    pass


class RouteIndexError(CarTrackerError, IndexError):
    """Raised when a route index is outside the stored collection."""

    def __init__(self, index: int, count: int):
        super().__init__(f"Route index {index} out of range [0, {count})")
        self.index = index
        self.count = count
