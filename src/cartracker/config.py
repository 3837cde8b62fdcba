import argparse
import os
from dataclasses import dataclass, field
from typing import Optional

from .gpx import DEFAULT_CREATOR
from .location import DEFAULT_API_TIMEOUT, GEOLOCATION_API_URL
from .tracking import DEFAULT_INTERVAL


def default_export_dir() -> str:
    return os.path.join(os.path.expanduser("~"), ".cartracker", "routes")


@dataclass
class TrackerConfig:
    """Configuration for the route tracker."""

    export_dir: str = field(default_factory=default_export_dir)
    interval: float = DEFAULT_INTERVAL
    duration: Optional[float] = None
    creator: str = DEFAULT_CREATOR
    provider: str = "ip"
    replay_file: Optional[str] = None
    geolocation_url: str = GEOLOCATION_API_URL
    timeout: float = DEFAULT_API_TIMEOUT
    log_level: str = "WARNING"

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "TrackerConfig":
        """Build a config from parsed arguments, keeping defaults for absent ones."""
        config = cls()
        for name in cls.__dataclass_fields__:
            value = getattr(args, name, None)
            if value is not None:
                setattr(config, name, value)
        return config
