#!/usr/bin/env python3
"""
Filename utilities for exported GPX routes.
"""

from datetime import datetime
from typing import Optional
import os
import logging

EXPORT_PREFIX = "Route_"
GPX_EXTENSION = ".gpx"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
MAX_NUMBERED_VARIANTS = 100

logger = logging.getLogger(__name__)


def is_gpx_filename(filename: str) -> bool:
    """Return True if filename has the GPX extension (case-insensitive)."""
    return filename.lower().endswith(GPX_EXTENSION)


def generate_export_filename(directory: str, now: Optional[datetime] = None) -> str:
    """
    Generates an export filename and reserves it by creating an empty file.

    Strategy:
    1. Name the file Route_<YYYYMMDD_HHMMSS>.gpx using the export time
    2. If that file exists, try Route_<timestamp>_1.gpx, _2.gpx, etc.
    3. Stop after 100 numbered attempts
    4. Use exclusive open (`open(path, 'x')`) so a name is never handed out twice.

    Args:
        directory: Directory the route is exported to
        now: Export time (default: current local time)

    Returns:
        Path of a newly created empty file reserved for the export

    Raises:
        RuntimeError: If no available filename is found
        OSError: If the file cannot be created (missing directory, permissions)
    """
    if now is None:
        now = datetime.now()
    base_name = EXPORT_PREFIX + now.strftime(TIMESTAMP_FORMAT)

    candidates = [base_name + GPX_EXTENSION] + [
        f"{base_name}_{i}{GPX_EXTENSION}" for i in range(1, MAX_NUMBERED_VARIANTS + 1)
    ]
    for name in candidates:
        candidate = os.path.join(directory, name)
        try:
            with open(candidate, "x"):
                pass  # File created successfully and is kept
            return candidate
        except FileExistsError:
            continue
        except OSError as e:
            logger.error(f"Cannot create file {candidate}: {e}")
            raise

    logger.error(
        f"Could not find an available filename for {base_name} after "
        f"{MAX_NUMBERED_VARIANTS} numbered attempts"
    )
    raise RuntimeError(f"No available export filename for {base_name}")
