#!/usr/bin/env python3
"""
GPX serialization and parsing of routes.

A route is written as a GPX 1.1 document holding one <wpt> per point and
nothing else. Parsing reads the <wpt> elements at the top level of any GPX
document, in document order, and ignores tracks, routes, metadata and
extensions, including anything nested inside them.
"""

from datetime import datetime
from typing import Optional
from xml.sax.saxutils import escape
import codecs
import logging
import os
import re
import gpxpy
import gpxpy.gpx

from .errors import MalformedInput
from .file_utils import generate_export_filename
from .geometry import GeoPoint
from .route import Route

DEFAULT_CREATOR = "CarTrackerApp"
GPX_VERSION = "1.1"

# gpxpy writes attribute values as given
ATTRIBUTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}

XML_DECLARATION_ENCODING = re.compile(
    rb"""^<\?xml[^>]*?\sencoding\s*=\s*["']([A-Za-z][A-Za-z0-9._-]*)["']"""
)
XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")

logger = logging.getLogger(__name__)


def serialize(route: Route, creator: str = DEFAULT_CREATOR) -> str:
    """
    Serialize a route to GPX text.

    Coordinates are written as the shortest decimal that reads back to the
    same float. GPX does not allow exponents, so very small values fall back
    to fixed-point notation.

    Args:
        route: Route to serialize
        creator: Value of the root creator attribute

    Returns:
        GPX 1.1 XML document as a string
    """
    gpx_data = gpxpy.gpx.GPX()
    gpx_data.creator = escape(creator, ATTRIBUTE_ENTITIES)

    for point in route:
        gpx_data.waypoints.append(
            gpxpy.gpx.GPXWaypoint(latitude=point.latitude, longitude=point.longitude)
        )

    return gpx_data.to_xml(version=GPX_VERSION)


def parse(text: str, name: Optional[str] = None) -> Route:
    """
    Parse GPX text into a route made of its waypoints.

    Args:
        text: GPX document
        name: Name given to the resulting route

    Returns:
        Route whose points are the document's <wpt> elements in order

    Raises:
        MalformedInput: If the text is not well-formed XML, a waypoint lacks
            lat or lon, or a coordinate is not a valid decimal in range
    """
    try:
        gpx_data = gpxpy.parse(text)
    except (gpxpy.gpx.GPXException, ValueError, TypeError) as e:
        raise MalformedInput(f"Invalid GPX document: {e}") from e

    points = []
    for i, waypoint in enumerate(gpx_data.waypoints):
        try:
            points.append(GeoPoint(waypoint.latitude, waypoint.longitude))
        except (TypeError, ValueError) as e:
            raise MalformedInput(f"Invalid waypoint {i}: {e}") from e

    route = Route(points, name=name)

    logger.debug(f"Parsed {len(route)} waypoints from GPX document")

    return route


def decode_document(data: bytes, filename: str = "<document>") -> str:
    """
    Decode raw GPX bytes using the encoding named in the XML declaration.

    Documents without a declared encoding are read as UTF-8, with or without
    a byte order mark.

    Raises:
        MalformedInput: If the encoding is unknown or the bytes do not decode
    """
    if data.startswith(codecs.BOM_UTF8):
        data = data[len(codecs.BOM_UTF8):]

    encoding = "utf-8"
    match = XML_DECLARATION_ENCODING.match(data)
    if match:
        encoding = match.group(1).decode("ascii")

    try:
        text = data.decode(encoding)
    except LookupError as e:
        raise MalformedInput(f"{filename} declares an unknown encoding: {e}") from e
    except UnicodeDecodeError as e:
        raise MalformedInput(f"{filename} is not valid {encoding} text: {e}") from e

    # The declared encoding no longer describes the decoded text
    return XML_DECLARATION.sub("", text, count=1)


def read_route(filename: str) -> Route:
    """
    Load and parse a GPX file into a route.

    Args:
        filename: Path to GPX file

    Returns:
        Route named after the file stem, with source set to filename

    Raises:
        MalformedInput: If the file content is not a valid GPX document
        FileNotFoundError: If file doesn't exist.
        PermissionError: If file can't be read.
    """
    logger.debug(f"Reading GPX file: {filename}")
    with open(filename, "rb") as f:
        data = f.read()
    text = decode_document(data, filename)

    name = os.path.splitext(os.path.basename(filename))[0]
    route = parse(text, name=name)
    route.source = filename
    return route


def write_route(
    route: Route,
    directory: str,
    now: Optional[datetime] = None,
    creator: str = DEFAULT_CREATOR,
) -> str:
    """
    Export a route to a new Route_<timestamp>.gpx file.

    On success the route's name and source are set from the new file.

    Args:
        route: Route to export
        directory: Destination directory
        now: Export time used in the filename (default: current local time)
        creator: Value of the root creator attribute

    Returns:
        Path of the written file

    Raises:
        OSError: If the file cannot be created or written
        RuntimeError: If no free filename is available
    """
    filename = generate_export_filename(directory, now)
    text = serialize(route, creator)
    try:
        with open(filename, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError:
        # Do not leave the reserved empty file behind
        if os.path.exists(filename):
            os.remove(filename)
        raise

    route.name = os.path.splitext(os.path.basename(filename))[0]
    route.source = filename
    logger.info(f"Exported {len(route)} points to {filename}")
    return filename
