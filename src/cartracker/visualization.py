#!/usr/bin/env python3
"""
Route visualization using folium maps.
"""

from typing import List, Optional, Sequence, Tuple
import html
import logging
import folium
from folium.template import Template

from .route import Route
from .store import RouteStore

# Used when there is nothing to show (Warsaw city centre)
DEFAULT_LOCATION = (52.2297, 21.0122)
DEFAULT_ZOOM = 18
ROUTE_WEIGHT = 8

logger = logging.getLogger(__name__)


class RouteLegend(folium.MacroElement):
    """Legend listing each route's label in its display color."""

    def __init__(self, entries: List[Tuple[str, str]]):
        super().__init__()
        self.entries = [(html.escape(label), color) for label, color in entries]

        self._template = Template(
            """
        {% macro html(this, kwargs) %}
        <div id="route-legend" style="
            position: fixed;
            bottom: 50px;
            left: 50px;
            width: 200px;
            max-height: 250px;
            background-color: white;
            border: 2px solid grey;
            z-index: 9999;
            font-size: 13px;
            padding: 12px;
            font-family: Arial, sans-serif;
            border-radius: 5px;
            box-shadow: 0 2px 5px rgba(0,0,0,0.2);
            overflow-y: auto;
            box-sizing: border-box;
        ">
            <b>Routes</b><br>
            {% for label, color in this.entries %}
            <div style="margin: 4px 0; line-height: 1.3;">
                <span style="color: {{ color }}; font-weight: bold; font-size: 18px;">—</span>
                {{ label }}
            </div>
            {% endfor %}
        </div>
        {% endmacro %}
        """
        )


def _combined_bbox(routes: Sequence[Route]) -> Optional[Tuple[float, float, float, float]]:
    """Bounding box (south, west, north, east) over all non-empty routes."""
    boxes = [route.get_bbox() for route in routes if len(route) > 0]
    if not boxes:
        return None
    return (
        min(box[0] for box in boxes),
        min(box[1] for box in boxes),
        max(box[2] for box in boxes),
        max(box[3] for box in boxes),
    )


def _add_route(route_map: folium.Map, route: Route, label: str) -> None:
    """Draw one route as a polyline with start and end markers."""
    coordinates = [point.as_latlon() for point in route]

    folium.PolyLine(
        coordinates,
        color=route.color,
        weight=ROUTE_WEIGHT,
        opacity=0.8,
        popup=f"{label} ({len(route)} points)",
        z_index=1,
    ).add_to(route_map)

    folium.Marker(
        route[0].as_latlon(),
        popup=f"{label}: start",
        icon=folium.Icon(color="green", icon="play"),
    ).add_to(route_map)

    folium.Marker(
        route[-1].as_latlon(),
        popup=f"{label}: end",
        icon=folium.Icon(color="red", icon="stop"),
    ).add_to(route_map)


def create_route_map(
    routes: Sequence[Route],
    output_filename: str,
    active_route: Optional[Route] = None,
) -> None:
    """
    Create an interactive map showing the stored routes, save as HTML.

    Args:
        routes: Stored routes in display order; labels follow their position
        output_filename: Path where HTML map file should be saved
        active_route: Route still being recorded, drawn with a marker on its
            latest point
    """
    shown = [route for route in routes if len(route) > 0]
    if active_route is not None and len(active_route) > 0:
        shown.append(active_route)

    bbox = _combined_bbox(shown)
    if bbox is None:
        center_lat, center_lon = DEFAULT_LOCATION
        logger.debug("No route points to show, using default location")
    else:
        south, west, north, east = bbox
        center_lat = (south + north) / 2
        center_lon = (west + east) / 2

    logger.debug(f"Creating map centered at ({center_lat:.4f}, {center_lon:.4f})")

    route_map = folium.Map(
        location=[center_lat, center_lon],
        zoom_start=DEFAULT_ZOOM,
        tiles=None,
    )

    # Add Standard layer (CartoDB positron)
    folium.TileLayer(
        tiles="CartoDB positron",
        attr=(
            "&copy; <a href='https://www.openstreetmap.org/copyright'>OpenStreetMap</a> "
            "contributors &copy; <a href='https://carto.com/attributions'>CARTO</a>"
        ),
        name="Standard",
        control=True,
        show=True,
    ).add_to(route_map)

    # Add Satellite layer (Esri World Imagery)
    folium.TileLayer(
        tiles="https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
        attr=(
            "Tiles &copy; Esri &mdash; Source: Esri, i-cubed, USDA, USGS, AEX, GeoEye, "
            "Getmapping, Aerogrid, IGN, IGP, UPR-EGP, and the GIS User Community"
        ),
        name="Satellite",
        control=True,
        show=False,
    ).add_to(route_map)

    folium.LayerControl().add_to(route_map)

    legend_entries = []
    for index, route in enumerate(routes):
        label = RouteStore.label(index)
        legend_entries.append((label, route.color))
        if len(route) > 0:
            _add_route(route_map, route, label)

    if active_route is not None:
        legend_entries.append(("Recording", active_route.color))
        if len(active_route) > 0:
            _add_route(route_map, active_route, "Recording")
            folium.Marker(
                active_route[-1].as_latlon(),
                popup="Current position",
                icon=folium.Icon(color="blue", icon="user"),
            ).add_to(route_map)

    if legend_entries:
        route_map.add_child(RouteLegend(legend_entries))

    if bbox is not None:
        south, west, north, east = bbox
        route_map.fit_bounds([[south, west], [north, east]])

    route_map.save(output_filename)

    logger.debug(f"Map saved to {output_filename} with {len(shown)} routes")
