import unittest
from unittest.mock import patch, MagicMock

from cartracker.geometry import GeoPoint
from cartracker.route import Route
from cartracker.visualization import DEFAULT_LOCATION, RouteLegend, create_route_map


class TestCreateRouteMap(unittest.TestCase):

    @patch('cartracker.visualization.folium.LayerControl')
    @patch('cartracker.visualization.folium.TileLayer')
    @patch('cartracker.visualization.folium.Map')
    @patch('cartracker.visualization.RouteLegend')
    @patch('cartracker.visualization.folium.PolyLine')
    @patch('cartracker.visualization.folium.Marker')
    def test_routes_are_drawn_in_their_colors(
        self,
        mock_folium_marker,
        mock_folium_polyline,
        mock_route_legend,
        mock_folium_map,
        mock_folium_tilelayer,
        mock_folium_layercontrol
    ):
        mock_map_instance = MagicMock(name="map_instance")
        mock_folium_map.return_value = mock_map_instance

        routes = [
            Route([GeoPoint(52.0, 21.0), GeoPoint(52.1, 21.1)], color="#aa5050"),
            Route(color="#50aa50"),  # empty routes are listed but not drawn
            Route([GeoPoint(52.2, 20.9)], color="#5050aa"),
        ]

        create_route_map(routes, "test_map.html")

        _, map_kwargs = mock_folium_map.call_args
        self.assertIsNone(map_kwargs.get('tiles'))
        self.assertEqual(mock_folium_tilelayer.call_count, 2)
        mock_folium_layercontrol.assert_called_once_with()

        self.assertEqual(mock_folium_polyline.call_count, 2)
        first_args, first_kwargs = mock_folium_polyline.call_args_list[0]
        self.assertEqual(first_args[0], [[52.0, 21.0], [52.1, 21.1]])
        self.assertEqual(first_kwargs['color'], "#aa5050")
        _, second_kwargs = mock_folium_polyline.call_args_list[1]
        self.assertEqual(second_kwargs['color'], "#5050aa")

        # Start and end markers for each drawn route
        self.assertEqual(mock_folium_marker.call_count, 4)

        mock_route_legend.assert_called_once_with(
            [("Route 1", "#aa5050"), ("Route 2", "#50aa50"), ("Route 3", "#5050aa")]
        )
        mock_map_instance.fit_bounds.assert_called_once_with([[52.0, 20.9], [52.2, 21.1]])
        mock_map_instance.save.assert_called_once_with("test_map.html")

    @patch('cartracker.visualization.folium.Map')
    @patch('cartracker.visualization.folium.PolyLine')
    def test_empty_map_uses_default_location(self, mock_folium_polyline, mock_folium_map):
        mock_map_instance = MagicMock(name="map_instance")
        mock_folium_map.return_value = mock_map_instance

        create_route_map([], "empty.html")

        _, map_kwargs = mock_folium_map.call_args
        self.assertEqual(map_kwargs['location'], list(DEFAULT_LOCATION))
        mock_folium_polyline.assert_not_called()
        mock_map_instance.fit_bounds.assert_not_called()
        mock_map_instance.save.assert_called_once_with("empty.html")

    @patch('cartracker.visualization.folium.Map')
    @patch('cartracker.visualization.folium.PolyLine')
    @patch('cartracker.visualization.folium.Marker')
    def test_active_route_gets_position_marker(
        self, mock_folium_marker, mock_folium_polyline, mock_folium_map
    ):
        active = Route([GeoPoint(52.0, 21.0), GeoPoint(52.05, 21.02)])

        create_route_map([], "active.html", active_route=active)

        mock_folium_polyline.assert_called_once()
        # start, end and current position
        self.assertEqual(mock_folium_marker.call_count, 3)
        current_args, current_kwargs = mock_folium_marker.call_args_list[-1]
        self.assertEqual(current_args[0], [52.05, 21.02])
        self.assertEqual(current_kwargs['popup'], "Current position")


def test_legend_escapes_labels():
    legend = RouteLegend([("<b>Route 1</b>", "#ffffff")])
    assert legend.entries == [("&lt;b&gt;Route 1&lt;/b&gt;", "#ffffff")]


def test_map_is_written(tmp_path):
    output = tmp_path / "routes map.html"
    routes = [Route([GeoPoint(52.0, 21.0), GeoPoint(52.1, 21.1)], color="#aa5050")]

    create_route_map(routes, str(output))

    content = output.read_text(encoding="utf-8")
    assert "#aa5050" in content
    assert "Route 1" in content


if __name__ == '__main__':
    unittest.main()
