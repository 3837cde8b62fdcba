#!/usr/bin/env python3
"""
Tests for the command line front end.
"""

import os
import shutil
from pathlib import Path
from unittest.mock import patch

import pytest

from cartracker.cli import create_argument_parser, create_sampler, import_route, main
from cartracker.config import TrackerConfig
from cartracker.geometry import GeoPoint
from cartracker.gpx import read_route, serialize
from cartracker.location import (
    GpxReplaySampler,
    IpGeolocationSampler,
    StaticLocationSampler,
)
from cartracker.route import Route
from cartracker.session import TrackingSession

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def no_root_handlers():
    """setup_logging() adds a root handler per call; drop them after each test."""
    import logging

    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)


def _save_route(directory: Path, name: str, points):
    (directory / name).write_text(serialize(Route(points)), encoding="utf-8")


def test_config_from_args(tmp_path):
    parser = create_argument_parser()
    args = parser.parse_args(
        ["--dir", str(tmp_path), "record", "--interval", "2", "--provider", "replay"]
    )
    config = TrackerConfig.from_args(args)

    assert config.export_dir == str(tmp_path)
    assert config.interval == 2.0
    assert config.provider == "replay"
    assert config.duration is None
    assert config.creator == "CarTrackerApp"


def test_create_sampler(tmp_path):
    assert isinstance(create_sampler(TrackerConfig()), IpGeolocationSampler)

    with pytest.raises(ValueError):
        create_sampler(TrackerConfig(provider="replay"))

    replay = create_sampler(
        TrackerConfig(provider="replay", replay_file=str(FIXTURES / "foreign.gpx"))
    )
    assert isinstance(replay, GpxReplaySampler)
    assert replay.remaining == 3


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 1
    assert "usage" in capsys.readouterr().out


def test_record_with_replay(tmp_path, capsys):
    main(
        [
            "--dir",
            str(tmp_path),
            "record",
            "--provider",
            "replay",
            "--replay",
            str(FIXTURES / "foreign.gpx"),
            "--interval",
            "0.001",
        ]
    )

    files = os.listdir(tmp_path)
    assert len(files) == 1
    assert files[0].startswith("Route_")
    recorded = read_route(str(tmp_path / files[0]))
    assert recorded.points == read_route(str(FIXTURES / "foreign.gpx")).points
    assert f"Route saved to {tmp_path / files[0]}" in capsys.readouterr().out


def test_list(tmp_path, capsys):
    _save_route(tmp_path, "a.gpx", [GeoPoint(1.0, 1.0)])
    _save_route(tmp_path, "b.gpx", [GeoPoint(1.0, 1.0), GeoPoint(2.0, 2.0)])

    main(["--dir", str(tmp_path), "list"])

    out = capsys.readouterr().out
    assert "Route 1: 1 points (a.gpx)" in out
    assert "Route 2: 2 points (b.gpx)" in out


def test_list_empty(tmp_path, capsys):
    main(["--dir", str(tmp_path / "routes"), "list"])
    assert "No saved routes" in capsys.readouterr().out


def test_import(tmp_path):
    main(["--dir", str(tmp_path), "import", str(FIXTURES / "foreign.gpx")])
    assert (tmp_path / "foreign.gpx").exists()


def test_import_malformed_exits(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["--dir", str(tmp_path), "import", str(FIXTURES / "broken.gpx")])
    assert excinfo.value.code == 1
    assert os.listdir(tmp_path) == []


def test_import_name_clash_exits(tmp_path):
    shutil.copy(FIXTURES / "broken.gpx", tmp_path / "foreign.gpx")
    with pytest.raises(SystemExit) as excinfo:
        main(["--dir", str(tmp_path), "import", str(FIXTURES / "foreign.gpx")])
    assert excinfo.value.code == 1


def test_import_name_clash_leaves_store_unchanged(tmp_path):
    saved = tmp_path / "saved"
    saved.mkdir()
    shutil.copy(FIXTURES / "foreign.gpx", saved / "foreign.gpx")
    messages = []
    session = TrackingSession(
        StaticLocationSampler(None), str(saved), notify=messages.append
    )
    session.open()

    with pytest.raises(FileExistsError):
        import_route(session, str(FIXTURES / "foreign.gpx"))

    assert len(session.routes) == 1
    assert messages == []


def test_remove(tmp_path):
    _save_route(tmp_path, "a.gpx", [GeoPoint(1.0, 1.0)])
    _save_route(tmp_path, "b.gpx", [GeoPoint(2.0, 2.0)])

    main(["--dir", str(tmp_path), "remove", "1"])

    assert sorted(os.listdir(tmp_path)) == ["b.gpx"]


def test_remove_unknown_number_exits(tmp_path):
    _save_route(tmp_path, "a.gpx", [GeoPoint(1.0, 1.0)])
    with pytest.raises(SystemExit) as excinfo:
        main(["--dir", str(tmp_path), "remove", "2"])
    assert excinfo.value.code == 1
    assert os.listdir(tmp_path) == ["a.gpx"]


@patch("cartracker.cli.open_file_in_browser")
def test_map(mock_open, tmp_path):
    _save_route(tmp_path, "a.gpx", [GeoPoint(52.0, 21.0), GeoPoint(52.1, 21.1)])
    output = tmp_path / "out.html"

    main(["--dir", str(tmp_path), "map", "--output", str(output), "--no-open"])

    assert output.exists()
    mock_open.assert_not_called()


@patch("cartracker.cli.open_file_in_browser")
def test_map_default_output_opens_browser(mock_open, tmp_path):
    main(["--dir", str(tmp_path), "map"])

    expected = os.path.join(str(tmp_path), "routes map.html")
    assert os.path.exists(expected)
    mock_open.assert_called_once_with(expected)
