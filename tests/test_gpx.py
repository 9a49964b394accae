import io
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from gpxpy.gpx import GPXException

from flighttrack.gpx import load_gpx_tracks, parse_gpx_tracks

FIXTURES = Path(__file__).parent / "fixtures"


def test_parse_flight_track():
    tracks = load_gpx_tracks(str(FIXTURES / "paragliding.gpx"))

    assert len(tracks) == 1
    track = tracks[0]
    assert track.name == "Hochries flight"
    assert track.description == "Short test flight"
    assert track.is_flight_track

    # both segments end up in one track
    assert len(track) == 3
    assert track[0].time == datetime(2024, 6, 1, 10, 0, 0, tzinfo=timezone.utc)

    statistics = track.statistics
    assert statistics.height_gain_in_meters == pytest.approx(50.0)
    assert statistics.height_loss_in_meters == pytest.approx(30.0)
    assert statistics.duration == timedelta(seconds=20)
    assert statistics.max_climb_rate == pytest.approx(5.0)


def test_parse_route_when_no_tracks():
    tracks = load_gpx_tracks(str(FIXTURES / "hike_route.gpx"))

    assert len(tracks) == 1
    assert tracks[0].name == "Hut to summit"
    assert not tracks[0].is_flight_track
    assert [p.altitude for p in tracks[0]] == [1200.0, 1350.0, 1500.0]
    assert tracks[0].statistics.height_gain_in_meters == pytest.approx(300.0)


def test_parse_track_without_times():
    tracks = load_gpx_tracks(str(FIXTURES / "xctracer.gpx"))

    assert len(tracks) == 1
    assert all(p.time is None for p in tracks[0])
    assert tracks[0].statistics.duration == timedelta(0)


def test_parse_multiple_tracks():
    gpx_text = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <trk><name>First</name><trkseg><trkpt lat="47.0" lon="11.0"/></trkseg></trk>
  <trk><type>Hiking</type><trkseg><trkpt lat="47.1" lon="11.1"/><trkpt lat="47.2" lon="11.2"/></trkseg></trk>
</gpx>"""
    tracks = parse_gpx_tracks(io.StringIO(gpx_text))

    assert [len(t) for t in tracks] == [1, 2]
    assert tracks[0].name == "First"
    assert tracks[1].name == ""
    assert not tracks[1].is_flight_track
    assert tracks[0][0].altitude is None


def test_parse_empty_gpx(caplog):
    gpx_text = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
</gpx>"""

    with caplog.at_level(logging.WARNING, logger="flighttrack.gpx"):
        tracks = parse_gpx_tracks(io.StringIO(gpx_text))

    assert tracks == []
    assert "No tracks or routes found" in caplog.text


def test_parse_invalid_gpx():
    with pytest.raises(GPXException):
        parse_gpx_tracks(io.StringIO("this is not gpx <<<"))


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_gpx_tracks(str(tmp_path / "missing.gpx"))


def test_load_from_stdin(monkeypatch):
    with open(FIXTURES / "paragliding.gpx", encoding="utf-8") as f:
        monkeypatch.setattr("sys.stdin", io.StringIO(f.read()))

    tracks = load_gpx_tracks("-")

    assert len(tracks) == 1
    assert len(tracks[0]) == 3
