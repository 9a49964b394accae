import pytest
import subprocess
import sys
from pathlib import Path
from typing import Dict, List

FIXTURES = Path(__file__).parent / "fixtures"


def run_flighttrack_cli(gpx_file: Path, *extra_args: str) -> "FlightTrackTestResult":
    """Run the flighttrack CLI in a subprocess with metrics enabled."""
    cmd = [
        sys.executable,
        "-m",
        "flighttrack.cli",
        str(gpx_file),
        "--log-level",
        "DEBUG",
        "--metrics",
        *extra_args,
    ]

    result = subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        cwd=Path(__file__).parent.parent,  # Run from project root
    )

    if result.returncode != 0:
        print(f"CLI failed for {gpx_file}")
        print(f"Command: {' '.join(cmd)}")
        print(f"Exit code: {result.returncode}")
        print(f"STDERR: {result.stderr}")
        print(f"STDOUT: {result.stdout}")

    return FlightTrackTestResult(result.stdout, result.stderr, result.returncode)


class FlightTrackTestResult:
    """Parse and validate flighttrack CLI output"""

    def __init__(self, stdout: str, stderr: str, exit_code: int):
        self.stdout = stdout
        self.stderr = stderr
        self.exit_code = exit_code

        # One dict of metrics per track, in file order
        self.track_metrics: List[Dict[str, str]] = []

        self._parse_output()

    def _parse_output(self):
        """Extract metrics from structured debug output"""
        current = None
        for line in self.stderr.split("\n"):
            # Strip the "time - logger - level - " prefix
            message = line.split(" - ")[-1].strip()
            if message == "=== FLIGHTTRACK_METRICS ===":
                current = {}
            elif message == "=== END_FLIGHTTRACK_METRICS ===":
                if current is not None:
                    self.track_metrics.append(current)
                current = None
            elif current is not None and "=" in message:
                key, value = message.split("=", 1)
                current[key] = value

    def metric(self, name: str, track_index: int = 0) -> float:
        return float(self.track_metrics[track_index][name])


class TestParaglidingFlight:

    @pytest.fixture(scope="class")
    def result(self) -> FlightTrackTestResult:
        return run_flighttrack_cli(FIXTURES / "paragliding.gpx")

    def test_exit_code(self, result: FlightTrackTestResult):
        assert result.exit_code == 0, f"CLI failed: {result.stderr}"

    def test_metrics(self, result: FlightTrackTestResult):
        assert len(result.track_metrics) == 1
        assert result.track_metrics[0]["track_name"] == "Hochries flight"
        assert result.metric("track_points") == 3
        assert result.metric("duration_s") == pytest.approx(20.0)
        assert result.metric("height_gain_m") == pytest.approx(50.0)
        assert result.metric("height_loss_m") == pytest.approx(30.0)
        assert result.metric("max_height_m") == pytest.approx(1050.0)
        assert result.metric("min_height_m") == pytest.approx(1000.0)
        assert result.metric("max_climb_rate_ms") == pytest.approx(5.0)
        assert result.metric("max_sink_rate_ms") == pytest.approx(-3.0)

    def test_length_matches_point_spacing(self, result: FlightTrackTestResult):
        # two steps of 0.001 degrees latitude
        assert result.metric("length_m") == pytest.approx(222.64, abs=0.05)

    def test_stdout_summary(self, result: FlightTrackTestResult):
        assert "Hochries flight" in result.stdout
        assert "0.22 km" in result.stdout


class TestXCTracerFlight:

    @pytest.fixture(scope="class")
    def result(self) -> FlightTrackTestResult:
        return run_flighttrack_cli(FIXTURES / "xctracer.gpx", "--window", "0.5")

    def test_point_times_generated(self, result: FlightTrackTestResult):
        assert result.exit_code == 0, f"CLI failed: {result.stderr}"
        assert result.metric("duration_s") == pytest.approx(1.0)
        # 0.4 m climb every 0.2 s
        assert result.metric("max_climb_rate_ms") == pytest.approx(2.0, abs=0.01)

    def test_window_trimmed(self, result: FlightTrackTestResult):
        # only the samples at 0.6, 0.8 and 1.0 s are within 0.5 s of the last one
        assert "window samples     : 3 in last 0.5 s" in result.stdout


class TestHikeRoute:

    @pytest.fixture(scope="class")
    def result(self) -> FlightTrackTestResult:
        return run_flighttrack_cli(FIXTURES / "hike_route.gpx")

    def test_route_loaded(self, result: FlightTrackTestResult):
        assert result.exit_code == 0, f"CLI failed: {result.stderr}"
        assert result.track_metrics[0]["track_name"] == "Hut to summit"
        assert result.metric("height_gain_m") == pytest.approx(300.0)
        assert result.metric("duration_s") == pytest.approx(0.0)


def test_missing_file_exit_code(tmp_path):
    result = run_flighttrack_cli(tmp_path / "missing.gpx")

    assert result.exit_code == 1
    assert "GPX file not found" in result.stderr
    assert result.track_metrics == []
