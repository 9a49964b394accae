import argparse
from dataclasses import dataclass


@dataclass
class FlightTrackConfig:
    """Configuration for the flighttrack CLI."""

    log_level: str = "WARNING"
    metrics: bool = False
    window_seconds: float = 60.0

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "FlightTrackConfig":
        return cls(
            log_level=args.log_level,
            metrics=args.metrics,
            window_seconds=args.window,
        )
