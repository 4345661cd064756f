"""Command-line argument parser for the CareScape map engine."""

import argparse
from typing import Any, Optional

from carescape.constants import COLOR_TYPE_VALUES


def non_negative_float(value: str) -> float:
    """argparse type for distances: a finite number that is zero or greater."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not a number")
    if not number >= 0 or number == float("inf"):
        raise argparse.ArgumentTypeError(f"{value!r} must be a finite number >= 0")
    return number


def create_argument_parser(
    api_url: str,
    zoom: float,
    log_file: str,
    threshold: Optional[float] = None,
) -> argparse.ArgumentParser:
    """
    Create and configure the CLI argument parser.

    Args:
        api_url: Default URL of the colors endpoint
        zoom: Default viewport zoom level
        log_file: Default log file name
        threshold: Default clustering threshold in degrees (None follows the zoom policy)

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Cluster color records for the map and walk through them in story mode."
    )

    parser.add_argument(
        "--api-url",
        type=str,
        default=api_url,
        help="Colors endpoint to fetch records from when no input file is given",
    )
    parser.add_argument(
        "--zoom",
        type=float,
        default=zoom,
        help="Viewport zoom level used for clustering and scaling",
    )
    parser.add_argument(
        "--threshold",
        type=non_negative_float,
        default=threshold,
        help="Fixed clustering threshold in degrees (overrides the zoom policy)",
    )
    parser.add_argument("--log-file", type=str, default=log_file, help="Path to the log file")

    # Filter panel
    parser.add_argument("--name", type=str, default="", help="Filter by color name")
    parser.add_argument("--material", type=str, default="", help="Filter by material")
    parser.add_argument("--location", type=str, default="", help="Filter by location")
    parser.add_argument(
        "--color-type",
        action="append",
        choices=COLOR_TYPE_VALUES,
        default=None,
        help="Only include this color type (repeatable)",
    )

    parser.add_argument(
        "--story",
        action="store_true",
        help="Print the story mode camera path through the filtered records",
    )

    # Positional arguments
    parser.add_argument(
        "input_file",
        type=str,
        nargs="?",
        default=None,
        help="JSON file of color records (defaults to fetching from --api-url)",
    )

    return parser


def parse_args_with_defaults(
    api_url: str,
    zoom: float,
    log_file: str,
    threshold: Optional[float] = None,
    argv: Optional[list[str]] = None,
) -> Any:
    """
    Create argument parser and parse command-line arguments.

    Returns:
        Parsed command-line arguments
    """
    parser = create_argument_parser(
        api_url=api_url,
        zoom=zoom,
        log_file=log_file,
        threshold=threshold,
    )
    return parser.parse_args(argv)
