"""
Argument helpers shared by the command line entry points.
"""

import argparse
from typing import Callable, List, Optional, Tuple

from loguru import logger

from shared_modules.config import Config


def add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the YAML config (default: $LEAVE_SYNC_CONFIG or .config/leave_sync_config.yaml)",
    )


def add_period_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--month", type=int, default=None, help="Target month, 1-12 (default: period.month)")
    parser.add_argument("--year", type=int, default=None, help="Target year (default: period.year)")


def resolve_period(args: argparse.Namespace, config: Config) -> Tuple[int, int]:
    month = args.month if args.month is not None else config.period.month
    year = args.year if args.year is not None else config.period.year
    if not 1 <= month <= 12:
        raise ValueError(f"--month must be between 1 and 12, got {month}")
    return month, year


def run_cli(main: Callable[[Optional[List[str]]], int], argv: Optional[List[str]] = None) -> int:
    """
    Runs a CLI main and turns any unhandled exception into exit code 1.
    """
    try:
        return main(argv)
    except KeyboardInterrupt:
        logger.warning("Interrupted.")
        return 130
    except Exception as e:
        logger.error(f"Error: {e}")
        return 1
