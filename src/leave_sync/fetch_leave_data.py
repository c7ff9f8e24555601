import argparse
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger
from rich import print

from leave_sync.modules.leave_cache import CACHE_FILE_NAME, holidays_file_name, save_holidays, save_leave_data
from leave_sync.modules.leave_service import LeaveService
from omnihr.client_factory import build_client, build_directory
from shared_modules.cli import add_config_argument, add_period_arguments, resolve_period, run_cli
from shared_modules.config import Config


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch leave balances and leave days from OmniHR into the JSON cache.")
    add_period_arguments(parser)
    add_config_argument(parser)
    parser.add_argument("--output", type=Path, default=None, help=f"Cache file (default: <data_path>/{CACHE_FILE_NAME})")
    return parser.parse_args(argv)


def _main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = Config.from_cli(args.config)
    month, year = resolve_period(args, config)

    client = build_client(config)
    service = LeaveService(client, build_directory(config, client))

    logger.info(f"Fetching leave data with requests for {month}/{year}.")
    leave_data = service.get_all_leave_data(
        month,
        year,
        on_progress=lambda done, total, name: logger.info(f"Progress: {done}/{total} - {name}"),
    )

    output = args.output or config.data_dir / CACHE_FILE_NAME
    save_leave_data(leave_data, output, month, year)
    save_holidays(service.holidays, output.parent / holidays_file_name(month, year))

    with_requests = [record for record in leave_data if record.leave_requests]
    print(f"Total employees processed: [bold]{len(leave_data)}[/bold]")
    print(f"Employees with leave in {month}/{year}: [bold]{len(with_requests)}[/bold]")
    print(f"Data saved to: {output}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    return run_cli(_main, argv)


if __name__ == "__main__":
    sys.exit(main())
