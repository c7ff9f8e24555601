import argparse
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger
from rich import print

from exports.modules.csv_export import export_csv, leave_balances_frame, leave_requests_frame
from exports.modules.google_sheets_exporter import GoogleSheetsExporter
from leave_sync.modules.leave_cache import CACHE_FILE_NAME, load_leave_data, save_leave_data
from leave_sync.modules.leave_service import LeaveService
from omnihr.client_factory import build_client, build_directory
from omnihr.errors import ConfigurationError, StaleCacheError
from pydantic_models.data.leave_day import EmployeeLeaveData
from shared_modules.cli import add_config_argument, add_period_arguments, resolve_period, run_cli
from shared_modules.config import Config


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export leave requests and balances to CSV and/or Google Sheets.")
    add_period_arguments(parser)
    add_config_argument(parser)
    parser.add_argument("--output", type=Path, default=None, help="Directory for the CSV files (default: output_path)")
    parser.add_argument("--credentials", type=Path, default=None, help="Google service account JSON")
    parser.add_argument("--cache", action="store_true", help="Use the cached leave data instead of calling the API")
    parser.add_argument("--push", action="store_true", help="Push the tables to Google Sheets")
    parser.add_argument("--csv-only", action="store_true", help="Write CSV files even when pushing")
    return parser.parse_args(argv)


def load_or_fetch(config: Config, month: int, year: int, use_cache: bool) -> List[EmployeeLeaveData]:
    """
    Reads the JSON cache when asked to and it exists for the same month;
    otherwise fetches fresh data and refreshes the cache.
    """
    cache_file = config.data_dir / CACHE_FILE_NAME
    if use_cache and cache_file.exists():
        try:
            leave_data = load_leave_data(cache_file, month, year)
        except StaleCacheError as exc:
            logger.warning(f"{exc} Fetching fresh data.")
        else:
            logger.info(f"Using cached data from {cache_file}")
            return leave_data

    client = build_client(config)
    service = LeaveService(client, build_directory(config, client))
    leave_data = service.get_all_leave_data(
        month,
        year,
        on_progress=lambda done, total, _name: logger.info(f"Progress: {done}/{total} employees"),
    )
    save_leave_data(leave_data, cache_file, month, year)
    return leave_data


def _main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = Config.from_cli(args.config)
    month, year = resolve_period(args, config)
    print(f"Exporting leave data for [bold]{month}/{year}[/bold]")

    leave_data = load_or_fetch(config, month, year, args.cache)

    if not args.push or args.csv_only:
        requests_file, balances_file = export_csv(leave_data, month, year, args.output or config.output_dir)
        print("Files created:")
        print(f"  - {requests_file}")
        print(f"  - {balances_file}")

    if args.push:
        sheets = config.google_sheets
        if not sheets.spreadsheet_id:
            raise ConfigurationError("google_sheets.spreadsheet_id is required for --push")
        credentials = args.credentials or config.prj_root / sheets.credentials_file
        exporter = GoogleSheetsExporter(credentials)
        exporter.upload_frame(sheets.spreadsheet_id, sheets.leave_requests_sheet, leave_requests_frame(leave_data, month, year))
        exporter.upload_frame(sheets.spreadsheet_id, sheets.leave_balances_sheet, leave_balances_frame(leave_data))
        print(f"Data pushed to: https://docs.google.com/spreadsheets/d/{sheets.spreadsheet_id}")

    print("[green]Export complete.[/green]")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    return run_cli(_main, argv)


if __name__ == "__main__":
    sys.exit(main())
