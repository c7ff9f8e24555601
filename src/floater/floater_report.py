import argparse
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger
from rich import print

from floater.modules.allocation_loader import AllocationTable, load_capacity_csv, load_project_allocations
from floater.modules.floater_calculator import calculate_floaters
from floater.modules.floater_output import write_floater_outputs
from leave_sync.modules.leave_cache import holidays_file_name, load_holidays
from leave_sync.modules.leave_service import LeaveService
from omnihr.client_factory import build_client, build_directory
from pydantic_models.data.leave_day import Holiday
from shared_modules.cli import add_config_argument, add_period_arguments, resolve_period, run_cli
from shared_modules.config import Config
from shared_modules.filters import FilterConfig


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Calculate the monthly floater percentage and idle cost per employee.")
    add_period_arguments(parser)
    add_config_argument(parser)
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--allocations", type=Path, default=None, help="Project workbook with allocated hours")
    source.add_argument("--capacity", type=Path, default=None, help="Capacity CSV with employee_id, free_hours")
    parser.add_argument("--output", type=Path, default=None, help="Output directory (default: output_path)")
    return parser.parse_args(argv)


def load_allocations(args: argparse.Namespace, config: Config) -> Optional[AllocationTable]:
    if args.allocations:
        return load_project_allocations(args.allocations, config.time_sheet)
    if args.capacity:
        return load_capacity_csv(args.capacity)
    logger.warning("No --allocations or --capacity given, every employee counts as 100 % floater.")
    return None


def _main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = Config.from_cli(args.config)
    month, year = resolve_period(args, config)
    allocations = load_allocations(args, config)

    client = build_client(config)
    directory = build_directory(config, client)
    employees = directory.fetch_employees(with_jobs=True, with_terminations=True)

    holidays_path = config.data_dir / holidays_file_name(month, year)
    holidays: List[Holiday]
    if holidays_path.exists():
        holidays = load_holidays(holidays_path)
    else:
        holidays = LeaveService(client, directory).fetch_holidays(employees, month, year)

    floater = config.floater
    records = calculate_floaters(
        employees,
        month,
        year,
        allocations=allocations,
        holidays={holiday.day for holiday in holidays},
        hours_per_day=floater.hours_per_day,
        average_salary=floater.average_salary,
    )
    filter_config = FilterConfig(
        locale=floater.locale or "en_US",
        currency=floater.currency or "USD",
        currency_format=floater.currency_format,
    )
    csv_path, md_path = write_floater_outputs(records, month, year, args.output or config.output_dir, filter_config)

    print(f"Employees: [bold]{len(records)}[/bold], leavers: {sum(1 for r in records if r.is_leaver)}")
    print(f"Estimated idle cost: [bold]{sum(r.estimated_cost for r in records)}[/bold] {filter_config.currency}")
    print(f"Written: {csv_path}, {md_path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    return run_cli(_main, argv)


if __name__ == "__main__":
    sys.exit(main())
