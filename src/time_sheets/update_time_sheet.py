import argparse
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger
from rich import print

from leave_sync.modules.leave_cache import CACHE_FILE_NAME, holidays_file_name, load_holidays, load_leave_data
from shared_modules.cli import add_config_argument, add_period_arguments, resolve_period, run_cli
from shared_modules.config import Config
from time_sheets.modules.time_sheet_factory import TimeSheetFactory
from time_sheets.modules.time_sheet_processor import TimeSheetProcessor


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Write cached leave data into a copy of the time sheet template.")
    add_period_arguments(parser)
    add_config_argument(parser)
    parser.add_argument("--template", type=Path, default=None, help="Template workbook (default: time_sheet.template)")
    parser.add_argument("--cache", type=Path, default=None, help=f"Leave cache (default: <data_path>/{CACHE_FILE_NAME})")
    parser.add_argument("--output", type=Path, default=None, help="Output directory (default: output_path)")
    return parser.parse_args(argv)


def _main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = Config.from_cli(args.config)
    month, year = resolve_period(args, config)

    cache = args.cache or config.data_dir / CACHE_FILE_NAME
    leave_data = load_leave_data(cache, month, year)
    holidays = load_holidays(cache.parent / holidays_file_name(month, year))

    processor = TimeSheetProcessor(config, TimeSheetFactory(config))
    logger.info(f"Updating time sheet for {month}/{year} with proration '{processor.strategy.name}'.")
    stats = processor.run(leave_data, month, year, holidays, template_file=args.template, output_dir=args.output)

    print(f"Employees matched: [bold]{stats.matched_employees}[/bold]")
    print(f"Leave cells updated: [bold]{stats.updated_cells}[/bold]")
    if stats.not_found:
        print(f"[yellow]Not found in sheet ({len(stats.not_found)}):[/yellow] {', '.join(stats.not_found)}")
    print(f"Saved to: {stats.output_file}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    return run_cli(_main, argv)


if __name__ == "__main__":
    sys.exit(main())
