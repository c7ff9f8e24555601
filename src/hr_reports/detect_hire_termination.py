import argparse
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger
from rich import print

from hr_reports.modules.hire_termination import REPORT_FILE_NAME, detect_hire_and_termination, render_markdown
from omnihr.client_factory import build_client, build_directory
from shared_modules.cli import add_config_argument, run_cli
from shared_modules.config import Config
from shared_modules.utils import ensure_dir


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Report recent hires and terminations as Markdown.")
    add_config_argument(parser)
    parser.add_argument("--recent-days", type=int, default=30, help="Window for recent hires/terminations (default: 30)")
    parser.add_argument("--output", type=Path, default=None, help=f"Report file (default: <output_path>/{REPORT_FILE_NAME})")
    return parser.parse_args(argv)


def _main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.recent_days < 0:
        raise ValueError("--recent-days must not be negative")
    config = Config.from_cli(args.config)

    client = build_client(config)
    logger.info("Detecting hire and termination employees...")
    employees = build_directory(config, client).fetch_employees(with_jobs=False, with_terminations=True)
    result = detect_hire_and_termination(employees, recent_days=args.recent_days)

    output = args.output or config.output_dir / REPORT_FILE_NAME
    ensure_dir(output.parent)
    output.write_text(render_markdown(result, excluded=config.directory.excluded_employees), encoding="utf-8")

    print("Summary:")
    print(f"  Total employees: {result.total_employees}")
    print(f"  With hire date: {len(result.with_hire_date)}")
    print(f"  With termination date: {len(result.with_termination_date)}")
    print(f"  Recent hires ({result.recent_days} days): {len(result.recent_hires)}")
    print(f"  Recent terminations ({result.recent_days} days): {len(result.recent_terminations)}")
    print(f"Report written to: {output}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    return run_cli(_main, argv)


if __name__ == "__main__":
    sys.exit(main())
