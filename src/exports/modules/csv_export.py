"""
Flat tables of the cached leave data, shared by the CSV files and the
Google Sheets push.
"""

from datetime import date
from pathlib import Path
from typing import List, Tuple

import pandas as pd
from loguru import logger

from pydantic_models.data.leave_day import EmployeeLeaveData
from shared_modules.utils import ensure_dir, month_label

REQUEST_COLUMNS = ["Employee ID", "Employee Name", "Date", "Leave Type", "Half Day"]
BALANCE_COLUMNS = ["Employee ID", "Employee Name", "Leave Type", "Entitlement", "Taken", "Remaining"]


def csv_file_names(month: int, year: int) -> Tuple[str, str]:
    label = month_label(month, year)
    return f"leave_requests_{label}.csv", f"leave_balances_{label}.csv"


def leave_requests_frame(leave_data: List[EmployeeLeaveData], month: int, year: int) -> pd.DataFrame:
    """One row per leave day, dates as YYYY-MM-DD."""
    rows = [
        {
            "Employee ID": record.employee_id or "",
            "Employee Name": record.employee_name,
            "Date": date(year, month, leave.date).isoformat(),
            "Leave Type": leave.leave_type or "",
            "Half Day": "Yes" if leave.is_half_day else "No",
        }
        for record in leave_data
        for leave in record.leave_requests
    ]
    return pd.DataFrame(rows, columns=REQUEST_COLUMNS)


def leave_balances_frame(leave_data: List[EmployeeLeaveData]) -> pd.DataFrame:
    rows = [
        {
            "Employee ID": record.employee_id or "",
            "Employee Name": record.employee_name,
            "Leave Type": balance.leave_type or "",
            "Entitlement": balance.entitlement,
            "Taken": balance.taken,
            "Remaining": balance.remaining,
        }
        for record in leave_data
        for balance in record.leave_balances
    ]
    return pd.DataFrame(rows, columns=BALANCE_COLUMNS)


def write_csv(df: pd.DataFrame, path: Path) -> Path:
    ensure_dir(path.parent)
    df.to_csv(path, index=False, encoding="utf-8")
    logger.info(f"{len(df)} rows written to {path}")
    return path


def export_csv(leave_data: List[EmployeeLeaveData], month: int, year: int, output_dir: Path) -> Tuple[Path, Path]:
    """
    Writes leave_requests_YYYY-MM.csv and leave_balances_YYYY-MM.csv.

    Returns:
        Tuple of (requests file, balances file).
    """
    requests_name, balances_name = csv_file_names(month, year)
    return (
        write_csv(leave_requests_frame(leave_data, month, year), output_dir / requests_name),
        write_csv(leave_balances_frame(leave_data), output_dir / balances_name),
    )
