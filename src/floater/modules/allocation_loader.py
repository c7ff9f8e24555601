from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

import pandas as pd
from loguru import logger
from openpyxl import load_workbook

from pydantic_models.config.time_sheet_config import TimeSheetConfig
from shared_modules.utils import log_exceptions
from time_sheets.modules.time_sheet_layout import TimeSheetLayout


class AllocationKind(str, Enum):
    ALLOCATED = "allocated"
    FREE = "free"


@dataclass
class AllocationTable:
    """
    Hours per employee, keyed by upper-cased employee code and by
    lower-cased name.
    """
    kind: AllocationKind
    by_id: Dict[str, float] = field(default_factory=dict)
    by_name: Dict[str, float] = field(default_factory=dict)

    def add(self, hours: float, employee_id: Optional[str] = None, employee_name: Optional[str] = None) -> None:
        if employee_id:
            key = employee_id.strip().upper()
            self.by_id[key] = self.by_id.get(key, 0.0) + hours
        elif employee_name:
            key = employee_name.strip().lower()
            self.by_name[key] = self.by_name.get(key, 0.0) + hours

    def lookup(self, employee_id: Optional[str], employee_name: Optional[str] = None) -> Optional[float]:
        if employee_id and employee_id.strip().upper() in self.by_id:
            return self.by_id[employee_id.strip().upper()]
        if employee_name:
            return self.by_name.get(employee_name.strip().lower())
        return None

    def __len__(self) -> int:
        return len(self.by_id) + len(self.by_name)


def load_project_allocations(path: Path, sheet_config: Optional[TimeSheetConfig] = None) -> AllocationTable:
    """
    Sums the day-column hours of every employee row over all worksheets of a
    project workbook laid out like the time sheet. Sheets without day columns
    are skipped.
    """
    if not path.exists():
        raise FileNotFoundError(f"Allocation workbook not found: {path}")
    sheet_config = sheet_config or TimeSheetConfig()
    table = AllocationTable(kind=AllocationKind.ALLOCATED)

    wb = load_workbook(path, data_only=True, read_only=False)
    for ws in wb.worksheets:
        layout = TimeSheetLayout(ws, sheet_config)
        day_columns = layout.parse_day_columns()
        if not day_columns:
            logger.debug(f"Sheet '{ws.title}' has no day columns, skipped.")
            continue
        for row in layout.parse_employee_rows(day_columns):
            table.add(sum(row.day_hours.values()), row.employee_id, row.employee_name)

    logger.info(f"Allocations for {len(table)} employees loaded from {path.name}.")
    return table


def load_capacity_csv(path: Path) -> AllocationTable:
    """
    Reads a capacity view with the columns `employee_id` and `free_hours`
    (optionally `employee_name`). Rows without a usable number are skipped.
    """
    if not path.exists():
        raise FileNotFoundError(f"Capacity file not found: {path}")
    df = pd.read_csv(path, dtype={"employee_id": str})
    missing = {"free_hours"} - set(df.columns)
    if missing or not ({"employee_id", "employee_name"} & set(df.columns)):
        raise ValueError(f"Capacity file needs employee_id (or employee_name) and free_hours columns: {path}")

    df["free_hours"] = pd.to_numeric(df["free_hours"], errors="coerce")
    table = AllocationTable(kind=AllocationKind.FREE)
    for idx, row in df.iterrows():
        with log_exceptions(f"Invalid capacity row {idx}"):
            hours = float(row["free_hours"]) if pd.notna(row["free_hours"]) else None
            if hours is None:
                logger.warning(f"Capacity row {idx} without free_hours, skipped.")
                continue
            emp_id = row.get("employee_id")
            name = row.get("employee_name")
            table.add(
                hours,
                emp_id if isinstance(emp_id, str) else None,
                name if isinstance(name, str) else None,
            )

    logger.info(f"Free hours for {len(table)} employees loaded from {path.name}.")
    return table
