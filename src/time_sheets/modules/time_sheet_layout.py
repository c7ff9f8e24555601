from __future__ import annotations

from typing import Any, Dict, List, Optional, Set

from openpyxl.worksheet.worksheet import Worksheet

from pydantic_models.config.time_sheet_config import TimeSheetConfig
from pydantic_models.data.sheet_row import SheetRow
from shared_modules.utils import to_float


def _day_number(value: Any) -> Optional[int]:
    """Header cells hold the day either as number or as numeric text."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = int(value)
        return number if number == value and 1 <= number <= 31 else None
    if isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
        return number if 1 <= number <= 31 else None
    return None


def _is_truthy_marker(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "x", "yes", "1", "✓"}
    return bool(value)


class TimeSheetLayout:
    """
    Reads the layout of a time sheet:

    - `header_row` holds the day numbers, `day_name_row` the weekday initials
    - metadata columns: employee code, name, project
    - optional per-week "validated" / "override" marker columns right after
      the last day column of a week
    """

    def __init__(self, ws: Worksheet, config: TimeSheetConfig):
        self.ws = ws
        self.config = config

    @property
    def first_data_row(self) -> int:
        return self.config.header_row + 1

    def parse_day_columns(self) -> Dict[int, int]:
        """Maps day number -> column index, as found in the header row."""
        day_columns: Dict[int, int] = {}
        for cell in self.ws[self.config.header_row]:
            day = _day_number(cell.value)
            if day is not None:
                day_columns[day] = cell.column
        return day_columns

    def parse_marker_columns(self, label: str) -> List[int]:
        wanted = label.strip().lower()
        return [
            cell.column
            for cell in self.ws[self.config.header_row]
            if isinstance(cell.value, str) and cell.value.strip().lower() == wanted
        ]

    def reserved_columns(self, day_columns: Dict[int, int]) -> Set[int]:
        """Header columns that hold something other than a day number."""
        day_cols = set(day_columns.values())
        return {
            cell.column
            for cell in self.ws[self.config.header_row]
            if cell.value not in (None, "") and cell.column not in day_cols
        }

    def override_spans(self, day_columns: Dict[int, int]) -> Dict[int, List[int]]:
        """
        Maps each override column to the day columns it governs: those to
        its left, back to the previous week boundary. Adjacent marker columns
        (e.g. "Validated" followed by "Override") form one boundary.
        """
        override_cols = self.parse_marker_columns(self.config.override_label)
        markers = set(override_cols) | set(self.parse_marker_columns(self.config.validated_label))
        spans: Dict[int, List[int]] = {}
        for col in override_cols:
            group_start = col
            while group_start - 1 in markers:
                group_start -= 1
            previous = max((m for m in markers if m < group_start), default=0)
            spans[col] = sorted(c for c in day_columns.values() if previous < c < group_start)
        return spans

    def data_rows(self) -> List[int]:
        """Rows below the header that carry an employee code or name."""
        cols = self.config.columns
        rows = []
        for row_num in range(self.first_data_row, self.ws.max_row + 1):
            emp_id = self.ws.cell(row=row_num, column=cols.employee_id).value
            name = self.ws.cell(row=row_num, column=cols.employee_name).value
            if (isinstance(emp_id, str) and emp_id.strip()) or (isinstance(name, str) and name.strip()):
                rows.append(row_num)
        return rows

    def read_hours(self, row_num: int, column: int) -> float:
        return to_float(self.ws.cell(row=row_num, column=column).value) or 0.0

    def parse_employee_rows(self, day_columns: Dict[int, int]) -> List[SheetRow]:
        cols = self.config.columns
        spans = self.override_spans(day_columns)
        column_to_day = {col: day for day, col in day_columns.items()}
        rows: List[SheetRow] = []
        for row_num in self.data_rows():
            emp_id = self.ws.cell(row=row_num, column=cols.employee_id).value
            name = self.ws.cell(row=row_num, column=cols.employee_name).value
            project = self.ws.cell(row=row_num, column=cols.project).value
            override_days = {
                column_to_day[day_col]
                for marker_col, day_cols in spans.items()
                if _is_truthy_marker(self.ws.cell(row=row_num, column=marker_col).value)
                for day_col in day_cols
                if day_col in column_to_day
            }
            rows.append(
                SheetRow(
                    row_num=row_num,
                    employee_id=emp_id.strip() if isinstance(emp_id, str) else None,
                    employee_name=name.strip() if isinstance(name, str) else None,
                    project=str(project).strip() if project is not None else None,
                    day_hours={day: self.read_hours(row_num, col) for day, col in day_columns.items()},
                    override_days=override_days,
                )
            )
        return rows

    def convert_day_column_formulas(self, day_columns: Dict[int, int], cached: Worksheet) -> int:
        """
        Replaces formulas in day columns by their last computed value taken
        from `cached` (the same sheet loaded with data_only=True). Formulas in
        total columns are left alone.
        """
        converted = 0
        for row_num in range(self.first_data_row, self.ws.max_row + 1):
            for col in day_columns.values():
                cell = self.ws.cell(row=row_num, column=col)
                if isinstance(cell.value, str) and cell.value.startswith("="):
                    cell.value = cached.cell(row=row_num, column=col).value
                    converted += 1
        return converted


def index_rows(rows: List[SheetRow]) -> tuple[Dict[str, List[SheetRow]], Dict[str, List[SheetRow]]]:
    """Groups rows by upper-cased employee code and by lower-cased name."""
    by_id: Dict[str, List[SheetRow]] = {}
    by_name: Dict[str, List[SheetRow]] = {}
    for row in rows:
        if row.employee_id:
            by_id.setdefault(row.employee_id.upper(), []).append(row)
        if row.employee_name:
            by_name.setdefault(row.employee_name.lower(), []).append(row)
    return by_id, by_name


def find_employee_rows(
    employee_name: str,
    employee_id: Optional[str],
    rows_by_id: Dict[str, List[SheetRow]],
    rows_by_name: Dict[str, List[SheetRow]],
) -> List[SheetRow]:
    """
    Matches an employee to sheet rows: external code first, then exact name,
    then a partial name match in either direction. The partial match is
    fuzzy on purpose and can pick the wrong person for short names.
    """
    if employee_id:
        rows = rows_by_id.get(employee_id.strip().upper())
        if rows:
            return rows

    name = (employee_name or "").strip().lower()
    if not name:
        return []
    exact = rows_by_name.get(name)
    if exact:
        return exact

    for sheet_name, rows in rows_by_name.items():
        if name in sheet_name or sheet_name in name:
            return rows
    return []
