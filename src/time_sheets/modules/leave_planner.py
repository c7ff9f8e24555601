"""
Decides, without touching the workbook, which value and category every
day cell of the time sheet gets for the target month.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import AbstractSet, Dict, Iterable, List, Optional

from leave_sync.modules.proration import ProrationStrategy
from pydantic_models.data.cell_decision import CellDecision, CellKind
from pydantic_models.data.leave_day import LeaveDay
from pydantic_models.data.sheet_row import SheetRow
from shared_modules.utils import days_in_month, is_weekend

RowValues = Dict[int, Dict[int, Optional[float]]]


@dataclass
class MonthLayout:
    day_columns: Dict[int, int] = field(default_factory=dict)
    # days that take normal hours (not weekend, not holiday)
    weekday_columns: Dict[int, int] = field(default_factory=dict)
    weekend_days: List[int] = field(default_factory=list)
    holiday_days: List[int] = field(default_factory=list)
    cleared_columns: List[int] = field(default_factory=list)
    decisions: List[CellDecision] = field(default_factory=list)


def _find_fill_value(values: Dict[int, Optional[float]], columns: List[int], column: int, default: float) -> float:
    """
    Hours for an empty weekday cell: the next positive value to the right,
    else the nearest positive value to the left, else `default`.
    """
    start = columns.index(column) if column in columns else -1
    for col in columns[start + 1:]:
        value = values.get(col)
        if value is not None and value > 0:
            return value
    for col in reversed(columns[:max(start, 0)]):
        value = values.get(col)
        if value is not None and value > 0:
            return value
    return default


def plan_month_layout(
    row_values: RowValues,
    template_columns: List[int],
    month: int,
    year: int,
    holidays: AbstractSet[int] = frozenset(),
    hours_per_day: float = 8.0,
    reserved_columns: AbstractSet[int] = frozenset(),
) -> MonthLayout:
    """
    Maps the days of the month onto the template's day columns.

    Args:
        row_values: row number -> column -> current hours, for all employee rows.
        template_columns: Day columns of the template, ordered by their original day.
        month: Target month, 1-based.
        year: Target year.
        holidays: Public holiday days of month.
        hours_per_day: Fallback for empty weekday cells without any neighbour value.
        reserved_columns: Non-day header columns (markers, totals). Days the
            template has no column for go to the next free columns after the
            last template day, skipping these.

    Returns:
        MonthLayout: Column mapping and one decision per (row, day) cell.
    """
    layout = MonthLayout()
    n_days = days_in_month(month, year)
    values = {row: dict(cols) for row, cols in row_values.items()}
    next_free_col = max(template_columns)

    for day in range(1, n_days + 1):
        if day <= len(template_columns):
            col = template_columns[day - 1]
        else:
            next_free_col += 1
            while next_free_col in reserved_columns:
                next_free_col += 1
            col = next_free_col
        layout.day_columns[day] = col

        if is_weekend(date(year, month, day)):
            layout.weekend_days.append(day)
            kind = CellKind.WEEKEND
        elif day in holidays:
            layout.holiday_days.append(day)
            kind = CellKind.HOLIDAY
        else:
            layout.weekday_columns[day] = col
            kind = CellKind.WORK

        for row_num, row in values.items():
            if kind is CellKind.WORK:
                hours = row.get(col)
                if hours is None or hours == 0:
                    hours = _find_fill_value(row, template_columns, col, hours_per_day)
            else:
                hours = 0.0
            row[col] = hours
            layout.decisions.append(CellDecision(row_num=row_num, column=col, day=day, hours=hours, kind=kind))

    layout.cleared_columns = template_columns[n_days:]
    return layout


def plan_leaves(
    rows: List[SheetRow],
    leave_days: Iterable[LeaveDay],
    weekday_columns: Dict[int, int],
    strategy: ProrationStrategy,
) -> List[CellDecision]:
    """
    Applies the leave days of one employee to that employee's rows.

    A full day zeroes every active row. A half day is split over the active
    rows by `strategy`. Rows with an override marker for the day's week are
    not active and keep their hours. `rows` is updated in place so that two
    half days on the same date add up.
    """
    decisions: List[CellDecision] = []
    for leave in leave_days:
        col = weekday_columns.get(leave.date)
        if col is None:
            continue
        active = [row for row in rows if leave.date not in row.override_days]
        if not active:
            continue

        if leave.is_half_day:
            new_hours = strategy.apply([row.day_hours.get(leave.date, 0.0) for row in active])
            kind = CellKind.HALF_LEAVE
        else:
            new_hours = [0.0] * len(active)
            kind = CellKind.FULL_LEAVE

        for row, hours in zip(active, new_hours):
            row.day_hours[leave.date] = hours
            decisions.append(CellDecision(row_num=row.row_num, column=col, day=leave.date, hours=hours, kind=kind))
    return decisions
