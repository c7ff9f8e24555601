"""
Monthly floater (free capacity) per employee and its estimated idle cost.

    max_hours   = working days of the month * hours_per_day
    allocation: pct = max(0, max_hours - allocated) / max_hours * 100
    free hours: pct = free / max_hours * 100

The percentage is clamped to [0, 100]. Leavers and employees without any
allocation record are 100 %.
"""

from __future__ import annotations

from typing import AbstractSet, List, Optional, Sequence

from loguru import logger

from floater.modules.allocation_loader import AllocationKind, AllocationTable
from pydantic_models.data.employee import Employee
from pydantic_models.data.floater_record import FloaterRecord
from shared_modules.utils import month_bounds, weekdays_in_month

FULL_FLOATER = 100.0


def working_days(month: int, year: int, holidays: AbstractSet[int] = frozenset()) -> int:
    """Weekdays of the month minus the public holidays that fall on a weekday."""
    return len([day for day in weekdays_in_month(month, year) if day not in holidays])


def clamp_pct(value: float) -> float:
    return min(FULL_FLOATER, max(0.0, value))


def floater_pct(
    max_hours: float,
    allocated_hours: Optional[float] = None,
    free_hours: Optional[float] = None,
) -> float:
    """
    Free capacity in percent. Without any hours the employee is fully
    unassigned. A month without working hours has no capacity to be idle.
    """
    if allocated_hours is None and free_hours is None:
        return FULL_FLOATER
    if max_hours <= 0:
        return 0.0
    if allocated_hours is not None:
        return clamp_pct(max(0.0, max_hours - allocated_hours) / max_hours * 100)
    return clamp_pct(free_hours / max_hours * 100)


def estimated_cost(pct: float, average_salary: float) -> int:
    return int(round(pct / 100 * average_salary))


def sort_records(records: Sequence[FloaterRecord]) -> List[FloaterRecord]:
    """Leavers last, then descending percentage, then name."""
    return sorted(records, key=lambda r: (r.is_leaver, -r.floater_pct, r.employee_name.lower()))


def calculate_floaters(
    employees: Sequence[Employee],
    month: int,
    year: int,
    allocations: Optional[AllocationTable] = None,
    holidays: AbstractSet[int] = frozenset(),
    hours_per_day: float = 8.0,
    average_salary: float = 5000.0,
) -> List[FloaterRecord]:
    """
    Builds one FloaterRecord per employee for the month.

    Args:
        employees: Roster with termination dates (and department, if looked up).
        month: Target month, 1-based.
        year: Target year.
        allocations: Allocated or free hours per employee; None means no records at all.
        holidays: Public holiday days of the month.
        hours_per_day: Nominal hours of a working day.
        average_salary: Monthly cost of a fully idle employee.

    Returns:
        List[FloaterRecord]: Sorted, leavers last.
    """
    max_hours = working_days(month, year, holidays) * hours_per_day
    _, period_end = month_bounds(month, year)
    logger.debug(f"Floater {month}/{year}: max_hours={max_hours}")

    records: List[FloaterRecord] = []
    for emp in employees:
        hours = allocations.lookup(emp.employee_id, emp.full_name) if allocations else None
        allocated = hours if allocations and allocations.kind is AllocationKind.ALLOCATED else None
        free = hours if allocations and allocations.kind is AllocationKind.FREE else None
        leaver = emp.is_leaver(period_end)

        pct = FULL_FLOATER if leaver else floater_pct(max_hours, allocated, free)
        records.append(
            FloaterRecord(
                employee_id=emp.employee_id,
                employee_name=emp.full_name,
                department=emp.department,
                allocated_hours=allocated,
                free_hours=free,
                max_hours=max_hours,
                is_leaver=leaver,
                floater_pct=round(pct, 2),
                estimated_cost=estimated_cost(pct, average_salary),
            )
        )

    without_record = sum(1 for r in records if r.allocated_hours is None and r.free_hours is None)
    if without_record:
        logger.info(f"{without_record} employees without allocation record count as 100 % floater.")
    return sort_records(records)
