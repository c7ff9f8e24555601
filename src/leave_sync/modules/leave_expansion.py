"""
Turns approved OmniHR time-off requests into per-day leave entries for one
target month.
"""

from __future__ import annotations

from datetime import date
from typing import AbstractSet, Iterable, List, Optional

from pydantic_models.data.leave_day import Holiday, LeaveDay
from pydantic_models.data.leave_request import (
    DURATION_HALF_AM,
    DURATION_HALF_PM,
    ApiHoliday,
    ApiLeaveRequest,
    CalendarResponse,
)
from shared_modules.utils import is_weekend, iter_days, parse_date_dmy


def is_half_day_duration(duration: Optional[int]) -> bool:
    return duration in (DURATION_HALF_AM, DURATION_HALF_PM)


def determine_half_day(request: ApiLeaveRequest, current: date, leave_start: date, leave_end: date) -> bool:
    """
    Only the boundary days of a range can be half days. When the range is a
    single day, the start duration decides and the end duration is ignored.
    """
    if current == leave_start:
        return is_half_day_duration(request.effective_date_duration)
    if current == leave_end:
        return is_half_day_duration(request.end_date_duration)
    return False


def expand_leave_request(
    request: ApiLeaveRequest,
    month: int,
    year: int,
    holidays: AbstractSet[int] = frozenset(),
) -> List[LeaveDay]:
    """
    Expands one request into the working days it covers in the target month.

    Args:
        request: Time-off request from the calendar endpoint.
        month: Target month, 1-based.
        year: Target year.
        holidays: Days of month that are public holidays; no leave is booked on them.

    Returns:
        List[LeaveDay]: Empty for non-approved requests or an unparseable start date.
    """
    if not request.is_approved:
        return []

    leave_start = parse_date_dmy(request.effective_date)
    if leave_start is None:
        return []
    leave_end = parse_date_dmy(request.end_date) if request.end_date else leave_start
    if leave_end is None:
        return []

    leave_days: List[LeaveDay] = []
    for current in iter_days(leave_start, leave_end):
        if is_weekend(current) or current.month != month or current.year != year:
            continue
        if current.day in holidays:
            continue
        leave_days.append(
            LeaveDay(
                date=current.day,
                leave_type=request.leave_type,
                is_half_day=determine_half_day(request, current, leave_start, leave_end),
            )
        )
    return leave_days


def expand_leave_requests(
    requests: Iterable[ApiLeaveRequest],
    month: int,
    year: int,
    holidays: AbstractSet[int] = frozenset(),
) -> List[LeaveDay]:
    return [day for request in requests for day in expand_leave_request(request, month, year, holidays)]


def holidays_in_month(entries: Iterable[ApiHoliday], month: int, year: int) -> List[Holiday]:
    """
    Keeps the holidays that fall into the target month, one per day,
    sorted by day. Unparseable dates are skipped.
    """
    by_day = {}
    for entry in entries:
        d = parse_date_dmy(entry.date)
        if d is None or d.month != month or d.year != year:
            continue
        by_day.setdefault(d.day, Holiday(day=d.day, name=entry.name or ""))
    return [by_day[day] for day in sorted(by_day)]


def process_calendar_response(
    calendar: CalendarResponse,
    month: int,
    year: int,
    holidays: AbstractSet[int] = frozenset(),
) -> List[LeaveDay]:
    return expand_leave_requests(calendar.time_off_request, month, year, holidays)
