from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class LeaveDay(BaseModel):
    """
    One working day of leave inside the target month.
    `date` is the day of month, kept under that name for the JSON cache format.
    """
    date: int = Field(ge=1, le=31)
    is_half_day: bool = False
    leave_type: Optional[str] = None


class Holiday(BaseModel):
    day: int = Field(ge=1, le=31)
    name: str = ""


class LeaveBalance(BaseModel):
    leave_type: Optional[str] = None
    entitlement: Optional[float] = None
    taken: Optional[float] = None
    remaining: Optional[float] = None


class EmployeeLeaveData(BaseModel):
    """
    Per-employee result of a leave fetch; also the record format of the
    JSON cache. A failed fetch keeps the employee with empty lists and `error` set.
    """
    user_id: int
    employee_id: Optional[str] = None
    employee_name: str
    leave_balances: List[LeaveBalance] = Field(default_factory=list)
    leave_requests: List[LeaveDay] = Field(default_factory=list)
    error: Optional[str] = None


class LeaveCache(BaseModel):
    """Content of the JSON leave cache: the records and the month they were fetched for."""
    month: int = Field(ge=1, le=12)
    year: int
    employees: List[EmployeeLeaveData] = Field(default_factory=list)
