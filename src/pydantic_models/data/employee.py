from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator

from shared_modules.utils import parse_date_dmy, to_date


class Employee(BaseModel):
    """
    One employee as assembled by the directory fetcher. Built fresh on every
    run from the employee list, the termination dashboard and the job lookup.
    """
    user_id: int
    employee_id: Optional[str] = None
    full_name: str
    hired_date: Optional[date] = None
    termination_date: Optional[date] = None
    department: Optional[str] = None
    team: Optional[str] = None
    employment_status: Optional[str] = None

    @field_validator("hired_date", "termination_date", mode="before")
    @classmethod
    def parse_api_date(cls, value: Any) -> Optional[date]:
        """
        API dates are DD/MM/YYYY; malformed values are dropped, not rejected.
        """
        if isinstance(value, str):
            return parse_date_dmy(value) or to_date(value)
        return to_date(value)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Employee":
        """
        Maps an /employee/list/ item. The list uses `id` or `user_id` and
        `full_name` or `name` depending on the endpoint version.
        """
        user_id = payload.get("id") or payload.get("user_id")
        if user_id is None:
            raise ValueError(f"Employee record without id: {payload}")
        name = (payload.get("full_name") or payload.get("name") or "").strip()
        return cls(
            user_id=user_id,
            employee_id=payload.get("employee_id") or None,
            full_name=name or f"User {user_id}",
            hired_date=payload.get("hired_date"),
            employment_status=payload.get("employment_status") or payload.get("status_display"),
        )

    def is_leaver(self, period_end: date) -> bool:
        """True if the termination date falls on or before the end of the period."""
        return self.termination_date is not None and self.termination_date <= period_end
