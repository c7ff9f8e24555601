from __future__ import annotations

from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field, model_validator

# OmniHR status code of an approved time-off request
LEAVE_STATUS_APPROVED = 3

# OmniHR duration codes: 1 = full day, 2 = half day AM, 3 = half day PM
DURATION_HALF_AM = 2
DURATION_HALF_PM = 3


class TimeOffType(BaseModel):
    name: Optional[str] = None


class ApiLeaveRequest(BaseModel):
    """
    A time-off request as returned inside the time-off calendar.
    Dates stay as raw DD/MM/YYYY strings; parsing happens in the expansion
    engine so that malformed dates can be skipped instead of failing validation.
    """
    status: Optional[int] = None
    effective_date: Optional[str] = None
    end_date: Optional[str] = None
    effective_date_duration: Optional[int] = None
    end_date_duration: Optional[int] = None
    time_off: Optional[TimeOffType] = None

    @property
    def is_approved(self) -> bool:
        return self.status == LEAVE_STATUS_APPROVED

    @property
    def leave_type(self) -> Optional[str]:
        return self.time_off.name if self.time_off else None


class ApiHoliday(BaseModel):
    date: Optional[str] = Field(default=None, validation_alias=AliasChoices("date", "effective_date", "holiday_date"))
    name: Optional[str] = None


class CalendarResponse(BaseModel):
    """
    Body of /employee/1.1/{user_id}/time-off-calendar/.
    Older API versions answer with a bare list of requests.
    """
    time_off_request: List[ApiLeaveRequest] = Field(default_factory=list)
    holidays: List[ApiHoliday] = Field(
        default_factory=list,
        validation_alias=AliasChoices("holiday", "holidays", "public_holiday"),
    )

    @model_validator(mode="before")
    @classmethod
    def accept_bare_list(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, list):
            return {"time_off_request": data}
        return data
