from __future__ import annotations

from datetime import date
from typing import Any, Callable, Dict, List, Optional

from loguru import logger

from omnihr.api_client import OmniHRAPIClient, run_in_batches
from omnihr.directory import EmployeeDirectory
from leave_sync.modules.leave_expansion import holidays_in_month, process_calendar_response
from pydantic_models.data.employee import Employee
from pydantic_models.data.leave_day import EmployeeLeaveData, Holiday, LeaveBalance
from pydantic_models.data.leave_request import CalendarResponse
from shared_modules.utils import format_date_dmy, month_bounds, to_float

ProgressCallback = Callable[[int, int, str], None]


class LeaveService:
    """
    Fetches balances and time-off calendars per employee and expands the
    approved requests into leave days of the target month.
    """

    def __init__(self, client: OmniHRAPIClient, directory: EmployeeDirectory):
        self.client = client
        self.directory = directory
        self.endpoints = client.api_config.endpoints
        self.holidays: List[Holiday] = []

    # ------------------------------------------------------------------ #
    # Endpoints
    # ------------------------------------------------------------------ #

    def get_employee_base_data(self, user_id: int) -> Dict[str, Any]:
        """Base data carries the external employee code (e.g. SM0068)."""
        response = self.client.get(self.client.user_endpoint(self.endpoints.base_data, user_id))
        if isinstance(response, dict) and isinstance(response.get("data"), dict):
            return response["data"]
        return response if isinstance(response, dict) else {}

    def get_employee_leave_balances(self, user_id: int) -> List[LeaveBalance]:
        time_off_types = self.client.get(self.client.user_endpoint(self.endpoints.time_off_types, user_id)) or []
        balances: List[LeaveBalance] = []
        for entry in time_off_types:
            balance = entry.get("time_off_balance") or {}
            balances.append(
                LeaveBalance(
                    leave_type=(entry.get("time_off") or {}).get("name"),
                    entitlement=to_float(balance.get("entitlement_earned")),
                    taken=to_float(balance.get("display_taken")),
                    remaining=to_float(balance.get("days")),
                )
            )
        return balances

    def get_user_time_off_calendar(self, user_id: int, start_date: date, end_date: date) -> CalendarResponse:
        response = self.client.get(
            self.client.user_endpoint(self.endpoints.time_off_calendar, user_id),
            {"start_date": format_date_dmy(start_date), "end_date": format_date_dmy(end_date)},
        )
        return CalendarResponse.model_validate(response)

    # ------------------------------------------------------------------ #
    # Processing
    # ------------------------------------------------------------------ #

    def fetch_holidays(self, employees: List[Employee], month: int, year: int) -> List[Holiday]:
        """
        Reads the public holidays of the month once. The holiday calendar is
        shared by all employees, so the first calendar that answers is used.
        """
        start_date, end_date = month_bounds(month, year)
        for emp in employees:
            try:
                calendar = self.get_user_time_off_calendar(emp.user_id, start_date, end_date)
            except Exception as e:
                logger.debug(f"Holiday lookup via {emp.full_name} failed: {e}")
                continue
            self.holidays = holidays_in_month(calendar.holidays, month, year)
            logger.info(f"{len(self.holidays)} public holidays in {month}/{year}.")
            return self.holidays
        self.holidays = []
        return self.holidays

    def process_employee(
        self,
        employee: Employee,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> EmployeeLeaveData:
        """
        Collects base data, balances and (with a month) the leave days of one
        employee. Any HTTP or parse failure is recorded in `error` instead of
        being raised.
        """
        try:
            base_data = self.get_employee_base_data(employee.user_id)
            balances = self.get_employee_leave_balances(employee.user_id)
            leave_days = []
            if month is not None and year is not None:
                start_date, end_date = month_bounds(month, year)
                calendar = self.get_user_time_off_calendar(employee.user_id, start_date, end_date)
                holiday_days = {holiday.day for holiday in self.holidays}
                leave_days = process_calendar_response(calendar, month, year, holiday_days)
            return EmployeeLeaveData(
                user_id=employee.user_id,
                employee_id=base_data.get("employee_id") or employee.employee_id,
                employee_name=employee.full_name,
                leave_balances=balances,
                leave_requests=leave_days,
            )
        except Exception as e:
            logger.warning(f"Leave data for {employee.full_name} ({employee.user_id}) failed: {e}")
            return EmployeeLeaveData(
                user_id=employee.user_id,
                employee_id=employee.employee_id,
                employee_name=employee.full_name,
                error=str(e),
            )

    def get_all_leave_data(
        self,
        month: Optional[int] = None,
        year: Optional[int] = None,
        concurrency: Optional[int] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[EmployeeLeaveData]:
        """
        Main entry point: fetches the employee directory and processes the
        employees in batches of `concurrency`.

        Args:
            month: Target month (1-based); without month/year only balances are fetched.
            year: Target year.
            concurrency: Batch size, defaults to api.concurrency.
            on_progress: Called after each batch with (completed, total, last employee name).

        Returns:
            List[EmployeeLeaveData]: One record per employee, in directory order.
        """
        employees = self.directory.fetch_employees(with_jobs=False, with_terminations=False)
        if month is not None and year is not None:
            self.fetch_holidays(employees, month, year)

        batch_size = concurrency or self.client.api_config.concurrency

        def _progress(completed: int, total: int, last: Employee) -> None:
            if on_progress:
                on_progress(completed, total, last.full_name)

        results = run_in_batches(
            employees,
            lambda emp: self.process_employee(emp, month, year),
            batch_size,
            on_progress=_progress,
        )
        leave_data = [result.value for result in results]
        failed = sum(1 for record in leave_data if record.error)
        logger.info(f"{len(leave_data)} employees processed, {failed} with errors.")
        return leave_data
