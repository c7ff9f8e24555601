from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from loguru import logger
from pydantic import ValidationError

from omnihr.api_client import OmniHRAPIClient, run_in_batches
from pydantic_models.config.directory_config import DirectoryConfig
from pydantic_models.data.employee import Employee
from shared_modules.utils import parse_date_dmy


def is_excluded(name: str, excluded: Iterable[str]) -> bool:
    """Case-insensitive exact match of the trimmed display name."""
    normalized = (name or "").strip().lower()
    return any(normalized == entry.strip().lower() for entry in excluded)


def _pick(payload: Dict[str, Any], *keys: str) -> Optional[str]:
    """
    Returns the first non-empty value of `keys`; nested `{"name": ...}`
    objects are unwrapped.
    """
    for key in keys:
        value = payload.get(key)
        if isinstance(value, dict):
            value = value.get("name")
        if value:
            return str(value)
    return None


class EmployeeDirectory:
    """
    Merges the employee list, the termination dashboard and the per-employee
    job lookup into Employee records keyed by internal user id, and removes
    the configured service accounts.
    """

    def __init__(self, client: OmniHRAPIClient, directory_config: Optional[DirectoryConfig] = None):
        self.client = client
        self.config = directory_config or DirectoryConfig()
        self.endpoints = client.api_config.endpoints

    def fetch_raw_employees(self) -> List[Dict[str, Any]]:
        employees = self.client.get_paginated(self.endpoints.employee_list)
        logger.info(f"{len(employees)} employees fetched from {self.endpoints.employee_list}.")
        return employees

    def fetch_termination_dates(self) -> Dict[int, str]:
        """
        Maps user id -> raw termination date from the onboarding dashboard.
        """
        termination_dates: Dict[int, str] = {}
        for record in self.client.get_paginated(self.endpoints.termination_dashboard):
            if record.get("termination_date") and record.get("id") is not None:
                termination_dates[record["id"]] = record["termination_date"]
        logger.info(f"{len(termination_dates)} termination dates found.")
        return termination_dates

    def fetch_job(self, user_id: int) -> Dict[str, Optional[str]]:
        payload = self.client.get(self.client.user_endpoint(self.endpoints.job, user_id))
        if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
            payload = payload["data"]
        if isinstance(payload, list):
            # job history: the first entry is the current one
            payload = payload[0] if payload else {}
        if not isinstance(payload, dict):
            return {}
        return {
            "department": _pick(payload, "department", "department_name"),
            "team": _pick(payload, "team", "team_name", "division"),
            "employment_status": _pick(payload, "employment_status", "employment_type"),
        }

    def filter_excluded(self, employees: List[Employee]) -> List[Employee]:
        kept = [emp for emp in employees if not is_excluded(emp.full_name, self.config.excluded_employees)]
        dropped = len(employees) - len(kept)
        if dropped:
            logger.debug(f"{dropped} excluded service accounts removed.")
        return kept

    def fetch_employees(self, with_jobs: bool = True, with_terminations: bool = True) -> List[Employee]:
        """
        Builds the merged, filtered employee list.

        Args:
            with_jobs: Also query the job endpoint per employee (batched).
            with_terminations: Also read the termination dashboard.

        Returns:
            List[Employee]: Employees in API order, service accounts removed.
        """
        employees: List[Employee] = []
        for payload in self.fetch_raw_employees():
            try:
                employees.append(Employee.from_api(payload))
            except (ValueError, ValidationError) as e:
                logger.warning(f"Skipping malformed employee record: {e}")
        employees = self.filter_excluded(employees)

        if with_terminations:
            termination_dates = self.fetch_termination_dates()
            for emp in employees:
                raw = termination_dates.get(emp.user_id)
                if raw:
                    emp.termination_date = parse_date_dmy(raw)

        if with_jobs and employees:
            results = run_in_batches(
                employees,
                lambda emp: self.fetch_job(emp.user_id),
                self.config.job_lookup_batch_size,
            )
            for result in results:
                if not result.ok:
                    logger.warning(f"Job lookup failed for {result.item.full_name}: {result.error}")
                    continue
                for field, value in result.value.items():
                    if value:
                        setattr(result.item, field, value)

        return employees
