from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from pydantic_models.data.employee import Employee
from shared_modules.filters import FilterConfig, report_environment

REPORT_FILE_NAME = "hire-termination-report.md"

REPORT_TEMPLATE = """\
{% macro hire_table(rows) -%}
| Employee ID | Full Name | Hired Date |
|-------------|-----------|------------|
{% for e in rows -%}
| {{ e.employee_id or e.user_id }} | {{ e.full_name }} | {{ e.hired_date | date }} |
{% endfor %}
{%- endmacro -%}
{% macro termination_table(rows) -%}
| Employee ID | Full Name | Termination Date |
|-------------|-----------|------------------|
{% for e in rows -%}
| {{ e.employee_id or e.user_id }} | {{ e.full_name }} | {{ e.termination_date | date }} |
{% endfor %}
{%- endmacro -%}
# Hire & Termination Detection Report

**Generated:** {{ generated_at.isoformat(timespec="seconds") }}

## Summary

| Metric | Count |
|--------|-------|
| Total employees{% if excluded %} (excl. {{ excluded | join(", ") }}){% endif %} | {{ result.total_employees }} |
| Employees with hire date | {{ result.with_hire_date | length }} |
| Employees with termination date | {{ result.with_termination_date | length }} |
| Recent hires (last {{ result.recent_days }} days) | {{ result.recent_hires | length }} |
| Recent terminations (last {{ result.recent_days }} days) | {{ result.recent_terminations | length }} |

---

## Recent Hires (last {{ result.recent_days }} days)

{% if result.recent_hires %}{{ hire_table(result.recent_hires) }}{% else %}*None*
{% endif %}
---

## Recent Terminations (last {{ result.recent_days }} days)

{% if result.recent_terminations %}{{ termination_table(result.recent_terminations) }}{% else %}*None*
{% endif %}
---

## All Employees with Hire Date

{{ hire_table(result.with_hire_date) }}
---

## All Employees with Termination Date

{{ termination_table(result.with_termination_date) }}"""


class HireTerminationResult(BaseModel):
    total_employees: int
    recent_days: int
    with_hire_date: List[Employee] = Field(default_factory=list)
    with_termination_date: List[Employee] = Field(default_factory=list)
    recent_hires: List[Employee] = Field(default_factory=list)
    recent_terminations: List[Employee] = Field(default_factory=list)


def detect_hire_and_termination(
    employees: Sequence[Employee],
    recent_days: int = 30,
    today: Optional[date] = None,
) -> HireTerminationResult:
    """
    Classifies employees by hire and termination date. "Recent" means on or
    after `today - recent_days` and not after `today`.
    """
    today = today or date.today()
    recent_start = today - timedelta(days=recent_days)
    result = HireTerminationResult(total_employees=len(employees), recent_days=recent_days)

    for emp in employees:
        if emp.hired_date is not None:
            result.with_hire_date.append(emp)
            if recent_start <= emp.hired_date <= today:
                result.recent_hires.append(emp)
        if emp.termination_date is not None:
            result.with_termination_date.append(emp)
            if recent_start <= emp.termination_date <= today:
                result.recent_terminations.append(emp)
    return result


def render_markdown(
    result: HireTerminationResult,
    generated_at: Optional[datetime] = None,
    excluded: Sequence[str] = (),
    filter_config: Optional[FilterConfig] = None,
) -> str:
    template = report_environment(filter_config).from_string(REPORT_TEMPLATE)
    return template.render(
        result=result,
        generated_at=generated_at or datetime.now(),
        excluded=list(excluded),
    )
