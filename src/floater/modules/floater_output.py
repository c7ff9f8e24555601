from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd
from loguru import logger

from pydantic_models.data.floater_record import FloaterRecord
from shared_modules.filters import FilterConfig, report_environment
from shared_modules.utils import ensure_dir, month_label

FLOATER_COLUMNS = [
    "Employee ID",
    "Employee Name",
    "Department",
    "Allocated Hours",
    "Free Hours",
    "Max Hours",
    "Leaver",
    "Floater %",
    "Estimated Cost",
]

FLOATER_TEMPLATE = """\
# Floater Report {{ period }}

| Metric | Value |
|--------|-------|
| Employees | {{ records | length }} |
| Leavers | {{ records | selectattr("is_leaver") | list | length }} |
| Max hours per employee | {{ max_hours | hours }} |
| Estimated idle cost | {{ total_cost | currency }} |

| Employee ID | Employee Name | Department | Floater % | Estimated Cost | Leaver |
|-------------|---------------|------------|-----------|----------------|--------|
{% for r in records -%}
| {{ r.employee_id or "" }} | {{ r.employee_name }} | {{ r.department or "" }} | {{ r.floater_pct | percent }} | {{ r.estimated_cost | currency }} | {{ "yes" if r.is_leaver else "" }} |
{% endfor %}"""


def floater_file_names(month: int, year: int) -> tuple[str, str]:
    label = month_label(month, year)
    return f"floater_{label}.csv", f"floater_{label}.md"


def floater_frame(records: Sequence[FloaterRecord]) -> pd.DataFrame:
    rows: List[dict] = [
        {
            "Employee ID": r.employee_id or "",
            "Employee Name": r.employee_name,
            "Department": r.department or "",
            "Allocated Hours": r.allocated_hours,
            "Free Hours": r.free_hours,
            "Max Hours": r.max_hours,
            "Leaver": "Yes" if r.is_leaver else "No",
            "Floater %": r.floater_pct,
            "Estimated Cost": r.estimated_cost,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=FLOATER_COLUMNS)


def render_floater_markdown(
    records: Sequence[FloaterRecord],
    month: int,
    year: int,
    filter_config: Optional[FilterConfig] = None,
) -> str:
    return report_environment(filter_config).from_string(FLOATER_TEMPLATE).render(
        records=list(records),
        period=date(year, month, 1).strftime("%B %Y"),
        max_hours=records[0].max_hours if records else 0,
        total_cost=sum(r.estimated_cost for r in records),
    )


def write_floater_outputs(
    records: Sequence[FloaterRecord],
    month: int,
    year: int,
    output_dir: Path,
    filter_config: Optional[FilterConfig] = None,
) -> tuple[Path, Path]:
    csv_name, md_name = floater_file_names(month, year)
    ensure_dir(output_dir)
    csv_path = output_dir / csv_name
    floater_frame(records).to_csv(csv_path, index=False, encoding="utf-8")
    md_path = output_dir / md_name
    md_path.write_text(render_floater_markdown(records, month, year, filter_config), encoding="utf-8")
    logger.info(f"Floater report for {len(records)} employees written to {csv_path} and {md_path}")
    return csv_path, md_path
