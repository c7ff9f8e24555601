from typing import Dict, Optional, Set

from pydantic import BaseModel, Field


class SheetRow(BaseModel):
    """
    One project row of an employee in the time sheet.
    """
    row_num: int
    employee_id: Optional[str] = None
    employee_name: Optional[str] = None
    project: Optional[str] = None
    day_hours: Dict[int, float] = Field(default_factory=dict)
    # days whose week carries a truthy override marker in this row
    override_days: Set[int] = Field(default_factory=set)
