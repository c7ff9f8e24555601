from typing import Optional
from pydantic import BaseModel


class FloaterRecord(BaseModel):
    """
    Free capacity of one employee for one month.
    """
    employee_id: Optional[str] = None
    employee_name: str
    department: Optional[str] = None
    allocated_hours: Optional[float] = None
    free_hours: Optional[float] = None
    max_hours: float
    is_leaver: bool = False
    floater_pct: float
    estimated_cost: int
