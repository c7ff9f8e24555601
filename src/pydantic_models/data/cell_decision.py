from enum import Enum
from pydantic import BaseModel


class CellKind(str, Enum):
    WORK = "work"
    WEEKEND = "weekend"
    HOLIDAY = "holiday"
    FULL_LEAVE = "full_leave"
    HALF_LEAVE = "half_leave"


class CellDecision(BaseModel):
    """
    Hours and category of one (row, day) cell. Produced by the leave logic,
    consumed by the spreadsheet renderers.
    """
    row_num: int
    column: int
    day: int
    hours: float
    kind: CellKind
