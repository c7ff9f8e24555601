from typing import Literal, Optional
from pydantic import BaseModel, Field


class TimeSheetColumns(BaseModel):
    """
    1-based column indices of the metadata columns in the time sheet.
    """
    employee_id: int = 1
    employee_name: int = 2
    project: int = 3


class TimeSheetColors(BaseModel):
    full_day: str = "FFFF0000"
    half_day: str = "FFFFA500"
    weekend: str = "FFD3D3D3"
    holiday: str = "FF9BC2E6"
    font_black: str = "FF000000"
    font_white: str = "FFFFFFFF"
    font_grey: str = "FF808080"


class TimeSheetConfig(BaseModel):
    template: str = "template.xlsx"
    sheet_name: Optional[str] = None
    day_name_row: int = 2
    header_row: int = 3
    columns: TimeSheetColumns = Field(default_factory=TimeSheetColumns)
    colors: TimeSheetColors = Field(default_factory=TimeSheetColors)
    hours_per_day: float = 8.0
    half_day_hours: float = 4.0
    proration: Literal["equal", "proportional"] = "proportional"
    # Header texts of the per-week marker columns
    validated_label: str = "Validated"
    override_label: str = "Override"
