from pydantic import BaseModel, Field


class PeriodConfig(BaseModel):
    """
    Default reporting month used when no --month/--year is given.
    The month is 1-based (1 = January).
    """
    month: int = Field(default=1, ge=1, le=12)
    year: int = Field(default=2025, ge=2000)
