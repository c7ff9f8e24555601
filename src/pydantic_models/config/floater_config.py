from typing import Optional
from pydantic import BaseModel, Field

class FloaterConfig(BaseModel):
    average_salary: float = Field(default=5000.0, ge=0)
    hours_per_day: float = 8.0
    locale: Optional[str] = "en_US"
    currency: Optional[str] = "USD"
    currency_format: Optional[str] = None
