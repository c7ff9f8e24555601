from typing import List
from pydantic import BaseModel, Field


class DirectoryConfig(BaseModel):
    # Shared service accounts that are not real employees
    excluded_employees: List[str] = Field(default_factory=lambda: ["Omni Support", "People Culture"])
    job_lookup_batch_size: int = Field(default=10, ge=1)
