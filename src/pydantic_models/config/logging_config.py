from typing import Optional
from pydantic import BaseModel

class LoggingConfig(BaseModel):
    log_file: Optional[str] = "leave_sync.log"
    log_level: Optional[str] = "INFO"         
