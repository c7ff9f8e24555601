from typing import Optional
from pydantic import BaseModel

class GoogleSheetsConfig(BaseModel):
    spreadsheet_id: Optional[str] = None
    leave_requests_sheet: str = "Leave Requests"
    leave_balances_sheet: str = "Leave Balances"
    credentials_file: str = "google-credentials.json"
