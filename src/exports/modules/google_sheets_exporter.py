from pathlib import Path
from typing import Any, List, Optional

import gspread
import pandas as pd
from google.oauth2.service_account import Credentials
from loguru import logger

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def frame_to_values(df: pd.DataFrame) -> List[List[Any]]:
    """Header plus rows; missing values become empty cells."""
    body = df.astype(object).where(pd.notna(df), "").values.tolist()
    return [list(df.columns)] + body


class GoogleSheetsExporter:
    """
    Replaces the content of worksheets of one spreadsheet with data frames.
    A missing worksheet is created.
    """

    def __init__(self, credentials_file: Optional[Path] = None, client: Optional[gspread.Client] = None):
        self.credentials_file = credentials_file
        self.client = client

    def initialize(self) -> gspread.Client:
        if self.client is None:
            if self.credentials_file is None or not Path(self.credentials_file).exists():
                raise FileNotFoundError(f"Google credentials not found: {self.credentials_file}")
            creds = Credentials.from_service_account_file(str(self.credentials_file), scopes=SCOPES)
            self.client = gspread.authorize(creds)
            logger.debug(f"Google Sheets client authorized with {self.credentials_file}")
        return self.client

    def get_or_create_worksheet(self, spreadsheet: Any, title: str, rows: int, cols: int) -> Any:
        try:
            ws = spreadsheet.worksheet(title)
            ws.clear()
            return ws
        except gspread.exceptions.WorksheetNotFound:
            logger.info(f"Worksheet '{title}' not found, creating it.")
            return spreadsheet.add_worksheet(title=title, rows=max(rows, 100), cols=max(cols, 10))

    def upload_frame(self, spreadsheet_id: str, sheet_name: str, df: pd.DataFrame) -> int:
        """
        Clears `sheet_name` and writes header and rows starting at A1.

        Returns:
            int: Number of data rows written.
        """
        spreadsheet = self.initialize().open_by_key(spreadsheet_id)
        values = frame_to_values(df)
        ws = self.get_or_create_worksheet(spreadsheet, sheet_name, len(values), len(df.columns))
        ws.update(range_name="A1", values=values, value_input_option="USER_ENTERED")
        logger.info(f"{len(df)} rows uploaded to '{sheet_name}'.")
        return len(df)
