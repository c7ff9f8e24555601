import gspread
import pandas as pd
import pytest

from exports.modules.csv_export import BALANCE_COLUMNS, REQUEST_COLUMNS, export_csv, leave_requests_frame
from exports.modules.google_sheets_exporter import GoogleSheetsExporter, frame_to_values
from leave_sync.modules.leave_cache import (
    holidays_file_name,
    load_holidays,
    load_leave_data,
    save_holidays,
    save_leave_data,
)
from omnihr.errors import StaleCacheError
from pydantic_models.data.leave_day import EmployeeLeaveData, Holiday, LeaveBalance, LeaveDay


def sample_leave_data():
    return [
        EmployeeLeaveData(
            user_id=1,
            employee_id="SM0001",
            employee_name="Alice Tan",
            leave_balances=[LeaveBalance(leave_type="Annual Leave", entitlement=14, taken=2, remaining=12)],
            leave_requests=[
                LeaveDay(date=10, leave_type="Annual Leave"),
                LeaveDay(date=12, is_half_day=True, leave_type="Annual Leave"),
            ],
        ),
        EmployeeLeaveData(user_id=3, employee_name="Bob Lim", error="HTTP error! status: 404"),
    ]


def test_export_csv(tmp_path):
    requests_file, balances_file = export_csv(sample_leave_data(), 6, 2026, tmp_path)
    assert requests_file.name == "leave_requests_2026-06.csv"
    assert balances_file.name == "leave_balances_2026-06.csv"

    requests = pd.read_csv(requests_file, dtype=str)
    assert list(requests.columns) == REQUEST_COLUMNS
    assert requests.values.tolist() == [
        ["SM0001", "Alice Tan", "2026-06-10", "Annual Leave", "No"],
        ["SM0001", "Alice Tan", "2026-06-12", "Annual Leave", "Yes"],
    ]
    balances = pd.read_csv(balances_file)
    assert list(balances.columns) == BALANCE_COLUMNS
    assert balances.loc[0, "Remaining"] == 12


def test_empty_export_still_has_header(tmp_path):
    requests_file, _ = export_csv([], 6, 2026, tmp_path)
    assert requests_file.read_text(encoding="utf-8").strip() == ",".join(REQUEST_COLUMNS)


def test_cache_round_trip(tmp_path):
    path = tmp_path / "data" / "leave_data.json"
    save_leave_data(sample_leave_data(), path, 6, 2026)
    assert load_leave_data(path) == sample_leave_data()
    assert load_leave_data(path, 6, 2026) == sample_leave_data()

    holidays_path = tmp_path / "data" / holidays_file_name(6, 2026)
    assert holidays_path.name == "holidays_2026-06.json"
    assert load_holidays(holidays_path) == []
    save_holidays([Holiday(day=11, name="Founders Day")], holidays_path)
    assert load_holidays(holidays_path) == [Holiday(day=11, name="Founders Day")]


def test_cache_of_another_month_is_refused(tmp_path):
    path = tmp_path / "data" / "leave_data.json"
    # 31 July does not exist in June
    july = [EmployeeLeaveData(user_id=1, employee_name="Alice Tan", leave_requests=[LeaveDay(date=31)])]
    save_leave_data(july, path, 7, 2026)

    with pytest.raises(StaleCacheError, match="7/2026"):
        load_leave_data(path, 6, 2026)
    with pytest.raises(StaleCacheError):
        load_leave_data(path, 7, 2025)


class FakeWorksheet:
    def __init__(self, title):
        self.title = title
        self.cleared = False
        self.values = None

    def clear(self):
        self.cleared = True

    def update(self, range_name=None, values=None, value_input_option=None):
        self.values = values


class FakeSpreadsheet:
    def __init__(self, titles):
        self.sheets = {title: FakeWorksheet(title) for title in titles}

    def worksheet(self, title):
        if title not in self.sheets:
            raise gspread.exceptions.WorksheetNotFound(title)
        return self.sheets[title]

    def add_worksheet(self, title, rows, cols):
        self.sheets[title] = FakeWorksheet(title)
        return self.sheets[title]


class FakeGspreadClient:
    def __init__(self, spreadsheet):
        self.spreadsheet = spreadsheet
        self.opened = []

    def open_by_key(self, key):
        self.opened.append(key)
        return self.spreadsheet


def test_frame_to_values_blanks_missing_values():
    df = pd.DataFrame([{"a": 1, "b": None}], columns=["a", "b"])
    assert frame_to_values(df) == [["a", "b"], [1, ""]]


def test_upload_clears_existing_worksheet():
    spreadsheet = FakeSpreadsheet(["Leave Requests"])
    client = FakeGspreadClient(spreadsheet)
    exporter = GoogleSheetsExporter(client=client)

    written = exporter.upload_frame("sheet-id", "Leave Requests", leave_requests_frame(sample_leave_data(), 6, 2026))
    ws = spreadsheet.sheets["Leave Requests"]
    assert written == 2
    assert client.opened == ["sheet-id"]
    assert ws.cleared
    assert ws.values[0] == REQUEST_COLUMNS
    assert ws.values[2] == ["SM0001", "Alice Tan", "2026-06-12", "Annual Leave", "Yes"]


def test_upload_creates_missing_worksheet():
    spreadsheet = FakeSpreadsheet([])
    exporter = GoogleSheetsExporter(client=FakeGspreadClient(spreadsheet))
    exporter.upload_frame("sheet-id", "Leave Balances", pd.DataFrame(columns=["x"]))
    assert spreadsheet.sheets["Leave Balances"].values == [["x"]]
