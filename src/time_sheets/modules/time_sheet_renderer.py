from typing import Dict, Iterable

from openpyxl.styles import Font, PatternFill
from openpyxl.worksheet.worksheet import Worksheet

from pydantic_models.config.time_sheet_config import TimeSheetConfig
from pydantic_models.data.cell_decision import CellDecision, CellKind
from shared_modules.utils import day_initial


class TimeSheetRenderer:
    """
    Writes CellDecisions into an openpyxl worksheet. Only this class knows
    about fills and fonts.
    """

    def __init__(self, ws: Worksheet, config: TimeSheetConfig):
        self.ws = ws
        self.config = config
        colors = config.colors
        self._styles: Dict[CellKind, tuple] = {
            CellKind.WEEKEND: (self._fill(colors.weekend), Font(color=colors.font_grey)),
            CellKind.HOLIDAY: (self._fill(colors.holiday), Font(color=colors.font_grey)),
            CellKind.FULL_LEAVE: (self._fill(colors.full_day), Font(color=colors.font_white, bold=True)),
            CellKind.HALF_LEAVE: (self._fill(colors.half_day), Font(color=colors.font_black, bold=True)),
            CellKind.WORK: (PatternFill(fill_type=None), Font()),
        }

    @staticmethod
    def _fill(argb: str) -> PatternFill:
        return PatternFill(fill_type="solid", start_color=argb, end_color=argb)

    def write_headers(self, day_columns: Dict[int, int], month: int, year: int) -> None:
        for day, col in day_columns.items():
            self.ws.cell(row=self.config.day_name_row, column=col).value = day_initial(day, month, year)
            self.ws.cell(row=self.config.header_row, column=col).value = str(day)

    def clear_columns(self, columns: Iterable[int], rows: Iterable[int]) -> None:
        rows = list(rows)
        for col in columns:
            self.ws.cell(row=self.config.day_name_row, column=col).value = None
            self.ws.cell(row=self.config.header_row, column=col).value = None
            for row_num in rows:
                cell = self.ws.cell(row=row_num, column=col)
                cell.value = None
                cell.fill = PatternFill(fill_type=None)
                cell.font = Font()

    def apply(self, decisions: Iterable[CellDecision]) -> int:
        count = 0
        for decision in decisions:
            cell = self.ws.cell(row=decision.row_num, column=decision.column)
            cell.value = int(decision.hours) if float(decision.hours).is_integer() else decision.hours
            fill, font = self._styles[decision.kind]
            cell.fill = fill
            cell.font = font
            count += 1
        return count
