from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from loguru import logger
from openpyxl import load_workbook
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from omnihr.errors import LayoutError
from shared_modules.config import Config
from shared_modules.utils import ensure_dir


class TimeSheetFactory:
    """
    Loads the time sheet template and saves the updated copy for a month.
    Handles the sheet protection of the template.
    """

    def __init__(self, config: Config) -> None:
        self.config: Config = config
        self.sheet_name: Optional[str] = config.time_sheet.sheet_name
        self.template_file: Path = config.template_dir / config.time_sheet.template
        self.output_dir: Path = config.output_dir

    def get_sheet_password(self) -> Optional[str]:
        """
        Protection password from the environment: SHEET_PASSWORD_ENC (Fernet) or
        SHEET_PASSWORD (plain). Only needed when the template is protected.
        """
        return self.config.get_decrypted_secret("SHEET_PASSWORD_ENC") or self.config.get_secret("SHEET_PASSWORD")

    def _select_sheet(self, wb: Workbook) -> Worksheet:
        if self.sheet_name:
            if self.sheet_name not in wb.sheetnames:
                raise LayoutError(f"Sheet '{self.sheet_name}' missing in template.")
            return wb[self.sheet_name]
        if not wb.worksheets:
            raise LayoutError("No worksheet found in Excel file")
        return wb.worksheets[0]

    def load(self, template_file: Optional[Path] = None) -> Tuple[Workbook, Worksheet, Worksheet]:
        """
        Loads the template twice: once with formulas (to be written back) and
        once with the cached values of those formulas.

        Returns:
            Tuple of (workbook, worksheet, worksheet with cached values).
        """
        source = template_file or self.template_file
        if not source.exists():
            logger.error(f"Template not found: {source}")
            raise FileNotFoundError(f"Template not found: {source}")

        try:
            wb = load_workbook(source)
            cached_wb = load_workbook(source, data_only=True)
        except Exception as exc:
            logger.error(f"Failed to load template {source.name}: {exc}")
            raise RuntimeError(f"Failed to load template: {exc}") from exc

        ws = self._select_sheet(wb)
        cached_ws = cached_wb[ws.title]
        return wb, ws, cached_ws

    def output_file(self, source: Path, month: int, year: int, output_dir: Optional[Path] = None) -> Path:
        return ensure_dir(output_dir or self.output_dir) / f"{source.stem}_{month}_{year}.xlsx"

    def save(self, wb: Workbook, ws: Worksheet, target_file: Path, was_protected: bool) -> Path:
        if was_protected:
            password = self.get_sheet_password()
            if not password:
                logger.error("Template is protected but SHEET_PASSWORD_ENC / SHEET_PASSWORD is not set.")
                raise RuntimeError("Sheet password is not set!")
            ws.protection.sheet = True
            ws.protection.set_password(str(password))
            ws.protection.enable()

        # Excel recalculates the total columns when the file is opened
        wb.calculation.fullCalcOnLoad = True
        try:
            wb.save(target_file)
        except Exception as exc:
            logger.error(f"Failed to save {target_file.name}: {exc}")
            raise RuntimeError(f"Failed to save file: {exc}") from exc

        logger.info(f"Saved updated file to: {target_file}")
        return target_file
