from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger

from leave_sync.modules.proration import ProrationStrategy, get_strategy
from omnihr.errors import LayoutError
from pydantic_models.data.leave_day import EmployeeLeaveData, Holiday
from shared_modules.config import Config
from time_sheets.modules.leave_planner import plan_leaves, plan_month_layout
from time_sheets.modules.time_sheet_factory import TimeSheetFactory
from time_sheets.modules.time_sheet_layout import TimeSheetLayout, find_employee_rows, index_rows
from time_sheets.modules.time_sheet_renderer import TimeSheetRenderer


@dataclass
class UpdateStats:
    output_file: Optional[Path] = None
    layout_cells: int = 0
    updated_cells: int = 0
    matched_employees: int = 0
    not_found: List[str] = field(default_factory=list)


class TimeSheetProcessor:
    """
    Writes one month of leave into a copy of the time sheet template.
    """

    def __init__(self, config: Config, factory: TimeSheetFactory, strategy: Optional[ProrationStrategy] = None):
        self.config: Config = config
        self.factory: TimeSheetFactory = factory
        sheet_config = config.time_sheet
        self.strategy: ProrationStrategy = strategy or get_strategy(sheet_config.proration, sheet_config.half_day_hours)

    def run(
        self,
        leave_data: List[EmployeeLeaveData],
        month: int,
        year: int,
        holidays: Optional[List[Holiday]] = None,
        template_file: Optional[Path] = None,
        output_dir: Optional[Path] = None,
    ) -> UpdateStats:
        """
        Restructures the day columns for the month, applies the leave days of
        every employee and saves `<template>_<month>_<year>.xlsx`.

        Args:
            leave_data: Cached leave records, one per employee.
            month: Target month, 1-based.
            year: Target year.
            holidays: Public holidays of the month.
            template_file: Overrides the configured template.
            output_dir: Overrides the configured output directory.

        Returns:
            UpdateStats: Counts, unmatched employees and the written file.

        Raises:
            LayoutError: If the sheet has no day columns in the header row.
        """
        stats = UpdateStats()
        source = template_file or self.factory.template_file
        wb, ws, cached_ws = self.factory.load(source)

        was_protected = bool(ws.protection.sheet)
        if was_protected:
            logger.debug(f"Removing sheet protection of '{ws.title}'.")
            ws.protection.sheet = False

        sheet_config = self.config.time_sheet
        layout = TimeSheetLayout(ws, sheet_config)
        day_columns = layout.parse_day_columns()
        if not day_columns:
            raise LayoutError(f"No day columns found in header row {sheet_config.header_row} of '{ws.title}'.")

        converted = layout.convert_day_column_formulas(day_columns, cached_ws)
        if converted:
            logger.info(f"{converted} formulas in day columns replaced by their values.")

        template_columns = [day_columns[day] for day in sorted(day_columns)]
        data_rows = layout.data_rows()
        row_values = {
            row_num: {col: layout.read_hours(row_num, col) for col in template_columns} for row_num in data_rows
        }
        holiday_days = {holiday.day for holiday in holidays or []}
        # override spans are read after the layout, so marker columns must survive it
        reserved = layout.reserved_columns(day_columns)
        month_layout = plan_month_layout(
            row_values, template_columns, month, year, holiday_days, sheet_config.hours_per_day, reserved
        )

        renderer = TimeSheetRenderer(ws, sheet_config)
        renderer.write_headers(month_layout.day_columns, month, year)
        renderer.clear_columns(month_layout.cleared_columns, data_rows)
        stats.layout_cells = renderer.apply(month_layout.decisions)
        logger.info(
            f"Month layout {month}/{year}: {len(month_layout.weekend_days)} weekend days, "
            f"{len(month_layout.holiday_days)} holidays, {len(month_layout.cleared_columns)} columns cleared."
        )

        rows_by_id, rows_by_name = index_rows(layout.parse_employee_rows(month_layout.day_columns))
        for record in leave_data:
            if not record.leave_requests:
                continue
            rows = find_employee_rows(record.employee_name, record.employee_id, rows_by_id, rows_by_name)
            if not rows:
                logger.warning(f"Employee not found in sheet: {record.employee_name} ({record.employee_id})")
                stats.not_found.append(record.employee_name)
                continue
            decisions = plan_leaves(rows, record.leave_requests, month_layout.weekday_columns, self.strategy)
            stats.updated_cells += renderer.apply(decisions)
            stats.matched_employees += 1
            logger.debug(f"{record.employee_name}: {len(decisions)} cells updated in {len(rows)} rows.")

        target = self.factory.output_file(source, month, year, output_dir)
        stats.output_file = self.factory.save(wb, ws, target, was_protected)
        return stats
