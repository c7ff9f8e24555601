import json
from pathlib import Path
from typing import List, Optional

from loguru import logger
from pydantic import TypeAdapter

from omnihr.errors import StaleCacheError
from pydantic_models.data.leave_day import EmployeeLeaveData, Holiday, LeaveCache
from shared_modules.utils import ensure_dir, month_label

CACHE_FILE_NAME = "leave_data.json"


def save_leave_data(leave_data: List[EmployeeLeaveData], path: Path, month: int, year: int) -> Path:
    """Writes the records together with the month they belong to."""
    ensure_dir(path.parent)
    cache = LeaveCache(month=month, year=year, employees=leave_data)
    path.write_text(cache.model_dump_json(indent=2), encoding="utf-8")
    logger.info(f"Leave data for {month}/{year} cached to {path}")
    return path


def load_leave_data(path: Path, month: Optional[int] = None, year: Optional[int] = None) -> List[EmployeeLeaveData]:
    """
    Reads the cache. With `month` and `year` given, the cache must have been
    fetched for exactly that month; day numbers of another month would land
    on the wrong dates.

    Raises:
        FileNotFoundError: If there is no cache at `path`.
        StaleCacheError: If the cache belongs to another month.
    """
    if not path.exists():
        raise FileNotFoundError(f"Leave data cache not found: {path}")
    cache = LeaveCache.model_validate_json(path.read_bytes())
    if month is not None and year is not None and (cache.month, cache.year) != (month, year):
        raise StaleCacheError(
            f"Leave cache {path} was fetched for {cache.month}/{cache.year}, not {month}/{year}."
        )
    logger.info(f"{len(cache.employees)} employee records for {cache.month}/{cache.year} loaded from {path}")
    return cache.employees


_HOLIDAY_ADAPTER = TypeAdapter(List[Holiday])


def holidays_file_name(month: int, year: int) -> str:
    return f"holidays_{month_label(month, year)}.json"


def save_holidays(holidays: List[Holiday], path: Path) -> Path:
    ensure_dir(path.parent)
    path.write_text(json.dumps(_HOLIDAY_ADAPTER.dump_python(holidays, mode="json"), indent=2), encoding="utf-8")
    logger.info(f"{len(holidays)} public holidays cached to {path}")
    return path


def load_holidays(path: Path) -> List[Holiday]:
    """A missing holiday cache means no public holidays."""
    if not path.exists():
        logger.warning(f"No holiday cache at {path}, assuming no public holidays.")
        return []
    return _HOLIDAY_ADAPTER.validate_json(path.read_bytes())
