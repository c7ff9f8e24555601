import calendar
from contextlib import contextmanager
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, Generator, Iterator, List, Optional

from loguru import logger

# Date format of the OmniHR API
API_DATE_FORMAT = "%d/%m/%Y"

# Date formats accepted for free-text input (config, sheets, CSV)
DATE_FORMATS: tuple[str, ...] = (API_DATE_FORMAT, "%Y-%m-%d", "%d.%m.%Y", "%Y/%m/%d")

DAY_INITIALS = ("M", "T", "W", "T", "F", "S", "S")


@contextmanager
def log_exceptions(msg: str, continue_on_error: bool = True) -> Generator[None, None, None]:
    """
    Context manager that logs exceptions and decides whether they propagate.

    Args:
        msg (str): Message logged on failure.
        continue_on_error (bool): With False the exception is re-raised, otherwise only logged.

    Example:
        with log_exceptions("Could not read employee row"):
            do_something()
    """
    try:
        yield
    except Exception as e:
        logger.error(f"{msg}: {e}")
        if not continue_on_error:
            raise


def ensure_dir(path: Path) -> Path:
    """Creates a directory (recursively) if missing and returns the path."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def _parse_float_str(s: str) -> Optional[float]:
    s = s.strip().replace("'", "").replace(" ", "").replace(",", ".")
    try:
        return float(s)
    except ValueError:
        return None


def _parse_date_str(s: str) -> Optional[date]:
    s = s.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None


_FLOAT_CONVERTERS: Dict[type, Callable[[Any], Optional[float]]] = {
    type(None): lambda _v: None,
    bool: lambda _v: None,
    int: lambda v: float(v),
    float: lambda v: float(v),
    str: _parse_float_str,
}

_DATE_CONVERTERS: Dict[type, Callable[[Any], Optional[date]]] = {
    datetime: lambda v: v.date(),
    date: lambda v: v,
    str: _parse_date_str,
    type(None): lambda _v: None,
}


def to_float(v: Any) -> Optional[float]:
    """Type based number conversion (None/str/int/float -> float|None)."""
    conv = _FLOAT_CONVERTERS.get(type(v))
    return conv(v) if conv else None


def to_date(v: Any) -> Optional[date]:
    """Type based date conversion (None/str/date/datetime -> date|None)."""
    conv = _DATE_CONVERTERS.get(type(v))
    return conv(v) if conv else None


def parse_date_dmy(value: Any) -> Optional[date]:
    """
    Parses an API date (DD/MM/YYYY). Anything malformed yields None,
    which callers treat as "no data".
    """
    if not value or not isinstance(value, str):
        return None
    parts = value.strip().split("/")
    if len(parts) != 3:
        return None
    try:
        return date(int(parts[2]), int(parts[1]), int(parts[0]))
    except ValueError:
        return None


def format_date_dmy(d: date) -> str:
    return d.strftime(API_DATE_FORMAT)


def is_weekend(d: date) -> bool:
    return d.weekday() >= 5


def month_bounds(month: int, year: int) -> tuple[date, date]:
    """First and last day of a month (month is 1-based)."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def days_in_month(month: int, year: int) -> int:
    return calendar.monthrange(year, month)[1]


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yields every calendar day from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def weekdays_in_month(month: int, year: int) -> List[int]:
    first, last = month_bounds(month, year)
    return [d.day for d in iter_days(first, last) if not is_weekend(d)]


def day_initial(day: int, month: int, year: int) -> str:
    return DAY_INITIALS[date(year, month, day).weekday()]


def month_label(month: int, year: int) -> str:
    """YYYY-MM, used in output file names."""
    return f"{year}-{month:02d}"
