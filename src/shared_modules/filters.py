"""
Babel formatting for the Markdown reports (hire/termination, floater).

Each filter takes the value first and the FilterConfig second, so that
`register_filters` can bind the config once per Jinja2 environment.
"""

from functools import partial
from typing import Any, Callable, Dict, Optional

from babel.dates import format_date
from babel.numbers import format_currency, format_decimal, format_percent
from jinja2 import Environment, Undefined
from pydantic import BaseModel

from shared_modules.utils import to_date

MISSING_DATE = "-"


class FilterConfig(BaseModel):
    """
    Formatting options for the Jinja2 report filters.
    """
    locale: str = "en_US"
    currency: str = "USD"
    currency_format: Optional[str] = None
    date_format: Optional[str] = "yyyy-MM-dd"
    numeric_format: Optional[str] = None
    hours_format: str = "#,##0.##"
    percent_format: str = "#,##0.##%"


def _blank(value: Any) -> bool:
    return value is None or isinstance(value, Undefined)


def babel_currency(value: Any, config: FilterConfig) -> str:
    if _blank(value):
        return ""
    return format_currency(value, config.currency, format=config.currency_format, locale=config.locale)


def babel_decimal(value: Any, config: FilterConfig) -> str:
    if _blank(value):
        return ""
    return format_decimal(value, format=config.numeric_format, locale=config.locale)


def babel_hours(value: Any, config: FilterConfig) -> str:
    """Working hours, e.g. `176 h` or `7.5 h`."""
    if _blank(value):
        return ""
    return f"{format_decimal(value, format=config.hours_format, locale=config.locale)} h"


def babel_percent(value: Any, config: FilterConfig) -> str:
    """Percentages kept on the 0-100 scale (floater %), e.g. `45.5%`."""
    if _blank(value):
        return ""
    return format_percent(value / 100, format=config.percent_format, locale=config.locale)


def babel_date(value: Any, config: FilterConfig) -> str:
    """Accepts dates, datetimes and the string formats of `to_date`; anything else is shown as is."""
    if _blank(value):
        return MISSING_DATE
    parsed = to_date(value)
    if parsed is None:
        return str(value)
    return format_date(parsed, format=config.date_format or "medium", locale=config.locale)


FILTERS: Dict[str, Callable[[Any, FilterConfig], str]] = {
    "currency": babel_currency,
    "decimal": babel_decimal,
    "hours": babel_hours,
    "percent": babel_percent,
    "date": babel_date,
}


def register_filters(env: Environment, config: FilterConfig) -> None:
    for name, func in FILTERS.items():
        env.filters[name] = partial(func, config=config)


def report_environment(config: Optional[FilterConfig] = None) -> Environment:
    """Jinja2 environment for the Markdown report templates, filters registered."""
    env = Environment(keep_trailing_newline=True)
    register_filters(env, config or FilterConfig())
    return env
