from datetime import date

from jinja2 import Undefined

from shared_modules.filters import FilterConfig, babel_date, babel_hours, babel_percent, report_environment

CONFIG = FilterConfig()


def test_report_filters_render_with_defaults():
    template = report_environment().from_string(
        "{{ cost | currency }} / {{ pct | percent }} / {{ max | hours }} / {{ day | date }}"
    )
    rendered = template.render(cost=5000, pct=45.5, max=176.0, day=date(2026, 3, 15))
    assert rendered == "$5,000.00 / 45.5% / 176 h / 2026-03-15"


def test_filters_follow_the_configured_locale():
    env = report_environment(FilterConfig(locale="de_CH", currency="CHF", date_format="dd.MM.yyyy"))
    assert env.from_string("{{ d | date }}").render(d="15/03/2026") == "15.03.2026"
    assert "CHF" in env.from_string("{{ c | currency }}").render(c=100)


def test_missing_values():
    assert babel_date(None, CONFIG) == "-"
    assert babel_date(Undefined(), CONFIG) == "-"
    assert babel_date("someday", CONFIG) == "someday"
    assert babel_hours(None, CONFIG) == ""
    assert babel_percent(None, CONFIG) == ""


def test_hours_and_percent():
    assert babel_hours(7.5, CONFIG) == "7.5 h"
    assert babel_percent(100, CONFIG) == "100%"
