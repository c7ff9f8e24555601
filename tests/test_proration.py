import pytest

from leave_sync.modules.proration import EqualSplit, ProportionalSplit, get_strategy, settle_last
from pydantic_models.data.cell_decision import CellKind
from pydantic_models.data.leave_day import LeaveDay
from pydantic_models.data.sheet_row import SheetRow
from time_sheets.modules.leave_planner import plan_leaves


@pytest.mark.parametrize("rows", range(1, 13))
def test_equal_split_sums_to_exactly_four_hours(rows):
    shares = EqualSplit(4).deductions([8.0] * rows)
    assert len(shares) == rows
    assert sum(shares) == 4.0
    assert shares == pytest.approx([4 / rows] * rows)


@pytest.mark.parametrize("rows", [3, 6, 7, 9, 11])
def test_equal_split_frees_exactly_four_hours_in_the_sheet(rows):
    decisions = plan_leaves(rows_for(*[8.0] * rows), [LeaveDay(date=10, is_half_day=True)], {10: 13}, EqualSplit())
    assert len(decisions) == rows
    assert sum(8.0 - d.hours for d in decisions) == 4.0


def test_proportional_split_sums_to_exactly_four_hours():
    assert sum(ProportionalSplit(4).deductions([7.0, 5.0, 3.0])) == 4.0


def test_settle_last_takes_the_remainder():
    assert settle_last([1.5, 1.5, 0.0], 4.0) == [1.5, 1.5, 1.0]
    assert settle_last([], 4.0) == []


def test_equal_split_float_deductions():
    assert EqualSplit(4).deductions([8, 8]) == [2.0, 2.0]
    assert EqualSplit(4).deductions([]) == []


def test_proportional_split_follows_row_hours():
    assert ProportionalSplit(4).deductions([6, 2]) == pytest.approx([3.0, 1.0])
    assert ProportionalSplit(4).apply([6, 2]) == pytest.approx([3.0, 1.0])


def test_proportional_split_with_zero_total_deducts_nothing():
    assert ProportionalSplit(4).deductions([0, 0]) == [0.0, 0.0]


def test_apply_never_goes_negative():
    assert EqualSplit(4).apply([1, 8]) == [0.0, 6.0]


def test_get_strategy_by_name():
    assert isinstance(get_strategy("equal"), EqualSplit)
    assert isinstance(get_strategy("proportional", 3.5), ProportionalSplit)
    with pytest.raises(ValueError):
        get_strategy("random")


def rows_for(*hours, override_days=()):
    return [
        SheetRow(row_num=4 + i, employee_name="Bob Lim", day_hours={10: h}, override_days=set(override_days) if i == 0 else set())
        for i, h in enumerate(hours)
    ]


def test_full_day_zeroes_every_row():
    rows = rows_for(4, 4)
    decisions = plan_leaves(rows, [LeaveDay(date=10)], {10: 13}, EqualSplit())
    assert [(d.row_num, d.column, d.hours, d.kind) for d in decisions] == [
        (4, 13, 0.0, CellKind.FULL_LEAVE),
        (5, 13, 0.0, CellKind.FULL_LEAVE),
    ]


def test_half_day_equal_split_over_rows():
    decisions = plan_leaves(rows_for(4, 4), [LeaveDay(date=10, is_half_day=True)], {10: 13}, EqualSplit())
    assert [d.hours for d in decisions] == [2.0, 2.0]
    assert {d.kind for d in decisions} == {CellKind.HALF_LEAVE}


def test_override_row_keeps_its_hours():
    rows = rows_for(4, 4, override_days=[10])
    decisions = plan_leaves(rows, [LeaveDay(date=10, is_half_day=True)], {10: 13}, EqualSplit())
    # only the second row is active and takes the whole half day
    assert [(d.row_num, d.hours) for d in decisions] == [(5, 0.0)]
    assert rows[0].day_hours[10] == 4


def test_override_excludes_row_from_full_day():
    rows = rows_for(8, override_days=[10])
    assert plan_leaves(rows, [LeaveDay(date=10)], {10: 13}, EqualSplit()) == []


def test_two_half_days_on_same_date_accumulate():
    rows = rows_for(8)
    leaves = [LeaveDay(date=10, is_half_day=True), LeaveDay(date=10, is_half_day=True)]
    decisions = plan_leaves(rows, leaves, {10: 13}, EqualSplit())
    assert [d.hours for d in decisions] == [4.0, 0.0]


def test_leave_on_non_working_day_is_ignored():
    # day 13 is not in the weekday columns (weekend or holiday)
    assert plan_leaves(rows_for(8), [LeaveDay(date=13)], {10: 13}, EqualSplit()) == []
