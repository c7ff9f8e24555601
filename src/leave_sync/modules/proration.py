"""
Distribution of a half-day leave over the project rows of one employee.

Two policies exist and product has not settled on one, so both are kept
behind the ProrationStrategy interface and selected by name from the
`time_sheet.proration` setting.

Shares are floats. The last row takes whatever the float rounding of the
other shares left over, so the deductions (and the hours actually freed
by `apply`) add up to exactly `half_day_hours`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from fractions import Fraction
from typing import Dict, List, Sequence, Type


def settle_last(shares: List[float], total: float) -> List[float]:
    """Replaces the last share by `total` minus the others."""
    if shares:
        shares[-1] = total - sum(shares[:-1])
    return shares


class ProrationStrategy(ABC):
    """
    Splits `half_day_hours` over the rows of one employee for one day.
    """

    name: str = ""

    def __init__(self, half_day_hours: float = 4.0):
        self.half_day_hours = half_day_hours

    @abstractmethod
    def deductions(self, row_hours: Sequence[float]) -> List[float]:
        """Hours to deduct from each row, in input order."""

    def apply(self, row_hours: Sequence[float]) -> List[float]:
        """
        New hours per row after the deduction, never below zero. Unless a
        row had to be clamped, the freed hours sum to the total deduction.
        """
        cuts = self.deductions(row_hours)
        new_hours = [max(0.0, hours - cut) for hours, cut in zip(row_hours, cuts)]
        if new_hours and all(hours >= cut for hours, cut in zip(row_hours, cuts)):
            freed = sum(hours - new for hours, new in zip(row_hours[:-1], new_hours[:-1]))
            new_hours[-1] = max(0.0, row_hours[-1] - (sum(cuts) - freed))
        return new_hours


class EqualSplit(ProrationStrategy):
    """Every active row gives up half_day_hours / N, whatever its allocation."""

    name = "equal"

    def deductions(self, row_hours: Sequence[float]) -> List[float]:
        if not row_hours:
            return []
        share = Fraction(self.half_day_hours).limit_denominator() / len(row_hours)
        return settle_last([float(share)] * len(row_hours), float(self.half_day_hours))


class ProportionalSplit(ProrationStrategy):
    """Each row gives up half_day_hours in proportion to its own hours."""

    name = "proportional"

    def deductions(self, row_hours: Sequence[float]) -> List[float]:
        total = sum(row_hours)
        if total <= 0:
            return [0.0] * len(row_hours)
        return settle_last([hours / total * self.half_day_hours for hours in row_hours], float(self.half_day_hours))


STRATEGIES: Dict[str, Type[ProrationStrategy]] = {
    EqualSplit.name: EqualSplit,
    ProportionalSplit.name: ProportionalSplit,
}


def get_strategy(name: str, half_day_hours: float = 4.0) -> ProrationStrategy:
    try:
        return STRATEGIES[name](half_day_hours)
    except KeyError:
        raise ValueError(f"Unknown proration policy '{name}', expected one of {sorted(STRATEGIES)}") from None
