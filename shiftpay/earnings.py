from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from .models import LineItem, ResolvedRate


RateLike = Union[float, ResolvedRate, None]

DEFAULT_OVERTIME_MULTIPLIER = 1.5


@dataclass
class EarningLine:
    category: str  # regular or overtime
    hours: float
    rate: float
    multiplier: float = 1.0

    @property
    def amount(self) -> float:
        return round(self.hours * self.rate * self.multiplier, 2)


def _rate_value(rate: RateLike) -> Optional[float]:
    if isinstance(rate, ResolvedRate):
        return rate.rate
    return rate


def earning_lines(
    regular_hours: float,
    overtime_hours: float,
    rate: RateLike,
    multiplier: float = DEFAULT_OVERTIME_MULTIPLIER,
) -> List[EarningLine]:
    value = _rate_value(rate)
    if value is None:
        return []
    return [
        EarningLine("regular", hours=regular_hours, rate=value),
        EarningLine("overtime", hours=overtime_hours, rate=value, multiplier=multiplier),
    ]


def compute_hourly_earnings(
    regular_hours: float,
    overtime_hours: float,
    rate: RateLike,
    multiplier: float = DEFAULT_OVERTIME_MULTIPLIER,
) -> float:
    """``regular * rate + overtime * rate * multiplier``; no rate earns nothing."""
    value = _rate_value(rate)
    if value is None:
        return 0.0
    return round(regular_hours * value + overtime_hours * value * multiplier, 2)


def total_amount(items: Iterable[LineItem]) -> float:
    return round(sum(item.amount or 0 for item in items), 2)


def compute_net_salary(base_salary: float, bonuses: Iterable[LineItem], deductions: Iterable[LineItem]) -> float:
    return round(base_salary + total_amount(bonuses) - total_amount(deductions), 2)
