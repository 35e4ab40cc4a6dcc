#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Economy math.

Pure functions only: no state, no clock. Costs follow a geometric curve
``base * growth ** level``; buying ``count`` units at once is the geometric
series of consecutive unit costs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple, Union

from config import BUY_MAX, PRESTIGE_DIVISOR, PRESTIGE_MULTIPLIER_PER_LEVEL

BuyQuantity = Union[int, str]


def _pow(growth: float, exponent: float) -> float:
    try:
        return math.pow(growth, exponent)
    except OverflowError:
        return math.inf


def next_unit_cost(base: float, level: float, growth: float) -> float:
    return max(0.0, base * _pow(growth, level))


def cumulative_cost(base: float, level: float, growth: float, count: float) -> float:
    if count <= 0:
        return 0.0
    first = next_unit_cost(base, level, growth)
    if growth == 1:
        return first * count
    series = (_pow(growth, count) - 1.0) / (growth - 1.0)
    if math.isinf(first) or math.isinf(series):
        return math.inf
    return max(0.0, first * series)


def max_affordable(base: float, level: float, growth: float, cash: float) -> int:
    """Largest count whose cumulative cost fits in ``cash``.

    The closed-form estimate is checked against ``cumulative_cost`` and
    nudged by whole units when floating rounding lands on the wrong side.
    """
    if growth <= 1 or cash <= 0:
        return 0
    first = next_unit_cost(base, level, growth)
    if not math.isfinite(first) or first <= 0 or cash < first:
        return 0
    estimate = math.log1p(cash * (growth - 1.0) / first) / math.log(growth)
    if not math.isfinite(estimate):
        return 0
    count = max(0, int(math.floor(estimate)))
    while count > 0 and cumulative_cost(base, level, growth, count) > cash:
        count -= 1
    while cumulative_cost(base, level, growth, count + 1) <= cash:
        count += 1
    return count


def revenue_per_cycle(
    base_revenue: float,
    level: int,
    global_mult: float = 1.0,
    unlock_mult: float = 1.0,
    upgrade_mult: float = 1.0,
) -> float:
    # all owned units produce as one block
    return max(0.0, base_revenue * level * global_mult * unlock_mult * upgrade_mult)


def revenue_per_second(revenue: float, duration: float) -> float:
    if duration <= 0:
        return 0.0
    return revenue / duration


def prestige_points(lifetime_earnings: float, divisor: float = PRESTIGE_DIVISOR) -> int:
    if divisor <= 0 or lifetime_earnings < divisor:
        return 0
    return int(math.floor(math.sqrt(lifetime_earnings / divisor)))


def global_multiplier(prestige_level: int, per_level_bonus: float = PRESTIGE_MULTIPLIER_PER_LEVEL) -> float:
    return 1.0 + max(0, prestige_level) * per_level_bonus


def purchase_quote(base: float, level: int, growth: float, cash: float, quantity: BuyQuantity) -> Tuple[int, float]:
    """(count, cost) a buy-quantity policy would purchase right now.

    A fixed quantity is all-or-nothing; ``"MAX"`` buys as many as fit.
    """
    if quantity == BUY_MAX:
        count = max_affordable(base, level, growth, cash)
    else:
        count = max(0, int(quantity))
        if cumulative_cost(base, level, growth, count) > cash:
            count = 0
    if count <= 0:
        return 0, 0.0
    return count, cumulative_cost(base, level, growth, count)


@dataclass(frozen=True)
class PrestigeProgress:
    points: int
    current_target: float
    next_target: float
    fraction: float


def prestige_progress(lifetime_earnings: float, divisor: float = PRESTIGE_DIVISOR) -> PrestigeProgress:
    # points = sqrt(earnings / divisor)  =>  earnings for n points = n^2 * divisor
    points = prestige_points(lifetime_earnings, divisor)
    current_target = float(points * points * divisor)
    next_target = float((points + 1) * (points + 1) * divisor)
    span = next_target - current_target
    fraction = (lifetime_earnings - current_target) / span if span > 0 else 0.0
    return PrestigeProgress(
        points=points,
        current_target=current_target,
        next_target=next_target,
        fraction=min(1.0, max(0.0, fraction)),
    )
