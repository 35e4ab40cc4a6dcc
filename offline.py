#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Offline earnings.

Run once right after a save is loaded: production that managed businesses
would have made while the game was closed is credited in one step, from one
snapshot of multipliers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Tuple

from config import OFFLINE_MIN_SECONDS
from economy import global_multiplier, revenue_per_cycle, revenue_per_second
from model import GameCatalog
from state import GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OfflineReport:
    elapsed_seconds: float
    earnings: float = 0.0
    per_business: Dict[str, float] = field(default_factory=dict)
    applied: bool = False


def offline_rates(state: GameState, catalog: GameCatalog) -> Dict[str, float]:
    """Revenue per second of every business that keeps running while closed."""
    g_mult = global_multiplier(state.prestige_multiplier_level)
    rates: Dict[str, float] = {}
    for defn in catalog.businesses:
        b = state.business(defn.id)
        if b is None or not (b.is_owned and b.is_manager_hired):
            continue
        revenue = revenue_per_cycle(
            defn.base_revenue,
            b.level,
            g_mult,
            catalog.unlock_multiplier(defn.id, b.level),
            catalog.upgrade_multiplier(defn.id, state.purchased_upgrades),
        )
        rates[defn.id] = revenue_per_second(revenue, defn.duration)
    return rates


def reconcile_offline(
    state: GameState,
    catalog: GameCatalog,
    now_ms: float,
    min_seconds: float = OFFLINE_MIN_SECONDS,
) -> Tuple[GameState, OfflineReport]:
    elapsed = max(0.0, (now_ms - state.last_save_time) / 1000.0)
    if elapsed < min_seconds:
        return state, OfflineReport(elapsed_seconds=elapsed)

    per_business = {bid: rate * elapsed for bid, rate in offline_rates(state, catalog).items()}
    total = sum(per_business.values())
    if total <= 0:
        return state, OfflineReport(elapsed_seconds=elapsed, per_business=per_business)

    logger.debug("Offline for %.1fs, crediting %.2f", elapsed, total)
    reconciled = state.model_copy(update={
        "cash": state.cash + total,
        "lifetime_earnings": state.lifetime_earnings + total,
    })
    return reconciled, OfflineReport(elapsed_seconds=elapsed, earnings=total, per_business=per_business, applied=True)
