#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Fixed-interval tick scheduler.

Per business the timer is a small state machine driven by ``work_start_time``
and the injected ``now``:

- IDLE: no timer. A hired manager starts a cycle immediately.
- RUNNING: elapsed < duration, nothing to do.
- COMPLETED: elapsed >= duration. A manual cycle settles exactly once and
  goes back to IDLE. A managed one settles every whole cycle that fit into
  the elapsed time and keeps the leftover progress.

A tick is split in two: ``compute_tick`` reads a snapshot and produces
deltas, ``commit_tick`` applies those deltas onto whatever state is current
at commit time, unless a reset moved the epoch in between.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from economy import BuyQuantity, global_multiplier, purchase_quote, revenue_per_cycle
from model import BusinessPhase, GameCatalog
from state import GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AutoPurchase:
    count: int
    cost: float
    from_level: int


@dataclass
class TickResult:
    epoch: int
    now_ms: float
    earned: float = 0.0
    timers: Dict[str, Optional[float]] = field(default_factory=dict)
    cycles: Dict[str, int] = field(default_factory=dict)
    purchases: Dict[str, AutoPurchase] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return bool(self.earned or self.timers or self.purchases)


def compute_tick(
    snapshot: GameState,
    catalog: GameCatalog,
    now_ms: float,
    buy_quantity: BuyQuantity = 1,
) -> TickResult:
    result = TickResult(epoch=snapshot.last_reset_time, now_ms=now_ms)
    g_mult = global_multiplier(snapshot.prestige_multiplier_level)

    for defn in catalog.businesses:
        b = snapshot.business(defn.id)
        if b is None or not b.is_owned:
            continue
        duration_ms = defn.duration_ms
        phase = b.phase(duration_ms, now_ms)
        if phase is BusinessPhase.IDLE:
            if b.is_manager_hired:
                result.timers[defn.id] = now_ms
            continue
        if phase is BusinessPhase.RUNNING:
            continue

        elapsed = now_ms - b.work_start_time
        revenue = revenue_per_cycle(
            defn.base_revenue,
            b.level,
            g_mult,
            catalog.unlock_multiplier(defn.id, b.level),
            catalog.upgrade_multiplier(defn.id, snapshot.purchased_upgrades),
        )
        if b.is_manager_hired:
            cycles = int(elapsed // duration_ms)
            result.timers[defn.id] = now_ms - (elapsed - cycles * duration_ms)
        else:
            # manual cycles never batch
            cycles = 1
            result.timers[defn.id] = None
        result.cycles[defn.id] = cycles
        result.earned += revenue * cycles

    cash = snapshot.cash + result.earned
    for defn in catalog.businesses:
        b = snapshot.business(defn.id)
        if b is None or not (b.is_owned and b.is_manager_hired and b.is_auto_upgrade_enabled):
            continue
        count, cost = purchase_quote(defn.base_cost, b.level, catalog.cost_multiplier, cash, buy_quantity)
        if count <= 0:
            continue
        cash -= cost
        result.purchases[defn.id] = AutoPurchase(count=count, cost=cost, from_level=b.level)

    return result


def commit_tick(current: GameState, result: TickResult) -> GameState:
    if current.last_reset_time != result.epoch:
        logger.debug("Discarding tick from epoch %s (current %s)", result.epoch, current.last_reset_time)
        return current
    if not result.changed:
        return current

    # purchases priced at a level that has since changed are void
    purchases = {
        bid: p
        for bid, p in result.purchases.items()
        if current.business(bid) is not None and current.business(bid).level == p.from_level
    }
    cash = current.cash + result.earned - sum(p.cost for p in purchases.values())
    if cash < 0:
        purchases = {}
        cash = current.cash + result.earned

    businesses = dict(current.businesses)
    for bid in set(result.timers) | set(purchases):
        b = businesses.get(bid)
        if b is None:
            continue
        update: Dict[str, object] = {}
        if bid in result.timers:
            update["work_start_time"] = result.timers[bid]
        if bid in purchases:
            update["level"] = b.level + purchases[bid].count
        businesses[bid] = b.model_copy(update=update)

    return current.model_copy(update={
        "cash": cash,
        "lifetime_earnings": current.lifetime_earnings + result.earned,
        "businesses": businesses,
    })


def resume_timers(state: GameState, paused_at: float, now_ms: float) -> GameState:
    """Shift in-flight managed cycles past a closed-app gap.

    Offline earnings already paid for the gap, so each managed timer keeps
    the progress it had when the game was saved.
    """
    gap = now_ms - paused_at
    if gap <= 0:
        return state
    businesses = dict(state.businesses)
    moved = False
    for bid, b in state.businesses.items():
        if not b.is_manager_hired or b.work_start_time is None:
            continue
        businesses[bid] = b.model_copy(update={"work_start_time": min(now_ms, b.work_start_time + gap)})
        moved = True
    if not moved:
        return state
    return state.model_copy(update={"businesses": businesses})
