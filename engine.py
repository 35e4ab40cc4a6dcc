#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Game engine facade.

Owns the one authoritative ``GameState`` and everything around it: the save
slot, the clock, the buy-quantity policy, tick/autosave cadence and the
pending "welcome back" earnings. Runners only read ``engine.state`` and call
the command methods; each command returns whether it changed anything.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Tuple

import commands
from config import AUTOSAVE_INTERVAL_MS, BUY_MAX, OFFLINE_MIN_SECONDS, SIM_TICK_MS
from economy import (
    BuyQuantity,
    PrestigeProgress,
    global_multiplier,
    prestige_progress,
    purchase_quote,
    revenue_per_cycle,
)
from model import GameCatalog
from offline import OfflineReport, reconcile_offline
from persistence import SaveSlot
from scheduler import TickResult, commit_tick, compute_tick, resume_timers
from state import GameState, new_game_state

logger = logging.getLogger(__name__)


def wall_clock_ms() -> float:
    return time.time() * 1000.0


class GameEngine:
    """Fixed-tick economy simulator, separate from any render loop."""

    def __init__(
        self,
        catalog: GameCatalog,
        slot: Optional[SaveSlot] = None,
        clock: Optional[Callable[[], float]] = None,
        tick_ms: float = SIM_TICK_MS,
        autosave_ms: float = AUTOSAVE_INTERVAL_MS,
    ):
        self.catalog = catalog
        self.slot = slot
        self.clock = clock or wall_clock_ms
        self.tick_seconds = max(0.01, float(tick_ms) / 1000.0)
        self.autosave_ms = float(autosave_ms)
        self._accumulator = 0.0
        self.ticks = 0
        self.buy_quantity: BuyQuantity = 1
        self.offline_earnings = 0.0
        self.offline_seconds = 0.0
        now = self.clock()
        self._state = new_game_state(catalog, now)
        self._last_autosave_ms = now

    @property
    def state(self) -> GameState:
        return self._state

    # -----------------------------
    # Lifecycle
    # -----------------------------
    def start(self) -> OfflineReport:
        """Load the save (if any) and credit the time spent closed, once."""
        now = self.clock()
        self._last_autosave_ms = now
        loaded = self.slot.load(self.catalog, now) if self.slot is not None else None
        if loaded is None:
            self._state = new_game_state(self.catalog, now)
            return OfflineReport(elapsed_seconds=0.0)

        reconciled, report = reconcile_offline(loaded, self.catalog, now, OFFLINE_MIN_SECONDS)
        if report.applied:
            reconciled = resume_timers(reconciled, loaded.last_save_time, now)
            self.offline_earnings = report.earnings
            self.offline_seconds = report.elapsed_seconds
            logger.info("Welcome back: %.2f earned over %.0fs", report.earnings, report.elapsed_seconds)
        self._state = reconciled
        return report

    def tick(self) -> TickResult:
        snapshot = self._state
        result = compute_tick(snapshot, self.catalog, self.clock(), self.buy_quantity)
        self._state = commit_tick(self._state, result)
        self.ticks += 1
        return result

    def advance(self, delta_time: float) -> None:
        self._accumulator += max(0.0, float(delta_time))
        if self._accumulator >= self.tick_seconds:
            # wall-clock catch-up inside the tick covers any extra intervals
            self._accumulator %= self.tick_seconds
            self.tick()
        now = self.clock()
        if now - self._last_autosave_ms >= self.autosave_ms:
            self.save(now)

    def save(self, now_ms: Optional[float] = None) -> bool:
        now = self.clock() if now_ms is None else now_ms
        self._last_autosave_ms = now
        if self.slot is None:
            return False
        return self.slot.save(self._state, now)

    def _apply(self, new_state: GameState) -> bool:
        if new_state is self._state:
            return False
        self._state = new_state
        return True

    # -----------------------------
    # Commands
    # -----------------------------
    def set_buy_quantity(self, quantity: BuyQuantity) -> bool:
        if quantity != BUY_MAX and (isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1):
            return False
        self.buy_quantity = quantity
        return True

    def buy_business(self, business_id: str, count: Optional[BuyQuantity] = None) -> bool:
        quantity = self.buy_quantity if count is None else count
        if quantity == BUY_MAX:
            # an unaffordable MAX press still tries one unit and is rejected
            quantity = max(1, self.quote_for(business_id, BUY_MAX)[0])
        return self._apply(commands.buy_business(self._state, self.catalog, business_id, int(quantity)))

    def hire_manager(self, business_id: str) -> bool:
        return self._apply(commands.hire_manager(self._state, self.catalog, business_id, self.clock()))

    def buy_upgrade(self, upgrade_id: str) -> bool:
        return self._apply(commands.buy_upgrade(self._state, self.catalog, upgrade_id))

    def toggle_auto_upgrade(self, business_id: str) -> bool:
        return self._apply(commands.toggle_auto_upgrade(self._state, business_id))

    def start_cycle(self, business_id: str) -> bool:
        return self._apply(commands.start_cycle(self._state, business_id, self.clock()))

    def prestige(self) -> bool:
        now = self.clock()
        if not self._apply(commands.prestige(self._state, self.catalog, now)):
            return False
        self.save(now)
        return True

    def buy_prestige_upgrade(self) -> bool:
        return self._apply(commands.buy_prestige_upgrade(self._state))

    def hard_reset(self) -> bool:
        now = self.clock()
        if self.slot is not None:
            self.slot.erase()
        logger.info("Hard reset: all progress discarded")
        self._state = commands.hard_reset(self.catalog, now, self._state.last_reset_time)
        self._last_autosave_ms = now
        self.clear_offline_earnings()
        return True

    def clear_offline_earnings(self) -> None:
        # display only; the credit itself was applied at load
        self.offline_earnings = 0.0
        self.offline_seconds = 0.0

    # -----------------------------
    # Read-only views
    # -----------------------------
    def revenue_for(self, business_id: str) -> float:
        defn = self.catalog.business(business_id)
        b = self._state.business(business_id)
        if defn is None or b is None:
            return 0.0
        return revenue_per_cycle(
            defn.base_revenue,
            b.level,
            global_multiplier(self._state.prestige_multiplier_level),
            self.catalog.unlock_multiplier(business_id, b.level),
            self.catalog.upgrade_multiplier(business_id, self._state.purchased_upgrades),
        )

    def quote_for(self, business_id: str, quantity: Optional[BuyQuantity] = None) -> Tuple[int, float]:
        defn = self.catalog.business(business_id)
        b = self._state.business(business_id)
        if defn is None or b is None:
            return 0, 0.0
        if not b.is_owned:
            return (1, defn.unlock_cost) if self._state.cash >= defn.unlock_cost else (0, 0.0)
        quantity = self.buy_quantity if quantity is None else quantity
        return purchase_quote(defn.base_cost, b.level, self.catalog.cost_multiplier, self._state.cash, quantity)

    def prestige_preview(self) -> PrestigeProgress:
        return prestige_progress(self._state.lifetime_earnings)
