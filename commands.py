#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""State transitions triggered by the player.

Every handler takes the current state and returns the next one. When a
precondition fails (unknown id, not enough cash, wrong phase) the same
object comes back unchanged, so callers compare identity to know whether
anything happened.
"""

from __future__ import annotations

import logging

from config import PRESTIGE_DIVISOR, PRESTIGE_UPGRADE_COST
from economy import cumulative_cost, prestige_points
from model import GameCatalog
from state import GameState, new_game_state, next_epoch

logger = logging.getLogger(__name__)


def buy_business(state: GameState, catalog: GameCatalog, business_id: str, count: int = 1) -> GameState:
    defn = catalog.business(business_id)
    b = state.business(business_id)
    if defn is None or b is None:
        return state

    if not b.is_owned:
        if state.cash < defn.unlock_cost:
            return state
        return state.with_business(
            b.model_copy(update={"is_owned": True, "level": 1}),
            cash=state.cash - defn.unlock_cost,
        )

    count = int(count)
    if count < 1:
        return state
    cost = cumulative_cost(defn.base_cost, b.level, catalog.cost_multiplier, count)
    if state.cash < cost:
        return state
    return state.with_business(b.model_copy(update={"level": b.level + count}), cash=state.cash - cost)


def hire_manager(state: GameState, catalog: GameCatalog, business_id: str, now_ms: float) -> GameState:
    defn = catalog.business(business_id)
    b = state.business(business_id)
    if defn is None or b is None:
        return state
    if not b.is_owned or b.is_manager_hired or state.cash < defn.manager_cost:
        return state
    hired = b.model_copy(update={
        "is_manager_hired": True,
        "is_auto_upgrade_enabled": False,
        "work_start_time": b.work_start_time if b.work_start_time is not None else now_ms,
    })
    return state.with_business(hired, cash=state.cash - defn.manager_cost)


def buy_upgrade(state: GameState, catalog: GameCatalog, upgrade_id: str) -> GameState:
    upgrade = catalog.upgrade(upgrade_id)
    if upgrade is None or state.owns_upgrade(upgrade_id) or state.cash < upgrade.cost:
        return state
    purchased = dict(state.purchased_upgrades)
    purchased[upgrade_id] = True
    return state.model_copy(update={"cash": state.cash - upgrade.cost, "purchased_upgrades": purchased})


def toggle_auto_upgrade(state: GameState, business_id: str) -> GameState:
    b = state.business(business_id)
    if b is None or not b.is_manager_hired:
        return state
    return state.with_business(b.model_copy(update={"is_auto_upgrade_enabled": not b.is_auto_upgrade_enabled}))


def start_cycle(state: GameState, business_id: str, now_ms: float) -> GameState:
    b = state.business(business_id)
    if b is None or not b.is_owned or b.work_start_time is not None:
        return state
    return state.with_business(b.model_copy(update={"work_start_time": now_ms}))


def prestige(state: GameState, catalog: GameCatalog, now_ms: float, divisor: float = PRESTIGE_DIVISOR) -> GameState:
    gained = prestige_points(state.lifetime_earnings, divisor)
    if gained < 1:
        return state
    logger.debug("Prestige: +%d points from %.2f lifetime earnings", gained, state.lifetime_earnings)
    return new_game_state(
        catalog,
        now_ms,
        prestige_points=state.prestige_points + gained,
        prestige_level=state.prestige_multiplier_level,
        epoch=next_epoch(state.last_reset_time, now_ms),
    )


def buy_prestige_upgrade(state: GameState) -> GameState:
    if state.prestige_points < PRESTIGE_UPGRADE_COST:
        return state
    return state.model_copy(update={
        "prestige_points": state.prestige_points - PRESTIGE_UPGRADE_COST,
        "prestige_multiplier_level": state.prestige_multiplier_level + 1,
    })


def hard_reset(catalog: GameCatalog, now_ms: float, previous_epoch: int = 0) -> GameState:
    """Everything goes, prestige progress included."""
    return new_game_state(catalog, now_ms, epoch=next_epoch(previous_epoch, now_ms))
