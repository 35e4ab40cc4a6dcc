#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Simulation state.

Run-scoped, mutable game data as frozen pydantic models. Transitions build
new instances with ``model_copy``; nothing mutates a state in place. Field
aliases match the persisted save layout.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from model import BusinessDef, BusinessPhase, GameCatalog


class BusinessState(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: str
    level: int = Field(default=0, ge=0)
    is_owned: bool = Field(default=False, alias="isOwned")
    is_manager_hired: bool = Field(default=False, alias="isManagerHired")
    is_auto_upgrade_enabled: bool = Field(default=False, alias="isAutoUpgradeEnabled")
    work_start_time: Optional[float] = Field(default=None, alias="workStartTime")

    def phase(self, duration_ms: float, now_ms: float) -> BusinessPhase:
        if self.work_start_time is None:
            return BusinessPhase.IDLE
        if now_ms - self.work_start_time >= duration_ms:
            return BusinessPhase.COMPLETED
        return BusinessPhase.RUNNING

    def progress(self, duration_ms: float, now_ms: float) -> float:
        """Fraction of the current cycle done, 0..1."""
        if self.work_start_time is None or duration_ms <= 0:
            return 0.0
        return min(1.0, max(0.0, (now_ms - self.work_start_time) / duration_ms))


class GameState(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    cash: float = 0.0
    lifetime_earnings: float = Field(default=0.0, alias="lifetimeEarnings")
    businesses: Dict[str, BusinessState] = Field(default_factory=dict)
    purchased_upgrades: Dict[str, bool] = Field(default_factory=dict, alias="purchasedUpgrades")
    last_save_time: float = Field(default=0.0, alias="lastSaveTime")
    # epoch marker: strictly increases on every prestige / hard reset
    last_reset_time: int = Field(default=0, alias="lastResetTime")
    prestige_points: int = Field(default=0, alias="prestigePoints", ge=0)
    prestige_multiplier_level: int = Field(default=0, alias="prestigeMultiplierLevel", ge=0)

    def business(self, business_id: str) -> Optional[BusinessState]:
        return self.businesses.get(business_id)

    def owns_upgrade(self, upgrade_id: str) -> bool:
        return bool(self.purchased_upgrades.get(upgrade_id))

    def with_business(self, business: BusinessState, **update: Any) -> "GameState":
        businesses = dict(self.businesses)
        businesses[business.id] = business
        return self.model_copy(update={"businesses": businesses, **update})


def fresh_business(defn: BusinessDef) -> BusinessState:
    # the starter is not owned either; its unlock costs nothing
    return BusinessState(id=defn.id)


def next_epoch(previous: int, now_ms: float) -> int:
    return max(int(now_ms), int(previous) + 1)


def new_game_state(
    catalog: GameCatalog,
    now_ms: float,
    prestige_points: int = 0,
    prestige_level: int = 0,
    epoch: Optional[int] = None,
) -> GameState:
    return GameState(
        cash=catalog.initial_cash,
        lifetime_earnings=0.0,
        businesses={b.id: fresh_business(b) for b in catalog.businesses},
        purchased_upgrades={},
        last_save_time=now_ms,
        last_reset_time=int(now_ms) if epoch is None else epoch,
        prestige_points=prestige_points,
        prestige_multiplier_level=prestige_level,
    )


def _normalize_business_row(row: Dict[str, Any]) -> Dict[str, Any]:
    # level 0 => not owned => no manager, whatever the save claims
    if row.get("level", 0) == 0:
        row["isOwned"] = False
    if not row.get("isOwned", False):
        row["isManagerHired"] = False
        row["workStartTime"] = None
    if not row.get("isManagerHired", False):
        row["isAutoUpgradeEnabled"] = False
    return row


def hydrate_state(payload: Mapping[str, Any], catalog: GameCatalog, now_ms: float) -> GameState:
    """Build a state from a save payload, back-filling anything an older save lacks.

    Raises pydantic ``ValidationError`` when present fields have the wrong shape.
    """
    raw = dict(payload)
    raw.setdefault("cash", catalog.initial_cash)
    raw.setdefault("lifetimeEarnings", 0.0)
    raw.setdefault("prestigePoints", 0)
    raw.setdefault("prestigeMultiplierLevel", 0)
    if raw.get("lastSaveTime") is None:
        raw["lastSaveTime"] = now_ms
    if raw.get("lastResetTime") is None:
        raw["lastResetTime"] = int(now_ms)
    if not isinstance(raw.get("purchasedUpgrades"), dict):
        raw["purchasedUpgrades"] = {}

    saved = raw.get("businesses") if isinstance(raw.get("businesses"), dict) else {}
    businesses: Dict[str, Any] = {}
    for defn in catalog.businesses:
        row = saved.get(defn.id)
        if isinstance(row, dict):
            businesses[defn.id] = _normalize_business_row({**row, "id": defn.id})
        else:
            businesses[defn.id] = fresh_business(defn)
    raw["businesses"] = businesses
    return GameState.model_validate(raw)


def dump_state(state: GameState) -> Dict[str, Any]:
    return state.model_dump(by_alias=True, mode="json")
